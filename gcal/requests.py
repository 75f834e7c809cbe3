from typing import Optional

from requests.auth import AuthBase

CLIENT_LOGIN = "ClientLogin"
AUTHSUB = "AuthSub"


class GDataTokenAuth(AuthBase):
    """
    Sets the Authorization header from a token handed out by the
    calendar service.  Any other headers on the request are left alone.
    """

    scheme: str = ""
    token_key: str = ""

    def __init__(self, token: str) -> None:
        self.token = token

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.token == getattr(
            other, "token", None
        )

    def __ne__(self, other: object) -> bool:
        return not self == other

    def header_value(self) -> str:
        return f"{self.scheme} {self.token_key}={self.token}"

    def __call__(self, r):
        r.headers["Authorization"] = self.header_value()
        return r


class GoogleLoginAuth(GDataTokenAuth):
    """Token obtained through a ClientLogin password exchange"""

    scheme = "GoogleLogin"
    token_key = "auth"


class AuthSubAuth(GDataTokenAuth):
    """Externally issued (AuthSub) token"""

    scheme = "AuthSub"
    token_key = "token"


auth_by_type = {
    CLIENT_LOGIN: GoogleLoginAuth,
    AUTHSUB: AuthSubAuth,
}


def build_auth(auth_type: Optional[str], token: Optional[str]) -> Optional[AuthBase]:
    """
    Returns the auth object matching the auth type tag, or None if
    there is no token yet.
    """
    if not token:
        return None
    try:
        return auth_by_type[auth_type](token)
    except KeyError:
        raise ValueError(
            "auth_type must be one of %s, not %r" % (", ".join(auth_by_type), auth_type)
        )
