"""
The Service is the entry point to the calendar service: it holds the
account, the auth token and the HTTP client everything else talks
through.

    service = Service()
    service.authenticate("someone@gmail.com", "secret")
    for cal in service.calendars():
        print(cal.title)

or, with the account details in the environment or a config file:

    service = get_service()
"""
import logging
import os
import sys
from types import TracebackType
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import TYPE_CHECKING
from urllib.parse import urlencode

import requests

from gcal import __version__
from gcal.client import GDataClient
from gcal.lib import error
from gcal.requests import AUTHSUB
from gcal.requests import build_auth
from gcal.requests import CLIENT_LOGIN

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self

if TYPE_CHECKING:
    from gcal.calendar import Calendar

log = logging.getLogger("gcal")

AUTH_URL = "https://www.google.com/accounts/ClientLogin"
CALENDAR_LIST_FEED = "https://www.google.com/calendar/feeds/default/allcalendars/full"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
SOURCE = "gcal-python-" + __version__

## environment values are strings, these parameters need something else
BOOLEAN_PARAMS = ("check_public", "debug", "ssl_verify_cert")
INTEGER_PARAMS = ("timeout", "max_redirects")


def _auth_field(reply: str) -> Optional[str]:
    """
    Picks the Auth field out of the ClientLogin reply, which is a list
    of key=value lines (SID, LSID and Auth).
    """
    for line in reply.splitlines():
        key, sep, value = line.strip().partition("=")
        if sep and key == "Auth" and value:
            return value
    return None


class Service:
    """
    Holds the authentication towards the calendar service.

    Args:
      client: a GDataClient, one is created from client_kwargs if not given
      check_public: look up the access control list of each loaded calendar, to find out if it's public and editable
      debug: log the request and response bodies
      client_kwargs: passed on to GDataClient, i.e. proxy, timeout, ssl_verify_cert
    """

    account: Optional[str] = None
    auth_token: Optional[str] = None
    auth_type: Optional[str] = None

    def __init__(
        self,
        client: Optional[GDataClient] = None,
        check_public: bool = True,
        debug: bool = False,
        **client_kwargs,
    ) -> None:
        self.client = client or GDataClient(**client_kwargs)
        if debug:
            self.client.debug = True
        self.check_public = check_public

    @property
    def debug(self) -> bool:
        return self.client.debug

    @debug.setter
    def debug(self, value: bool) -> None:
        self.client.debug = value

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[BaseException] = None,
        exc_value: Optional[BaseException] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def _set_token(self, token: str, account: Optional[str], auth_type: str) -> None:
        self.auth_token = token
        self.account = account
        self.auth_type = auth_type
        self.client.auth = build_auth(auth_type, token)

    def authenticate(self, account: str, password: str) -> bool:
        """
        Exchanges the account and password for an auth token (ClientLogin).
        Returns True, or raises AuthenticationFailed.
        """
        body = urlencode(
            {
                "Email": account,
                "Passwd": password,
                "source": SOURCE,
                "service": "cl",
                "accountType": "HOSTED_OR_GOOGLE",
            }
        )
        log.debug("authenticating %s" % account)
        try:
            r = self.client.post(
                AUTH_URL, body, {"Content-Type": FORM_CONTENT_TYPE}
            )
        except (error.HTTPError, requests.RequestException) as e:
            raise error.AuthenticationFailed(str(e), url=AUTH_URL) from e

        token = _auth_field(r.raw)
        if not token:
            raise error.AuthenticationFailed(
                "no Auth field in the reply", url=AUTH_URL
            )
        self._set_token(token, account, CLIENT_LOGIN)
        return True

    def authenticate_with_token(self, token: str, account: Optional[str] = None) -> bool:
        """
        Uses an auth token obtained elsewhere (AuthSub).  No network
        traffic will be initiated by this method.
        """
        self._set_token(token, account, AUTHSUB)
        return True

    def calendars(self) -> List["Calendar"]:
        """
        Returns all calendars of the account, including the ones shared
        with it.
        """
        from gcal.calendar import Calendar
        from gcal.gdataobject import entries

        if not self.auth_token:
            raise error.NotAuthenticated()
        r = self.client.get(CALENDAR_LIST_FEED + "?max-results=10000")
        ret = []
        for entry in entries(r.tree):
            cal = Calendar(self)
            cal.load(entry)
            ret.append(cal)
        return ret


def _coerce(key: str, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    if key in BOOLEAN_PARAMS and value.lower() in ("true", "yes", "1", "false", "no", "0"):
        return value.lower() in ("true", "yes", "1")
    if key in INTEGER_PARAMS:
        return int(value)
    return value


def _service_from_params(params: Dict[str, Any]) -> Service:
    params = {k: _coerce(k, v) for k, v in params.items()}
    account = params.pop("account", None)
    password = params.pop("password", None)
    token = params.pop("token", None)
    service = Service(**params)
    if token:
        service.authenticate_with_token(token, account)
    elif account and password:
        service.authenticate(account, password)
    return service


def get_service(
    check_config_file: bool = True,
    config_file: str = None,
    config_section: str = None,
    environment: bool = True,
    **config_data,
) -> Optional[Service]:
    """
    This function will yield an authenticated Service object, if
    credentials are found.  It reads configuration from the first of
    these sources that has any:

    * The parameters given (account, password or token, and the Service/GDataClient parameters)
    * Environment variables prepended with `GCAL_`, like `GCAL_ACCOUNT`, `GCAL_PASSWORD`, `GCAL_TOKEN`, `GCAL_PROXY`
    * The config file, see gcal.config.  `GCAL_CONFIG_FILE` and `GCAL_CONFIG_SECTION` select file and section.

    Returns None if no configuration is found.
    """
    if config_data:
        return _service_from_params(config_data)

    if environment:
        conf = {}
        for conf_key in (
            x
            for x in os.environ
            if x.startswith("GCAL_")
            and not x.startswith("GCAL_CONFIG")
            and x != "GCAL_DEBUGMODE"
        ):
            conf[conf_key[5:].lower()] = os.environ[conf_key]
        if conf:
            return _service_from_params(conf)
        if not config_file:
            config_file = os.environ.get("GCAL_CONFIG_FILE")
        if not config_section:
            config_section = os.environ.get("GCAL_CONFIG_SECTION")

    if check_config_file:
        from gcal import config

        if not config_section:
            config_section = "default"

        cfg = config.read_config(config_file)
        if cfg:
            section = config.config_section(cfg, config_section)
            params = {}
            for k in section:
                if k.startswith("gcal_") and section[k]:
                    key = k[5:]
                    if key == "pass":
                        key = "password"
                    if key == "user":
                        key = "account"
                    params[key] = section[k]
            if params:
                return _service_from_params(params)
    return None
