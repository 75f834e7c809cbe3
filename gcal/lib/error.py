#!/usr/bin/env python
import logging
import os
from collections import defaultdict
from typing import Dict
from typing import Optional
from typing import Type

from gcal import __version__

## Environmental variables prepended with "GCAL_" are used both for
## connection parameters (see gcal.service.get_service) and for debugging.
## GCAL_DEBUGMODE is one of DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("GCAL_DEBUGMODE")
if not debugmode:
    if "dev" in __version__:
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("gcal")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def errmsg(r) -> str:
    """Utility for formatting an error response to an error string"""
    return "%s %s\n\n%s" % (r.status, r.reason, r.raw)


def weirdness(*reasons) -> None:
    reason = " : ".join([str(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")


class GCalError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"

    def __init__(self, reason: Optional[str] = None, url: Optional[str] = None) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason
        super().__init__(self.reason)

    def __str__(self) -> str:
        if self.url:
            return "%s at '%s', reason %s" % (
                self.__class__.__name__,
                self.url,
                self.reason,
            )
        return "%s: %s" % (self.__class__.__name__, self.reason)


class AuthenticationFailed(GCalError):
    """
    The credential exchange endpoint refused the account/password
    combination, or did not hand out a token.
    """

    reason = "authentication failed"


class NotAuthenticated(GCalError):
    reason = "no auth token, authenticate first"


class InvalidService(GCalError, TypeError):
    reason = "a Service object is required"


class CalendarSaveFailed(GCalError):
    pass


class EventSaveFailed(GCalError):
    pass


class RecurrenceValueError(GCalError, ValueError):
    pass


class CalendarNotEditable(GCalError):
    reason = "the calendar is not editable by this account"


class QueryParameterError(GCalError, ValueError):
    pass


class HTTPError(GCalError):
    """
    The server answered with something else than a 2xx (or a 3xx that
    could be followed).  The raw response body is kept unmodified in
    ``body`` for diagnostics.
    """

    status: Optional[int] = None
    body: str = ""

    def __init__(
        self,
        reason: Optional[str] = None,
        url: Optional[str] = None,
        status: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        self.status = status
        if body is not None:
            self.body = body
        super().__init__(reason=reason, url=url)


class GetError(HTTPError):
    pass


class PostError(HTTPError):
    pass


class PutError(HTTPError):
    pass


class DeleteError(HTTPError):
    pass


exception_by_method: Dict[str, Type[HTTPError]] = defaultdict(lambda: HTTPError)
for method in ("get", "post", "put", "delete"):
    exception_by_method[method] = locals()[method[0].upper() + method[1:] + "Error"]
