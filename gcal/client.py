#!/usr/bin/env python
import logging
import sys
from types import TracebackType
from typing import Optional
from typing import Tuple
from typing import Union
from urllib.parse import quote

import requests
from lxml import etree
from lxml.etree import _Element
from requests.auth import AuthBase
from requests.models import Response
from requests.structures import CaseInsensitiveDict

from gcal import __version__
from gcal.lib import error
from gcal.lib.python_utilities import to_normal_str
from gcal.lib.python_utilities import to_wire
from gcal.lib.url import URL

if sys.version_info < (3, 9):
    from typing import Mapping
else:
    from collections.abc import Mapping

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self

"""
The ``GDataClient`` class handles the basic communication with the
calendar service: it sends one request at a time, lets the auth object
of the session put the Authorization header on it, follows redirects
and turns every non-2xx answer into an exception.

The ``GDataResponse`` class wraps the data returned from the server.
Since we mostly get Atom XML back, it tries to parse it into
`self.tree`.
"""

log = logging.getLogger("gcal")

GDATA_VERSION = "2.1"
ATOM_CONTENT_TYPE = "application/atom+xml"
MAX_REDIRECTS = 5


class GDataResponse:
    """
    This class is a response from a GData request.  It is instantiated
    from the GDataClient class.  End users of the library should not
    need to know anything about this class.
    """

    reason: str = ""
    tree: Optional[_Element] = None
    headers: CaseInsensitiveDict = None
    status: int = 0

    def __init__(self, response: Response, debug: bool = False) -> None:
        self.headers = CaseInsensitiveDict(response.headers or {})
        self.status = response.status_code
        log.debug("response headers: " + str(self.headers))
        log.debug("response status: " + str(self.status))

        self._raw = response.content or b""
        content_type = self.headers.get("Content-Type", "")
        expect_xml = any(
            content_type.startswith(x)
            for x in (ATOM_CONTENT_TYPE, "text/xml", "application/xml")
        )

        if not self._raw:
            self.tree = None
            log.debug("No content delivered")
        else:
            ## The ClientLogin endpoint answers with text/plain, error
            ## pages are typically HTML.  We try to parse as XML no matter
            ## the content type given, and only complain if XML was promised.
            try:
                self.tree = etree.XML(
                    to_wire(self._raw),
                    parser=etree.XMLParser(remove_blank_text=True),
                )
            except etree.XMLSyntaxError:
                self.tree = None
                if expect_xml and 200 <= self.status < 300:
                    log.error(
                        "Expected some valid XML from the server, but got this: \n"
                        + to_normal_str(self._raw),
                        exc_info=True,
                    )
                    raise
            else:
                if debug:
                    log.debug(etree.tostring(self.tree, pretty_print=True))

        ## a response without a reason has been observed
        try:
            self.reason = response.reason or ""
        except AttributeError:
            self.reason = ""

    @property
    def raw(self) -> str:
        return to_normal_str(self._raw)

    @property
    def etag(self) -> Optional[str]:
        return self.headers.get("ETag")

    def is_redirect(self) -> bool:
        return 300 <= self.status < 400 and "Location" in self.headers

    def is_success(self) -> bool:
        return 200 <= self.status < 300


class GDataClient:
    """
    Basic client for the calendar service, uses the requests lib.

    Unless you have special needs, you should use a
    :class:`gcal.Service` rather than this class directly.  The service
    owns the client and sets ``auth`` after a successful
    authentication.
    """

    proxy: Optional[str] = None
    auth: Optional[AuthBase] = None

    def __init__(
        self,
        proxy: Optional[str] = None,
        proxy_username: Optional[str] = None,
        proxy_password: Optional[str] = None,
        auth: Optional[AuthBase] = None,
        timeout: Optional[int] = None,
        ssl_verify_cert: Union[bool, str] = False,
        ssl_cert: Union[str, Tuple[str, str], None] = None,
        headers: Mapping[str, str] = None,
        max_redirects: int = MAX_REDIRECTS,
        debug: bool = False,
    ) -> None:
        """
        Sets up a requests session towards the calendar service.

        Args:
          proxy: A string defining a proxy server: `scheme://hostname:port`. Scheme defaults to http, port defaults to 8080.
          proxy_username, proxy_password: optional proxy credentials
          auth: A requests.auth.AuthBase object, normally set by the Service
          timeout and ssl_cert are passed to requests.request.
          ssl_verify_cert: can be the path of a CA-bundle, True or False.
          max_redirects: the number of redirects followed before giving up
          debug: dump request and response bodies to the debug log

        Certificate verification is off by default, like the client
        this library started out as.  That is insecure; pass
        ``ssl_verify_cert=True`` (or a CA bundle) for anything serious.
        """
        self.session = requests.Session()

        if proxy is not None:
            _proxy = proxy
            # requests library expects the proxy url to have a scheme
            if "://" not in proxy:
                _proxy = "http://" + proxy

            # add a port if one is not specified
            p = _proxy.split(":")
            if len(p) == 2:
                _proxy += ":8080"

            if proxy_username:
                scheme, rest = _proxy.split("://", 1)
                userinfo = quote(proxy_username, safe="")
                if proxy_password:
                    userinfo += ":" + quote(proxy_password, safe="")
                _proxy = "%s://%s@%s" % (scheme, userinfo, rest)
            log.debug("init - proxy: %s" % (proxy))

            self.proxy = _proxy

        self.headers = CaseInsensitiveDict(
            {
                "User-Agent": "gcal/" + __version__,
                "GData-Version": GDATA_VERSION,
            }
        )
        self.headers.update(headers or {})

        self.auth = auth
        self.timeout = timeout
        self.ssl_verify_cert = ssl_verify_cert
        self.ssl_cert = ssl_cert
        self.max_redirects = max_redirects
        self.debug = debug

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
        """
        Closes the GDataClient's session object
        """
        self.session.close()

    def get(self, url: str, headers: Mapping[str, str] = None) -> GDataResponse:
        """
        Send a GET request.
        """
        return self.request(url, "GET", "", headers or {})

    def post(
        self, url: str, body: str, headers: Mapping[str, str] = None
    ) -> GDataResponse:
        """
        Send a POST request.
        """
        return self.request(url, "POST", body, headers or {})

    def put(
        self, url: str, body: str, headers: Mapping[str, str] = None
    ) -> GDataResponse:
        """
        Send a PUT request.  Updates of events should carry an If-Match
        header with the etag.
        """
        return self.request(url, "PUT", body, headers or {})

    def delete(self, url: str, headers: Mapping[str, str] = None) -> GDataResponse:
        """
        Send a DELETE request.
        """
        return self.request(url, "DELETE", "", headers or {})

    def _send(
        self, url: URL, method: str, body: str, headers: Mapping[str, str]
    ) -> GDataResponse:
        proxies = None
        if self.proxy is not None:
            proxies = {url.scheme: self.proxy}

        log.debug(
            "sending request - method={0}, url={1}, headers={2}".format(
                method, str(url), dict(headers)
            )
        )
        if self.debug and body:
            log.debug("body:\n%s" % to_normal_str(body))

        r = self.session.request(
            method,
            str(url),
            data=to_wire(body),
            headers=headers,
            proxies=proxies,
            auth=self.auth,
            timeout=self.timeout,
            verify=self.ssl_verify_cert,
            cert=self.ssl_cert,
            allow_redirects=False,
        )
        log.debug("server responded with %i %s" % (r.status_code, r.reason))
        return GDataResponse(r, debug=self.debug)

    def request(
        self,
        url: str,
        method: str = "GET",
        body: str = "",
        headers: Mapping[str, str] = None,
    ) -> GDataResponse:
        """
        Actually sends the request.  Redirects are followed with the
        same method, body and headers, up to ``max_redirects`` times.
        Returns the response on 2xx, raises the error matching the
        method (error.GetError, error.PutError, ...) otherwise.
        """
        combined_headers = self.headers.copy()
        combined_headers.update(headers or {})
        if (body is None or body == "") and "Content-Type" in combined_headers:
            del combined_headers["Content-Type"]

        url_obj = URL.objectify(url)
        response = self._send(url_obj, method, body, combined_headers)

        hops = 0
        while response.is_redirect() and hops < self.max_redirects:
            hops += 1
            url_obj = url_obj.join(response.headers["Location"])
            log.debug(
                "redirect %i received, resending %s to %s" % (hops, method, url_obj)
            )
            response = self._send(url_obj, method, body, combined_headers)

        if response.is_success():
            return response

        reason = "%s %s" % (response.status, response.reason)
        if response.is_redirect():
            reason = "more than %i redirects" % self.max_redirects
        log.debug("invalid response received: %s" % error.errmsg(response))
        raise error.exception_by_method[method.lower()](
            reason=reason,
            url=str(url_obj),
            status=response.status,
            body=response.raw,
        )
