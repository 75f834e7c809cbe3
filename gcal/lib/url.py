#!/usr/bin/env python
import sys
import urllib.parse
from typing import cast
from typing import Optional
from typing import Union
from urllib.parse import ParseResult
from urllib.parse import SplitResult
from urllib.parse import urljoin
from urllib.parse import urlparse

from gcal.lib.python_utilities import to_normal_str

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


class URL:
    """
    This class is for wrapping URLs into objects.  It's used
    internally in the library, end users should not need to know
    anything about this class.  All methods that accept URLs can be
    fed either with a URL object, a string or a urlparse.ParseResult
    object.

    The feeds of the calendar service are always addressed with fully
    qualified URLs, but the Location header of a redirect and the
    query term given to Event.find may be anything.
    """

    def __init__(self, url: Union[str, bytes, ParseResult, SplitResult]) -> None:
        if isinstance(url, ParseResult) or isinstance(url, SplitResult):
            self.url_parsed: Optional[Union[ParseResult, SplitResult]] = url
            self.url_raw = None
        else:
            self.url_raw = to_normal_str(url)
            self.url_parsed = None

    def __bool__(self) -> bool:
        if self.url_raw or self.url_parsed:
            return True
        else:
            return False

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __eq__(self, other: object) -> bool:
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    @classmethod
    def objectify(self, url: Union[Self, str, ParseResult, SplitResult]) -> "URL":
        if url is None or isinstance(url, URL):
            return url
        else:
            return URL(url)

    # To deal with all kind of methods/properties in the ParseResult
    # class
    def __getattr__(self, attr: str):
        if "url_parsed" not in vars(self):
            raise AttributeError
        if self.url_parsed is None:
            self.url_parsed = cast(urllib.parse.ParseResult, urlparse(self.url_raw))
        if hasattr(self.url_parsed, attr):
            return getattr(self.url_parsed, attr)
        else:
            return getattr(str(self), attr)

    def __str__(self) -> str:
        if self.url_raw is None:
            if self.url_parsed is None:
                raise ValueError("Unexpected value None for self.url_parsed")
            self.url_raw = self.url_parsed.geturl()
        return self.url_raw

    def __repr__(self) -> str:
        return "URL(%s)" % str(self)

    def is_absolute(self) -> bool:
        """
        True for a fully qualified http(s) URL.  Free text like
        "Soccer game" or "foo:bar" is not.
        """
        try:
            return self.scheme in ("http", "https") and bool(self.netloc)
        except ValueError:
            return False

    def join(self, path: Union[Self, str]) -> "URL":
        """
        Resolves path relative to this URL.  An absolute path keeps
        the connection details of self, a fully qualified URL replaces
        everything.
        """
        pathAsString = str(path)
        if not path or not pathAsString:
            return self
        return URL(urljoin(str(self), pathAsString))
