import logging
from typing import ClassVar
from typing import Dict
from typing import Optional
from typing import TYPE_CHECKING
from typing import Union

from lxml.etree import _Element

from .client import ATOM_CONTENT_TYPE
from .lib.namespace import ns
from .lib.python_utilities import to_element

if TYPE_CHECKING:
    from .client import GDataClient
    from .service import Service

__all__ = ["GDataObject"]

log = logging.getLogger("gcal")

ATOM_HEADERS = {"Content-Type": ATOM_CONTENT_TYPE}

"""
This file contains one class, the GDataObject which is the base class
for Calendar and Event.  It holds what the entities share: the service
they talk through, the existence flag and the parsing of an Atom entry
into fields.  Library users should never need to initialize one.
"""


class GDataObject:
    """
    Base class for the entities stored at the calendar service.

    Subclasses list the child elements of an Atom entry they care about
    in ``_handlers``, a mapping from the (Clark notation) tag to the
    name of the method consuming the element.  Elements not in the
    mapping are ignored, so additions on the server side do no harm.
    """

    _handlers: ClassVar[Dict[str, str]] = {}

    id: Optional[str] = None
    title: Optional[str] = None
    edit_feed: Optional[str] = None
    exists: bool = False
    service: Optional["Service"] = None

    @property
    def client(self) -> "GDataClient":
        if self.service is None:
            raise ValueError("Unexpected value None for self.service")
        return self.service.client

    @property
    def debug(self) -> bool:
        return bool(self.service and self.service.debug)

    def _load_entry(self, data: Union[str, bytes, _Element]) -> _Element:
        """
        Walks through the children of an Atom entry and hands each
        known element to its handler.  Returns the entry element.
        """
        entry = to_element(data)
        self.id = None
        for elem in entry:
            handler = self._handlers.get(elem.tag)
            if handler is None:
                continue
            getattr(self, handler)(elem)
        ## an entry without id is not something stored at the server
        self.exists = self.id is not None
        return entry

    def _load_edit_link(self, elem: _Element) -> None:
        if elem.get("rel") == "edit":
            self.edit_feed = elem.get("href")

    def _load_title(self, elem: _Element) -> None:
        self.title = elem.text

    def to_xml(self) -> str:
        raise NotImplementedError()

    def __str__(self) -> str:
        return self.to_xml()

    def __repr__(self) -> str:
        return "%s(%s)" % (self.__class__.__name__, self.title or self.id)


def entries(tree: Optional[_Element]):
    """
    Yields the Atom entries of a feed.  A single entry is yielded
    as-is, an empty response yields nothing.
    """
    if tree is None:
        return
    if tree.tag == ns("atom", "entry"):
        yield tree
        return
    yield from tree.iterfind(ns("atom", "entry"))
