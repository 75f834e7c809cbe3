#!/usr/bin/env python
import sys
from typing import ClassVar
from typing import Dict
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from gcal.lib.namespace import entry_nsmap
from gcal.lib.python_utilities import to_normal_str

if sys.version_info < (3, 9):
    from typing import Iterable
else:
    from collections.abc import Iterable

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


class BaseElement:
    """
    Builder for one XML element.  Children are added with ``+``:

        Entry() + [Title("Soccer", type="text"), Content("Bring shoes")]

    The text goes in as the first positional argument, keyword
    arguments (including "value") become attributes.  Attributes given
    as None are left out, other attribute values are
    converted to strings.  Namespace declarations are only put on the
    root element.
    """

    children: Optional[List[Self]] = None
    tag: ClassVar[Optional[str]] = None
    text: Optional[str] = None
    attributes: Optional[Dict[str, str]] = None
    nsmap: Optional[dict] = None

    def __init__(self, text: Union[str, bytes, None] = None, **attributes) -> None:
        self.children = []
        self.attributes = {}
        self.text = None
        if text is not None:
            self.text = to_normal_str(text)
        for k in attributes:
            if attributes[k] is not None:
                self.attributes[k] = str(attributes[k])

    def __add__(
        self, other: Union["BaseElement", Iterable["BaseElement"]]
    ) -> "BaseElement":
        return self.append(other)

    def __str__(self) -> str:
        utf8 = etree.tostring(
            self.xmlelement(), encoding="utf-8", xml_declaration=True
        )
        return str(utf8, "utf-8")

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.text)

    def xmlelement(self, parent: Optional[_Element] = None) -> _Element:
        if self.tag is None:
            raise ValueError("Unexpected value None for self.tag")

        if parent is None:
            root = etree.Element(self.tag, nsmap=self.nsmap or entry_nsmap())
        else:
            root = etree.SubElement(parent, self.tag)
        if self.text is not None:
            root.text = self.text

        for k in self.attributes:
            root.set(k, self.attributes[k])

        self.xmlchildren(root)
        return root

    def xmlchildren(self, root: _Element) -> None:
        if self.children is None:
            raise ValueError("Unexpected value None for self.children")

        for c in self.children:
            c.xmlelement(root)

    def append(self, element: Union[Self, Iterable[Self]]) -> Self:
        if self.children is None:
            raise ValueError("Unexpected value None for self.children")

        if isinstance(element, Iterable):
            self.children.extend(element)
        else:
            self.children.append(element)

        return self
