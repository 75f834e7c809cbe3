#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from gcal.lib.namespace import entry_nsmap
from gcal.lib.namespace import ns


class Entry(BaseElement):
    """
    The envelope of every document sent to the server.  The vendor
    namespace prefixes to declare are given up front, the server is
    picky about the declarations.
    """

    tag: ClassVar[str] = ns("atom", "entry")

    def __init__(self, *prefixes: str, **attributes) -> None:
        super().__init__(**attributes)
        self.nsmap = entry_nsmap(*prefixes)


class Title(BaseElement):
    tag: ClassVar[str] = ns("atom", "title")


class Summary(BaseElement):
    tag: ClassVar[str] = ns("atom", "summary")


class Content(BaseElement):
    tag: ClassVar[str] = ns("atom", "content")


class Category(BaseElement):
    tag: ClassVar[str] = ns("atom", "category")
