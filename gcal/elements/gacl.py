#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from gcal.lib.namespace import ns


class Scope(BaseElement):
    tag: ClassVar[str] = ns("gAcl", "scope")


class Role(BaseElement):
    tag: ClassVar[str] = ns("gAcl", "role")
