#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from gcal.lib.namespace import ns


class Timezone(BaseElement):
    tag: ClassVar[str] = ns("gCal", "timezone")


class Hidden(BaseElement):
    tag: ClassVar[str] = ns("gCal", "hidden")


class Color(BaseElement):
    tag: ClassVar[str] = ns("gCal", "color")
