#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from gcal.lib.namespace import ns


class Transparency(BaseElement):
    tag: ClassVar[str] = ns("gd", "transparency")


class EventStatus(BaseElement):
    tag: ClassVar[str] = ns("gd", "eventStatus")


class Where(BaseElement):
    tag: ClassVar[str] = ns("gd", "where")


class When(BaseElement):
    tag: ClassVar[str] = ns("gd", "when")


class Reminder(BaseElement):
    tag: ClassVar[str] = ns("gd", "reminder")


class Who(BaseElement):
    tag: ClassVar[str] = ns("gd", "who")


class Recurrence(BaseElement):
    tag: ClassVar[str] = ns("gd", "recurrence")
