#!/usr/bin/env python
import logging

__version__ = "0.1.0"

from .client import GDataClient
from .service import get_service
from .service import Service

## Importing the entity classes from the top level is the common use case,
## `from gcal import Service, Calendar, Event`.
from .objects import *

# Silence notification of no default logging handler
log = logging.getLogger("gcal")


class NullHandler(logging.Handler):
    def emit(self, record) -> None:
        pass


log.addHandler(NullHandler())

__all__ = [
    "__version__",
    "GDataClient",
    "Service",
    "get_service",
    "Calendar",
    "Event",
    "Recurrence",
    "Status",
    "Transparency",
    "Reminder",
    "Attendee",
]
