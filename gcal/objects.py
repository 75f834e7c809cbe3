#!/usr/bin/env python
"""
Convenience module collecting the entity classes.

* GDataObject base class -> gdataobject.py
* Calendar -> calendar.py
* Event, Status, Transparency, Reminder, Attendee -> event.py
* Recurrence -> recurrence.py
"""
from .calendar import *
from .event import *
from .gdataobject import *
from .recurrence import *
