"""
The Event class represents one event in a calendar.

All usages assume an authenticated Service and an editable Calendar.

Create a new event:

    event = Event(calendar, title="Soccer Game", where="Merry Playfields")
    event.start = datetime(2009, 6, 12, 12, 30)
    event.end = datetime(2009, 6, 12, 13, 30)
    event.save()

Find events:

    event = Event.find(calendar, "Soccer Game", scope="first")
    events = Event.find(calendar, "Soccer Game", start=..., end=...)

A recurring event for every saturday:

    event = Event(calendar, title="Baseball Game")
    event.recurrence = Recurrence(
        start=datetime(2009, 6, 13, 16, 30),
        end=datetime(2009, 6, 13, 18, 30),
        frequency={"weekly": ["SA"]},
    )
    event.save()

An event with a 15 minute email reminder and an attendee:

    event.reminder = Reminder(minutes=15, method="email")
    event.attendees = [Attendee("kate@example.com", "Kate")]
"""
import copy
import logging
from dataclasses import dataclass
from datetime import date
from datetime import datetime
from enum import Enum
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Union
from urllib.parse import urlencode

from dateutil import parser as dtparser
from lxml.etree import _Element

from .calendar import Calendar
from .elements import atom
from .elements import gd
from .gdataobject import ATOM_HEADERS
from .gdataobject import entries
from .gdataobject import GDataObject
from .lib import error
from .lib.namespace import GD_ATTENDEE
from .lib.namespace import GD_EVENT_KIND
from .lib.namespace import GD_KIND
from .lib.namespace import ns
from .lib.namespace import nsmap
from .lib.url import URL
from .recurrence import Recurrence

__all__ = ["Event", "Status", "Transparency", "Reminder", "Attendee"]

log = logging.getLogger("gcal")

TimeStamp = Union[date, datetime]


class Status(Enum):
    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CANCELLED = "cancelled"


class Transparency(Enum):
    """Whether the event shows the attendees as free or busy"""

    FREE = "free"
    BUSY = "busy"


STATUS_TO_WIRE: Dict[Status, str] = {
    Status.CONFIRMED: nsmap["gd"] + "#event.confirmed",
    Status.TENTATIVE: nsmap["gd"] + "#event.tentative",
    Status.CANCELLED: nsmap["gd"] + "#event.canceled",
}
WIRE_TO_STATUS: Dict[str, Status] = {v: k for k, v in STATUS_TO_WIRE.items()}

TRANSPARENCY_TO_WIRE: Dict[Transparency, str] = {
    Transparency.FREE: nsmap["gd"] + "#event.transparent",
    Transparency.BUSY: nsmap["gd"] + "#event.opaque",
}
WIRE_TO_TRANSPARENCY: Dict[str, Transparency] = {
    v: k for k, v in TRANSPARENCY_TO_WIRE.items()
}

SORT_ORDERS = ("ascending", "descending")
SCOPES = ("all", "first")


@dataclass
class Reminder:
    """
    A reminder some minutes, hours or days before the start of the
    event.  Only one of them is sent, minutes win over hours and hours
    over days.  The method is "email" or "alert" (a popup when viewing
    the calendar in a browser).
    """

    minutes: Optional[int] = None
    hours: Optional[int] = None
    days: Optional[int] = None
    method: str = "email"

    def attributes(self) -> Dict[str, Any]:
        ret: Dict[str, Any] = {}
        if self.minutes is not None:
            ret["minutes"] = self.minutes
        elif self.hours is not None:
            ret["hours"] = self.hours
        elif self.days is not None:
            ret["days"] = self.days
        ret["method"] = self.method or "email"
        return ret

    @classmethod
    def from_element(cls, elem: _Element) -> "Reminder":
        def _int(name):
            value = elem.get(name)
            return None if value is None else int(value)

        return cls(
            minutes=_int("minutes"),
            hours=_int("hours"),
            days=_int("days"),
            method=elem.get("method") or "",
        )


@dataclass
class Attendee:
    email: str
    name: Optional[str] = None


def _to_status(value: Union[Status, str]) -> Status:
    if isinstance(value, Status):
        return value
    value = str(value).lower()
    ## the service spells it "canceled"
    if value == "canceled":
        return Status.CANCELLED
    return Status(value)


def _to_transparency(value: Union[Transparency, str]) -> Transparency:
    if isinstance(value, Transparency):
        return value
    return Transparency(str(value).lower())


def _to_timestamp(value: Union[TimeStamp, str], what: str) -> TimeStamp:
    if isinstance(value, str):
        return dtparser.parse(value)
    if isinstance(value, date):
        return value
    raise TypeError("%s must be either a datetime, a date or a string" % what)


def _xmlschema(ts: TimeStamp) -> str:
    """ISO 8601 with offset, a naive timestamp is taken as localtime"""
    if not isinstance(ts, datetime):
        ts = datetime(ts.year, ts.month, ts.day)
    if ts.tzinfo is None:
        ts = ts.astimezone()
    return ts.isoformat(timespec="seconds")


class Event(GDataObject):
    """
    An event in a calendar.  It either has a start and end time, or a
    Recurrence, never both on the wire.
    """

    _handlers = {
        ns("atom", "id"): "_load_id",
        ns("atom", "title"): "_load_title",
        ns("atom", "content"): "_load_content",
        ns("atom", "published"): "_load_published",
        ns("atom", "updated"): "_load_updated",
        ns("app", "edited"): "_load_edited",
        ns("atom", "link"): "_load_edit_link",
        ns("gd", "when"): "_load_when",
        ns("gd", "where"): "_load_where",
        ns("gd", "who"): "_load_who",
        ns("gd", "eventStatus"): "_load_status",
        ns("gd", "transparency"): "_load_transparency",
        ns("gd", "recurrence"): "_load_recurrence",
    }

    content: Optional[str] = None
    where: Optional[str] = None
    all_day: bool = False
    etag: Optional[str] = None
    deleted: bool = False
    published: Optional[str] = None
    updated: Optional[str] = None
    edited: Optional[str] = None
    _start: Optional[TimeStamp] = None
    _end: Optional[TimeStamp] = None
    _status: Optional[Status] = None
    _transparency: Optional[Transparency] = None
    _reminder: Optional[Reminder] = None
    _recurrence: Optional[Recurrence] = None
    _attendees: List[Attendee]

    def __init__(
        self,
        calendar: Calendar,
        title: str = "",
        content: str = "",
        where: str = "",
        start: Union[TimeStamp, str, None] = None,
        end: Union[TimeStamp, str, None] = None,
        all_day: bool = False,
        status: Union[Status, str] = Status.CONFIRMED,
        transparency: Union[Transparency, str] = Transparency.BUSY,
        reminder: Union[Reminder, dict, None] = None,
        attendees: Optional[List[Union[Attendee, dict]]] = None,
        recurrence: Optional[Recurrence] = None,
    ) -> None:
        """
        Creates a new event in the given calendar.  Raises
        CalendarNotEditable if the calendar can't be written to.

        No network traffic will be initiated by this method.
        """
        if not isinstance(calendar, Calendar):
            raise error.InvalidService("a Calendar object is required")
        if not calendar.editable:
            raise error.CalendarNotEditable(url=calendar.event_feed)
        self.calendar = calendar
        self.service = calendar.service
        self.exists = False
        self.deleted = False
        self.title = title
        self.content = content
        self.where = where
        self.all_day = all_day
        self._start = None
        self._end = None
        if start is not None:
            self.start = start
        if end is not None:
            self.end = end
        self.status = status
        self.transparency = transparency
        self.reminder = reminder
        self.attendees = attendees or []
        self._recurrence = None
        self.recurrence = recurrence

    @property
    def start(self) -> Optional[TimeStamp]:
        return self._start

    @start.setter
    def start(self, value: Union[TimeStamp, str]) -> None:
        self._start = _to_timestamp(value, "Start time")

    @property
    def end(self) -> Optional[TimeStamp]:
        return self._end

    @end.setter
    def end(self, value: Union[TimeStamp, str]) -> None:
        self._end = _to_timestamp(value, "End time")

    @property
    def status(self) -> Optional[Status]:
        return self._status

    @status.setter
    def status(self, value: Union[Status, str]) -> None:
        self._status = _to_status(value)

    @property
    def transparency(self) -> Optional[Transparency]:
        return self._transparency

    @transparency.setter
    def transparency(self, value: Union[Transparency, str]) -> None:
        self._transparency = _to_transparency(value)

    @property
    def reminder(self) -> Optional[Reminder]:
        return self._reminder

    @reminder.setter
    def reminder(self, r: Union[Reminder, dict, None]) -> None:
        """
        Accepts a Reminder, None, or a dict with one of the keys
        minutes, hours and days and optionally method.
        """
        if isinstance(r, dict):
            r = Reminder(**r)
        if r is not None and not isinstance(r, Reminder):
            raise TypeError("Reminder must be a Reminder or a dict")
        self._reminder = r

    @property
    def attendees(self) -> List[Attendee]:
        return self._attendees

    @attendees.setter
    def attendees(self, a: List[Union[Attendee, dict]]) -> None:
        """
        Accepts a list of Attendee objects or of dicts with the keys
        email (required) and name.
        """
        if not isinstance(a, list):
            raise TypeError("Attendees must be a list of Attendee objects")
        self._attendees = [x if isinstance(x, Attendee) else Attendee(**x) for x in a]

    @property
    def recurrence(self) -> Optional[Recurrence]:
        return self._recurrence

    @recurrence.setter
    def recurrence(self, r: Optional[Recurrence]) -> None:
        if r is not None and not isinstance(r, Recurrence):
            raise error.RecurrenceValueError("Recurrence must be a Recurrence object")
        if r is not None:
            r.event = self
        self._recurrence = r

    def _format_time(self, ts: Optional[TimeStamp]) -> Optional[str]:
        if ts is None:
            return None
        if self.all_day:
            return ts.strftime("%Y-%m-%d")
        return _xmlschema(ts)

    def _reminder_elements(self) -> List[gd.Reminder]:
        if self.reminder is None:
            return []
        return [gd.Reminder(**self.reminder.attributes())]

    def to_xml(self) -> str:
        """
        Returns the XML representation of the event.  The time window
        goes into gd:when, unless there is a recurrence.  A reminder
        always lives in a gd:when element, so an event having both a
        recurrence and a reminder gets a gd:when without times.
        """
        entry = atom.Entry("gd") + [
            atom.Category(scheme=GD_KIND, term=GD_EVENT_KIND),
            atom.Title(self.title, type="text"),
            atom.Content(self.content, type="text"),
            gd.Transparency(value=TRANSPARENCY_TO_WIRE[self.transparency]),
            gd.EventStatus(value=STATUS_TO_WIRE[self.status]),
            gd.Where(valueString=self.where or ""),
        ]
        if self.recurrence is None:
            entry += gd.When(
                startTime=self._format_time(self.start),
                endTime=self._format_time(self.end),
            ) + self._reminder_elements()
        else:
            entry += gd.Recurrence(self.recurrence.to_ical())
            if self.reminder is not None:
                entry += gd.When() + self._reminder_elements()
        for attendee in self.attendees:
            entry += gd.Who(
                email=attendee.email, valueString=attendee.name, rel=GD_ATTENDEE
            )
        return str(entry)

    def load(self, data: Union[str, bytes, _Element]) -> bool:
        """
        Loads the event from an Atom entry.  Returns True if the entry
        identified an event at the server.
        """
        self._attendees = []
        self._reminder = None
        self._recurrence = None
        entry = self._load_entry(data)
        self.etag = entry.get(ns("gd", "etag")) or entry.get("etag")
        return self.exists

    def _load_id(self, elem: _Element) -> None:
        ## edit_feed stays empty until the rel="edit" link of the entry.
        ## TODO: fall back to the private feed URL of the id for entries
        ## without an edit link
        self.id = elem.text
        self.edit_feed = None

    def _load_content(self, elem: _Element) -> None:
        self.content = elem.text

    def _load_published(self, elem: _Element) -> None:
        self.published = elem.text

    def _load_updated(self, elem: _Element) -> None:
        self.updated = elem.text

    def _load_edited(self, elem: _Element) -> None:
        self.edited = elem.text

    def _load_when(self, elem: _Element) -> None:
        start = elem.get("startTime")
        end = elem.get("endTime")
        if start:
            self.all_day = "T" not in start
            self._start = dtparser.isoparse(start)
            if self.all_day:
                self._start = self._start.date()
        if end:
            self._end = dtparser.isoparse(end)
            if "T" not in end:
                self._end = self._end.date()
        for r in elem.iterfind(ns("gd", "reminder")):
            self._reminder = Reminder.from_element(r)

    def _load_where(self, elem: _Element) -> None:
        self.where = elem.get("valueString")

    def _load_who(self, elem: _Element) -> None:
        if elem.get("rel") != GD_ATTENDEE:
            return
        self._attendees.append(Attendee(elem.get("email"), elem.get("valueString")))

    def _load_status(self, elem: _Element) -> None:
        value = elem.get("value")
        if value in WIRE_TO_STATUS:
            self._status = WIRE_TO_STATUS[value]
        else:
            error.weirdness("unknown event status", value)

    def _load_transparency(self, elem: _Element) -> None:
        value = elem.get("value")
        if value in WIRE_TO_TRANSPARENCY:
            self._transparency = WIRE_TO_TRANSPARENCY[value]
        else:
            error.weirdness("unknown event transparency", value)

    def _load_recurrence(self, elem: _Element) -> None:
        self.recurrence = Recurrence(elem.text or "")

    def save(self) -> bool:
        """
        Creates the event if it doesn't exist at the service, otherwise
        updates it.  Returns False for a deleted event.

        Updates are conditional on the etag; if the event was changed
        at the server in the meantime, the error.PutError is passed on.
        After an update the event is reloaded, overwriting anything
        that wasn't saved.
        """
        if self.deleted:
            return False
        if self.exists:
            headers = dict(ATOM_HEADERS)
            if self.etag:
                headers["If-Match"] = self.etag
            else:
                error.weirdness("updating event without etag, not conditional", self.id)
            self.client.put(self.edit_feed, self.to_xml(), headers)
            self.reload()
            return True

        r = self.client.post(self.calendar.event_feed, self.to_xml(), ATOM_HEADERS)
        entry = next(entries(r.tree), None)
        if entry is None or not self.load(entry):
            raise error.EventSaveFailed(
                "the response did not identify the event", url=self.calendar.event_feed
            )
        return True

    def reload(self) -> bool:
        """
        Reloads the event from the service.  Returns False if it
        doesn't exist (any more).
        """
        if not self.exists:
            return False
        entry = self._get_entry(self.calendar, self.id)
        if entry is None:
            return False
        return self.load(entry)

    def delete(self) -> bool:
        """
        Deletes the event from the service, conditional on the etag.
        All values are cleared.  Returns False, without asking the
        server, if the event doesn't exist.
        """
        if not self.exists:
            return False
        headers = {}
        if self.etag:
            headers["If-Match"] = self.etag
        else:
            error.weirdness("deleting event without etag, not conditional", self.id)
        self.client.delete(self.edit_feed, headers)
        self.exists = False
        self.deleted = True
        self.id = None
        self.title = None
        self.content = None
        self.where = None
        self._start = None
        self._end = None
        self._status = None
        self._transparency = None
        self._reminder = None
        self._recurrence = None
        self._attendees = []
        self.etag = None
        self.edit_feed = None
        return True

    def copy(self) -> "Event":
        """
        Returns a duplicate of the event, in the same calendar, not yet
        saved.
        """
        ret = Event(
            self.calendar,
            title=self.title,
            content=self.content,
            where=self.where,
            all_day=self.all_day,
            status=self.status or Status.CONFIRMED,
            transparency=self.transparency or Transparency.BUSY,
            reminder=copy.copy(self.reminder),
            attendees=[copy.copy(a) for a in self.attendees],
            recurrence=copy.copy(self.recurrence),
        )
        ret._start = self._start
        ret._end = self._end
        return ret

    @classmethod
    def _from_entry(cls, calendar: Calendar, entry: _Element) -> "Event":
        """
        Builds an event from an entry received from the service.
        Events of read-only calendars may be read, so the editable
        check of the constructor is skipped.
        """
        event = cls.__new__(cls)
        event.calendar = calendar
        event.service = calendar.service
        event.deleted = False
        event._status = Status.CONFIRMED
        event._transparency = Transparency.BUSY
        event.load(entry)
        return event

    @classmethod
    def _get_entry(cls, calendar: Calendar, url: str) -> Optional[_Element]:
        ## the id found in the entries points to the public event view
        url = url.replace("/events/", "/private/full/")
        try:
            r = calendar.client.get(url)
        except error.GetError as e:
            if e.status == 404:
                return None
            raise
        return next(entries(r.tree), None)

    @classmethod
    def find(
        cls,
        calendar: Calendar,
        query: str = "",
        scope: str = "all",
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        max_results: Optional[int] = None,
        sort_order: Optional[str] = None,
        single_events: Optional[bool] = None,
        ctz: Optional[str] = None,
    ) -> Union[List["Event"], "Event", None]:
        """
        Finds events in a calendar.

        If query is a URL (an event id), that event is looked up and
        returned, or None if it doesn't exist.  Otherwise query is a
        search term matched by the server against the event texts.

        Args:
          scope: "all" returns a list of all matches, "first" the first match (or None)
          start, end: only events within this time range
          max_results: the number of events to return at most
          sort_order: "ascending" or "descending"
          single_events: True to return each occurrence of a recurring event as an event of its own
          ctz: the timezone to return the event times in

        Raises error.QueryParameterError on malformed parameters.
        """
        if query and URL.objectify(query).is_absolute():
            log.debug("id passed, finding event by id %s" % query)
            entry = cls._get_entry(calendar, query)
            if entry is None:
                return None
            return cls._from_entry(calendar, entry)

        url = calendar.event_feed
        params = cls._query_params(
            query, scope, start, end, max_results, sort_order, single_events, ctz
        )
        if params:
            url += "?" + urlencode(params)
        r = calendar.client.get(url)
        ret = []
        for entry in entries(r.tree):
            ret.append(cls._from_entry(calendar, entry))
        if scope == "first":
            return ret[0] if ret else None
        return ret

    @staticmethod
    def _query_params(
        query, scope, start, end, max_results, sort_order, single_events, ctz
    ) -> List[tuple]:
        if scope not in SCOPES:
            raise error.QueryParameterError("scope must be one of %s" % ", ".join(SCOPES))
        params = []
        if query:
            params.append(("q", query))
        if start is not None or end is not None:
            if not isinstance(start, datetime) or not isinstance(end, datetime):
                raise error.QueryParameterError(
                    "The date range must include both start and end as datetimes"
                )
            params.append(("start-min", _xmlschema(start)))
            params.append(("start-max", _xmlschema(end)))
        if max_results is not None:
            if (
                not isinstance(max_results, int)
                or isinstance(max_results, bool)
                or max_results < 1
            ):
                raise error.QueryParameterError("max_results must be a positive integer")
            params.append(("max-results", str(max_results)))
        if sort_order is not None:
            if sort_order not in SORT_ORDERS:
                raise error.QueryParameterError(
                    "sort_order must be one of %s" % ", ".join(SORT_ORDERS)
                )
            params.append(("sortorder", sort_order))
        if ctz is not None:
            params.append(("ctz", ctz.replace(" ", "_")))
        if single_events is not None:
            if isinstance(single_events, str):
                single_events = single_events.lower()
                if single_events not in ("true", "false"):
                    raise error.QueryParameterError(
                        "single_events must be a boolean"
                    )
            else:
                single_events = "true" if single_events else "false"
            params.append(("singleevents", single_events))
        return params
