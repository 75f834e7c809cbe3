"""
The Recurrence class stores the repetition of an Event, using the
RFC 2445 iCalendar recurrence description the service expects inside
the gd:recurrence element.

    Recurrence(
        start=datetime(2009, 6, 13, 16, 30),
        end=datetime(2009, 6, 13, 18, 30),
        frequency={"weekly": ["SA"]},
    )

gives

    DTSTART;VALUE=DATE-TIME:20090613T163000Z
    DTEND;VALUE=DATE-TIME:20090613T183000Z
    RRULE:FREQ=WEEKLY;BYDAY=SA;
"""
import logging
from datetime import date
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Dict
from typing import Optional
from typing import TYPE_CHECKING
from typing import Union

from icalendar.prop import vDate
from icalendar.prop import vDatetime
from icalendar.prop import vRecur

from .lib import error

if TYPE_CHECKING:
    from .event import Event

__all__ = ["Recurrence"]

log = logging.getLogger("gcal")

utc_tz = timezone.utc

FREQUENCIES = ("secondly", "minutely", "hourly", "daily", "weekly", "monthly", "yearly")

## The by-rule emitted for the values of each frequency.  Daily takes no
## values.  Monthly takes values like "+1MO", so it shares BYDAY with weekly.
BY_RULES = {
    "secondly": "BYSECOND",
    "minutely": "BYMINUTE",
    "hourly": "BYHOUR",
    "weekly": "BYDAY",
    "monthly": "BYDAY",
    "yearly": "BYYEARDAY",
}

TimeStamp = Union[date, datetime]


def _to_utc(ts: datetime) -> datetime:
    """coerce datetimes to UTC (assume localtime if nothing is given)"""
    return ts.astimezone(utc_tz)


def _parse_params(key: str) -> Dict[str, str]:
    params = {}
    for param in key.split(";")[1:]:
        name, _, value = param.partition("=")
        params[name.upper()] = value
    return params


class Recurrence:
    """
    Start, end and repetition of an event.

    ``frequency`` is a dict with one of "secondly", "minutely",
    "hourly", "daily", "weekly", "monthly", "yearly" as the key (any
    case), and as the value a list with zero to n of:

    - Secondly: a value between 0 and 59, the second of each minute.
    - Minutely: a value between 0 and 59, the minute of every hour.
    - Hourly: a value between 0 and 23, the hour of every day.
    - Daily: no value needed.
    - Weekly: the first two letters of a day of the week, i.e. "TU".
    - Monthly: a day-of-week string with a position, i.e. "+1TU" for
      the first tuesday of the month.
    - Yearly: a value of 1 to 366, the day of the year.  May be
      negative to count from the end of the year.

    An "interval" key may be added to repeat every n'th time:

        {"Weekly": ["FR"], "interval": 2}
    """

    _start: Optional[TimeStamp] = None
    _end: Optional[TimeStamp] = None
    _repeat_until: Optional[date] = None
    _frequency: Optional[Dict[str, Any]] = None
    _event: Optional["Event"] = None

    def __init__(
        self,
        data: Optional[str] = None,
        start: Optional[TimeStamp] = None,
        end: Optional[TimeStamp] = None,
        frequency: Optional[Dict[str, Any]] = None,
        repeat_until: Optional[date] = None,
        all_day: bool = False,
    ) -> None:
        """
        Accepts either the recurrence text as received from the
        service, or the separate values.
        """
        self.all_day = all_day
        if start is not None:
            self.start = start
        if end is not None:
            self.end = end
        if frequency is not None:
            self.frequency = frequency
        if repeat_until is not None:
            self.repeat_until = repeat_until
        if data is not None:
            self.load(data)

    @property
    def start(self) -> Optional[TimeStamp]:
        return self._start

    @start.setter
    def start(self, s: TimeStamp) -> None:
        if not isinstance(s, date):
            raise error.RecurrenceValueError("Start must be a date or a time")
        self._start = s

    @property
    def end(self) -> Optional[TimeStamp]:
        return self._end

    @end.setter
    def end(self, e: TimeStamp) -> None:
        if not isinstance(e, date):
            raise error.RecurrenceValueError("End must be a date or a time")
        self._end = e

    @property
    def repeat_until(self) -> Optional[date]:
        return self._repeat_until

    @repeat_until.setter
    def repeat_until(self, r: date) -> None:
        if not isinstance(r, date):
            raise error.RecurrenceValueError("Repeat_until must be a date")
        self._repeat_until = r

    @property
    def frequency(self) -> Optional[Dict[str, Any]]:
        return self._frequency

    @frequency.setter
    def frequency(self, f: Dict[str, Any]) -> None:
        if not isinstance(f, dict):
            raise error.RecurrenceValueError(
                "Frequency must be a dict, like {'weekly': ['TU']}"
            )
        keys = [str(k).lower() for k in f]
        freqs = [k for k in keys if k in FREQUENCIES]
        if len(freqs) != 1 or len(keys) != len(freqs) + keys.count("interval"):
            raise error.RecurrenceValueError(
                "Frequency must have exactly one of %s as key, and optionally interval, got %s"
                % (", ".join(FREQUENCIES), ", ".join(str(k) for k in f))
            )
        self._frequency = f

    @property
    def event(self) -> Optional["Event"]:
        return self._event

    @event.setter
    def event(self, e: "Event") -> None:
        from .event import Event

        if not isinstance(e, Event):
            raise error.RecurrenceValueError("Event must be an event")
        self._event = e

    @property
    def interval(self) -> Optional[int]:
        for key, value in (self._frequency or {}).items():
            if str(key).lower() == "interval":
                return int(value)
        return None

    def _format(self, ts: TimeStamp) -> str:
        if self.all_day:
            if isinstance(ts, datetime):
                ts = ts.date()
            return vDate(ts).to_ical().decode("ascii")
        if not isinstance(ts, datetime):
            ts = datetime(ts.year, ts.month, ts.day)
        return vDatetime(_to_utc(ts)).to_ical().decode("ascii")

    def _rrule(self) -> str:
        freq = ""
        interval = ""
        by = ""
        for key, v in (self._frequency or {}).items():
            if isinstance(v, (list, tuple)):
                value = ",".join(str(x) for x in v) if v else None
            else:
                value = None if v is None else str(v)
            key = str(key).lower()
            if key == "interval":
                if value:
                    interval += "INTERVAL=%s;" % value
                continue
            freq += "FREQ=%s;" % key.upper()
            if value and key in BY_RULES:
                by += "%s=%s;" % (BY_RULES[key], value)
        ret = "RRULE:" + freq + interval + by
        if self._repeat_until:
            ret += "UNTIL=%s" % self._repeat_until.strftime("%Y%m%d")
        return ret

    def to_ical(self) -> str:
        """
        Returns the recurrence as RFC 2445 text, one property per line
        """
        if self._start is None or self._end is None:
            raise error.RecurrenceValueError("Start and end must be set")
        value_type = "DATE" if self.all_day else "DATE-TIME"
        lines = [
            "DTSTART;VALUE=%s:%s" % (value_type, self._format(self._start)),
            "DTEND;VALUE=%s:%s" % (value_type, self._format(self._end)),
            self._rrule(),
        ]
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_ical()

    def __repr__(self) -> str:
        return "Recurrence(start=%r, end=%r, frequency=%r)" % (
            self._start,
            self._end,
            self._frequency,
        )

    def _parse_timestamp(self, key: str, value: str) -> TimeStamp:
        params = _parse_params(key)
        if params.get("VALUE") == "DATE" or (
            "VALUE" not in params and "T" not in value
        ):
            return vDate.from_ical(value)
        return vDatetime.from_ical(value, timezone=params.get("TZID"))

    def load(self, rec: str) -> "Recurrence":
        """
        Loads the recurrence from RFC 2445 text.  Components embedded
        in the text (the service sends a VTIMEZONE along) are skipped.
        """
        depth = 0
        for line in rec.splitlines():
            line = line.strip()
            if not line or ":" not in line:
                continue
            key, value = line.split(":", 1)
            name = key.split(";")[0].upper()
            if name == "BEGIN":
                depth += 1
                continue
            if name == "END":
                depth -= 1
                continue
            if depth > 0:
                continue
            if name == "DTSTART":
                self._start = self._parse_timestamp(key, value)
                self.all_day = not isinstance(self._start, datetime)
            elif name == "DTEND":
                self._end = self._parse_timestamp(key, value)
            elif name == "RRULE":
                self._load_rrule(value)
            else:
                log.debug("ignoring recurrence property %s" % key)
        return self

    def _load_rrule(self, value: str) -> None:
        rrule = vRecur.from_ical(value)
        key = str(rrule.get("FREQ", [""])[0]).lower()
        by: list = []
        if key in BY_RULES:
            by = [str(x) for x in rrule.get(BY_RULES[key], [])]
        if "UNTIL" in rrule:
            until = rrule["UNTIL"][0]
            if isinstance(until, datetime):
                until = until.date()
            self._repeat_until = until
        for part in rrule:
            if part not in ("FREQ", "INTERVAL", "UNTIL", BY_RULES.get(key)):
                log.debug("ignoring recurrence rule part %s" % part)
        frequency: Dict[str, Any] = {key.capitalize(): by}
        if "INTERVAL" in rrule:
            frequency["interval"] = int(rrule["INTERVAL"][0])
        self.frequency = frequency
