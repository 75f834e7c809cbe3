from datetime import date
from datetime import datetime
from datetime import timezone

import pytest

from gcal import Recurrence
from gcal.lib import error

utc = timezone.utc


class TestRecurrence:
    def test_weekly(self):
        r = Recurrence(
            start=datetime(2009, 6, 16, 18, 0, tzinfo=utc),
            end=datetime(2009, 6, 16, 19, 30, tzinfo=utc),
            frequency={"weekly": ["TU"]},
        )
        assert r.to_ical() == (
            "DTSTART;VALUE=DATE-TIME:20090616T180000Z\n"
            "DTEND;VALUE=DATE-TIME:20090616T193000Z\n"
            "RRULE:FREQ=WEEKLY;BYDAY=TU;\n"
        )
        assert str(r) == r.to_ical()

    def test_interval_and_until(self):
        r = Recurrence(
            start=datetime(2009, 6, 12, 18, 0, tzinfo=utc),
            end=datetime(2009, 6, 12, 19, 0, tzinfo=utc),
            frequency={"Weekly": ["MO", "FR"], "interval": 2},
            repeat_until=date(2009, 12, 31),
        )
        assert r.interval == 2
        assert r.to_ical().splitlines()[2] == (
            "RRULE:FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,FR;UNTIL=20091231"
        )

    def test_all_day(self):
        r = Recurrence(
            start=date(2009, 6, 13),
            end=date(2009, 6, 14),
            frequency={"monthly": ["+2SA"]},
            all_day=True,
        )
        assert r.to_ical() == (
            "DTSTART;VALUE=DATE:20090613\n"
            "DTEND;VALUE=DATE:20090614\n"
            "RRULE:FREQ=MONTHLY;BYDAY=+2SA;\n"
        )

    @pytest.mark.parametrize(
        "frequency, rrule",
        [
            ({"daily": []}, "RRULE:FREQ=DAILY;"),
            ({"yearly": [1, -1]}, "RRULE:FREQ=YEARLY;BYYEARDAY=1,-1;"),
            ({"hourly": [8]}, "RRULE:FREQ=HOURLY;BYHOUR=8;"),
        ],
    )
    def test_rrules(self, frequency, rrule):
        r = Recurrence(
            start=datetime(2009, 6, 13, 16, 30, tzinfo=utc),
            end=datetime(2009, 6, 13, 18, 30, tzinfo=utc),
            frequency=frequency,
        )
        assert r.to_ical().splitlines()[2] == rrule

    def test_localtime_converted_to_utc(self):
        start = datetime(2009, 6, 13, 16, 30)
        r = Recurrence(start=start, end=start, frequency={"daily": []})
        expected = start.astimezone(utc).strftime("%Y%m%dT%H%M%SZ")
        assert r.to_ical().splitlines()[0] == "DTSTART;VALUE=DATE-TIME:" + expected

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"frequency": "weekly"},
            {"frequency": {"weekly": ["TU"], "daily": []}},
            {"frequency": {"fortnightly": []}},
            {"frequency": {"weekly": ["TU"], "count": 3}},
            {"frequency": {"interval": 2}},
            {"start": "tomorrow"},
            {"end": 5},
            {"repeat_until": "2009-12-31"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(error.RecurrenceValueError):
            Recurrence(**kwargs)

    def test_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            Recurrence(frequency=["weekly"])

    def test_incomplete(self):
        with pytest.raises(error.RecurrenceValueError):
            Recurrence(frequency={"daily": []}).to_ical()

    def test_event_must_be_event(self):
        with pytest.raises(error.RecurrenceValueError):
            Recurrence().event = "an event"

    def test_round_trip(self):
        r = Recurrence(
            start=datetime(2009, 6, 16, 18, 0, tzinfo=utc),
            end=datetime(2009, 6, 16, 19, 30, tzinfo=utc),
            frequency={"weekly": ["TU"], "interval": 2},
            repeat_until=date(2009, 12, 15),
        )
        loaded = Recurrence(r.to_ical())
        assert loaded.start == r.start
        assert loaded.end == r.end
        assert not loaded.all_day
        assert loaded.frequency == {"Weekly": ["TU"], "interval": 2}
        assert loaded.repeat_until == date(2009, 12, 15)
        assert loaded.to_ical() == r.to_ical()

    def test_load_all_day(self):
        r = Recurrence(
            "DTSTART;VALUE=DATE:20090613\r\n"
            "DTEND;VALUE=DATE:20090614\r\n"
            "RRULE:FREQ=YEARLY;BYYEARDAY=164\r\n"
        )
        assert r.all_day
        assert r.start == date(2009, 6, 13)
        assert r.end == date(2009, 6, 14)
        assert r.frequency == {"Yearly": ["164"]}
        assert r.interval is None

    def test_load_with_timezone(self):
        r = Recurrence(
            "DTSTART;TZID=America/Los_Angeles:20090616T180000\n"
            "DTEND;TZID=America/Los_Angeles:20090616T193000\n"
            "RRULE:FREQ=DAILY;UNTIL=20090630T070000Z\n"
            "BEGIN:VTIMEZONE\n"
            "TZID:America/Los_Angeles\n"
            "BEGIN:DAYLIGHT\n"
            "DTSTART:19700308T020000\n"
            "TZOFFSETTO:-0700\n"
            "END:DAYLIGHT\n"
            "END:VTIMEZONE\n"
        )
        assert r.start.tzinfo is not None
        assert r.start.replace(tzinfo=None) == datetime(2009, 6, 16, 18, 0)
        assert r.end.replace(tzinfo=None) == datetime(2009, 6, 16, 19, 30)
        assert r.frequency == {"Daily": []}
        assert r.repeat_until == date(2009, 6, 30)

    def test_load_week_start_keeps_days(self):
        r = Recurrence(
            "DTSTART:20090616T180000Z\n"
            "DTEND:20090616T193000Z\n"
            "RRULE:FREQ=WEEKLY;BYDAY=TU,TH;WKST=SU\n"
        )
        assert r.frequency == {"Weekly": ["TU", "TH"]}
        assert "RRULE:FREQ=WEEKLY;BYDAY=TU,TH;" in r.to_ical()

    def test_load_count_keeps_days(self):
        r = Recurrence(
            "DTSTART:20090616T180000Z\n"
            "DTEND:20090616T193000Z\n"
            "RRULE:FREQ=WEEKLY;BYDAY=TU;COUNT=10;INTERVAL=2\n"
        )
        assert r.frequency == {"Weekly": ["TU"], "interval": 2}
        assert r.repeat_until is None
