#!/usr/bin/env python
# -*- encoding: utf-8 -*-
"""
Tests of the Calendar class.  The GDataClient.request method is mocked,
no test in this file initiates any internet communication.
"""
from unittest import mock

import pytest
from lxml import etree

from gcal import Calendar
from gcal import Service
from gcal.calendar import ACL_FEED
from gcal.calendar import CALENDAR_FEED
from gcal.calendar import EVENT_FEED
from gcal.client import GDataClient
from gcal.client import GDataResponse
from gcal.lib import error
from gcal.lib.namespace import ns

CAL_ID = "soccer%40group.calendar.google.com"

calendar_entry = """<?xml version='1.0' encoding='UTF-8'?>
<entry xmlns='http://www.w3.org/2005/Atom' xmlns:gCal='http://schemas.google.com/gCal/2005' xmlns:gd='http://schemas.google.com/g/2005'>
  <id>http://www.google.com/calendar/feeds/default/calendars/soccer%40group.calendar.google.com</id>
  <title type='text'>Soccer team</title>
  <summary type='text'>Games and training</summary>
  <link rel='alternate' type='application/atom+xml' href='https://www.google.com/calendar/feeds/soccer%40group.calendar.google.com/private/full'/>
  <link rel='edit' type='application/atom+xml' href='https://www.google.com/calendar/feeds/default/owncalendars/full/soccer%40group.calendar.google.com'/>
  <gCal:timezone value='Europe/Oslo'/>
  <gCal:hidden value='false'/>
  <gCal:color value='#A32929'/>
  <gCal:selected value='true'/>
</entry>"""

acl_feed_public = """<?xml version='1.0' encoding='UTF-8'?>
<feed xmlns='http://www.w3.org/2005/Atom' xmlns:gAcl='http://schemas.google.com/acl/2007'>
  <entry>
    <gAcl:scope type='user' value='someone@gmail.com'/>
    <gAcl:role value='http://schemas.google.com/gCal/2005#owner'/>
  </entry>
  <entry>
    <gAcl:scope type='default'/>
    <gAcl:role value='http://schemas.google.com/gCal/2005#read'/>
  </entry>
</feed>"""

acl_feed_private = """<?xml version='1.0' encoding='UTF-8'?>
<feed xmlns='http://www.w3.org/2005/Atom' xmlns:gAcl='http://schemas.google.com/acl/2007'>
  <entry>
    <gAcl:scope type='user' value='someone@gmail.com'/>
    <gAcl:role value='http://schemas.google.com/gCal/2005#owner'/>
  </entry>
</feed>"""


def MockedGDataResponse(text="", status=200):
    resp = mock.MagicMock()
    resp.status_code = status
    resp.reason = "OK"
    resp.headers = {}
    resp.content = text
    return GDataResponse(resp)


def MockedService(*responses, check_public=True):
    """
    A Service whose client answers each request with the next of the
    given responses (xml strings, or exceptions to be raised)
    """
    client = GDataClient()
    client.request = mock.MagicMock(
        side_effect=[
            r if isinstance(r, Exception) else MockedGDataResponse(r)
            for r in responses
        ]
    )
    service = Service(client=client, check_public=check_public)
    service.authenticate_with_token("tok")
    return service


def loaded_calendar(check_public=False):
    cal = Calendar(MockedService(check_public=check_public))
    cal.load(calendar_entry)
    return cal


class TestCalendar:
    def test_invalid_service(self):
        with pytest.raises(error.InvalidService):
            Calendar("not a service")
        with pytest.raises(TypeError):
            Calendar(None)

    def test_defaults(self):
        cal = Calendar(MockedService())
        assert not cal.exists
        assert cal.editable
        assert not cal.public
        assert cal.timezone == "America/Los_Angeles"

    def test_xml_round_trip(self):
        service = MockedService()
        cal = Calendar(
            service,
            title="Soccer team",
            summary="Games & training",
            timezone="Europe/Oslo",
            color="#A32929",
            hidden=True,
        )
        root = etree.XML(cal.to_xml().encode("utf-8"))
        assert root.tag == ns("atom", "entry")
        assert root.find(ns("gCal", "hidden")).get("value") == "true"

        other = Calendar(service)
        other.load(cal.to_xml())
        assert other.title == "Soccer team"
        assert other.summary == "Games & training"
        assert other.timezone == "Europe/Oslo"
        assert other.color == "#A32929"
        assert other.hidden
        ## nothing at the server is identified by our own xml
        assert not other.exists
        assert not service.client.request.called

    def test_load_public(self):
        service = MockedService(acl_feed_public)
        cal = Calendar(service)
        assert cal.load(calendar_entry)
        assert cal.id == CAL_ID
        assert cal.exists
        assert cal.title == "Soccer team"
        assert cal.summary == "Games and training"
        assert cal.selected
        assert not cal.hidden
        assert cal.event_feed == EVENT_FEED % CAL_ID
        assert (
            cal.edit_feed
            == "https://www.google.com/calendar/feeds/default/owncalendars/full/" + CAL_ID
        )
        assert cal.editable
        assert cal.public
        assert service.client.request.call_args.args[:2] == (ACL_FEED % CAL_ID, "GET")

    def test_load_private(self):
        cal = Calendar(MockedService(acl_feed_private))
        cal.load(calendar_entry)
        assert cal.editable
        assert not cal.public

    def test_load_acl_refused(self):
        ## calendars shared with the account have no readable ACL feed
        cal = Calendar(
            MockedService(error.GetError("403 Forbidden", url=ACL_FEED % CAL_ID, status=403))
        )
        assert cal.load(calendar_entry)
        assert cal.exists
        assert not cal.editable
        assert not cal.public

    def test_load_acl_unparsable(self):
        cal = Calendar(
            MockedService(etree.XMLSyntaxError("Premature end of data", 0, 1, 1))
        )
        assert cal.load(calendar_entry)
        assert cal.exists
        assert not cal.editable
        assert not cal.public

    def test_vendor_values_are_attributes(self):
        cal = Calendar(
            MockedService(),
            timezone="Europe/Oslo",
            color="#A32929",
            hidden=False,
        )
        root = etree.XML(cal.to_xml().encode("utf-8"))
        for name, value in (
            ("timezone", "Europe/Oslo"),
            ("hidden", "false"),
            ("color", "#A32929"),
        ):
            elem = root.find(ns("gCal", name))
            assert elem.get("value") == value
            assert elem.text is None

    def test_load_without_acl_check(self):
        cal = loaded_calendar(check_public=False)
        assert cal.editable
        assert not cal.public
        assert not cal.service.client.request.called

    def test_save_new(self):
        service = MockedService(calendar_entry, check_public=False)
        cal = Calendar(service, title="Soccer team")
        assert cal.save()
        assert cal.exists
        assert cal.id == CAL_ID
        url, method, body, headers = service.client.request.call_args.args
        assert (url, method) == (CALENDAR_FEED, "POST")
        assert headers["Content-Type"] == "application/atom+xml"
        assert "Soccer team" in body

    def test_save_new_without_answer(self):
        cal = Calendar(MockedService(""), title="Soccer team")
        with pytest.raises(error.CalendarSaveFailed):
            cal.save()
        assert not cal.exists

    def test_save_new_without_id(self):
        cal = Calendar(MockedService(Calendar(MockedService()).to_xml()))
        with pytest.raises(error.CalendarSaveFailed):
            cal.save()

    def test_save_existing(self):
        cal = loaded_calendar()
        cal.service.client.request.side_effect = [MockedGDataResponse(calendar_entry)]
        cal.title = "Soccer"
        assert cal.save()
        url, method, body, headers = cal.service.client.request.call_args.args
        assert (url, method) == (cal.edit_feed, "PUT")
        assert "<title type=\"text\">Soccer</title>" in body

    def test_delete(self):
        cal = loaded_calendar()
        cal.service.client.request.side_effect = [MockedGDataResponse()]
        assert cal.delete()
        assert cal.service.client.request.call_args.args[:2] == (
            CALENDAR_FEED + "/" + CAL_ID,
            "DELETE",
        )
        assert not cal.exists
        assert cal.id is None
        assert cal.title is None
        assert cal.event_feed is None

    def test_delete_not_existing(self):
        cal = Calendar(MockedService())
        assert cal.delete() is False
        assert not cal.service.client.request.called

    def test_set_public(self):
        cal = loaded_calendar()
        cal.service.client.request.side_effect = [MockedGDataResponse()]
        cal.public = True
        assert cal.public
        url, method, body, headers = cal.service.client.request.call_args.args
        assert (url, method) == (ACL_FEED % CAL_ID + "/default", "PUT")
        rule = etree.XML(body.encode("utf-8"))
        assert rule.find(ns("gAcl", "scope")).get("type") == "default"
        assert (
            rule.find(ns("gAcl", "role")).get("value")
            == "http://schemas.google.com/gCal/2005#read"
        )

    def test_set_public_refused(self):
        cal = loaded_calendar()
        cal.service.client.request.side_effect = [
            error.PutError("403 Forbidden", status=403)
        ]
        with pytest.raises(error.PutError):
            cal.public = True
        assert not cal.public

    def test_set_private(self):
        cal = loaded_calendar()
        cal.service.client.request.side_effect = [MockedGDataResponse()]
        cal.set_public(False)
        body = cal.service.client.request.call_args.args[2]
        rule = etree.XML(body.encode("utf-8"))
        role = rule.find(ns("gAcl", "role"))
        assert role.get("value") == "none"
        assert role.text is None

    def test_find(self):
        service = MockedService(check_public=False)
        one = loaded_calendar()
        one.service = service
        other = Calendar(service, title="Work", summary="Meetings")
        other.id = "work%40example.com"
        with mock.patch.object(Service, "calendars", return_value=[one, other]):
            assert Calendar.find(service, "soccer") == [one]
            assert Calendar.find(service, "MEETINGS", scope="first") is other
            assert Calendar.find(service, CAL_ID, scope="all") is one
            assert Calendar.find(service, "nothing", scope="first") is None
            assert Calendar.find(service) == [one, other]

    def test_reload(self):
        cal = loaded_calendar()
        cal.title = "unsaved"
        fresh = loaded_calendar()
        with mock.patch.object(Calendar, "find", return_value=fresh) as find:
            assert cal.reload()
        find.assert_called_once_with(cal.service, CAL_ID, scope="first")
        assert cal.title == "Soccer team"
