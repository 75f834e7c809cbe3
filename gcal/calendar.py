"""
The Calendar class maps one calendar of the service account to and
from an Atom entry.  Each account can have multiple calendars, see
Service.calendars() and Calendar.find().

After a calendar object has been created or loaded, change any of the
attributes like on any other object, then save() it to write the
changes to the service.
"""
import logging
from typing import List
from typing import Optional
from typing import TYPE_CHECKING
from typing import Union

import requests
from lxml import etree
from lxml.etree import _Element

from .elements import atom
from .elements import gacl
from .elements import gcal
from .gdataobject import ATOM_HEADERS
from .gdataobject import entries
from .gdataobject import GDataObject
from .lib import error
from .lib.namespace import GCAL_READ
from .lib.namespace import ns
from .lib.namespace import ACL_RULE_KIND
from .lib.namespace import GD_KIND

if TYPE_CHECKING:
    from .event import Event
    from .service import Service

__all__ = ["Calendar"]

log = logging.getLogger("gcal")

CALENDAR_FEED = "https://www.google.com/calendar/feeds/default/owncalendars/full"
EVENT_FEED = "https://www.google.com/calendar/feeds/%s/private/full"
ACL_FEED = "https://www.google.com/calendar/feeds/%s/acl/full"
## the id element of a calendar entry is a URL, the calendar id is the last part
CALENDAR_ID_PREFIXES = (
    "http://www.google.com/calendar/feeds/default/calendars/",
    "https://www.google.com/calendar/feeds/default/calendars/",
)

DEFAULT_TIMEZONE = "America/Los_Angeles"
DEFAULT_COLOR = "#2952A3"


def _bool_value(elem: _Element) -> bool:
    return elem.get("value") == "true"


class Calendar(GDataObject):
    """
    A calendar at the service.  You need an authenticated Service to
    do anything but building XML.

        cal = Calendar(service, title="Soccer team")
        cal.save()
        cal.public = True
    """

    _handlers = {
        ns("atom", "id"): "_load_id",
        ns("atom", "title"): "_load_title",
        ns("atom", "summary"): "_load_summary",
        ns("atom", "link"): "_load_edit_link",
        ns("gCal", "color"): "_load_color",
        ns("gCal", "hidden"): "_load_hidden",
        ns("gCal", "timezone"): "_load_timezone",
        ns("gCal", "selected"): "_load_selected",
    }

    summary: Optional[str] = None
    timezone: Optional[str] = None
    color: Optional[str] = None
    hidden: bool = False
    selected: bool = False
    editable: bool = False
    event_feed: Optional[str] = None
    _public: bool = False

    def __init__(
        self,
        service: "Service",
        title: str = "",
        summary: str = "",
        timezone: str = DEFAULT_TIMEZONE,
        color: str = DEFAULT_COLOR,
        hidden: bool = False,
        selected: bool = False,
        editable: bool = True,
    ) -> None:
        """
        Accepts a Service object and optional initial values.  Raises
        InvalidService if something else than a Service is given.

        No network traffic will be initiated by this method.  A new
        calendar is editable until the service tells otherwise, so that
        events can be created in it right after it has been saved.
        """
        ## Late import to avoid circular imports
        from .service import Service

        if not isinstance(service, Service):
            raise error.InvalidService()
        self.service = service
        self.exists = False
        self.title = title
        self.summary = summary
        self.timezone = timezone
        self.color = color
        self.hidden = hidden
        self.selected = selected
        self.editable = editable
        self._public = False

    @property
    def public(self) -> bool:
        """True if the calendar can be read by anyone, without logging in"""
        return self._public

    @public.setter
    def public(self, p: bool) -> None:
        self.set_public(p)

    @property
    def acl_feed(self) -> str:
        return ACL_FEED % self.id

    def set_public(self, p: bool) -> bool:
        """
        Makes the calendar public (p = True) or private (p = False) by
        changing the role of the default scope in the access control
        list.  The cached flag is only updated if the server accepts it.
        """
        role = GCAL_READ if p else "none"
        rule = (
            atom.Entry("gAcl")
            + atom.Category(scheme=GD_KIND, term=ACL_RULE_KIND)
            + gacl.Scope(type="default")
            + gacl.Role(value=role)
        )
        self.client.put(self.acl_feed + "/default", str(rule), ATOM_HEADERS)
        self._public = bool(p)
        return True

    def to_xml(self) -> str:
        """
        Returns the XML representation of the calendar
        """
        entry = atom.Entry("gd", "gCal") + [
            atom.Title(self.title, type="text"),
            atom.Summary(self.summary, type="text"),
            gcal.Timezone(value=self.timezone or ""),
            gcal.Hidden(value=str(bool(self.hidden)).lower()),
            gcal.Color(value=self.color or ""),
        ]
        return str(entry)

    def load(self, data: Union[str, bytes, _Element]) -> bool:
        """
        Loads the calendar from an entry of a calendar feed (or from
        the response to a create).  Returns True.
        """
        self._load_entry(data)
        if not self.id:
            ## our own to_xml() output, nothing to look up at the server
            return True
        self.event_feed = EVENT_FEED % self.id

        if not self.service.check_public:
            self._public = False
            self.editable = True
            return True

        log.debug("getting ACL feed of calendar %s" % self.id)
        ## The ACL feed of a calendar shared with us (and not owned by us)
        ## can't be read.  That's not an error, the calendar just isn't
        ## ours to edit.
        try:
            r = self.client.get(self.acl_feed)
        except (error.HTTPError, requests.RequestException, etree.XMLSyntaxError) as e:
            log.info("could not read the ACL feed of %s: %s" % (self.id, e))
            self._public = False
            self.editable = False
            return True

        self.editable = True
        self._public = False
        for rule in entries(r.tree):
            scope = rule.find(ns("gAcl", "scope"))
            role = rule.find(ns("gAcl", "role"))
            if scope is None or role is None or scope.get("type") != "default":
                continue
            self._public = "#read" in (role.get("value") or "")
        return True

    def _load_id(self, elem: _Element) -> None:
        self.id = elem.text
        for prefix in CALENDAR_ID_PREFIXES:
            if self.id and self.id.startswith(prefix):
                self.id = self.id[len(prefix) :]

    def _load_summary(self, elem: _Element) -> None:
        self.summary = elem.text

    def _load_color(self, elem: _Element) -> None:
        self.color = elem.get("value")

    def _load_hidden(self, elem: _Element) -> None:
        self.hidden = _bool_value(elem)

    def _load_timezone(self, elem: _Element) -> None:
        self.timezone = elem.get("value")

    def _load_selected(self, elem: _Element) -> None:
        self.selected = _bool_value(elem)

    def save(self) -> bool:
        """
        Creates the calendar if it doesn't exist, otherwise updates
        it.  On creation the server's answer is loaded back, to get hold
        of the id and edit feed; CalendarSaveFailed is raised if that
        doesn't work out.
        """
        if self.exists:
            self.client.put(self.edit_feed, self.to_xml(), ATOM_HEADERS)
            return True

        r = self.client.post(CALENDAR_FEED, self.to_xml(), ATOM_HEADERS)
        if r.tree is None:
            raise error.CalendarSaveFailed(
                "no calendar entry in the response", url=CALENDAR_FEED
            )
        self.load(r.tree)
        if not (self.exists and self.id):
            raise error.CalendarSaveFailed(
                "the response did not identify the calendar", url=CALENDAR_FEED
            )
        return True

    def delete(self) -> bool:
        """
        Deletes the calendar.  On success the calendar object is
        cleared.  Returns False, without asking the server, if the
        calendar doesn't exist.
        """
        if not self.exists:
            return False
        self.client.delete(CALENDAR_FEED + "/" + self.id)
        self.exists = False
        self.id = None
        self.title = None
        self.summary = None
        self.timezone = None
        self.color = None
        self.hidden = False
        self.selected = False
        self.event_feed = None
        self.edit_feed = None
        self._public = False
        return True

    def reload(self) -> bool:
        """
        Reloads the calendar from the service.  Returns False if it
        can't be found.  Any unsaved changes are overwritten.
        """
        if not self.exists:
            return False
        found = Calendar.find(self.service, self.id, scope="first")
        if not found:
            return False
        for attr in (
            "id",
            "title",
            "summary",
            "timezone",
            "color",
            "hidden",
            "selected",
            "editable",
            "event_feed",
            "edit_feed",
            "_public",
        ):
            setattr(self, attr, getattr(found, attr))
        return True

    def events(self) -> List["Event"]:
        """
        Returns all events in the calendar
        """
        from .event import Event

        r = self.client.get(self.event_feed)
        return [Event._from_entry(self, entry) for entry in entries(r.tree)]

    @classmethod
    def find(
        cls, service: "Service", query: Optional[str] = None, scope: str = "all"
    ) -> Union[List["Calendar"], "Calendar", None]:
        """
        Finds calendars of the service account.  A calendar whose id
        equals the query is returned right away.  Otherwise the query
        is matched case-insensitively against title and summary, and
        either a list of all matches (scope="all") or the first match
        (scope="first") is returned.
        """
        term = (query or "").lower()
        ret = []
        for cal in service.calendars():
            if query and cal.id == query:
                return cal
            if term in (cal.title or "").lower() or term in (cal.summary or "").lower():
                if scope == "first":
                    return cal
                ret.append(cal)
        if scope == "first":
            return None
        return ret
