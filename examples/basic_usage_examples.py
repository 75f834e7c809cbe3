import sys
from datetime import datetime
from datetime import timedelta

## We'll try to use the local gcal library, not the system-installed
sys.path.insert(0, "..")
sys.path.insert(0, ".")

import gcal
from gcal import Attendee
from gcal import Calendar
from gcal import Event
from gcal import Recurrence
from gcal import Reminder

## CONFIGURATION.  Edit here, or leave it empty and set GCAL_ACCOUNT
## and GCAL_PASSWORD in the environment.
account = None
password = None


def run_examples():
    """
    Run through all the examples, one by one
    """
    if account:
        service = gcal.Service()
        service.authenticate(account, password)
    else:
        service = gcal.get_service()

    with service:
        ## print out some information
        print_calendars_demo(service.calendars())

        ## This cleans up from previous runs, if needed
        for cal in Calendar.find(service, "Test calendar from gcal examples"):
            cal.delete()

        cal = Calendar(service, title="Test calendar from gcal examples")
        cal.save()

        add_stuff_to_calendar_demo(cal)
        event = search_calendar_demo(cal)
        read_modify_event_demo(event)

        event.delete()
        cal.delete()


def print_calendars_demo(calendars):
    for c in calendars:
        print(
            "%s (%s)%s"
            % (c.title, c.id, "" if c.editable else ", shared with us, read only")
        )


def add_stuff_to_calendar_demo(cal):
    """
    A one-off event with a reminder and a guest, and a recurring one
    """
    start = datetime.now().replace(minute=0, second=0, microsecond=0) + timedelta(
        days=1
    )
    may_event = Event(
        cal,
        title="Soccer Game",
        where="Merry Playfields",
        start=start,
        end=start + timedelta(hours=2),
        reminder=Reminder(minutes=30),
        attendees=[Attendee("kate@example.com", "Kate")],
    )
    may_event.save()

    training = Event(cal, title="Training")
    training.recurrence = Recurrence(
        start=start + timedelta(days=1),
        end=start + timedelta(days=1, hours=1),
        frequency={"weekly": ["TU", "TH"]},
    )
    training.save()


def search_calendar_demo(cal):
    events = Event.find(
        cal,
        "Soccer",
        start=datetime.now(),
        end=datetime.now() + timedelta(days=7),
        sort_order="ascending",
    )
    assert len(events) == 1
    return events[0]


def read_modify_event_demo(event):
    print(event.title, event.start, event.where)
    event.where = "The indoor hall"
    ## the update is conditional, if someone else changed the event in
    ## the meantime a gcal.lib.error.PutError is raised
    event.save()
    duplicate = event.copy()
    duplicate.start = event.start + timedelta(days=7)
    duplicate.end = event.end + timedelta(days=7)
    duplicate.save()
    duplicate.delete()


if __name__ == "__main__":
    run_examples()
