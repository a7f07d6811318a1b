import logging
from typing import List, Optional

from eventhub.database.store import EventStore
from eventhub.schemas.events import EventCreate, EventOut, EventUpdate, JoinRequest
from eventhub.services.exceptions import EventNotFoundError
from eventhub.services.query import filter_events
from eventhub.services.validation import validate_create, validate_join, validate_update

logger = logging.getLogger(__name__)


def create_event(store: EventStore, payload: EventCreate) -> EventOut:
    """Create an event. The host is its first attendee."""
    fields = validate_create(payload)
    fields["attendees"] = [fields["hostInstagram"]]
    event = store.create(fields)
    logger.info("Created event %s hosted by %s", event.id, event.hostInstagram)
    return event


def list_events(
    store: EventStore,
    *,
    activity: Optional[str] = None,
    location: Optional[str] = None,
    date: Optional[str] = None,
) -> List[EventOut]:
    return filter_events(store.list_all(), activity=activity, location=location, date=date)


def get_event(store: EventStore, event_id: int) -> EventOut:
    event = store.get(event_id)
    if event is None:
        raise EventNotFoundError()
    return event


def update_event(store: EventStore, event_id: int, payload: EventUpdate) -> EventOut:
    get_event(store, event_id)
    changes = validate_update(payload)
    event = store.update(event_id, changes)
    logger.info("Updated event %s: %s", event_id, ", ".join(sorted(changes)))
    return event


def delete_event(store: EventStore, event_id: int) -> None:
    store.delete(event_id)
    logger.info("Deleted event %s", event_id)


def join_event(store: EventStore, event_id: int, payload: JoinRequest) -> EventOut:
    get_event(store, event_id)
    handle = validate_join(payload)
    event = store.add_attendee(event_id, handle)
    logger.info("%s joined event %s (%d attending)", handle, event_id, event.currentAttendees)
    return event
