import threading
from typing import Dict, List, Optional

from eventhub.schemas.events import EventOut
from eventhub.services.attendance import check_capacity_change, check_join
from eventhub.services.exceptions import EventNotFoundError
from eventhub.services.validation import EventChanges


class InMemoryEventStore:
    """Process-local store. One lock serializes every operation.

    Ids start at 1 and are never reused. Callers always get copies, so
    nothing outside the lock can mutate a stored event.
    """

    def __init__(self) -> None:
        self._events: Dict[int, EventOut] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, fields: EventChanges) -> EventOut:
        with self._lock:
            event = EventOut(id=self._next_id, **fields)
            self._next_id += 1
            self._events[event.id] = event
            return event.model_copy(deep=True)

    def get(self, event_id: int) -> Optional[EventOut]:
        with self._lock:
            event = self._events.get(event_id)
            return event.model_copy(deep=True) if event else None

    def list_all(self) -> List[EventOut]:
        with self._lock:
            # dicts keep insertion order, which is id order here
            return [event.model_copy(deep=True) for event in self._events.values()]

    def update(self, event_id: int, changes: EventChanges) -> EventOut:
        with self._lock:
            event = self._require(event_id)
            if "capacity" in changes:
                check_capacity_change(len(event.attendees), changes["capacity"])
            updated = event.model_copy(update=changes, deep=True)
            self._events[event_id] = updated
            return updated.model_copy(deep=True)

    def delete(self, event_id: int) -> None:
        with self._lock:
            self._require(event_id)
            del self._events[event_id]

    def add_attendee(self, event_id: int, handle: str) -> EventOut:
        with self._lock:
            event = self._require(event_id)
            check_join(event.attendees, event.capacity, handle)
            event.attendees.append(handle)
            return event.model_copy(deep=True)

    def _require(self, event_id: int) -> EventOut:
        event = self._events.get(event_id)
        if event is None:
            raise EventNotFoundError()
        return event
