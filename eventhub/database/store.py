"""Storage contract for events and the process-wide store dependency."""
from functools import lru_cache
from typing import List, Optional, Protocol

from eventhub.core.config import get_storage_backend
from eventhub.schemas.events import EventOut
from eventhub.services.validation import EventChanges


class EventStore(Protocol):
    """What the event services need from storage.

    ``update`` and ``add_attendee`` must run their read, invariant check and
    write as one atomic step and raise the domain errors themselves.
    """

    def create(self, fields: EventChanges) -> EventOut: ...

    def get(self, event_id: int) -> Optional[EventOut]: ...

    def list_all(self) -> List[EventOut]: ...

    def update(self, event_id: int, changes: EventChanges) -> EventOut: ...

    def delete(self, event_id: int) -> None: ...

    def add_attendee(self, event_id: int, handle: str) -> EventOut: ...


@lru_cache
def get_store() -> EventStore:
    """Dependency returning the configured store (one per process)."""
    backend = get_storage_backend()
    if backend == "memory":
        from eventhub.database.memory_store import InMemoryEventStore

        return InMemoryEventStore()
    if backend == "sql":
        from eventhub.database.db import SessionLocal
        from eventhub.database.sql_store import SqlEventStore, get_redis_client

        return SqlEventStore(SessionLocal, get_redis_client())
    raise ValueError(f"Invalid STORAGE_BACKEND: {backend}. Must be 'sql' or 'memory'")
