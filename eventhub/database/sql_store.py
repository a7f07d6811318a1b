import functools
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

import redis
from redis.lock import Lock
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from eventhub.core.config import get_redis_url
from eventhub.models.attendees import Attendee
from eventhub.models.events import Event
from eventhub.schemas.events import EventOut
from eventhub.services.attendance import check_capacity_change, check_join, handle_key
from eventhub.services.dates import as_utc
from eventhub.services.exceptions import AlreadyJoinedError, EventNotFoundError, StorageError
from eventhub.services.validation import EventChanges

logger = logging.getLogger(__name__)

# Largest value an Integer primary key holds
MAX_EVENT_ID = 2**31 - 1

# Event record field -> ORM column attribute
COLUMNS = {
    "activity": "activity",
    "date": "date",
    "location": "location",
    "hostInstagram": "host_instagram",
    "capacity": "capacity",
}


def get_redis_client() -> redis.Redis:
    """Get Redis client for locking."""
    return redis.from_url(get_redis_url(), decode_responses=True)


def _to_record(event: Event) -> EventOut:
    return EventOut(
        id=event.id,
        activity=event.activity,
        date=as_utc(event.date),
        location=event.location,
        hostInstagram=event.host_instagram,
        capacity=event.capacity,
        attendees=[attendee.handle for attendee in event.attendees],
    )


def _valid_id(event_id: int) -> bool:
    return 0 < event_id <= MAX_EVENT_ID


def _database_errors(method):
    """Log SQLAlchemy failures and re-raise them as StorageError."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception("Database error during %s", method.__name__)
            raise StorageError() from e

    return wrapper


class SqlEventStore:
    """Events in a SQLAlchemy database.

    Joins and capacity changes hold a per-event Redis lock around their
    transaction, so the invariant check and the write happen as one step
    even across worker processes.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        redis_client: redis.Redis,
        lock_timeout: float = 10,
        lock_blocking_timeout: float = 5,
    ) -> None:
        self.session_factory = session_factory
        self.redis_client = redis_client
        self.lock_timeout = lock_timeout
        self.lock_blocking_timeout = lock_blocking_timeout

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self.session_factory() as db, db.begin():
            yield db

    @contextmanager
    def event_lock(self, event_id: int) -> Iterator[Lock]:
        try:
            lock = self.redis_client.lock(f"event_lock:{event_id}", timeout=self.lock_timeout)
            # Acquire the lock - only one request per event can proceed at a time
            if not lock.acquire(blocking=True, blocking_timeout=self.lock_blocking_timeout):
                logger.error("Timed out waiting for lock on event %s", event_id)
                raise StorageError()
        except redis.exceptions.RedisError as e:
            logger.exception("Redis lock failed for event %s", event_id)
            raise StorageError() from e
        try:
            yield lock
        finally:
            try:
                lock.release()
            except redis.exceptions.RedisError:
                # The transaction has already finished, so only report it
                logger.warning("Could not release lock on event %s", event_id)

    @contextmanager
    def _locked_session(self, event_id: int) -> Iterator[Session]:
        with self.event_lock(event_id) as lock, self._session() as db:
            yield db
            # Still inside the transaction: raising here rolls it back
            try:
                owned = lock.owned()
            except redis.exceptions.RedisError as e:
                logger.exception("Redis lock check failed for event %s", event_id)
                raise StorageError() from e
            if not owned:
                logger.error("Lock on event %s expired before commit", event_id)
                raise StorageError()

    @_database_errors
    def create(self, fields: EventChanges) -> EventOut:
        with self._session() as db:
            event = Event(**{COLUMNS[name]: fields[name] for name in COLUMNS})
            event.attendees = [
                Attendee(handle=handle, handle_key=handle_key(handle))
                for handle in fields.get("attendees", [])
            ]
            db.add(event)
            db.flush()  # gets event.id
            return _to_record(event)

    @_database_errors
    def get(self, event_id: int) -> Optional[EventOut]:
        if not _valid_id(event_id):
            return None
        with self._session() as db:
            event = db.get(Event, event_id)
            return _to_record(event) if event else None

    @_database_errors
    def list_all(self) -> List[EventOut]:
        with self._session() as db:
            events = db.scalars(
                select(Event).options(selectinload(Event.attendees)).order_by(Event.id)
            ).all()
            return [_to_record(event) for event in events]

    @_database_errors
    def update(self, event_id: int, changes: EventChanges) -> EventOut:
        if not _valid_id(event_id):
            raise EventNotFoundError()
        with self._locked_session(event_id) as db:
            event = db.get(Event, event_id)
            if not event:
                raise EventNotFoundError()
            if "capacity" in changes:
                check_capacity_change(len(event.attendees), changes["capacity"])
            for name, value in changes.items():
                setattr(event, COLUMNS[name], value)
            db.flush()
            return _to_record(event)

    @_database_errors
    def delete(self, event_id: int) -> None:
        if not _valid_id(event_id):
            raise EventNotFoundError()
        with self._locked_session(event_id) as db:
            event = db.get(Event, event_id)
            if not event:
                raise EventNotFoundError()
            db.delete(event)

    @_database_errors
    def add_attendee(self, event_id: int, handle: str) -> EventOut:
        if not _valid_id(event_id):
            raise EventNotFoundError()
        with self._locked_session(event_id) as db:
            event = db.get(Event, event_id)
            if not event:
                raise EventNotFoundError()
            check_join([attendee.handle for attendee in event.attendees], event.capacity, handle)

            event.attendees.append(Attendee(handle=handle, handle_key=handle_key(handle)))
            try:
                db.flush()
            except IntegrityError as e:
                # uq_attendees_event_handle caught a join that bypassed the lock
                raise AlreadyJoinedError() from e
            return _to_record(event)
