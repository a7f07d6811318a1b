"""
Test database models (Event and Attendee).
"""
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.models.attendees import Attendee
from eventhub.models.events import Event

EVENT_DATE = datetime(2024, 5, 1, 10, tzinfo=timezone.utc)


def make_event(**overrides) -> Event:
    data = {
        "activity": "Morning Run",
        "date": EVENT_DATE,
        "location": "Central Park",
        "host_instagram": "runner_host",
    }
    data.update(overrides)
    return Event(**data)


class TestEventModel:
    """Test the Event model."""

    def test_create_event(self, db_session: Session):
        """Test creating an event."""
        event = make_event(capacity=100)
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)

        assert event.id is not None
        assert event.activity == "Morning Run"
        assert event.capacity == 100
        assert event.attendees == []

    def test_capacity_is_optional(self, db_session: Session):
        """Test creating an event without capacity."""
        event = make_event()
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)

        assert event.capacity is None

    def test_attendees_in_join_order(self, db_session: Session):
        """Test the relationship between Event and Attendee."""
        event = make_event()
        event.attendees = [
            Attendee(handle="runner_host", handle_key="runner_host"),
            Attendee(handle="Zed", handle_key="zed"),
            Attendee(handle="alice", handle_key="alice"),
        ]
        db_session.add(event)
        db_session.commit()

        db_session.expire_all()
        loaded = db_session.get(Event, event.id)

        assert [a.handle for a in loaded.attendees] == ["runner_host", "Zed", "alice"]
        assert all(a.event_id == event.id for a in loaded.attendees)

    def test_delete_cascades_to_attendees(self, db_session: Session):
        """Test that deleting an event deletes its attendees."""
        event = make_event()
        event.attendees = [Attendee(handle="alice", handle_key="alice")]
        db_session.add(event)
        db_session.commit()

        db_session.delete(event)
        db_session.commit()

        assert db_session.query(Attendee).count() == 0


class TestAttendeeModel:
    """Test the Attendee model."""

    def test_handle_unique_per_event(self, db_session: Session):
        """Test the unique handle constraint."""
        event = make_event()
        db_session.add(event)
        db_session.commit()

        db_session.add(Attendee(event_id=event.id, handle="Alice", handle_key="alice"))
        db_session.add(Attendee(event_id=event.id, handle="ALICE", handle_key="alice"))

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_same_handle_on_different_events(self, db_session: Session):
        """Test one handle attending several events."""
        first = make_event()
        second = make_event(activity="Yoga")
        db_session.add_all([first, second])
        db_session.commit()

        db_session.add(Attendee(event_id=first.id, handle="alice", handle_key="alice"))
        db_session.add(Attendee(event_id=second.id, handle="alice", handle_key="alice"))
        db_session.commit()

        assert db_session.query(Attendee).count() == 2

    def test_joined_at_set_by_database(self, db_session: Session):
        """Test the joined_at server default."""
        event = make_event()
        event.attendees = [Attendee(handle="alice", handle_key="alice")]
        db_session.add(event)
        db_session.commit()

        attendee = db_session.query(Attendee).one()
        assert attendee.joined_at is not None
