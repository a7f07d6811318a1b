"""Attendance invariants shared by every event store.

Stores call these while holding the event, so the check and the write
that follows it cannot interleave with another join or update.
"""
from typing import Optional, Sequence

from eventhub.services.exceptions import (
    AlreadyJoinedError,
    CapacityConflictError,
    EventFullError,
)


def handle_key(handle: str) -> str:
    """Comparison key for handles; attendees are unique case-insensitively."""
    return handle.casefold()


def check_join(attendees: Sequence[str], capacity: Optional[int], handle: str) -> None:
    # Duplicate check first: re-joining a full event reports the duplicate
    key = handle_key(handle)
    if any(handle_key(attendee) == key for attendee in attendees):
        raise AlreadyJoinedError()
    if capacity is not None and len(attendees) >= capacity:
        raise EventFullError()


def check_capacity_change(attendee_count: int, new_capacity: Optional[int]) -> None:
    if new_capacity is not None and new_capacity < attendee_count:
        raise CapacityConflictError(
            f"capacity cannot be less than current attendee count ({attendee_count})"
        )
