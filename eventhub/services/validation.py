"""Request validation for create, update and join.

Every function either returns normalized values ready for the store or
raises an :class:`EventValidationError`; nothing here touches state.
"""
from typing import Any, Dict, Optional

from eventhub.schemas.events import EventCreate, EventUpdate, JoinRequest
from eventhub.services.dates import parse_date
from eventhub.services.exceptions import EventValidationError, NoFieldsToUpdateError

REQUIRED_MESSAGE = "activity, date, location, and instagramUsername are required"
DATE_MESSAGE = "date must be a valid ISO 8601 date string"
CAPACITY_MESSAGE = "capacity must be a positive integer"
# Largest value the capacity column holds
MAX_CAPACITY = 2**31 - 1
CAPACITY_LIMIT_MESSAGE = f"capacity must be at most {MAX_CAPACITY}"
HANDLE_MESSAGE = "instagramUsername is required"

UPDATABLE_FIELDS = ("activity", "date", "location", "capacity", "instagramUsername")
TEXT_FIELDS = ("activity", "location", "instagramUsername")

# Request field name -> event record field name
RECORD_FIELDS = {"instagramUsername": "hostInstagram"}

# A key that is present with None means "explicitly cleared"
EventChanges = Dict[str, Any]


def is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def text_field_message(field: str) -> str:
    return f"{field} must be a non-empty string"


def _check_capacity(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise EventValidationError(CAPACITY_MESSAGE)
    if value > MAX_CAPACITY:
        raise EventValidationError(CAPACITY_LIMIT_MESSAGE)
    return value


def validate_create(payload: EventCreate) -> EventChanges:
    """Return the fields of a new event record."""
    required = (payload.activity, payload.date, payload.location, payload.instagramUsername)
    if any(is_blank(value) for value in required):
        raise EventValidationError(REQUIRED_MESSAGE)

    parsed = parse_date(payload.date)
    if parsed is None:
        raise EventValidationError(DATE_MESSAGE)

    capacity: Optional[int] = None
    if payload.capacity is not None:
        capacity = _check_capacity(payload.capacity)

    return {
        "activity": payload.activity,
        "date": parsed,
        "location": payload.location,
        "hostInstagram": payload.instagramUsername,
        "capacity": capacity,
    }


def validate_update(payload: EventUpdate) -> EventChanges:
    """Return only the fields the client sent, keyed by record field name.

    The capacity-vs-attendance check needs current state and is done by
    the store while it holds the event.
    """
    present = [field for field in UPDATABLE_FIELDS if field in payload.model_fields_set]
    if not present:
        raise NoFieldsToUpdateError()

    changes: EventChanges = {}
    for field in present:
        value = getattr(payload, field)
        if field in TEXT_FIELDS:
            if is_blank(value):
                raise EventValidationError(text_field_message(field))
        elif field == "date":
            if is_blank(value):
                raise EventValidationError(text_field_message(field))
            value = parse_date(value)
            if value is None:
                raise EventValidationError(DATE_MESSAGE)
        elif field == "capacity" and value is not None:
            value = _check_capacity(value)
        changes[RECORD_FIELDS.get(field, field)] = value
    return changes


def validate_join(payload: JoinRequest) -> str:
    if is_blank(payload.instagramUsername):
        raise EventValidationError(HANDLE_MESSAGE)
    return payload.instagramUsername
