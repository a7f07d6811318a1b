"""Domain errors raised by the event services and stores.

Each error carries the HTTP status it maps to and a machine-readable
``kind`` next to the human-readable message.
"""


class EventError(Exception):
    """Base class for event operation errors."""

    status_code: int = 500
    kind: str = "error"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.__class__.message
        super().__init__(self.message)


class EventValidationError(EventError):
    status_code = 400
    kind = "invalid_field"
    message = "Invalid request"


class NoFieldsToUpdateError(EventValidationError):
    kind = "no_fields"
    message = "No fields to update"


class CapacityConflictError(EventValidationError):
    kind = "capacity_conflict"
    message = "capacity cannot be less than current attendee count"


class EventNotFoundError(EventError):
    status_code = 404
    kind = "not_found"
    message = "Event not found"


class JoinConflictError(EventError):
    status_code = 409
    kind = "conflict"
    message = "Cannot join event"


class AlreadyJoinedError(JoinConflictError):
    kind = "already_joined"
    message = "User has already joined this event"


class EventFullError(JoinConflictError):
    kind = "event_full"
    message = "Event is full"


class StorageError(EventError):
    """Storage collaborator failure. The message never reaches the client."""

    status_code = 500
    kind = "storage_error"
    message = "Internal server error"
