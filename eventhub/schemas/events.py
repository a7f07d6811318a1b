from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, StrictInt, StrictStr, computed_field, field_serializer

from eventhub.services.dates import format_timestamp


# ---------- Requests ----------
# Presence checks live in eventhub.services.validation so that missing and
# blank fields produce the same messages; the schemas only pin JSON types.
class EventCreate(BaseModel):
    activity: Optional[StrictStr] = None
    date: Optional[StrictStr] = None
    location: Optional[StrictStr] = None
    instagramUsername: Optional[StrictStr] = None
    capacity: Optional[StrictInt] = None


class EventUpdate(BaseModel):
    """Partial update. Unset fields are left alone; ``capacity: null`` removes the limit."""

    activity: Optional[StrictStr] = None
    date: Optional[StrictStr] = None
    location: Optional[StrictStr] = None
    instagramUsername: Optional[StrictStr] = None
    capacity: Optional[StrictInt] = None


class JoinRequest(BaseModel):
    instagramUsername: Optional[StrictStr] = None


# ---------- Event ----------
class EventOut(BaseModel):
    id: int
    activity: str
    date: datetime
    location: str
    hostInstagram: str
    capacity: Optional[int] = None
    attendees: List[str] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def currentAttendees(self) -> int:
        return len(self.attendees)

    @field_serializer("date")
    def serialize_date(self, value: datetime) -> str:
        return format_timestamp(value)
