from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from eventhub.database.store import EventStore, get_store
from eventhub.schemas.events import EventCreate, EventOut, EventUpdate, JoinRequest
from eventhub.services import events

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=EventOut, status_code=201)
def create_event(payload: EventCreate, store: EventStore = Depends(get_store)):
    return events.create_event(store, payload)


@router.get("", response_model=List[EventOut])
def list_events(
    activity: Optional[str] = Query(None, description="Case-insensitive substring of the activity"),
    location: Optional[str] = Query(None, description="Case-insensitive substring of the location"),
    date: Optional[str] = Query(None, description="UTC calendar day, YYYY-MM-DD"),
    store: EventStore = Depends(get_store),
):
    """List events matching all given filters, earliest first."""
    return events.list_events(store, activity=activity, location=location, date=date)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, store: EventStore = Depends(get_store)):
    return events.get_event(store, event_id)


@router.put("/{event_id}", response_model=EventOut)
def update_event(event_id: int, payload: EventUpdate, store: EventStore = Depends(get_store)):
    return events.update_event(store, event_id, payload)


@router.delete("/{event_id}", status_code=204)
def delete_event(event_id: int, store: EventStore = Depends(get_store)):
    events.delete_event(store, event_id)
    return Response(status_code=204)


@router.post("/{event_id}/join", response_model=EventOut)
def join_event(event_id: int, payload: JoinRequest, store: EventStore = Depends(get_store)):
    return events.join_event(store, event_id, payload)
