from typing import Iterable, List, Optional

from eventhub.schemas.events import EventOut
from eventhub.services.dates import as_utc, utc_day


def filter_events(
    events: Iterable[EventOut],
    *,
    activity: Optional[str] = None,
    location: Optional[str] = None,
    date: Optional[str] = None,
) -> List[EventOut]:
    """Return events matching every given criterion, earliest first.

    ``activity`` and ``location`` are case-insensitive substrings, ``date``
    is a ``YYYY-MM-DD`` day compared against the event's UTC date. Empty
    criteria are ignored. Events sharing a timestamp keep their input order.
    """
    filtered = list(events)

    if activity:
        needle = activity.casefold()
        filtered = [e for e in filtered if needle in e.activity.casefold()]

    if location:
        needle = location.casefold()
        filtered = [e for e in filtered if needle in e.location.casefold()]

    if date:
        filtered = [e for e in filtered if utc_day(e.date) == date]

    return sorted(filtered, key=lambda e: as_utc(e.date))
