from datetime import datetime, timezone
from typing import Any, Optional


def parse_date(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 date or date-time into an aware UTC datetime.

    Returns None when the value is not a string or does not map to a
    representable instant. Values without an offset are taken as UTC.
    """
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    try:
        return as_utc(parsed)
    except OverflowError:
        return None


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render an instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    utc = as_utc(value).replace(tzinfo=None)
    return utc.isoformat(timespec="milliseconds") + "Z"


def utc_day(value: datetime) -> str:
    return as_utc(value).date().isoformat()
