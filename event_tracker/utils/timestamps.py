"""UTC clock and the two timestamp formats stored in the data files.

- ``addedAt`` / ``lastScan``: instant, ``2025-04-20T02:30:00.000Z``
- ``date`` / ``scannedAt``: calendar day, ``2025-04-20``
"""

from datetime import date, datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """Current time as an aware datetime in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return dt in UTC. Naive values are assumed to already be UTC; None passes through."""
    if dt is None:
        return None
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Millisecond-precision UTC instant with a ``Z`` suffix.

    Example:
        >>> format_timestamp(datetime(2025, 4, 20, 2, 30, tzinfo=timezone.utc))
        '2025-04-20T02:30:00.000Z'
    """
    utc = ensure_utc(dt)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def format_date(value: Union[date, datetime]) -> str:
    """Calendar day as ``YYYY-MM-DD``; datetimes are taken on their UTC day."""
    if isinstance(value, datetime):
        value = ensure_utc(value).date()
    return value.isoformat()
