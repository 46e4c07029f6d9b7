"""UTC timestamp helpers."""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp_for_log(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as ISO-8601 UTC with a 'Z' suffix.

    Naive datetimes are treated as UTC.

    Example:
        >>> format_timestamp_for_log(datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        '2025-01-02T03:04:05Z'
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
