"""Time helpers shared by models and services.

Timestamps are stored and compared as aware UTC datetimes.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    SQLite hands back naive datetimes; those are taken to already be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def within_window(moment: datetime, start: datetime, end: datetime) -> bool:
    """Return True when ``moment`` falls in ``[start, end]``, both ends included."""
    return as_utc(start) <= as_utc(moment) <= as_utc(end)
