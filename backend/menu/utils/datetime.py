"""Datetime helpers.

All timestamps are handled as timezone-aware UTC values. Some backends
(SQLite in particular) hand back naive datetimes for ``DateTime(timezone=True)``
columns, so values read from the store go through ``as_utc`` before comparison.
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Interpret a naive datetime as UTC; convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
