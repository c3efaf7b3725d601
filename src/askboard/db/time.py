"""Time utilities for database models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    SQLite hands back naive datetimes for ``DateTime(timezone=True)`` columns;
    those are stored as UTC so they are tagged rather than converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def start_of_utc_day(value: datetime | None = None) -> datetime:
    """Return midnight UTC of the day containing ``value`` (default: now)."""
    current = as_utc(value) if value is not None else utcnow()
    return current.replace(hour=0, minute=0, second=0, microsecond=0)
