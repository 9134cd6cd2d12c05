# src/threadboard/db/time.py
"""Time helpers shared by models and services."""

from datetime import UTC, datetime

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime:
    """Normalize a stored timestamp for comparison.

    SQLite hands back naive datetimes even for ``DateTime(timezone=True)``
    columns; those are read as UTC. Missing values sort as the epoch.
    """
    if value is None:
        return EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
