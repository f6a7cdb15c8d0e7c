"""
Base model class for SQLAlchemy ORM.

Re-exports the Base class from the database module for convenience,
together with the UTC timestamp helpers every model uses.
"""

from datetime import datetime, timezone

from qa_routing.db import Base


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """
    Normalize a datetime read back from the database to aware UTC.

    SQLite drops tzinfo on round-trip; stored values are always UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


__all__ = ["Base", "as_utc", "utcnow"]
