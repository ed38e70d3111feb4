"""Helpers shared by the SQLAlchemy repositories."""

from datetime import datetime, timezone


def as_utc(value: datetime | None) -> datetime | None:
    """
    Re-attach UTC to datetimes read back from the database.

    SQLite stores DateTime(timezone=True) columns without an
    offset, so values come back naive. Every datetime written
    by the core is UTC.
    """
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
