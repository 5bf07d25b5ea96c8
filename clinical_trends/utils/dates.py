"""Timestamp helpers."""

from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    """Return a timezone-aware datetime, reading naive values as UTC.

    Report timestamps arrive both with and without offsets; making every
    value aware keeps them comparable.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value
