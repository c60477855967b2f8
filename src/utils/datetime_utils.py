"""Helpers for timestamp normalization at the persistence boundary."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def coerce_datetime(value) -> datetime | None:
    """Normalize a stored timestamp into an aware datetime.

    Args:
        value: ISO string or datetime returned by a database driver.

    Returns:
        datetime | None: Aware datetime (naive values are assumed UTC).
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def coerce_date(value) -> date | None:
    """Normalize a stored day value into a date.

    Args:
        value: ISO date string, date or datetime.

    Returns:
        date | None: Calendar day.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def to_iso(value: datetime | date | None) -> str | None:
    """Serialize a datetime or date for storage."""
    if value is None:
        return None
    return value.isoformat()


__all__ = ["utc_now", "coerce_datetime", "coerce_date", "to_iso"]
