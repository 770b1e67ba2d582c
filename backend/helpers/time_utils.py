"""
Time helpers.

Timestamps are written as UTC. SQLite hands them back without tzinfo, so
anything read from the database goes through ``as_utc`` before arithmetic.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values are converted to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime | None) -> str | None:
    """
    Format a datetime as ``YYYY-MM-DD HH:MM:SS`` (UTC).

    Args:
        dt: The datetime to format, or None

    Returns:
        Formatted string, or None when dt is None
    """
    if dt is None:
        return None
    return as_utc(dt).strftime("%Y-%m-%d %H:%M:%S")
