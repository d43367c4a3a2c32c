"""
Date/time helpers.

All timestamps are handled as timezone-aware UTC. MongoDB hands datetimes
back naive, so values read from storage go through ``as_utc`` before being
compared with ``utc_now()``.
"""

from datetime import datetime, timezone


def as_utc(dt: datetime) -> datetime:
    """
    Convert dt to tz-aware UTC.
    If dt is naive, we treat it as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current UTC datetime."""
    return datetime.now(timezone.utc)


def format_record_store_timestamp(dt: datetime) -> str:
    """Visit timestamp in the record store's ``YYYY-MM-DD HH:MM`` layout."""
    return dt.strftime("%Y-%m-%d %H:%M")


def start_of_utc_day(dt: datetime) -> datetime:
    """Midnight UTC of the day ``dt`` falls on."""
    return as_utc(dt).replace(hour=0, minute=0, second=0, microsecond=0)
