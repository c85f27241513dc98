"""
UTC datetime utilities for consistent timezone handling.

Session timestamps and file modification times are exposed as
timezone-aware UTC values. Use these helpers instead of datetime.now().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def from_timestamp_utc(timestamp: float) -> datetime:
    """
    Create a UTC-aware datetime from a Unix timestamp (e.g. st_mtime).
    Use instead of datetime.fromtimestamp() which returns naive local time.

    Args:
        timestamp: Unix timestamp (seconds since epoch)

    Returns:
        UTC-aware datetime
    """
    return datetime.fromtimestamp(timestamp, tz=UTC)
