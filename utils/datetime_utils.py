# utils/datetime_utils.py
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get current UTC time with timezone info.

    Returns:
        datetime: Current time in UTC with timezone
    """
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return datetime_to_ms(utc_now())


def datetime_to_ms(dt: datetime) -> int:
    """
    Convert a datetime to epoch milliseconds.

    Naive datetimes are treated as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def ms_to_datetime(epoch_ms: Optional[int]) -> Optional[datetime]:
    """
    Convert epoch milliseconds to a UTC datetime.

    Args:
        epoch_ms: Milliseconds since the epoch

    Returns:
        Timezone-aware datetime, or None for None/0 (never happened)
    """
    if not epoch_ms:
        return None
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)


def format_iso_ms(epoch_ms: Optional[int]) -> Optional[str]:
    """
    Format epoch milliseconds as an ISO 8601 string.

    Returns:
        str: Formatted string or None if the timestamp was never set
    """
    dt = ms_to_datetime(epoch_ms)
    return dt.isoformat() if dt else None
