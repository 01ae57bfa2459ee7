"""UTC datetime and wall-clock utilities."""

import time
from datetime import datetime, timedelta, timezone

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Last millisecond datetime can represent (9999-12-31T23:59:59.999Z).
MAX_DATETIME_MS = 253_402_300_799_999


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Milliseconds since the Unix epoch, read from the system wall clock."""
    return time.time_ns() // 1_000_000


def to_ms(moment: datetime) -> int:
    """Convert a datetime to Unix milliseconds. Naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    delta = moment - _UNIX_EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def from_ms(ms: int) -> datetime:
    """Convert Unix milliseconds to an aware UTC datetime.

    Raises OverflowError outside the years 1-9999.
    """
    return _UNIX_EPOCH + timedelta(milliseconds=ms)
