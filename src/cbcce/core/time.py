from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

# Chronological constants in Unix time units (ms).
DAY_UNIT = 86400000
HOUR_UNIT = 3600000
MINUTE_UNIT = 60000
SECOND_UNIT = 1000

# Julian Day 0 at 0h00 UTC, in ms before the Unix epoch.
JULIAN_DAY_UTC0_EPOCH_OFFSET = 210866803200000

# Spreadsheet serial day of 1970-01-01 (day 0 is 1899-12-30).
SHEET_DAYS_TO_POSIX = 25569

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ============================================================
# datetime <-> ms since Unix epoch
# ============================================================

def _aware(dt: datetime) -> datetime:
    # naive datetimes are taken as local system time
    return dt if dt.tzinfo is not None else dt.astimezone()


def datetime_to_ms(dt: datetime) -> int:
    """Aware (or local naive) datetime -> integer ms since 1970-01-01T00:00Z."""
    delta = _aware(dt) - _UNIX_EPOCH
    return (delta.days * 86400 + delta.seconds) * SECOND_UNIT + delta.microseconds // 1000


def ms_to_datetime(ms: int, tz: Optional[tzinfo] = timezone.utc) -> datetime:
    """
    ms since Unix epoch -> aware datetime in `tz`.
    Uses timedelta arithmetic, so dates before 1970 work on every platform.
    """
    dt = _UNIX_EPOCH + timedelta(milliseconds=ms)
    return dt.astimezone(tz) if tz is not None else dt


def utc_offset_minutes(dt: datetime) -> int:
    """Local time minus UTC, in minutes (positive east of Greenwich)."""
    off = _aware(dt).utcoffset()
    return int(off.total_seconds() // 60) if off is not None else 0


def local_quantity(ms: int, offset_minutes: int = 0) -> int:
    """Shift a UTC timestamp to the wall-clock count of a zone `offset_minutes` east."""
    return ms + offset_minutes * MINUTE_UNIT


# ============================================================
# Julian day and spreadsheet serial counts
# ============================================================

def julian_epoch_count(ms: int) -> float:
    """Julian Date (days since noon of JD 0) of a Unix ms timestamp. Always UTC."""
    return (ms + JULIAN_DAY_UTC0_EPOCH_OFFSET - 12 * HOUR_UNIT) / DAY_UNIT


def julian_epoch_ms(jd: float) -> int:
    """Inverse of julian_epoch_count, rounded to the millisecond."""
    return round(jd * DAY_UNIT) - JULIAN_DAY_UTC0_EPOCH_OFFSET + 12 * HOUR_UNIT


def sheet_count(ms: int) -> float:
    return ms / DAY_UNIT + SHEET_DAYS_TO_POSIX


def sheet_count_to_ms(count: float) -> int:
    return round((count - SHEET_DAYS_TO_POSIX) * DAY_UNIT)
