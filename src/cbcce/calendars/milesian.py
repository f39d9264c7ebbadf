"""
cbcce.calendars.milesian
------------------------
Milesian calendar on top of the cycle engine.

The Milesian year starts near the December solstice and has 12 months of
30/31 days arranged in bimesters (30 + 31). The 12th month gets its 31st day
in a "long" year, the year just before a Gregorian leap year.

Months are 1..12 here; the engine's `month` field is 0..11.
All validation lives in this layer; the engine itself never rejects a record.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from numbers import Real
from typing import Any, Tuple

from ..core.engine import compose, decompose
from ..core.errors import InvalidArgumentError, InvalidDateError, OutOfRangeError
from ..core.time import (
    DAY_UNIT,
    HOUR_UNIT,
    MINUTE_UNIT,
    SECOND_UNIT,
    datetime_to_ms,
    local_quantity,
    ms_to_datetime,
    sheet_count,
    utc_offset_minutes,
)
from ..core.types import DateRecord
from ..tables import MILESIAN_TIME, YEAR_MONTH

# Bounds of years whose dates map to spreadsheet day counts.
LOW_YEAR = -2
HIGH_YEAR = 99999
# Lowest spreadsheet serial day accepted as a date.
LOW_COUNT = -694324


def _integers(func: str, *values: Any) -> Tuple[int, ...]:
    out = []
    for v in values:
        if isinstance(v, bool) or not isinstance(v, Real) or not math.isfinite(v) or v != round(v):
            raise InvalidArgumentError(func, *values)
        out.append(int(v))
    return tuple(out)


@dataclass(frozen=True)
class MilesianDate:
    year: int
    month: int  # 1..12
    day: int
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0

    @classmethod
    def from_record(cls, rec: DateRecord) -> "MilesianDate":
        return cls(
            year=rec["year"],
            month=rec["month"] + 1,
            day=rec["date"],
            hours=rec["hours"],
            minutes=rec["minutes"],
            seconds=rec["seconds"],
            milliseconds=rec["milliseconds"],
        )

    def to_record(self) -> DateRecord:
        return {
            "year": self.year,
            "month": self.month - 1,
            "date": self.day,
            "hours": self.hours,
            "minutes": self.minutes,
            "seconds": self.seconds,
            "milliseconds": self.milliseconds,
        }

    def __str__(self) -> str:
        return display(self)


# ============================================================
# Year and month structure
# ============================================================

def is_long_year(year: int) -> bool:
    """True if `year` has 366 days, i.e. year+1 is a Gregorian leap year."""
    (y,) = _integers("is_long_year", year)
    if not (LOW_YEAR <= y <= HIGH_YEAR):
        raise InvalidArgumentError("is_long_year", year, reason="year out of range")
    n = y + 1
    return n % 4 == 0 and (n % 100 != 0 or n % 400 == 0)


def month_length(year: int, month: int) -> int:
    """Days in Milesian month `month` (1..12) of `year`."""
    y, m = _integers("month_length", year, month)
    if not (LOW_YEAR <= y <= HIGH_YEAR and 1 <= m <= 12):
        raise OutOfRangeError("month_length", year, month)
    if m % 2 == 1:
        return 30
    if m < 12 or is_long_year(y):
        return 31
    return 30


# ============================================================
# Milesian date -> timestamp
# ============================================================

def milesian_date(year: int, month: int, day: int) -> int:
    """Unix ms at 00:00 UTC of the Milesian date, with full validity checks."""
    y, m, d = _integers("milesian_date", year, month, day)
    if not (LOW_YEAR <= y <= HIGH_YEAR and 1 <= m <= 12 and 1 <= d <= 31):
        raise OutOfRangeError("milesian_date", year, month, day)
    if d > month_length(y, m):
        raise InvalidDateError("milesian_date", year, month, day)

    ms = to_timestamp(MilesianDate(y, m, d))
    if sheet_count(ms) < LOW_COUNT:
        raise OutOfRangeError("milesian_date", year, month, day)
    return ms


def year_base(year: int) -> int:
    """Unix ms at 00:00 UTC of the last day before 1 1m of `year` (the "doomsday" base)."""
    (y,) = _integers("year_base", year)
    if not (LOW_YEAR <= y <= HIGH_YEAR):
        raise InvalidArgumentError("year_base", year, reason="year out of range")
    # date 0 of month 0 composes to the day before the year starts
    return to_timestamp(MilesianDate(y, 1, 0))


def to_timestamp(md: MilesianDate, *, offset_minutes: int = 0) -> int:
    """Compose without validation: out-of-range fields roll over arithmetically."""
    return compose(md.to_record(), MILESIAN_TIME) - offset_minutes * MINUTE_UNIT


def to_datetime(year: int, month: int, day: int, *, tz: tzinfo = timezone.utc) -> datetime:
    """Local midnight of the Milesian date in `tz`."""
    wall = ms_to_datetime(milesian_date(year, month, day))
    return wall.replace(tzinfo=tz)


# ============================================================
# Timestamp -> Milesian date
# ============================================================

def from_timestamp(ms: int, *, offset_minutes: int = 0) -> MilesianDate:
    """Milesian date of a Unix ms timestamp, seen from a zone `offset_minutes` east of UTC."""
    return MilesianDate.from_record(decompose(local_quantity(ms, offset_minutes), MILESIAN_TIME))


def from_datetime(dt: datetime, *, utc: bool = False) -> MilesianDate:
    """Milesian date of `dt` in its own zone (naive = local system time), or in UTC."""
    offset = 0 if utc else utc_offset_minutes(dt)
    return from_timestamp(datetime_to_ms(dt), offset_minutes=offset)


def display(md: MilesianDate, *, with_time: bool = False) -> str:
    """'12 1m 1970', optionally followed by ' HH:MM:SS'."""
    s = f"{md.day} {md.month}m {md.year}"
    if with_time:
        s += f" {md.hours:02d}:{md.minutes:02d}:{md.seconds:02d}"
    return s


def time_fraction(md: MilesianDate) -> float:
    """Time of day as a fraction of the day, in [0, 1)."""
    ms = md.hours * HOUR_UNIT + md.minutes * MINUTE_UNIT + md.seconds * SECOND_UNIT + md.milliseconds
    return ms / DAY_UNIT


# ============================================================
# Month arithmetic
# ============================================================

def _shift_months(func: str, ms: int, shift: int, offset_minutes: int, *, to_end: bool) -> int:
    (n,) = _integers(func, shift)
    rec = decompose(local_quantity(ms, offset_minutes), MILESIAN_TIME)
    moved = decompose(rec["month"] + n, YEAR_MONTH)
    year = rec["year"] + moved["year"]
    if not (LOW_YEAR <= year <= HIGH_YEAR):
        raise OutOfRangeError(func, year, moved["month"] + 1)

    last = month_length(year, moved["month"] + 1)
    if to_end or rec["date"] > last:
        rec["date"] = last
    rec["year"] = year
    rec["month"] = moved["month"]
    return compose(rec, MILESIAN_TIME) - offset_minutes * MINUTE_UNIT


def month_shift(ms: int, shift: int, *, offset_minutes: int = 0) -> int:
    """Same day and time `shift` Milesian months later (or earlier); 31 may become 30."""
    return _shift_months("month_shift", ms, shift, offset_minutes, to_end=False)


def month_end(ms: int, shift: int, *, offset_minutes: int = 0) -> int:
    """Last day of the Milesian month `shift` months away, same time of day."""
    return _shift_months("month_end", ms, shift, offset_minutes, to_end=True)
