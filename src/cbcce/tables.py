from __future__ import annotations

from typing import Dict

from .core.types import UNBOUNDED as INF
from .core.types import CanvasEntry, ParameterSet, levels
from .core.time import DAY_UNIT, HOUR_UNIT, MINUTE_UNIT, SECOND_UNIT


# ============================================================
# DAYS + MILLISECONDS IN DAY
# ============================================================

# Duration or Unix time -> whole days and ms within the day.
DAY_MILLISECONDS = ParameterSet(
    epoch=0,
    cycles=levels([
        (DAY_UNIT, INF, 0, 1, "day_number"),
        (1,        INF, 0, 1, "milliseconds_in_day"),
    ]),
    canvas=(
        CanvasEntry("day_number", 0),
        CanvasEntry("milliseconds_in_day", 0),
    ),
    meta={"unit": "ms", "description": "days and milliseconds in day"},
)


# ============================================================
# MILESIAN CALENDAR
# ============================================================

# Unix ms of 1 1m 0, 00h00 UTC
MILESIAN_EPOCH = -62168083200000

# Cycle lengths in days. A quadrisaeculum is 4 centuries where only the last
# one holds the extra day; likewise only the 4th year of a quadrennium is long.
QUADRISAECULUM_DAYS = 146097
CENTURY_DAYS = 36524
QUADRENNIUM_DAYS = 1461
YEAR_DAYS = 365
BIMESTER_DAYS = 61
MONTH_DAYS = 30

MILESIAN_TIME = ParameterSet(
    epoch=MILESIAN_EPOCH,
    cycles=levels([
        (QUADRISAECULUM_DAYS * DAY_UNIT, INF, 0, 400, "year"),
        (CENTURY_DAYS * DAY_UNIT,        3,   0, 100, "year"),
        (QUADRENNIUM_DAYS * DAY_UNIT,    INF, 0, 4,   "year"),
        (YEAR_DAYS * DAY_UNIT,           3,   0, 1,   "year"),
        (BIMESTER_DAYS * DAY_UNIT,       INF, 0, 2,   "month"),
        (MONTH_DAYS * DAY_UNIT,          1,   0, 1,   "month"),
        (DAY_UNIT,                       INF, 0, 1,   "date"),
        (HOUR_UNIT,                      INF, 0, 1,   "hours"),
        (MINUTE_UNIT,                    INF, 0, 1,   "minutes"),
        (SECOND_UNIT,                    INF, 0, 1,   "seconds"),
        (1,                              INF, 0, 1,   "milliseconds"),
    ]),
    canvas=(
        CanvasEntry("year", 0),
        CanvasEntry("month", 0),   # 0..11 for 1m..12m
        CanvasEntry("date", 1),
        CanvasEntry("hours", 0),
        CanvasEntry("minutes", 0),
        CanvasEntry("seconds", 0),
        CanvasEntry("milliseconds", 0),
    ),
    meta={"unit": "ms", "description": "Milesian date and time (month is 0-based)"},
)


# ============================================================
# YEAR + MONTH (month arithmetic)
# ============================================================

# Month count -> (years, month in year). Set epoch via tweak() to re-anchor.
YEAR_MONTH = ParameterSet(
    epoch=0,
    cycles=levels([
        (12, INF, 0, 1, "year"),
        (1,  INF, 0, 1, "month"),
    ]),
    canvas=(
        CanvasEntry("year", 0),
        CanvasEntry("month", 0),
    ),
    meta={"unit": "month", "description": "years and month in year"},
)


ALL_PARAMS: Dict[str, ParameterSet] = {
    "day-milliseconds": DAY_MILLISECONDS,
    "milesian": MILESIAN_TIME,
    "year-month": YEAR_MONTH,
}
