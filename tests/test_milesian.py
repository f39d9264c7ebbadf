# tests/test_milesian.py

import random
from datetime import datetime, timedelta, timezone

import pytest

from cbcce import InvalidArgumentError, InvalidDateError, OutOfRangeError
from cbcce.calendars import milesian as ml
from cbcce.calendars.milesian import MilesianDate
from cbcce.core.time import DAY_UNIT, HOUR_UNIT
from cbcce.tables import MILESIAN_EPOCH

# 1 1m 2000 is 1999-12-22; 1970-01-01 is 12 1m 1970
MS_1999_12_21 = 10946 * DAY_UNIT
MS_1999_12_22 = 10947 * DAY_UNIT


# ------------------------------------------------------------
# Timestamp -> Milesian
# ------------------------------------------------------------

def test_unix_epoch_is_12_1m_1970():
    assert ml.from_timestamp(0) == MilesianDate(1970, 1, 12)


def test_one_ms_before_unix_epoch():
    assert ml.from_timestamp(-1) == MilesianDate(1970, 1, 11, 23, 59, 59, 999)


def test_new_year_2000():
    assert ml.from_timestamp(MS_1999_12_21) == MilesianDate(1999, 12, 31)
    assert ml.from_timestamp(MS_1999_12_22) == MilesianDate(2000, 1, 1)


def test_calendar_epoch():
    assert ml.from_timestamp(MILESIAN_EPOCH) == MilesianDate(0, 1, 1)
    assert ml.milesian_date(0, 1, 1) == MILESIAN_EPOCH


def test_offset_minutes_shifts_wall_clock():
    west = ml.from_timestamp(0, offset_minutes=-60)
    assert west == MilesianDate(1970, 1, 11, 23, 0, 0, 0)
    assert ml.to_timestamp(west, offset_minutes=-60) == 0


def test_from_datetime_uses_own_zone_or_utc():
    dt = datetime(1970, 1, 1, 0, 30, tzinfo=timezone(timedelta(hours=1)))
    assert ml.from_datetime(dt) == MilesianDate(1970, 1, 12, 0, 30)
    assert ml.from_datetime(dt, utc=True) == MilesianDate(1970, 1, 11, 23, 30)


def test_record_conversion_uses_1_based_months():
    md = MilesianDate(2000, 12, 31, 1, 2, 3, 4)
    rec = md.to_record()
    assert rec["month"] == 11 and rec["date"] == 31
    assert MilesianDate.from_record(rec) == md


def test_timestamp_round_trip():
    random.seed(42)
    for _ in range(2000):
        ms = random.randint(-62135596800000, 253402300799999)
        assert ml.to_timestamp(ml.from_timestamp(ms)) == ms


# ------------------------------------------------------------
# Year and month structure
# ------------------------------------------------------------

@pytest.mark.parametrize(
    "year, expected",
    [(1999, True), (2000, False), (2003, True), (2099, False), (2399, True), (3, True), (-1, True), (-2, False)],
)
def test_is_long_year(year, expected):
    assert ml.is_long_year(year) is expected


@pytest.mark.parametrize("bad", [2000.5, "2000", None, True, float("nan"), float("inf")])
def test_is_long_year_rejects_non_integers(bad):
    with pytest.raises(InvalidArgumentError):
        ml.is_long_year(bad)


def test_is_long_year_accepts_integral_float():
    assert ml.is_long_year(1999.0) is True


def test_is_long_year_out_of_range():
    with pytest.raises(InvalidArgumentError, match="out of range"):
        ml.is_long_year(100000)
    with pytest.raises(InvalidArgumentError):
        ml.is_long_year(-3)


def test_month_length():
    assert [ml.month_length(2001, m) for m in range(1, 13)] == [30, 31] * 5 + [30, 30]
    assert ml.month_length(1999, 12) == 31
    with pytest.raises(OutOfRangeError):
        ml.month_length(2001, 13)


@pytest.mark.parametrize("year, month", [(100000, 1), (100000, 12), (-3, 2)])
def test_month_length_checks_year_range_for_every_month(year, month):
    with pytest.raises(OutOfRangeError):
        ml.month_length(year, month)


def test_year_lengths_match_long_year_rule():
    for Y in range(1990, 2110):
        n = (ml.milesian_date(Y + 1, 1, 1) - ml.milesian_date(Y, 1, 1)) // DAY_UNIT
        assert n == (366 if ml.is_long_year(Y) else 365)


# ------------------------------------------------------------
# Milesian -> timestamp, validation
# ------------------------------------------------------------

def test_milesian_date_values():
    assert ml.milesian_date(2000, 1, 1) == MS_1999_12_22
    assert ml.milesian_date(1999, 12, 31) == MS_1999_12_21
    assert ml.milesian_date(1970, 1, 12) == 0


def test_year_base_is_day_before_new_year():
    assert ml.year_base(2000) == MS_1999_12_21
    assert ml.year_base(1970) == ml.milesian_date(1970, 1, 1) - DAY_UNIT
    with pytest.raises(InvalidArgumentError):
        ml.year_base(1.5)


def test_invalid_31st_days():
    with pytest.raises(InvalidDateError) as exc:
        ml.milesian_date(2001, 12, 31)
    err = exc.value
    assert err.kind == "invalid_date"
    assert err.func == "milesian_date"
    assert err.values == (2001, 12, 31)
    with pytest.raises(InvalidDateError):
        ml.milesian_date(2000, 1, 31)


@pytest.mark.parametrize(
    "args",
    [(2000, 13, 1), (2000, 0, 1), (2000, 1, 0), (2000, 2, 32), (100000, 1, 1), (-3, 1, 1), (-2, 1, 1)],
)
def test_out_of_range_dates(args):
    with pytest.raises(OutOfRangeError) as exc:
        ml.milesian_date(*args)
    assert exc.value.kind == "out_of_range"


def test_non_integer_date_components():
    with pytest.raises(InvalidArgumentError) as exc:
        ml.milesian_date(2000, 1.5, 1)
    assert exc.value.values == (2000, 1.5, 1)
    assert "milesian_date" in str(exc.value)


def test_to_datetime():
    assert ml.to_datetime(2000, 1, 1) == datetime(1999, 12, 22, tzinfo=timezone.utc)
    tz = timezone(timedelta(hours=2))
    assert ml.to_datetime(2000, 1, 1, tz=tz) == datetime(1999, 12, 22, tzinfo=tz)


# ------------------------------------------------------------
# Display
# ------------------------------------------------------------

def test_display():
    assert str(ml.from_timestamp(0)) == "12 1m 1970"
    assert ml.display(ml.from_timestamp(-1), with_time=True) == "11 1m 1970 23:59:59"
    assert ml.display(MilesianDate(-1, 12, 31)) == "31 12m -1"


def test_time_fraction():
    assert ml.time_fraction(MilesianDate(2000, 1, 1, 12)) == 0.5
    assert ml.time_fraction(MilesianDate(2000, 1, 1)) == 0.0


# ------------------------------------------------------------
# Month arithmetic
# ------------------------------------------------------------

def test_month_shift_forward_and_back():
    assert ml.month_shift(0, 1) == 30 * DAY_UNIT
    assert ml.month_shift(0, -1) == -30 * DAY_UNIT
    assert ml.month_shift(0, 0) == 0


def test_month_shift_keeps_time_of_day():
    assert ml.month_shift(5 * HOUR_UNIT, 12) == 365 * DAY_UNIT + 5 * HOUR_UNIT


def test_month_shift_clips_31_to_30():
    start = ml.milesian_date(1970, 2, 31)
    assert ml.from_timestamp(start) == MilesianDate(1970, 2, 31)
    assert ml.from_timestamp(ml.month_shift(start, 1)) == MilesianDate(1970, 3, 30)
    assert ml.from_timestamp(ml.month_shift(start, 2)) == MilesianDate(1970, 4, 31)


def test_month_end():
    assert ml.month_end(0, 0) == 18 * DAY_UNIT
    assert ml.from_timestamp(ml.month_end(0, 11)) == MilesianDate(1970, 12, 30)
    assert ml.month_end(ml.milesian_date(1999, 1, 1), 11) == ml.milesian_date(1999, 12, 31)


def test_month_shift_with_offset():
    assert ml.month_shift(0, 1, offset_minutes=60) == 30 * DAY_UNIT


def test_month_shift_errors():
    with pytest.raises(InvalidArgumentError):
        ml.month_shift(0, 1.5)
    with pytest.raises(OutOfRangeError):
        ml.month_shift(ml.milesian_date(99999, 12, 1), 1)
    with pytest.raises(OutOfRangeError):
        ml.month_end(0, -12 * 1975)
