"""
Tests for ymlib.iso.dates

Checks:
1. Leap years and month lengths
2. Range limits for dates and year-months
3. Epoch-day conversion across the full range
4. ISO date addition and difference
"""

import pytest

from ymlib.conventions.types import Overflow, TemporalUnit
from ymlib.duration.core import DateDuration
from ymlib.errors import ErrorKind, TemporalRangeError
from ymlib.iso.dates import (
    MAX_ISO_DATE,
    MIN_ISO_DATE,
    IsoDate,
    IsoYearMonth,
    add_iso_date,
    balance_iso_date,
    compare_iso_date,
    difference_iso_date,
    epoch_days_to_iso_date,
    is_leap_year,
    iso_date_to_epoch_days,
    iso_date_within_limits,
    iso_days_in_month,
    iso_year_month_within_limits,
    regulate_iso_date,
    throw_if_invalid_iso_date,
)


class TestCalendarRules:
    """Leap years and days per month"""

    @pytest.mark.parametrize(
        "year, expected",
        [(2000, True), (1900, False), (2024, True), (2023, False), (0, True), (-4, True), (-100, False)],
    )
    def test_leap_year(self, year: int, expected: bool) -> None:
        """Proleptic Gregorian leap rule, including non-positive years"""
        assert is_leap_year(year) is expected

    def test_days_in_month(self) -> None:
        """February follows the leap rule, other months are fixed"""
        assert iso_days_in_month(2024, 2) == 29
        assert iso_days_in_month(2023, 2) == 28
        assert iso_days_in_month(2023, 4) == 30
        assert iso_days_in_month(2023, 12) == 31

    def test_invalid_date_rejected(self) -> None:
        """Day 30 of February is not a date"""
        with pytest.raises(TemporalRangeError) as exc_info:
            throw_if_invalid_iso_date(2024, 2, 30)
        assert exc_info.value.kind == ErrorKind.INVALID_ISO_DATE

    def test_invalid_month_rejected(self) -> None:
        with pytest.raises(TemporalRangeError):
            throw_if_invalid_iso_date(2024, 13, 1)


class TestLimits:
    """Supported range of dates and year-months"""

    def test_year_month_limits_inclusive(self) -> None:
        assert iso_year_month_within_limits(-271821, 4)
        assert iso_year_month_within_limits(275760, 9)

    def test_year_month_limits_exclusive(self) -> None:
        assert not iso_year_month_within_limits(-271821, 3)
        assert not iso_year_month_within_limits(275760, 10)
        assert not iso_year_month_within_limits(275761, 1)

    def test_date_limits(self) -> None:
        assert iso_date_within_limits(MIN_ISO_DATE)
        assert iso_date_within_limits(MAX_ISO_DATE)
        assert not iso_date_within_limits(IsoDate(-271821, 4, 18))
        assert not iso_date_within_limits(IsoDate(275760, 9, 14))


class TestEpochDays:
    """Conversion between ISO dates and days since 1970-01-01"""

    def test_unix_epoch(self) -> None:
        assert iso_date_to_epoch_days(1970, 1, 1) == 0
        assert iso_date_to_epoch_days(1969, 12, 31) == -1
        assert iso_date_to_epoch_days(2000, 1, 1) == 10957

    def test_range_extremes(self) -> None:
        """The supported range spans 10^8 days either side of the epoch"""
        assert iso_date_to_epoch_days(275760, 9, 13) == 100_000_000
        assert iso_date_to_epoch_days(-271821, 4, 20) == -100_000_000

    def test_inverse(self) -> None:
        for date in (IsoDate(1969, 12, 31), IsoDate(2024, 2, 29), MIN_ISO_DATE, MAX_ISO_DATE):
            days = iso_date_to_epoch_days(date.year, date.month, date.day)
            assert epoch_days_to_iso_date(days) == date

    def test_day_overflow_balances(self) -> None:
        """Day 0 and day 32 roll into the neighbouring months"""
        assert balance_iso_date(2024, 3, 0) == IsoDate(2024, 2, 29)
        assert balance_iso_date(2023, 12, 32) == IsoDate(2024, 1, 1)


class TestIsoYearMonth:
    def test_round_trip_through_date(self) -> None:
        anchor = IsoYearMonth(2024, 5, 9)
        assert IsoYearMonth.from_iso_date(anchor.to_iso_date()) == anchor

    def test_default_reference_day(self) -> None:
        assert IsoYearMonth(2024, 5).reference_iso_day == 1


class TestRegulateAndAdd:
    """Overflow handling and date addition"""

    def test_constrain_clamps_day(self) -> None:
        assert regulate_iso_date(2023, 2, 31, Overflow.CONSTRAIN) == IsoDate(2023, 2, 28)

    def test_reject_raises(self) -> None:
        with pytest.raises(TemporalRangeError):
            regulate_iso_date(2023, 2, 31, Overflow.REJECT)

    def test_add_month_end_constrained(self) -> None:
        result = add_iso_date(IsoDate(2020, 1, 31), DateDuration(months=1), Overflow.CONSTRAIN)
        assert result == IsoDate(2020, 2, 29)

    def test_add_month_end_rejected(self) -> None:
        with pytest.raises(TemporalRangeError):
            add_iso_date(IsoDate(2020, 1, 31), DateDuration(months=1), Overflow.REJECT)

    def test_add_years_months_then_days(self) -> None:
        result = add_iso_date(
            IsoDate(2020, 11, 30), DateDuration(years=1, months=3, weeks=1, days=1), Overflow.CONSTRAIN
        )
        # 2022-02-28 after years and months, then 8 days
        assert result == IsoDate(2022, 3, 8)

    def test_add_negative_months_crosses_year(self) -> None:
        result = add_iso_date(IsoDate(2020, 1, 1), DateDuration(months=-1), Overflow.CONSTRAIN)
        assert result == IsoDate(2019, 12, 1)


class TestDifference:
    """difference_iso_date balances up to the largest unit"""

    def test_compare(self) -> None:
        assert compare_iso_date(IsoDate(2020, 1, 1), IsoDate(2020, 1, 2)) == -1
        assert compare_iso_date(IsoDate(2020, 1, 2), IsoDate(2020, 1, 1)) == 1
        assert compare_iso_date(IsoDate(2020, 1, 1), IsoDate(2020, 1, 1)) == 0

    def test_years_and_months(self) -> None:
        result = difference_iso_date(IsoDate(2020, 1, 1), IsoDate(2021, 3, 1), TemporalUnit.YEAR)
        assert result == DateDuration(years=1, months=2)

    def test_negative(self) -> None:
        result = difference_iso_date(IsoDate(2021, 3, 1), IsoDate(2020, 1, 1), TemporalUnit.YEAR)
        assert result == DateDuration(years=-1, months=-2)

    def test_months_only(self) -> None:
        result = difference_iso_date(IsoDate(2020, 1, 1), IsoDate(2021, 3, 1), TemporalUnit.MONTH)
        assert result == DateDuration(months=14)

    def test_month_end_start(self) -> None:
        """Jan 31 to Mar 1 is one month and one day"""
        result = difference_iso_date(IsoDate(2020, 1, 31), IsoDate(2020, 3, 1), TemporalUnit.MONTH)
        assert result == DateDuration(months=1, days=1)

    def test_weeks(self) -> None:
        result = difference_iso_date(IsoDate(2020, 1, 1), IsoDate(2020, 1, 20), TemporalUnit.WEEK)
        assert result == DateDuration(weeks=2, days=5)

    def test_equal_dates(self) -> None:
        assert difference_iso_date(IsoDate(2020, 1, 1), IsoDate(2020, 1, 1), TemporalUnit.YEAR) == DateDuration()
