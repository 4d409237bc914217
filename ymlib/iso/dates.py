"""
Proleptic Gregorian (ISO 8601) date arithmetic over the full Temporal range.

Python's ``datetime.date`` stops at year 9999, so epoch-day conversion goes
through numpy ``datetime64``, which covers every representable year.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ymlib.conventions.types import Overflow, TemporalUnit
from ymlib.duration.core import DateDuration
from ymlib.errors import ErrorKind, TemporalRangeError

MIN_ISO_YEAR = -271821
MAX_ISO_YEAR = 275760

_EPOCH_YEAR = 1970


@dataclass(frozen=True, order=True)
class IsoDate:
    """An ISO calendar date. Ordering is lexicographic (year, month, day)."""

    year: int
    month: int
    day: int

    def __str__(self) -> str:
        return f"{self.year}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class IsoYearMonth:
    """The ISO anchor of a year-month: year, month, and reference day."""

    iso_year: int
    iso_month: int
    reference_iso_day: int = 1

    def to_iso_date(self) -> IsoDate:
        return IsoDate(self.iso_year, self.iso_month, self.reference_iso_day)

    @classmethod
    def from_iso_date(cls, date: IsoDate) -> "IsoYearMonth":
        return cls(date.year, date.month, date.day)


# First and last dates whose noon lies within one day of the instant limits
MIN_ISO_DATE = IsoDate(MIN_ISO_YEAR, 4, 19)
MAX_ISO_DATE = IsoDate(MAX_ISO_YEAR, 9, 13)

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    """Proleptic Gregorian leap year rule."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def iso_days_in_month(year: int, month: int) -> int:
    """Number of days in an ISO month."""
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def iso_days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def is_valid_iso_date(year: int, month: int, day: int) -> bool:
    if month < 1 or month > 12:
        return False
    return 1 <= day <= iso_days_in_month(year, month)


def throw_if_invalid_iso_date(year: int, month: int, day: int) -> None:
    """Raise if (year, month, day) is not a valid proleptic Gregorian date."""
    if not is_valid_iso_date(year, month, day):
        raise TemporalRangeError(
            ErrorKind.INVALID_ISO_DATE, f"Invalid ISO date: {year}-{month:02d}-{day:02d}"
        )


def iso_year_month_within_limits(year: int, month: int) -> bool:
    """True if (year, month) lies within [(-271821, 4), (275760, 9)]."""
    if year < MIN_ISO_YEAR or year > MAX_ISO_YEAR:
        return False
    if year == MIN_ISO_YEAR and month < 4:
        return False
    if year == MAX_ISO_YEAR and month > 9:
        return False
    return True


def iso_date_within_limits(date: IsoDate) -> bool:
    """True if the date lies within [-271821-04-19, 275760-09-13]."""
    return MIN_ISO_DATE <= date <= MAX_ISO_DATE


def iso_date_to_epoch_days(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 for an ISO date; ``day`` may overflow the month."""
    month_start = np.datetime64(year - _EPOCH_YEAR, "Y").astype("datetime64[M]") + (month - 1)
    return int((month_start.astype("datetime64[D]") + (day - 1)).astype(np.int64))


def epoch_days_to_iso_date(epoch_days: int) -> IsoDate:
    """Inverse of :func:`iso_date_to_epoch_days`."""
    day_value = np.datetime64(int(epoch_days), "D")
    month_value = day_value.astype("datetime64[M]")
    year = int(day_value.astype("datetime64[Y]").astype(np.int64)) + _EPOCH_YEAR
    month = int(month_value.astype(np.int64)) % 12 + 1
    day = int((day_value - month_value.astype("datetime64[D]")).astype(np.int64)) + 1
    return IsoDate(year, month, day)


def balance_iso_year_month(year: int, month: int) -> tuple:
    """Carry an out-of-range month into the year."""
    return year + (month - 1) // 12, (month - 1) % 12 + 1


def balance_iso_date(year: int, month: int, day: int) -> IsoDate:
    """Normalize a date whose day may lie outside the month (e.g. day 0)."""
    return epoch_days_to_iso_date(iso_date_to_epoch_days(year, month, day))


def regulate_iso_date(year: int, month: int, day: int, overflow: Overflow) -> IsoDate:
    """Clamp (constrain) or validate (reject) an ISO date."""
    if overflow == Overflow.REJECT:
        throw_if_invalid_iso_date(year, month, day)
        return IsoDate(year, month, day)
    month = min(max(month, 1), 12)
    day = min(max(day, 1), iso_days_in_month(year, month))
    return IsoDate(year, month, day)


def add_iso_date(date: IsoDate, duration: DateDuration, overflow: Overflow) -> IsoDate:
    """Add a date duration: years and months first, then weeks and days."""
    year, month = balance_iso_year_month(date.year + duration.years, date.month + duration.months)
    intermediate = regulate_iso_date(year, month, date.day, overflow)
    days = duration.days + 7 * duration.weeks
    return balance_iso_date(intermediate.year, intermediate.month, intermediate.day + days)


def compare_iso_date(one: IsoDate, two: IsoDate) -> int:
    """Return -1, 0 or 1 comparing two ISO dates."""
    if one < two:
        return -1
    if one > two:
        return 1
    return 0


def _surpasses(sign: int, year: int, month: int, day: int, target: IsoDate) -> bool:
    """True if the unregulated (year, month, day) lies beyond target in sign's direction."""
    return sign * compare_iso_date(IsoDate(year, month, day), target) > 0


def difference_iso_date(one: IsoDate, two: IsoDate, largest_unit: TemporalUnit) -> DateDuration:
    """Difference between two ISO dates, balanced up to ``largest_unit``."""
    sign = -compare_iso_date(one, two)
    if sign == 0:
        return DateDuration()

    years = 0
    months = 0
    if largest_unit in (TemporalUnit.YEAR, TemporalUnit.MONTH):
        candidate_years = two.year - one.year
        if candidate_years != 0:
            candidate_years -= sign
        while not _surpasses(sign, one.year + candidate_years, one.month, one.day, two):
            years = candidate_years
            candidate_years += sign

        candidate_months = sign
        year, month = balance_iso_year_month(one.year + years, one.month + candidate_months)
        while not _surpasses(sign, year, month, one.day, two):
            months = candidate_months
            candidate_months += sign
            year, month = balance_iso_year_month(one.year + years, one.month + candidate_months)

        if largest_unit == TemporalUnit.MONTH:
            months += years * 12
            years = 0

    year, month = balance_iso_year_month(one.year + years, one.month + months)
    intermediate = regulate_iso_date(year, month, one.day, Overflow.CONSTRAIN)
    days = iso_date_to_epoch_days(two.year, two.month, two.day) - iso_date_to_epoch_days(
        intermediate.year, intermediate.month, intermediate.day
    )

    weeks = 0
    if largest_unit == TemporalUnit.WEEK:
        weeks = int(days / 7)
        days -= weeks * 7
    return DateDuration(years, months, weeks, days)
