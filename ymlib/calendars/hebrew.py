"""
Hebrew lunisolar calendar.

Years have 12 months, or 13 in the seven leap years of each 19-year cycle.
Ordinal months run in civil order from Tishri. Month codes stay stable
across years: Adar I of a leap year is ``M05L`` and Adar (or Adar II) is
``M06``.

New-year and month-length rules follow the molad formulas of Reingold and
Dershowitz, *Calendrical Calculations*.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Tuple

from ymlib.calendars.base import Calendar, CalendarDate, create_month_code, parse_month_code
from ymlib.calendars.coptic import RD_UNIX_EPOCH
from ymlib.conventions.types import Overflow
from ymlib.errors import ErrorKind, TemporalRangeError

logger = logging.getLogger(__name__)

# Rata Die of 1 Tishri AM 1
HEBREW_EPOCH = -1373427

# Mean year length in days, as a ratio
_MEAN_YEAR_NUMERATOR = 35975351
_MEAN_YEAR_DENOMINATOR = 98496

_ADAR_I = 6
_LEAP_MONTH_CODE_NUMBER = 5


def is_hebrew_leap_year(year: int) -> bool:
    return (7 * year + 1) % 19 < 7


def months_before_year(year: int) -> int:
    """Months elapsed from the epoch to 1 Tishri of ``year``."""
    return (235 * year - 234) // 19


def _elapsed_days(year: int) -> int:
    months_elapsed = months_before_year(year)
    parts_elapsed = 12084 + 13753 * months_elapsed
    days = 29 * months_elapsed + parts_elapsed // 25920
    if (3 * (days + 1)) % 7 < 3:
        return days + 1
    return days


def _year_length_correction(year: int) -> int:
    ny0 = _elapsed_days(year - 1)
    ny1 = _elapsed_days(year)
    ny2 = _elapsed_days(year + 1)
    if ny2 - ny1 == 356:
        return 2
    if ny1 - ny0 == 382:
        return 1
    return 0


@lru_cache(maxsize=4096)
def hebrew_new_year(year: int) -> int:
    """Rata Die of 1 Tishri of ``year``."""
    return HEBREW_EPOCH + _elapsed_days(year) + _year_length_correction(year)


def days_in_hebrew_year(year: int) -> int:
    return hebrew_new_year(year + 1) - hebrew_new_year(year)


class HebrewCalendar(Calendar):
    identifier = "hebrew"
    eras = ("am",)
    months_per_year = None

    def _in_leap_year(self, year: int) -> bool:
        return is_hebrew_leap_year(year)

    def _months_in_year(self, year: int) -> int:
        return 13 if is_hebrew_leap_year(year) else 12

    def _days_in_year(self, year: int) -> int:
        return days_in_hebrew_year(year)

    def _days_in_month(self, year: int, month: int) -> int:
        leap = is_hebrew_leap_year(year)
        year_length = days_in_hebrew_year(year)
        if month == 2:
            # Heshvan is long in complete years
            return 30 if year_length % 10 == 5 else 29
        if month == 3:
            # Kislev is short in deficient years
            return 29 if year_length % 10 == 3 else 30
        if month == _ADAR_I:
            return 30 if leap else 29
        if leap and month > _ADAR_I:
            month -= 1
        # Tishri, Shevat, Nisan, Sivan, Av have 30 days
        return 30 if month in (1, 5, 7, 9, 11) else 29

    def _to_epoch_days(self, year: int, month: int, day: int) -> int:
        days = sum(self._days_in_month(year, m) for m in range(1, month))
        return hebrew_new_year(year) + days + day - 1 - RD_UNIX_EPOCH

    def _from_epoch_days(self, epoch_days: int) -> CalendarDate:
        fixed = epoch_days + RD_UNIX_EPOCH
        year = (fixed - HEBREW_EPOCH) * _MEAN_YEAR_DENOMINATOR // _MEAN_YEAR_NUMERATOR + 1
        while hebrew_new_year(year) > fixed:
            year -= 1
        while hebrew_new_year(year + 1) <= fixed:
            year += 1
        remaining = fixed - hebrew_new_year(year)
        month = 1
        while remaining >= self._days_in_month(year, month):
            remaining -= self._days_in_month(year, month)
            month += 1
        return CalendarDate(year, month, remaining + 1)

    def _month_code(self, year: int, month: int) -> str:
        if not is_hebrew_leap_year(year) or month < _ADAR_I:
            return create_month_code(month)
        if month == _ADAR_I:
            return create_month_code(_LEAP_MONTH_CODE_NUMBER, leap=True)
        return create_month_code(month - 1)

    def _month_from_code(self, year: int, code: str, overflow: Overflow) -> int:
        number, leap_code = parse_month_code(code)
        if number > 12 or (leap_code and number != _LEAP_MONTH_CODE_NUMBER):
            raise TemporalRangeError(
                ErrorKind.INVALID_MONTH_CODE,
                f"Month code {code!r} is not valid in the hebrew calendar",
            )
        leap_year = is_hebrew_leap_year(year)
        if leap_code:
            if leap_year:
                return _ADAR_I
            if overflow == Overflow.REJECT:
                raise TemporalRangeError(
                    ErrorKind.OUT_OF_RANGE, f"Month code {code!r} does not exist in common year {year}"
                )
            logger.debug("Constraining %s to M06 in hebrew common year %d", code, year)
            return _ADAR_I
        if leap_year and number >= _ADAR_I:
            return number + 1
        return number

    def _month_index(self, year: int, month: int) -> int:
        return months_before_year(year) + month - 1

    def _from_month_index(self, index: int) -> Tuple[int, int]:
        year = 19 * index // 235 + 1
        while months_before_year(year) > index:
            year -= 1
        while months_before_year(year + 1) <= index:
            year += 1
        return year, index - months_before_year(year) + 1

    def _era_of(self, year: int) -> Optional[Tuple[str, int]]:
        return "am", year

    def _year_from_era(self, era: str, era_year: int) -> int:
        if era == "am":
            return era_year
        return super()._year_from_era(era, era_year)
