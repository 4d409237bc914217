"""
Coptic and Ethiopic calendars.

Both have twelve 30-day months followed by a five- or six-day thirteenth
month, with a leap year every fourth year. Conversions follow the fixed-day
(Rata Die) formulas of Reingold and Dershowitz, *Calendrical Calculations*.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ymlib.calendars.base import Calendar, CalendarDate

# Rata Die of 1970-01-01
RD_UNIX_EPOCH = 719163

# Rata Die of 1 Thout, year 1
COPTIC_EPOCH = 103605
ETHIOPIC_EPOCH = 2796

# Years between the Amete Alem and Amete Mihret eras
AMETE_ALEM_OFFSET = 5500


class CopticCalendar(Calendar):
    identifier = "coptic"
    eras = ("am",)
    months_per_year = 13
    epoch = COPTIC_EPOCH

    def _fixed_from_date(self, year: int, month: int, day: int) -> int:
        return self.epoch - 1 + 365 * (year - 1) + year // 4 + 30 * (month - 1) + day

    def _from_epoch_days(self, epoch_days: int) -> CalendarDate:
        fixed = epoch_days + RD_UNIX_EPOCH
        year = (4 * (fixed - self.epoch) + 1463) // 1461
        month = (fixed - self._fixed_from_date(year, 1, 1)) // 30 + 1
        day = fixed + 1 - self._fixed_from_date(year, month, 1)
        return CalendarDate(year, month, day)

    def _to_epoch_days(self, year: int, month: int, day: int) -> int:
        return self._fixed_from_date(year, month, day) - RD_UNIX_EPOCH

    def _in_leap_year(self, year: int) -> bool:
        return year % 4 == 3

    def _days_in_month(self, year: int, month: int) -> int:
        if month < 13:
            return 30
        return 6 if self._in_leap_year(year) else 5

    def _days_in_year(self, year: int) -> int:
        return 366 if self._in_leap_year(year) else 365

    def _era_of(self, year: int) -> Optional[Tuple[str, int]]:
        return "am", year

    def _year_from_era(self, era: str, era_year: int) -> int:
        if era == "am":
            return era_year
        return super()._year_from_era(era, era_year)


class EthiopicCalendar(CopticCalendar):
    """Ethiopic calendar; years before the incarnation era count from Amete Alem."""

    identifier = "ethiopic"
    eras = ("am", "aa")
    epoch = ETHIOPIC_EPOCH

    def _era_of(self, year: int) -> Optional[Tuple[str, int]]:
        if year >= 1:
            return "am", year
        return "aa", year + AMETE_ALEM_OFFSET

    def _year_from_era(self, era: str, era_year: int) -> int:
        if era == "aa":
            return era_year - AMETE_ALEM_OFFSET
        return super()._year_from_era(era, era_year)
