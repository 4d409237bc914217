"""
Tabular Islamic calendars.

Months alternate between 30 and 29 days; the last month gains a day in 11
of every 30 years. ``islamic-civil`` counts from the Friday epoch (16 July
622 Julian) and ``islamic-tbla`` from the Thursday (astronomical) epoch.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ymlib.calendars.base import Calendar, CalendarDate
from ymlib.calendars.coptic import RD_UNIX_EPOCH

ISLAMIC_CIVIL_EPOCH = 227015
ISLAMIC_ASTRONOMICAL_EPOCH = 227014


class IslamicCivilCalendar(Calendar):
    identifier = "islamic-civil"
    eras = ("ah", "bh")
    epoch = ISLAMIC_CIVIL_EPOCH

    def _fixed_from_date(self, year: int, month: int, day: int) -> int:
        return (
            self.epoch
            - 1
            + (year - 1) * 354
            + (3 + 11 * year) // 30
            + 29 * (month - 1)
            + month // 2
            + day
        )

    def _from_epoch_days(self, epoch_days: int) -> CalendarDate:
        fixed = epoch_days + RD_UNIX_EPOCH
        year = (30 * (fixed - self.epoch) + 10646) // 10631
        prior_days = fixed - self._fixed_from_date(year, 1, 1)
        month = (11 * prior_days + 330) // 325
        day = fixed - self._fixed_from_date(year, month, 1) + 1
        return CalendarDate(year, month, day)

    def _to_epoch_days(self, year: int, month: int, day: int) -> int:
        return self._fixed_from_date(year, month, day) - RD_UNIX_EPOCH

    def _in_leap_year(self, year: int) -> bool:
        return (14 + 11 * year) % 30 < 11

    def _days_in_month(self, year: int, month: int) -> int:
        if month == 12 and self._in_leap_year(year):
            return 30
        return 30 if month % 2 == 1 else 29

    def _days_in_year(self, year: int) -> int:
        return 355 if self._in_leap_year(year) else 354

    def _era_of(self, year: int) -> Optional[Tuple[str, int]]:
        if year >= 1:
            return "ah", year
        return "bh", 1 - year

    def _year_from_era(self, era: str, era_year: int) -> int:
        if era == "ah":
            return era_year
        if era == "bh":
            return 1 - era_year
        return super()._year_from_era(era, era_year)


class IslamicTblaCalendar(IslamicCivilCalendar):
    identifier = "islamic-tbla"
    epoch = ISLAMIC_ASTRONOMICAL_EPOCH
