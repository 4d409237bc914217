"""
ISO 8601 and the Gregorian-structured calendars.

``gregory``, ``buddhist`` and ``roc`` share ISO months and leap years and
differ only in year numbering, so their arithmetic runs on ISO dates.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ymlib.calendars.base import Calendar, CalendarDate
from ymlib.conventions.types import Overflow, TemporalUnit
from ymlib.duration.core import DateDuration
from ymlib.errors import ErrorKind, TemporalRangeError
from ymlib.iso.dates import (
    IsoDate,
    add_iso_date,
    difference_iso_date,
    epoch_days_to_iso_date,
    is_leap_year,
    iso_date_to_epoch_days,
    iso_date_within_limits,
    iso_days_in_month,
    iso_days_in_year,
)


class IsoCalendar(Calendar):
    """The ISO 8601 calendar; other Gregorian calendars shift its years."""

    identifier = "iso8601"
    # Calendar year minus ISO year
    year_offset = 0

    def _from_epoch_days(self, epoch_days: int) -> CalendarDate:
        iso = epoch_days_to_iso_date(epoch_days)
        return CalendarDate(iso.year + self.year_offset, iso.month, iso.day)

    def _to_epoch_days(self, year: int, month: int, day: int) -> int:
        return iso_date_to_epoch_days(year - self.year_offset, month, day)

    def _days_in_month(self, year: int, month: int) -> int:
        return iso_days_in_month(year - self.year_offset, month)

    def _days_in_year(self, year: int) -> int:
        return iso_days_in_year(year - self.year_offset)

    def _in_leap_year(self, year: int) -> bool:
        return is_leap_year(year - self.year_offset)

    def calendar_date(self, iso: IsoDate) -> CalendarDate:
        return CalendarDate(iso.year + self.year_offset, iso.month, iso.day)

    def date_add(self, iso: IsoDate, duration: DateDuration, overflow: Overflow) -> IsoDate:
        result = add_iso_date(iso, duration, overflow)
        if not iso_date_within_limits(result):
            raise TemporalRangeError(ErrorKind.PLAIN_DATE_INVALID, f"Date {result} outside supported range")
        return result

    def date_until(self, one: IsoDate, two: IsoDate, largest_unit: TemporalUnit) -> DateDuration:
        return difference_iso_date(one, two, largest_unit)


class GregorianCalendar(IsoCalendar):
    """Proleptic Gregorian calendar with CE/BCE eras."""

    identifier = "gregory"
    eras = ("ce", "bce")

    def _era_of(self, year: int) -> Optional[Tuple[str, int]]:
        if year >= 1:
            return "ce", year
        return "bce", 1 - year

    def _year_from_era(self, era: str, era_year: int) -> int:
        if era == "ce":
            return era_year
        if era == "bce":
            return 1 - era_year
        return super()._year_from_era(era, era_year)


class BuddhistCalendar(IsoCalendar):
    """Thai solar calendar: Gregorian months, Buddhist Era years."""

    identifier = "buddhist"
    eras = ("be",)
    year_offset = 543

    def _era_of(self, year: int) -> Optional[Tuple[str, int]]:
        return "be", year

    def _year_from_era(self, era: str, era_year: int) -> int:
        if era == "be":
            return era_year
        return super()._year_from_era(era, era_year)


class RocCalendar(IsoCalendar):
    """Republic of China (Minguo) calendar; year 1 is ISO 1912."""

    identifier = "roc"
    eras = ("roc", "broc")
    year_offset = -1911

    def _era_of(self, year: int) -> Optional[Tuple[str, int]]:
        if year >= 1:
            return "roc", year
        return "broc", 1 - year

    def _year_from_era(self, era: str, era_year: int) -> int:
        if era == "roc":
            return era_year
        if era == "broc":
            return 1 - era_year
        return super()._year_from_era(era, era_year)
