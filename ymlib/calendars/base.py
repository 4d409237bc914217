"""
Base calendar class.

A calendar maps epoch days to its own (year, ordinal month, day) triples and
back. The base class builds every field, construction, and arithmetic
operation on top of that mapping; concrete calendars only describe their
year and month structure.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ymlib.conventions.types import Overflow, TemporalUnit
from ymlib.duration.core import DateDuration
from ymlib.errors import ErrorKind, TemporalRangeError, TemporalTypeError
from ymlib.fields import (
    DAY,
    ERA,
    ERA_YEAR,
    MONTH,
    MONTH_CODE,
    YEAR,
    FieldRecord,
    sort_field_names,
)
from ymlib.iso.dates import (
    IsoDate,
    compare_iso_date,
    epoch_days_to_iso_date,
    iso_date_to_epoch_days,
    iso_date_within_limits,
    iso_year_month_within_limits,
)

logger = logging.getLogger(__name__)

_MONTH_CODE_RE = re.compile(r"^M(\d\d)(L?)$")


@dataclass(frozen=True, order=True)
class CalendarDate:
    """A date in a calendar's own numbering; ``month`` is ordinal (1-based)."""

    year: int
    month: int
    day: int


def parse_month_code(code: str) -> Tuple[int, bool]:
    """Split ``MNN`` / ``MNNL`` into (number, is_leap); raise on bad syntax."""
    match = _MONTH_CODE_RE.match(code)
    if match is None or match.group(1) == "00":
        raise TemporalRangeError(ErrorKind.INVALID_MONTH_CODE, f"Invalid month code: {code!r}")
    return int(match.group(1)), bool(match.group(2))


def create_month_code(number: int, leap: bool = False) -> str:
    return f"M{number:02d}" + ("L" if leap else "")


class Calendar(ABC):
    """Base class for built-in calendars."""

    identifier: str = ""
    eras: Tuple[str, ...] = ()
    # Fixed number of months per year, or None for lunisolar calendars
    months_per_year: Optional[int] = 12

    # ------------------------------------------------------------------
    # Calendar structure, supplied by subclasses
    # ------------------------------------------------------------------
    @abstractmethod
    def _from_epoch_days(self, epoch_days: int) -> CalendarDate:
        """Convert days since 1970-01-01 to a calendar date."""

    @abstractmethod
    def _to_epoch_days(self, year: int, month: int, day: int) -> int:
        """Convert a calendar date to days since 1970-01-01."""

    @abstractmethod
    def _days_in_month(self, year: int, month: int) -> int:
        pass

    @abstractmethod
    def _in_leap_year(self, year: int) -> bool:
        pass

    def _months_in_year(self, year: int) -> int:
        return self.months_per_year

    def _days_in_year(self, year: int) -> int:
        return self._to_epoch_days(year + 1, 1, 1) - self._to_epoch_days(year, 1, 1)

    def _month_code(self, year: int, month: int) -> str:
        return create_month_code(month)

    def _month_from_code(self, year: int, code: str, overflow: Overflow) -> int:
        """Ordinal month for ``code`` in ``year``."""
        number, leap = parse_month_code(code)
        if leap or number > self.months_per_year:
            raise TemporalRangeError(
                ErrorKind.INVALID_MONTH_CODE,
                f"Month code {code!r} is not valid in the {self.identifier} calendar",
            )
        return number

    def _month_index(self, year: int, month: int) -> int:
        """Absolute month number, consecutive across years."""
        return year * self.months_per_year + month - 1

    def _from_month_index(self, index: int) -> Tuple[int, int]:
        year, month0 = divmod(index, self.months_per_year)
        return year, month0 + 1

    def _era_of(self, year: int) -> Optional[Tuple[str, int]]:
        """(era, era_year) for an arithmetic year, or None without eras."""
        return None

    def _year_from_era(self, era: str, era_year: int) -> int:
        raise TemporalRangeError(
            ErrorKind.OUT_OF_RANGE, f"Unknown era {era!r} for the {self.identifier} calendar"
        )

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    @property
    def has_eras(self) -> bool:
        return bool(self.eras)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Calendar):
            return NotImplemented
        return self.identifier == other.identifier

    def __hash__(self) -> int:
        return hash(self.identifier)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier!r})"

    def __str__(self) -> str:
        return self.identifier

    # ------------------------------------------------------------------
    # Accessors for an ISO anchor
    # ------------------------------------------------------------------
    def calendar_date(self, iso: IsoDate) -> CalendarDate:
        return self._from_epoch_days(iso_date_to_epoch_days(iso.year, iso.month, iso.day))

    def era(self, iso: IsoDate) -> Optional[str]:
        info = self._era_of(self.calendar_date(iso).year)
        return info[0] if info else None

    def era_year(self, iso: IsoDate) -> Optional[int]:
        info = self._era_of(self.calendar_date(iso).year)
        return info[1] if info else None

    def year(self, iso: IsoDate) -> int:
        return self.calendar_date(iso).year

    def month(self, iso: IsoDate) -> int:
        return self.calendar_date(iso).month

    def month_code(self, iso: IsoDate) -> str:
        date = self.calendar_date(iso)
        return self._month_code(date.year, date.month)

    def day(self, iso: IsoDate) -> int:
        return self.calendar_date(iso).day

    def days_in_month(self, iso: IsoDate) -> int:
        date = self.calendar_date(iso)
        return self._days_in_month(date.year, date.month)

    def days_in_year(self, iso: IsoDate) -> int:
        return self._days_in_year(self.calendar_date(iso).year)

    def months_in_year(self, iso: IsoDate) -> int:
        return self._months_in_year(self.calendar_date(iso).year)

    def in_leap_year(self, iso: IsoDate) -> bool:
        return self._in_leap_year(self.calendar_date(iso).year)

    # ------------------------------------------------------------------
    # Field records
    # ------------------------------------------------------------------
    def field_names(self, names: Iterable[str]) -> List[str]:
        """Requested names plus ``era``/``era_year`` when the calendar has eras."""
        names = list(names)
        if self.has_eras and YEAR in names:
            names += [ERA, ERA_YEAR]
        return sort_field_names(names)

    def fields_of(self, iso: IsoDate, names: Iterable[str]) -> FieldRecord:
        """Read the named fields of an ISO anchor, in canonical order."""
        date = self.calendar_date(iso)
        era_info = self._era_of(date.year)
        values = {
            DAY: date.day,
            ERA: era_info[0] if era_info else None,
            ERA_YEAR: era_info[1] if era_info else None,
            MONTH: date.month,
            MONTH_CODE: self._month_code(date.year, date.month),
            YEAR: date.year,
        }
        record = FieldRecord()
        for name in sort_field_names(names):
            if values[name] is not None:
                record[name] = values[name]
        return record

    def merge_fields(self, fields: FieldRecord, additional: FieldRecord) -> FieldRecord:
        """Merge two records; ``additional`` shadows ``fields``.

        ``month``/``month_code`` are mutually exclusive, as are
        ``year``/``era``/``era_year`` for calendars with eras.
        """
        ignored = set(additional)
        if MONTH in additional or MONTH_CODE in additional:
            ignored.update((MONTH, MONTH_CODE))
        if self.has_eras and ignored.intersection((YEAR, ERA, ERA_YEAR)):
            ignored.update((YEAR, ERA, ERA_YEAR))

        merged = FieldRecord()
        for name, value in fields.items():
            if name not in ignored:
                merged[name] = value
        for name, value in additional.items():
            merged[name] = value
        return merged

    def _resolve_year(self, fields: FieldRecord) -> int:
        year = fields.get(YEAR)
        if self.has_eras and (ERA in fields or ERA_YEAR in fields):
            if ERA not in fields or ERA_YEAR not in fields:
                raise TemporalTypeError(
                    ErrorKind.MISSING_FIELD, "era and era_year must be given together"
                )
            era_year_value = self._year_from_era(fields[ERA], fields[ERA_YEAR])
            if year is not None and year != era_year_value:
                raise TemporalRangeError(
                    ErrorKind.OUT_OF_RANGE,
                    f"year {year} does not match era {fields[ERA]!r} year {fields[ERA_YEAR]}",
                )
            year = era_year_value
        if year is None:
            raise TemporalTypeError(ErrorKind.MISSING_FIELD, "Missing required field: year")
        return year

    def _resolve_month(self, year: int, fields: FieldRecord, overflow: Overflow) -> int:
        month = fields.get(MONTH)
        code = fields.get(MONTH_CODE)
        if month is None and code is None:
            raise TemporalTypeError(
                ErrorKind.MISSING_FIELD, "Missing required field: month or month_code"
            )
        if code is not None:
            # Code syntax is checked before the year-specific lookup
            parse_month_code(code)
            code_month = self._month_from_code(year, code, overflow)
            if month is not None and month != code_month:
                raise TemporalRangeError(
                    ErrorKind.OUT_OF_RANGE, f"month {month} does not match month_code {code!r}"
                )
            return code_month

        months_in_year = self._months_in_year(year)
        if month > months_in_year:
            if overflow == Overflow.REJECT:
                raise TemporalRangeError(
                    ErrorKind.OUT_OF_RANGE,
                    f"month {month} out of range for {self.identifier} year {year}",
                )
            logger.debug("Constraining month %d to %d in %s year %d", month, months_in_year, self.identifier, year)
            return months_in_year
        return month

    def _regulate_day(self, year: int, month: int, day: int, overflow: Overflow) -> int:
        days_in_month = self._days_in_month(year, month)
        if day > days_in_month:
            if overflow == Overflow.REJECT:
                raise TemporalRangeError(
                    ErrorKind.OUT_OF_RANGE,
                    f"day {day} out of range for {self.identifier} {year}-{self._month_code(year, month)}",
                )
            logger.debug("Constraining day %d to %d in %s %d-%d", day, days_in_month, self.identifier, year, month)
            return days_in_month
        return day

    def _to_iso_date(self, year: int, month: int, day: int) -> IsoDate:
        iso = epoch_days_to_iso_date(self._to_epoch_days(year, month, day))
        if not iso_date_within_limits(iso):
            raise TemporalRangeError(ErrorKind.PLAIN_DATE_INVALID, f"Date {iso} outside supported range")
        return iso

    # ------------------------------------------------------------------
    # Construction from fields
    # ------------------------------------------------------------------
    def date_from_fields(self, fields: FieldRecord, overflow: Overflow) -> IsoDate:
        """Resolve year, month and day fields to an ISO date."""
        year = self._resolve_year(fields)
        month = self._resolve_month(year, fields, overflow)
        if DAY not in fields:
            raise TemporalTypeError(ErrorKind.MISSING_FIELD, "Missing required field: day")
        day = self._regulate_day(year, month, fields[DAY], overflow)
        return self._to_iso_date(year, month, day)

    def year_month_from_fields(self, fields: FieldRecord, overflow: Overflow) -> IsoDate:
        """Resolve year and month fields to the ISO date of the month's first day."""
        year = self._resolve_year(fields)
        month = self._resolve_month(year, fields, overflow)
        iso = epoch_days_to_iso_date(self._to_epoch_days(year, month, 1))
        if not iso_year_month_within_limits(iso.year, iso.month):
            raise TemporalRangeError(
                ErrorKind.PLAIN_YEAR_MONTH_INVALID, f"Year-month {iso.year}-{iso.month:02d} outside supported range"
            )
        return iso

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def _add_months(self, year: int, month: int, months: int) -> Tuple[int, int]:
        return self._from_month_index(self._month_index(year, month) + months)

    def date_add(self, iso: IsoDate, duration: DateDuration, overflow: Overflow) -> IsoDate:
        """Add years (keeping the month code), months, then weeks and days."""
        date = self.calendar_date(iso)
        year, month = date.year, date.month
        if duration.years:
            code = self._month_code(year, month)
            year += duration.years
            month = self._month_from_code(year, code, overflow)
        if duration.months:
            year, month = self._add_months(year, month, duration.months)
        day = self._regulate_day(year, month, date.day, overflow)
        epoch_days = self._to_epoch_days(year, month, day) + 7 * duration.weeks + duration.days
        result = epoch_days_to_iso_date(epoch_days)
        if not iso_date_within_limits(result):
            raise TemporalRangeError(ErrorKind.PLAIN_DATE_INVALID, f"Date {result} outside supported range")
        return result

    def _surpasses(self, sign: int, year: int, month: int, day: int, target: CalendarDate) -> bool:
        candidate = (year, month, day)
        reference = (target.year, target.month, target.day)
        if candidate == reference:
            return False
        return (candidate > reference) == (sign > 0)

    def date_until(self, one: IsoDate, two: IsoDate, largest_unit: TemporalUnit) -> DateDuration:
        """Difference between two ISO dates measured in this calendar."""
        sign = -compare_iso_date(one, two)
        if sign == 0:
            return DateDuration()

        epoch_one = iso_date_to_epoch_days(one.year, one.month, one.day)
        epoch_two = iso_date_to_epoch_days(two.year, two.month, two.day)
        if largest_unit in (TemporalUnit.WEEK, TemporalUnit.DAY):
            days = epoch_two - epoch_one
            weeks = 0
            if largest_unit == TemporalUnit.WEEK:
                weeks = int(days / 7)
                days -= weeks * 7
            return DateDuration(weeks=weeks, days=days)

        start = self._from_epoch_days(epoch_one)
        end = self._from_epoch_days(epoch_two)
        code = self._month_code(start.year, start.month)

        years = 0
        base_year, base_month = start.year, start.month
        if largest_unit == TemporalUnit.YEAR:
            candidate = end.year - start.year
            if candidate:
                candidate -= sign
            while True:
                year = start.year + candidate
                month = self._month_from_code(year, code, Overflow.CONSTRAIN)
                if self._surpasses(sign, year, month, start.day, end):
                    break
                years = candidate
                base_year, base_month = year, month
                candidate += sign

        months = 0
        base_index = self._month_index(base_year, base_month)
        candidate = self._month_index(end.year, end.month) - base_index
        if candidate:
            candidate -= sign
        while True:
            year, month = self._from_month_index(base_index + candidate)
            if self._surpasses(sign, year, month, start.day, end):
                break
            months = candidate
            candidate += sign

        year, month = self._from_month_index(base_index + months)
        day = self._regulate_day(year, month, start.day, Overflow.CONSTRAIN)
        days = epoch_two - self._to_epoch_days(year, month, day)
        return DateDuration(years=years, months=months, days=days)
