"""
Calendar date value type.

``PlainDate`` is the result of :meth:`PlainYearMonth.to_plain_date` and an
accepted input to :meth:`PlainYearMonth.from_`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from ymlib.calendars import DEFAULT_CALENDAR_ID, Calendar, get_calendar
from ymlib.conventions.options import get_show_calendar_option
from ymlib.errors import ErrorKind, TemporalRangeError
from ymlib.iso.dates import IsoDate, iso_date_within_limits, throw_if_invalid_iso_date
from ymlib.serialization import temporal_date_to_string
from ymlib.utils.mathutils import coerce_constructor_integer


@dataclass(frozen=True)
class PlainDate:
    """
    A calendar date anchored to an ISO date.

    Attributes
    ----------
    iso_year, iso_month, iso_day : int
        The ISO anchor.
    calendar : Calendar
        Calendar used for field getters.
    """

    iso_year: int
    iso_month: int
    iso_day: int
    calendar: Union[Calendar, str] = field(default=DEFAULT_CALENDAR_ID)

    def __post_init__(self):
        year = coerce_constructor_integer(self.iso_year, "iso_year")
        month = coerce_constructor_integer(self.iso_month, "iso_month")
        day = coerce_constructor_integer(self.iso_day, "iso_day")
        throw_if_invalid_iso_date(year, month, day)
        if not iso_date_within_limits(IsoDate(year, month, day)):
            raise TemporalRangeError(
                ErrorKind.PLAIN_DATE_INVALID, f"Date {year}-{month:02d}-{day:02d} outside supported range"
            )
        object.__setattr__(self, "iso_year", year)
        object.__setattr__(self, "iso_month", month)
        object.__setattr__(self, "iso_day", day)
        object.__setattr__(self, "calendar", get_calendar(self.calendar))

    @classmethod
    def from_iso_date(cls, date: IsoDate, calendar: Calendar) -> "PlainDate":
        return cls(date.year, date.month, date.day, calendar)

    @property
    def iso_date(self) -> IsoDate:
        return IsoDate(self.iso_year, self.iso_month, self.iso_day)

    @property
    def calendar_id(self) -> str:
        return self.calendar.identifier

    @property
    def era(self) -> Optional[str]:
        return self.calendar.era(self.iso_date)

    @property
    def era_year(self) -> Optional[int]:
        return self.calendar.era_year(self.iso_date)

    @property
    def year(self) -> int:
        return self.calendar.year(self.iso_date)

    @property
    def month(self) -> int:
        return self.calendar.month(self.iso_date)

    @property
    def month_code(self) -> str:
        return self.calendar.month_code(self.iso_date)

    @property
    def day(self) -> int:
        return self.calendar.day(self.iso_date)

    @property
    def days_in_month(self) -> int:
        return self.calendar.days_in_month(self.iso_date)

    @property
    def days_in_year(self) -> int:
        return self.calendar.days_in_year(self.iso_date)

    @property
    def months_in_year(self) -> int:
        return self.calendar.months_in_year(self.iso_date)

    @property
    def in_leap_year(self) -> bool:
        return self.calendar.in_leap_year(self.iso_date)

    def equals(self, other: "PlainDate") -> bool:
        return self == other

    def to_string(self, *, calendar_name=None) -> str:
        show = get_show_calendar_option(calendar_name)
        return temporal_date_to_string(self.iso_date, self.calendar, show)

    def __str__(self) -> str:
        return self.to_string()
