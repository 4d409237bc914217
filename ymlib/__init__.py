"""ymlib public API: calendar-aware year-month values and their arithmetic."""

from .calendars import CALENDARS, DEFAULT_CALENDAR_ID, Calendar, get_calendar
from .conventions.types import (
    Overflow,
    RoundingMode,
    ShowCalendar,
    TemporalUnit,
)
from .duration.core import Duration
from .errors import ErrorKind, TemporalError, TemporalRangeError, TemporalTypeError
from .parsing import parse_duration_string, parse_temporal_year_month_string
from .plain_date import PlainDate
from .plain_year_month import PlainYearMonth, to_temporal_year_month

__version__ = "0.1.0"

__all__ = [
    "CALENDARS",
    "DEFAULT_CALENDAR_ID",
    "Calendar",
    "Duration",
    "ErrorKind",
    "Overflow",
    "PlainDate",
    "PlainYearMonth",
    "RoundingMode",
    "ShowCalendar",
    "TemporalError",
    "TemporalRangeError",
    "TemporalTypeError",
    "TemporalUnit",
    "get_calendar",
    "parse_duration_string",
    "parse_temporal_year_month_string",
    "to_temporal_year_month",
]
