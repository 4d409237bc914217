"""
String formatting for year-months and dates.
"""

from ymlib.calendars import Calendar, is_iso_calendar
from ymlib.conventions.types import ShowCalendar
from ymlib.iso.dates import IsoDate


def format_iso_year(year: int) -> str:
    """Four digits for years 0..9999, otherwise a sign and six digits."""
    if 0 <= year <= 9999:
        return f"{year:04d}"
    sign = "-" if year < 0 else "+"
    return f"{sign}{abs(year):06d}"


def format_calendar_annotation(calendar: Calendar, show: ShowCalendar) -> str:
    if show == ShowCalendar.NEVER:
        return ""
    if show == ShowCalendar.AUTO and is_iso_calendar(calendar):
        return ""
    flag = "!" if show == ShowCalendar.CRITICAL else ""
    return f"[{flag}u-ca={calendar.identifier}]"


def temporal_year_month_to_string(anchor: IsoDate, calendar: Calendar, show: ShowCalendar) -> str:
    """
    Format a year-month as ``YYYY-MM``.

    The reference day is appended when the calendar is not ISO, or when the
    calendar annotation is forced with ``always`` / ``critical``.
    """
    result = f"{format_iso_year(anchor.year)}-{anchor.month:02d}"
    if not is_iso_calendar(calendar) or show in (
        ShowCalendar.ALWAYS,
        ShowCalendar.CRITICAL,
    ):
        result += f"-{anchor.day:02d}"
    return result + format_calendar_annotation(calendar, show)


def temporal_date_to_string(date: IsoDate, calendar: Calendar, show: ShowCalendar) -> str:
    result = f"{format_iso_year(date.year)}-{date.month:02d}-{date.day:02d}"
    return result + format_calendar_annotation(calendar, show)
