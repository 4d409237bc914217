"""
Built-in calendar registry.

Calendars are stateless singletons created once at import time.
"""

import logging
from typing import Dict, Union

from ymlib.calendars.base import Calendar, CalendarDate
from ymlib.calendars.coptic import CopticCalendar, EthiopicCalendar
from ymlib.calendars.gregorian import (
    BuddhistCalendar,
    GregorianCalendar,
    IsoCalendar,
    RocCalendar,
)
from ymlib.calendars.hebrew import HebrewCalendar
from ymlib.calendars.islamic import IslamicCivilCalendar, IslamicTblaCalendar
from ymlib.errors import ErrorKind, TemporalRangeError, TemporalTypeError

logger = logging.getLogger(__name__)

DEFAULT_CALENDAR_ID = "iso8601"

CALENDARS: Dict[str, Calendar] = {
    cal.identifier: cal
    for cal in (
        IsoCalendar(),
        GregorianCalendar(),
        BuddhistCalendar(),
        RocCalendar(),
        CopticCalendar(),
        EthiopicCalendar(),
        HebrewCalendar(),
        IslamicCivilCalendar(),
        IslamicTblaCalendar(),
    )
}

_ALIASES = {
    "gregorian": "gregory",
    "islamicc": "islamic-civil",
}


def get_calendar(name: Union[str, Calendar]) -> Calendar:
    """
    Look up a built-in calendar by identifier.

    Parameters
    ----------
    name : str or Calendar
        Calendar identifier (ASCII case-insensitive) or a calendar instance.

    Raises
    ------
    TemporalTypeError
        If ``name`` is not a string.
    TemporalRangeError
        If the identifier is not a built-in calendar.
    """
    if isinstance(name, Calendar):
        return name
    if not isinstance(name, str):
        raise TemporalTypeError(
            ErrorKind.UNEXPECTED_TYPE, f"Calendar must be a string, got {type(name).__name__}"
        )
    key = name.lower() if name.isascii() else name
    key = _ALIASES.get(key, key)
    if key not in CALENDARS:
        logger.debug("Calendar lookup failed for %r", name)
        raise TemporalRangeError(ErrorKind.CALENDAR_UNKNOWN, f"Unknown calendar: {name!r}")
    return CALENDARS[key]


def calendar_equals(one: Calendar, two: Calendar) -> bool:
    """Calendars are equal when their identifiers are equal."""
    return one.identifier == two.identifier


def is_iso_calendar(calendar: Calendar) -> bool:
    return calendar.identifier == DEFAULT_CALENDAR_ID


__all__ = [
    "CALENDARS",
    "DEFAULT_CALENDAR_ID",
    "Calendar",
    "CalendarDate",
    "calendar_equals",
    "get_calendar",
    "is_iso_calendar",
]
