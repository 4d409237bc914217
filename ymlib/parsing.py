"""
ISO 8601 / RFC 9557 string parsing for year-months and durations.
"""

from __future__ import annotations

import logging
import re
from fractions import Fraction
from typing import Optional, Tuple

from ymlib.duration.core import (
    NS_PER_HOUR,
    NS_PER_MICROSECOND,
    NS_PER_MILLISECOND,
    NS_PER_MINUTE,
    NS_PER_SECOND,
    Duration,
)
from ymlib.errors import ErrorKind, TemporalRangeError, TemporalTypeError
from ymlib.iso.dates import is_valid_iso_date

logger = logging.getLogger(__name__)

_DATE_TIME_RE = re.compile(
    r"""
    (?P<year>[+-]\d{6}|\d{4})
    (?:
        -(?P<month>\d{2})(?:-(?P<day>\d{2}))?
      | (?P<month_basic>\d{2})(?P<day_basic>\d{2})?
    )
    (?:
        [Tt\ ]
        (?P<hour>\d{2})
        (?::?(?P<minute>\d{2})
            (?::?(?P<second>\d{2})(?:[.,](?P<fraction>\d{1,9}))?)?
        )?
    )?
    (?P<offset>
        [Zz]
      | [+-](?P<offset_hour>\d{2})
        (?::?(?P<offset_minute>\d{2})
            (?::?(?P<offset_second>\d{2})(?:[.,]\d{1,9})?)?
        )?
    )?
    (?P<annotations>(?:\[[^\[\]]*\])*)
    """,
    re.VERBOSE,
)

_ANNOTATION_RE = re.compile(r"\[(?P<critical>!?)(?P<body>[^\[\]]*)\]")
_ANNOTATION_KEY_RE = re.compile(r"^[a-z_][a-z0-9_-]*$")
_ANNOTATION_VALUE_RE = re.compile(r"^[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*$")
_CALENDAR_KEY = "u-ca"

_DURATION_RE = re.compile(
    r"""
    (?P<sign>[+-])?
    [Pp]
    (?:(?P<years>\d+)[Yy])?
    (?:(?P<months>\d+)[Mm])?
    (?:(?P<weeks>\d+)[Ww])?
    (?:(?P<days>\d+)[Dd])?
    (?P<time>[Tt]
        (?:(?P<hours>\d+)(?:[.,](?P<hours_fraction>\d{1,9}))?[Hh])?
        (?:(?P<minutes>\d+)(?:[.,](?P<minutes_fraction>\d{1,9}))?[Mm])?
        (?:(?P<seconds>\d+)(?:[.,](?P<seconds_fraction>\d{1,9}))?[Ss])?
    )?
    """,
    re.VERBOSE,
)


def _fail(text: str, reason: str) -> TemporalRangeError:
    logger.debug("Rejected %r: %s", text, reason)
    return TemporalRangeError(ErrorKind.PARSE_FAILURE, f"Cannot parse {text!r}: {reason}")


def _require_string(text) -> str:
    if not isinstance(text, str):
        raise TemporalTypeError(
            ErrorKind.UNEXPECTED_TYPE, f"Expected a string, got {type(text).__name__}"
        )
    return text


def _parse_annotations(text: str, annotations: str) -> Optional[str]:
    """Return the calendar from ``[u-ca=...]`` annotations, if any."""
    calendar = None
    calendar_critical = False
    calendar_count = 0
    for index, match in enumerate(_ANNOTATION_RE.finditer(annotations)):
        critical = bool(match.group("critical"))
        body = match.group("body")
        if "=" not in body:
            # Time zone annotation; only valid first
            if index != 0 or not body:
                raise _fail(text, "misplaced time zone annotation")
            continue

        key, value = body.split("=", 1)
        if not _ANNOTATION_KEY_RE.match(key) or not _ANNOTATION_VALUE_RE.match(value):
            raise _fail(text, f"malformed annotation [{body}]")
        if key == _CALENDAR_KEY:
            calendar_count += 1
            calendar_critical = calendar_critical or critical
            if calendar is None:
                calendar = value
        elif critical:
            raise _fail(text, f"unknown critical annotation [{body}]")

    if calendar_count > 1 and calendar_critical:
        raise _fail(text, "multiple calendar annotations with a critical flag")
    return calendar


def parse_temporal_year_month_string(text: str) -> Tuple[int, int, int, Optional[str]]:
    """
    Parse a year-month or date string.

    Args:
        text: e.g. ``"2024-06"``, ``"+275760-09"``, ``"2024-06-15T12:00+01:00"``
            or ``"2024-06[u-ca=hebrew]"``.

    Returns:
        ``(iso_year, iso_month, iso_day, calendar_id_or_None)``; the day is 1
        when the string has no day.

    Raises:
        TemporalRangeError: kind ``parse-failure`` for malformed input.
    """
    text = _require_string(text)
    match = _DATE_TIME_RE.fullmatch(text)
    if match is None:
        raise _fail(text, "not an ISO 8601 year-month or date")

    year_text = match.group("year")
    if year_text == "-000000":
        raise _fail(text, "negative zero year")
    year = int(year_text)

    month = int(match.group("month") or match.group("month_basic"))
    day_text = match.group("day") or match.group("day_basic")
    day = int(day_text) if day_text else 1

    if match.group("hour") is not None:
        if day_text is None:
            raise _fail(text, "time requires a full date")
        hour = int(match.group("hour"))
        minute = int(match.group("minute") or 0)
        second = int(match.group("second") or 0)
        if hour > 23 or minute > 59 or second > 60:
            raise _fail(text, "invalid time")

    offset = match.group("offset")
    if offset is not None:
        if offset in ("Z", "z"):
            raise _fail(text, "UTC designator not allowed for a plain year-month")
        if match.group("hour") is None:
            raise _fail(text, "UTC offset requires a time")
        if int(match.group("offset_hour")) > 23 or int(match.group("offset_minute") or 0) > 59:
            raise _fail(text, "invalid UTC offset")

    if not is_valid_iso_date(year, month, day):
        raise _fail(text, "invalid date")

    calendar = _parse_annotations(text, match.group("annotations"))
    return year, month, day, calendar


def _fraction_ns(fraction_text: Optional[str], unit_ns: int) -> int:
    if not fraction_text:
        return 0
    return int(Fraction(int(fraction_text), 10 ** len(fraction_text)) * unit_ns)


def parse_duration_string(text: str) -> Duration:
    """
    Parse an ISO 8601 duration such as ``"P1Y2M"`` or ``"-PT1.5H"``.

    Only the last time component may carry a fraction.
    """
    text = _require_string(text)
    match = _DURATION_RE.fullmatch(text)
    if match is None:
        raise _fail(text, "not an ISO 8601 duration")

    groups = match.groupdict()
    date_names = ("years", "months", "weeks", "days")
    time_names = ("hours", "minutes", "seconds")
    if all(groups[name] is None for name in date_names + time_names):
        raise _fail(text, "duration has no components")
    if groups["time"] is not None and all(groups[name] is None for name in time_names):
        raise _fail(text, "time designator without time components")
    if groups["hours_fraction"] and (groups["minutes"] or groups["seconds"]):
        raise _fail(text, "fractional hours must be the last component")
    if groups["minutes_fraction"] and groups["seconds"]:
        raise _fail(text, "fractional minutes must be the last component")

    values = {name: int(groups[name] or 0) for name in date_names + time_names}

    # Fractional hours/minutes spill into smaller units
    remainder = _fraction_ns(groups["hours_fraction"], NS_PER_HOUR)
    remainder += _fraction_ns(groups["minutes_fraction"], NS_PER_MINUTE)
    remainder += _fraction_ns(groups["seconds_fraction"], NS_PER_SECOND)
    if groups["hours_fraction"]:
        extra_minutes, remainder = divmod(remainder, NS_PER_MINUTE)
        values["minutes"] += extra_minutes
    if groups["hours_fraction"] or groups["minutes_fraction"]:
        extra_seconds, remainder = divmod(remainder, NS_PER_SECOND)
        values["seconds"] += extra_seconds
    values["milliseconds"], remainder = divmod(remainder, NS_PER_MILLISECOND)
    values["microseconds"], values["nanoseconds"] = divmod(remainder, NS_PER_MICROSECOND)

    if groups["sign"] == "-":
        values = {name: -value for name, value in values.items()}
    return Duration(**values)
