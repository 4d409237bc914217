"""
Duration records and time balancing.

``Duration`` is the public, validated ten-field record. ``DateDuration``
is the internal years/months/weeks/days record handed to calendar
arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Mapping, Union

from ymlib.conventions.types import TemporalUnit
from ymlib.errors import ErrorKind, TemporalRangeError, TemporalTypeError
from ymlib.utils.mathutils import sign, to_integer_if_integral

NS_PER_MICROSECOND = 1_000
NS_PER_MILLISECOND = 1_000_000
NS_PER_SECOND = 1_000_000_000
NS_PER_MINUTE = 60 * NS_PER_SECOND
NS_PER_HOUR = 60 * NS_PER_MINUTE
NS_PER_DAY = 24 * NS_PER_HOUR

_MAX_CALENDAR_COMPONENT = 2**32
_MAX_TIME_SECONDS = 2**53

DURATION_FIELDS = (
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
    "milliseconds",
    "microseconds",
    "nanoseconds",
)

_TIME_UNIT_NS = (
    (TemporalUnit.DAY, NS_PER_DAY),
    (TemporalUnit.HOUR, NS_PER_HOUR),
    (TemporalUnit.MINUTE, NS_PER_MINUTE),
    (TemporalUnit.SECOND, NS_PER_SECOND),
    (TemporalUnit.MILLISECOND, NS_PER_MILLISECOND),
    (TemporalUnit.MICROSECOND, NS_PER_MICROSECOND),
    (TemporalUnit.NANOSECOND, 1),
)


@dataclass(frozen=True)
class DateDuration:
    """Date portion of a duration."""

    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0

    @property
    def sign(self) -> int:
        for value in (self.years, self.months, self.weeks, self.days):
            if value:
                return sign(value)
        return 0

    def negated(self) -> "DateDuration":
        return DateDuration(-self.years, -self.months, -self.weeks, -self.days)


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


@dataclass(frozen=True)
class Duration:
    """
    An immutable duration with ten integer components.

    All non-zero components share one sign. Calendar components are bounded
    by 2**32 and the day-and-time portion by 2**53 seconds.
    """

    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0
    microseconds: int = 0
    nanoseconds: int = 0

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, to_integer_if_integral(getattr(self, f.name), f.name))
        _validate_duration(self)

    @property
    def sign(self) -> int:
        for name in DURATION_FIELDS:
            value = getattr(self, name)
            if value:
                return sign(value)
        return 0

    @property
    def blank(self) -> bool:
        return self.sign == 0

    def negated(self) -> "Duration":
        return Duration(**{name: -getattr(self, name) for name in DURATION_FIELDS})

    def abs(self) -> "Duration":
        return Duration(**{name: abs(getattr(self, name)) for name in DURATION_FIELDS})

    def date_duration(self) -> DateDuration:
        return DateDuration(self.years, self.months, self.weeks, self.days)

    def to_string(self) -> str:
        """Format as an ISO 8601 duration, e.g. ``P1Y2M`` or ``-PT1.5S``."""
        return temporal_duration_to_string(self)

    def to_json(self) -> str:
        return self.to_string()

    def __str__(self) -> str:
        return self.to_string()


def _validate_duration(duration: Duration) -> None:
    duration_sign = 0
    for name in DURATION_FIELDS:
        value_sign = sign(getattr(duration, name))
        if value_sign == 0:
            continue
        if duration_sign and value_sign != duration_sign:
            raise TemporalRangeError(
                ErrorKind.DURATION_INVALID, "Duration components must not have mixed signs"
            )
        duration_sign = value_sign

    for name in ("years", "months", "weeks"):
        if abs(getattr(duration, name)) >= _MAX_CALENDAR_COMPONENT:
            raise TemporalRangeError(
                ErrorKind.DURATION_INVALID, f"Duration {name} out of range: {getattr(duration, name)}"
            )

    total_ns = duration.days * NS_PER_DAY + normalize_time_duration(duration)
    if abs(total_ns) >= _MAX_TIME_SECONDS * NS_PER_SECOND:
        raise TemporalRangeError(ErrorKind.DURATION_INVALID, "Duration time portion out of range")


def normalize_time_duration(duration: Duration) -> int:
    """Total nanoseconds of the hours..nanoseconds components."""
    return (
        duration.hours * NS_PER_HOUR
        + duration.minutes * NS_PER_MINUTE
        + duration.seconds * NS_PER_SECOND
        + duration.milliseconds * NS_PER_MILLISECOND
        + duration.microseconds * NS_PER_MICROSECOND
        + duration.nanoseconds
    )


def balance_time_duration(total_ns: int, largest_unit: TemporalUnit) -> Duration:
    """Balance nanoseconds into days..nanoseconds, starting at ``largest_unit``.

    Each component truncates toward zero so all parts share the input's sign.
    """
    if largest_unit.value < TemporalUnit.DAY.value:
        largest_unit = TemporalUnit.DAY
    result = {}
    remainder = total_ns
    for unit, unit_ns in _TIME_UNIT_NS:
        if unit.value < largest_unit.value:
            continue
        quotient = _trunc_div(remainder, unit_ns)
        remainder -= quotient * unit_ns
        result[unit.plural] = quotient
    return Duration(**result)


def duration_from_fields(item: Mapping) -> Duration:
    """Build a duration from a mapping of component names to integers.

    Unknown keys are ignored; at least one component must be present.
    """
    values = {}
    for name in DURATION_FIELDS:
        value = item.get(name)
        if value is not None:
            values[name] = to_integer_if_integral(value, name)
    if not values:
        raise TemporalTypeError(
            ErrorKind.MISSING_FIELD,
            f"Duration-like mapping must have at least one of: {', '.join(DURATION_FIELDS)}",
        )
    return Duration(**values)


def to_temporal_duration(item: Union[Duration, Mapping, str]) -> Duration:
    """Convert a duration-like value (Duration, mapping, or ISO 8601 string)."""
    if isinstance(item, Duration):
        return item
    if isinstance(item, str):
        from ymlib.parsing import parse_duration_string

        return parse_duration_string(item)
    if isinstance(item, Mapping):
        return duration_from_fields(item)
    raise TemporalTypeError(
        ErrorKind.UNEXPECTED_TYPE,
        f"Expected a Duration, mapping or string, got {type(item).__name__}",
    )


def temporal_duration_to_string(duration: Duration) -> str:
    duration_sign = duration.sign
    d = duration.abs()

    date_part = ""
    for value, designator in ((d.years, "Y"), (d.months, "M"), (d.weeks, "W"), (d.days, "D")):
        if value:
            date_part += f"{value}{designator}"

    time_part = ""
    if d.hours:
        time_part += f"{d.hours}H"
    if d.minutes:
        time_part += f"{d.minutes}M"

    subsecond_ns = d.milliseconds * NS_PER_MILLISECOND + d.microseconds * NS_PER_MICROSECOND + d.nanoseconds
    whole_seconds = d.seconds + subsecond_ns // NS_PER_SECOND
    fraction_ns = subsecond_ns % NS_PER_SECOND
    if whole_seconds or fraction_ns or (not date_part and not time_part):
        seconds_text = str(whole_seconds)
        if fraction_ns:
            seconds_text += "." + f"{fraction_ns:09d}".rstrip("0")
        time_part += f"{seconds_text}S"

    result = "P" + date_part
    if time_part:
        result += "T" + time_part
    return ("-" if duration_sign < 0 else "") + result
