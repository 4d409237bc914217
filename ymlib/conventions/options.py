"""
Option readers for overflow, calendar display, and difference settings.

Options are passed as keyword arguments. Each reader accepts ``None``
(meaning "not supplied"), the matching enum member, or the option string.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from ymlib.conventions.types import (
    Overflow,
    RoundingMode,
    ShowCalendar,
    TemporalDifference,
    TemporalUnit,
    UnitGroup,
)
from ymlib.errors import ErrorKind, TemporalRangeError, TemporalTypeError

# Default option values
_DEFAULT_OVERFLOW = Overflow.CONSTRAIN
_DEFAULT_SHOW_CALENDAR = ShowCalendar.AUTO
_DEFAULT_ROUNDING_MODE = RoundingMode.TRUNC
_DEFAULT_ROUNDING_INCREMENT = 1
_MAX_ROUNDING_INCREMENT = 1_000_000_000

_AUTO = "auto"

_UNITS_BY_NAME = {}
for _unit in TemporalUnit:
    _UNITS_BY_NAME[_unit.singular] = _unit
    _UNITS_BY_NAME[_unit.plural] = _unit


def _string_option(name: str, value) -> str:
    if not isinstance(value, str):
        raise TemporalTypeError(
            ErrorKind.UNEXPECTED_TYPE, f"{name} option must be a string, got {type(value).__name__}"
        )
    return value


def _enum_option(name: str, value, enum_type, default):
    if value is None:
        return default
    if isinstance(value, enum_type):
        return value
    text = _string_option(name, value)
    for member in enum_type:
        if member.value == text:
            return member
    allowed = ", ".join(m.value for m in enum_type)
    raise TemporalRangeError(
        ErrorKind.INVALID_OPTION, f"Invalid {name}: {text!r}. Allowed: {allowed}"
    )


def get_overflow_option(value: Union[str, Overflow, None]) -> Overflow:
    """Read the ``overflow`` option (default ``constrain``)."""
    return _enum_option("overflow", value, Overflow, _DEFAULT_OVERFLOW)


def get_show_calendar_option(value: Union[str, ShowCalendar, None]) -> ShowCalendar:
    """Read the ``calendar_name`` option (default ``auto``)."""
    return _enum_option("calendar_name", value, ShowCalendar, _DEFAULT_SHOW_CALENDAR)


def get_rounding_mode_option(
    value: Union[str, RoundingMode, None], default: RoundingMode = _DEFAULT_ROUNDING_MODE
) -> RoundingMode:
    """Read the ``rounding_mode`` option."""
    return _enum_option("rounding_mode", value, RoundingMode, default)


def get_rounding_increment_option(value) -> int:
    """Read ``rounding_increment``: truncated to an integer in [1, 1e9]."""
    if value is None:
        return _DEFAULT_ROUNDING_INCREMENT
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TemporalTypeError(
            ErrorKind.UNEXPECTED_TYPE, f"rounding_increment must be a number, got {value!r}"
        )
    if not math.isfinite(value):
        raise TemporalRangeError(
            ErrorKind.INVALID_OPTION, f"rounding_increment must be finite, got {value!r}"
        )
    increment = int(value)
    if increment < 1 or increment > _MAX_ROUNDING_INCREMENT:
        raise TemporalRangeError(
            ErrorKind.INVALID_OPTION,
            f"rounding_increment must be between 1 and {_MAX_ROUNDING_INCREMENT}, got {value!r}",
        )
    return increment


def get_temporal_unit_option(
    name: str,
    value: Union[str, TemporalUnit, None],
    unit_group: UnitGroup,
    default: Union[TemporalUnit, str, None],
) -> Union[TemporalUnit, str, None]:
    """Read a unit-valued option restricted to ``unit_group``.

    Returns ``"auto"`` when the caller passed ``"auto"`` (or when that is the
    default), otherwise a ``TemporalUnit``.
    """
    if value is None:
        return default
    if isinstance(value, TemporalUnit):
        unit = value
    else:
        text = _string_option(name, value)
        if text == _AUTO:
            return _AUTO
        unit = _UNITS_BY_NAME.get(text)
        if unit is None:
            raise TemporalRangeError(ErrorKind.INVALID_OPTION, f"Invalid {name}: {text!r}")

    if unit_group == UnitGroup.DATE and not unit.is_date_unit:
        raise TemporalRangeError(
            ErrorKind.INVALID_OPTION, f"{name} must be a date unit, got {unit.singular!r}"
        )
    return unit


@dataclass(frozen=True)
class DifferenceSettings:
    """Resolved options for a difference operation."""

    smallest_unit: TemporalUnit
    largest_unit: TemporalUnit
    rounding_mode: RoundingMode
    rounding_increment: int


def get_difference_settings(
    operation: TemporalDifference,
    unit_group: UnitGroup,
    disallowed_units: Iterable[TemporalUnit],
    fallback_smallest_unit: TemporalUnit,
    smallest_largest_default_unit: TemporalUnit,
    *,
    largest_unit=None,
    smallest_unit=None,
    rounding_mode=None,
    rounding_increment=None,
) -> DifferenceSettings:
    """Resolve and validate ``until``/``since`` options.

    Options are read in the order largest unit, rounding increment, rounding
    mode, smallest unit. For ``since`` the rounding mode is negated.
    """
    disallowed = set(disallowed_units)

    largest: Optional[Union[TemporalUnit, str]] = get_temporal_unit_option(
        "largest_unit", largest_unit, unit_group, _AUTO
    )
    if largest in disallowed:
        raise TemporalRangeError(
            ErrorKind.INVALID_OPTION, f"largest_unit {largest.singular!r} is not allowed here"
        )

    increment = get_rounding_increment_option(rounding_increment)

    mode = get_rounding_mode_option(rounding_mode)
    if operation == TemporalDifference.SINCE:
        mode = mode.negate()

    smallest = get_temporal_unit_option(
        "smallest_unit", smallest_unit, unit_group, fallback_smallest_unit
    )
    if smallest == _AUTO:
        raise TemporalRangeError(ErrorKind.INVALID_OPTION, "smallest_unit cannot be 'auto'")
    if smallest in disallowed:
        raise TemporalRangeError(
            ErrorKind.INVALID_OPTION, f"smallest_unit {smallest.singular!r} is not allowed here"
        )

    default_largest = smallest_largest_default_unit.larger_of(smallest)
    if largest == _AUTO:
        largest = default_largest

    if largest.larger_of(smallest) != largest:
        raise TemporalRangeError(
            ErrorKind.INVALID_OPTION,
            f"smallest_unit {smallest.singular!r} is larger than largest_unit {largest.singular!r}",
        )

    # Calendar units have no maximum increment; nothing further to validate
    return DifferenceSettings(
        smallest_unit=smallest,
        largest_unit=largest,
        rounding_mode=mode,
        rounding_increment=increment,
    )
