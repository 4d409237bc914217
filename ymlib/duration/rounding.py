"""
Rounding of calendar durations relative to a start date.

Year and month lengths vary, so a duration is rounded by bracketing the
destination between two candidate end dates (``r1`` and ``r2`` units away
from the origin) and measuring how far the destination has progressed
between them. Progress is kept as an exact ``Fraction``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from ymlib.conventions.types import (
    Overflow,
    RoundingMode,
    TemporalUnit,
    UnsignedRoundingMode,
)
from ymlib.duration.core import NS_PER_DAY, DateDuration
from ymlib.errors import ErrorKind, TemporalRangeError
from ymlib.iso.dates import IsoDate, iso_date_to_epoch_days

logger = logging.getLogger(__name__)

# Unsigned rounding mode per signed mode, for (positive, negative) operands
_UNSIGNED_MODES = {
    RoundingMode.CEIL: (UnsignedRoundingMode.INFINITY, UnsignedRoundingMode.ZERO),
    RoundingMode.FLOOR: (UnsignedRoundingMode.ZERO, UnsignedRoundingMode.INFINITY),
    RoundingMode.EXPAND: (UnsignedRoundingMode.INFINITY, UnsignedRoundingMode.INFINITY),
    RoundingMode.TRUNC: (UnsignedRoundingMode.ZERO, UnsignedRoundingMode.ZERO),
    RoundingMode.HALF_CEIL: (UnsignedRoundingMode.HALF_INFINITY, UnsignedRoundingMode.HALF_ZERO),
    RoundingMode.HALF_FLOOR: (UnsignedRoundingMode.HALF_ZERO, UnsignedRoundingMode.HALF_INFINITY),
    RoundingMode.HALF_EXPAND: (UnsignedRoundingMode.HALF_INFINITY, UnsignedRoundingMode.HALF_INFINITY),
    RoundingMode.HALF_TRUNC: (UnsignedRoundingMode.HALF_ZERO, UnsignedRoundingMode.HALF_ZERO),
    RoundingMode.HALF_EVEN: (UnsignedRoundingMode.HALF_EVEN, UnsignedRoundingMode.HALF_EVEN),
}


def get_unsigned_rounding_mode(mode: RoundingMode, is_negative: bool) -> UnsignedRoundingMode:
    """Map a signed rounding mode to its direction for the operand's sign."""
    return _UNSIGNED_MODES[mode][1 if is_negative else 0]


def apply_unsigned_rounding_mode(x, r1, r2, mode: UnsignedRoundingMode):
    """
    Choose between the bracketing values ``r1 <= x <= r2``.

    Args:
        x: Value being rounded (non-negative).
        r1: Lower candidate.
        r2: Upper candidate.
        mode: Unsigned rounding direction.

    Returns:
        ``r1`` or ``r2``.
    """
    if x == r1:
        return r1
    if mode == UnsignedRoundingMode.ZERO:
        return r1
    if mode == UnsignedRoundingMode.INFINITY:
        return r2

    d1 = x - r1
    d2 = r2 - x
    if d1 < d2:
        return r1
    if d2 < d1:
        return r2
    if mode == UnsignedRoundingMode.HALF_ZERO:
        return r1
    if mode == UnsignedRoundingMode.HALF_INFINITY:
        return r2
    cardinality = Fraction(r1, r2 - r1) % 2
    return r1 if cardinality == 0 else r2


def round_number_to_increment_trunc(value: int, increment: int) -> int:
    """Round toward zero to a multiple of ``increment``."""
    quotient = abs(value) // increment
    return quotient * increment if value >= 0 else -quotient * increment


def get_utc_epoch_nanoseconds(date: IsoDate) -> int:
    """Epoch nanoseconds of midnight UTC at the start of ``date``."""
    return iso_date_to_epoch_days(date.year, date.month, date.day) * NS_PER_DAY


@dataclass(frozen=True)
class NudgeResult:
    duration: DateDuration
    nudged_epoch_ns: int
    did_expand_calendar_unit: bool


def _calendar_epoch_ns(calendar, origin: IsoDate, duration: DateDuration) -> int:
    end = calendar.date_add(origin, duration, Overflow.CONSTRAIN)
    return get_utc_epoch_nanoseconds(end)


def nudge_to_calendar_unit(
    sign: int,
    duration: DateDuration,
    dest_epoch_ns: int,
    origin: IsoDate,
    calendar,
    increment: int,
    unit: TemporalUnit,
    rounding_mode: RoundingMode,
) -> NudgeResult:
    """Round ``duration`` to ``unit`` by bracketing ``dest_epoch_ns``."""
    if unit == TemporalUnit.YEAR:
        r1 = round_number_to_increment_trunc(duration.years, increment)
        r2 = r1 + increment * sign
        start_duration = DateDuration(years=r1)
        end_duration = DateDuration(years=r2)
    elif unit == TemporalUnit.MONTH:
        r1 = round_number_to_increment_trunc(duration.months, increment)
        r2 = r1 + increment * sign
        start_duration = DateDuration(years=duration.years, months=r1)
        end_duration = DateDuration(years=duration.years, months=r2)
    else:
        raise TemporalRangeError(
            ErrorKind.INVALID_OPTION, f"Cannot round year-month differences to {unit.plural}"
        )

    start_epoch_ns = _calendar_epoch_ns(calendar, origin, start_duration)
    end_epoch_ns = _calendar_epoch_ns(calendar, origin, end_duration)
    low, high = sorted((start_epoch_ns, end_epoch_ns))
    if not low <= dest_epoch_ns <= high:
        raise TemporalRangeError(
            ErrorKind.OUT_OF_RANGE,
            f"Destination is outside the {unit.plural} rounding bracket [{r1}, {r2}]",
        )

    progress = Fraction(dest_epoch_ns - start_epoch_ns, end_epoch_ns - start_epoch_ns)
    total = r1 + progress * increment * sign
    unsigned_mode = get_unsigned_rounding_mode(rounding_mode, sign < 0)
    if progress == 1:
        rounded_unit = abs(r2)
    else:
        rounded_unit = apply_unsigned_rounding_mode(abs(total), abs(r1), abs(r2), unsigned_mode)
    logger.debug(
        "Rounding %s: bracket [%d, %d], progress %s, mode %s -> %d",
        unit.plural, r1, r2, progress, unsigned_mode.value, rounded_unit,
    )

    if rounded_unit == abs(r2):
        return NudgeResult(end_duration, end_epoch_ns, True)
    return NudgeResult(start_duration, start_epoch_ns, False)


def bubble_relative_duration(
    sign: int,
    duration: DateDuration,
    nudged_epoch_ns: int,
    origin: IsoDate,
    calendar,
    largest_unit: TemporalUnit,
    smallest_unit: TemporalUnit,
) -> DateDuration:
    """Carry a rounded-up smaller unit into the next larger unit(s)."""
    if smallest_unit == largest_unit:
        return duration

    for unit_value in range(smallest_unit.value - 1, largest_unit.value - 1, -1):
        unit = TemporalUnit(unit_value)
        if unit == TemporalUnit.WEEK and largest_unit != TemporalUnit.WEEK:
            continue
        if unit == TemporalUnit.YEAR:
            end_duration = DateDuration(years=duration.years + sign)
        elif unit == TemporalUnit.MONTH:
            end_duration = DateDuration(years=duration.years, months=duration.months + sign)
        else:
            end_duration = DateDuration(
                years=duration.years, months=duration.months, weeks=duration.weeks + sign
            )

        end_epoch_ns = _calendar_epoch_ns(calendar, origin, end_duration)
        beyond_end = nudged_epoch_ns - end_epoch_ns
        beyond_sign = (beyond_end > 0) - (beyond_end < 0)
        if beyond_sign == -sign:
            break
        duration = end_duration
    return duration


def round_relative_duration(
    duration: DateDuration,
    dest_epoch_ns: int,
    origin: IsoDate,
    calendar,
    time_zone: Optional[str],
    largest_unit: TemporalUnit,
    increment: int,
    smallest_unit: TemporalUnit,
    rounding_mode: RoundingMode,
) -> DateDuration:
    """
    Round a date duration measured from ``origin`` to ``smallest_unit``.

    Parameters
    ----------
    duration : DateDuration
        Unrounded difference from ``origin`` to the destination.
    dest_epoch_ns : int
        Epoch nanoseconds of the destination.
    origin : IsoDate
        Start date the duration is relative to.
    calendar : Calendar
        Calendar used to add candidate durations to ``origin``.
    time_zone : str or None
        Must be ``None``; rounding is done on plain dates only.
    largest_unit, smallest_unit : TemporalUnit
        Calendar units bounding the result.
    increment : int
        Rounding increment for ``smallest_unit``.
    rounding_mode : RoundingMode
        Signed rounding mode.

    Returns
    -------
    DateDuration
        The rounded duration.
    """
    if time_zone is not None:
        raise TemporalRangeError(ErrorKind.INVALID_OPTION, "Zoned rounding is not supported")
    if not smallest_unit.is_calendar_unit:
        raise TemporalRangeError(
            ErrorKind.INVALID_OPTION, f"Cannot round year-month differences to {smallest_unit.plural}"
        )

    sign = -1 if duration.sign < 0 else 1
    nudge = nudge_to_calendar_unit(
        sign, duration, dest_epoch_ns, origin, calendar, increment, smallest_unit, rounding_mode
    )
    result = nudge.duration
    if nudge.did_expand_calendar_unit and smallest_unit != TemporalUnit.WEEK:
        start_unit = smallest_unit.larger_of(TemporalUnit.DAY)
        result = bubble_relative_duration(
            sign, result, nudge.nudged_epoch_ns, origin, calendar, largest_unit, start_unit
        )
    return result
