"""Numeric coercion helpers for user-supplied field and option values."""

from __future__ import annotations

import math
import numbers
from fractions import Fraction

from ymlib.errors import ErrorKind, TemporalRangeError, TemporalTypeError


def _to_number(value, name: str):
    if isinstance(value, bool):
        raise TemporalTypeError(ErrorKind.UNEXPECTED_TYPE, f"{name} must be a number, got a bool")
    if isinstance(value, numbers.Real):
        return value
    raise TemporalTypeError(
        ErrorKind.UNEXPECTED_TYPE, f"{name} must be a number, got {type(value).__name__}"
    )


def to_integer_with_truncation(value, name: str = "value") -> int:
    """
    Truncate a finite number toward zero.

    Raises
    ------
    TemporalTypeError
        If value is not a real number
    TemporalRangeError
        If value is NaN or infinite
    """
    number = _to_number(value, name)
    if isinstance(number, numbers.Integral):
        return int(number)
    if not math.isfinite(number):
        raise TemporalRangeError(ErrorKind.OUT_OF_RANGE, f"{name} must be finite, got {value!r}")
    return int(number)


def to_positive_integer_with_truncation(value, name: str = "value") -> int:
    """Truncate toward zero and require the result to be at least 1."""
    integer = to_integer_with_truncation(value, name)
    if integer < 1:
        raise TemporalRangeError(ErrorKind.OUT_OF_RANGE, f"{name} must be positive, got {value!r}")
    return integer


def to_integer_if_integral(value, name: str = "value") -> int:
    """Accept only finite numbers without a fractional part."""
    number = _to_number(value, name)
    if isinstance(number, numbers.Integral):
        return int(number)
    if not math.isfinite(number) or number != math.trunc(number):
        raise TemporalRangeError(
            ErrorKind.OUT_OF_RANGE, f"{name} must be an integer, got {value!r}"
        )
    return int(number)


def coerce_constructor_integer(value, name: str) -> int:
    """Truncating integer conversion for constructor arguments.

    Numeric strings are accepted; anything that cannot be read as a finite
    number is a range error.
    """
    if isinstance(value, str):
        try:
            value = Fraction(value.strip()) if value.strip() else 0
        except ValueError as exc:
            raise TemporalRangeError(
                ErrorKind.OUT_OF_RANGE, f"{name} is not a number: {value!r}"
            ) from exc
    try:
        return to_integer_with_truncation(value, name)
    except TemporalTypeError as exc:
        raise TemporalRangeError(ErrorKind.OUT_OF_RANGE, str(exc.message)) from exc


def sign(value) -> int:
    """Return -1, 0 or 1."""
    return (value > 0) - (value < 0)
