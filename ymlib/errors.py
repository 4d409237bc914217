"""
Error taxonomy for year-month and date arithmetic.

Every failure raised by the package is a ``TemporalError`` carrying a
``kind`` tag. Type errors also subclass ``TypeError`` and range errors
subclass ``ValueError`` so callers can catch either family.
"""

from enum import Enum


class ErrorKind(Enum):
    """Failure kinds surfaced to callers."""

    UNEXPECTED_TYPE = "unexpected-type"
    MISSING_FIELD = "missing-field"
    TEMPORAL_LIKE_OBJECT = "temporal-like-object"
    NO_PRIMITIVE_CONVERSION = "no-primitive-conversion"
    OUT_OF_RANGE = "out-of-range"
    INVALID_ISO_DATE = "invalid-iso-date"
    PLAIN_YEAR_MONTH_INVALID = "plain-year-month-invalid"
    PLAIN_DATE_INVALID = "plain-date-invalid"
    CALENDAR_UNKNOWN = "calendar-unknown"
    CALENDAR_INCOMPATIBLE = "calendar-incompatible"
    INVALID_MONTH_CODE = "invalid-month-code"
    PARSE_FAILURE = "parse-failure"
    INVALID_OPTION = "invalid-option"
    DURATION_INVALID = "duration-invalid"


class TemporalError(Exception):
    """Base class for all errors raised by ymlib."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class TemporalTypeError(TemporalError, TypeError):
    """Argument of the wrong shape, or an unsupported primitive conversion."""


class TemporalRangeError(TemporalError, ValueError):
    """Value out of bounds, unparsable, or otherwise invalid."""
