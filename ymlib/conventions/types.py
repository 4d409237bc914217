"""
Basic types and enums used across the year-month engine.
"""

from enum import Enum


class Overflow(Enum):
    """Field overflow handling."""

    CONSTRAIN = "constrain"
    REJECT = "reject"


class ShowCalendar(Enum):
    """Calendar annotation display modes for string output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"
    CRITICAL = "critical"


class UnitGroup(Enum):
    """Unit groups accepted by option readers."""

    DATE = "date"


class TemporalUnit(Enum):
    """Duration units, largest first.

    The value is the rank; a smaller rank is a larger unit.
    """

    YEAR = 0
    MONTH = 1
    WEEK = 2
    DAY = 3
    HOUR = 4
    MINUTE = 5
    SECOND = 6
    MILLISECOND = 7
    MICROSECOND = 8
    NANOSECOND = 9

    @property
    def singular(self) -> str:
        return self.name.lower()

    @property
    def plural(self) -> str:
        return self.singular + "s"

    @property
    def is_calendar_unit(self) -> bool:
        return self in (TemporalUnit.YEAR, TemporalUnit.MONTH, TemporalUnit.WEEK)

    @property
    def is_date_unit(self) -> bool:
        return self.value <= TemporalUnit.DAY.value

    def larger_of(self, other: "TemporalUnit") -> "TemporalUnit":
        return self if self.value <= other.value else other


class RoundingMode(Enum):
    """Rounding modes for duration rounding."""

    CEIL = "ceil"
    FLOOR = "floor"
    EXPAND = "expand"
    TRUNC = "trunc"
    HALF_CEIL = "halfCeil"
    HALF_FLOOR = "halfFloor"
    HALF_EXPAND = "halfExpand"
    HALF_TRUNC = "halfTrunc"
    HALF_EVEN = "halfEven"

    def negate(self) -> "RoundingMode":
        """Mirror the mode for a negated operand (used by ``since``)."""
        return _NEGATED_MODES.get(self, self)


_NEGATED_MODES = {
    RoundingMode.CEIL: RoundingMode.FLOOR,
    RoundingMode.FLOOR: RoundingMode.CEIL,
    RoundingMode.HALF_CEIL: RoundingMode.HALF_FLOOR,
    RoundingMode.HALF_FLOOR: RoundingMode.HALF_CEIL,
}


class UnsignedRoundingMode(Enum):
    """Rounding direction once the operand sign has been factored out."""

    ZERO = "zero"
    INFINITY = "infinity"
    HALF_ZERO = "half-zero"
    HALF_INFINITY = "half-infinity"
    HALF_EVEN = "half-even"


class TemporalDifference(Enum):
    """Direction of a difference operation."""

    UNTIL = "until"
    SINCE = "since"
