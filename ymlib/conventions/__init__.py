# Re-export option types and readers
from .options import (
    DifferenceSettings,
    get_difference_settings,
    get_overflow_option,
    get_rounding_increment_option,
    get_rounding_mode_option,
    get_show_calendar_option,
    get_temporal_unit_option,
)
from .types import (
    Overflow,
    RoundingMode,
    ShowCalendar,
    TemporalDifference,
    TemporalUnit,
    UnitGroup,
    UnsignedRoundingMode,
)
