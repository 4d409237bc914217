"""
Tests for ymlib.conventions option readers
"""

import pytest

from ymlib.conventions import (
    Overflow,
    RoundingMode,
    ShowCalendar,
    TemporalDifference,
    TemporalUnit,
    UnitGroup,
    get_difference_settings,
    get_overflow_option,
    get_rounding_increment_option,
    get_show_calendar_option,
    get_temporal_unit_option,
)
from ymlib.errors import ErrorKind, TemporalRangeError, TemporalTypeError

_YEAR_MONTH_DISALLOWED = [u for u in TemporalUnit if u.value >= TemporalUnit.WEEK.value]


def _settings(operation=TemporalDifference.UNTIL, **options):
    return get_difference_settings(
        operation,
        UnitGroup.DATE,
        _YEAR_MONTH_DISALLOWED,
        TemporalUnit.MONTH,
        TemporalUnit.YEAR,
        **options,
    )


class TestEnumOptions:
    def test_overflow_default(self) -> None:
        assert get_overflow_option(None) == Overflow.CONSTRAIN

    def test_overflow_string_and_enum(self) -> None:
        assert get_overflow_option("reject") == Overflow.REJECT
        assert get_overflow_option(Overflow.REJECT) == Overflow.REJECT

    def test_overflow_invalid(self) -> None:
        with pytest.raises(TemporalRangeError) as exc_info:
            get_overflow_option("clamp")
        assert exc_info.value.kind == ErrorKind.INVALID_OPTION

    def test_overflow_wrong_type(self) -> None:
        with pytest.raises(TemporalTypeError):
            get_overflow_option(1)

    def test_show_calendar(self) -> None:
        assert get_show_calendar_option(None) == ShowCalendar.AUTO
        assert get_show_calendar_option("critical") == ShowCalendar.CRITICAL

    def test_rounding_mode_negation(self) -> None:
        assert RoundingMode.CEIL.negate() == RoundingMode.FLOOR
        assert RoundingMode.HALF_FLOOR.negate() == RoundingMode.HALF_CEIL
        assert RoundingMode.HALF_EVEN.negate() == RoundingMode.HALF_EVEN


class TestIncrementOption:
    def test_default(self) -> None:
        assert get_rounding_increment_option(None) == 1

    def test_truncated(self) -> None:
        assert get_rounding_increment_option(2.9) == 2

    @pytest.mark.parametrize("value", [0, 0.5, 1_000_000_001, float("inf"), float("nan")])
    def test_out_of_range(self, value) -> None:
        with pytest.raises(TemporalRangeError):
            get_rounding_increment_option(value)

    def test_wrong_type(self) -> None:
        with pytest.raises(TemporalTypeError):
            get_rounding_increment_option("2")


class TestUnitOption:
    def test_plural_names(self) -> None:
        assert get_temporal_unit_option("smallest_unit", "months", UnitGroup.DATE, None) == TemporalUnit.MONTH

    def test_auto(self) -> None:
        assert get_temporal_unit_option("largest_unit", "auto", UnitGroup.DATE, None) == "auto"

    def test_time_unit_in_date_group(self) -> None:
        with pytest.raises(TemporalRangeError):
            get_temporal_unit_option("smallest_unit", "hour", UnitGroup.DATE, None)

    def test_unknown_unit(self) -> None:
        with pytest.raises(TemporalRangeError):
            get_temporal_unit_option("smallest_unit", "fortnight", UnitGroup.DATE, None)


class TestDifferenceSettings:
    """Defaults and validation for until/since"""

    def test_defaults(self) -> None:
        settings = _settings()
        assert settings.smallest_unit == TemporalUnit.MONTH
        assert settings.largest_unit == TemporalUnit.YEAR
        assert settings.rounding_mode == RoundingMode.TRUNC
        assert settings.rounding_increment == 1

    def test_auto_largest_follows_smallest(self) -> None:
        settings = _settings(smallest_unit="year", largest_unit="auto")
        assert settings.largest_unit == TemporalUnit.YEAR

    def test_since_negates_mode(self) -> None:
        settings = _settings(TemporalDifference.SINCE, rounding_mode="ceil")
        assert settings.rounding_mode == RoundingMode.FLOOR

    def test_smallest_larger_than_largest(self) -> None:
        with pytest.raises(TemporalRangeError) as exc_info:
            _settings(smallest_unit="year", largest_unit="month")
        assert exc_info.value.kind == ErrorKind.INVALID_OPTION

    @pytest.mark.parametrize("unit", ["week", "day"])
    def test_disallowed_smallest(self, unit: str) -> None:
        with pytest.raises(TemporalRangeError):
            _settings(smallest_unit=unit)

    def test_disallowed_largest(self) -> None:
        with pytest.raises(TemporalRangeError):
            _settings(largest_unit="days")

    def test_invalid_rounding_mode(self) -> None:
        with pytest.raises(TemporalRangeError):
            _settings(rounding_mode="nearest")
