"""
Tests for ymlib.duration (records, balancing, rounding primitives)
"""

from fractions import Fraction

import pytest

from ymlib.calendars import get_calendar
from ymlib.conventions.types import RoundingMode, TemporalUnit, UnsignedRoundingMode
from ymlib.duration.core import (
    NS_PER_DAY,
    NS_PER_SECOND,
    DateDuration,
    Duration,
    balance_time_duration,
    duration_from_fields,
    normalize_time_duration,
    to_temporal_duration,
)
from ymlib.duration.rounding import (
    apply_unsigned_rounding_mode,
    get_unsigned_rounding_mode,
    get_utc_epoch_nanoseconds,
    nudge_to_calendar_unit,
    round_number_to_increment_trunc,
    round_relative_duration,
)
from ymlib.errors import ErrorKind, TemporalRangeError, TemporalTypeError
from ymlib.iso.dates import IsoDate


class TestDurationRecord:
    """Validation and sign"""

    def test_mixed_signs(self) -> None:
        with pytest.raises(TemporalRangeError) as exc_info:
            Duration(years=1, months=-1)
        assert exc_info.value.kind == ErrorKind.DURATION_INVALID

    def test_calendar_component_limit(self) -> None:
        with pytest.raises(TemporalRangeError):
            Duration(years=2**32)
        assert Duration(years=2**32 - 1).years == 2**32 - 1

    def test_time_limit(self) -> None:
        with pytest.raises(TemporalRangeError):
            Duration(seconds=2**53)

    def test_fraction_rejected(self) -> None:
        with pytest.raises(TemporalRangeError):
            Duration(months=1.5)

    def test_sign_and_negation(self) -> None:
        duration = Duration(months=2, days=3)
        assert duration.sign == 1
        assert duration.negated() == Duration(months=-2, days=-3)
        assert duration.negated().abs() == duration
        assert Duration().blank

    def test_date_duration(self) -> None:
        assert Duration(years=1, weeks=2, hours=5).date_duration() == DateDuration(years=1, weeks=2)
        assert DateDuration(months=-1).sign == -1


class TestDurationFormatting:
    @pytest.mark.parametrize(
        "duration, expected",
        [
            (Duration(years=1, months=2), "P1Y2M"),
            (Duration(), "PT0S"),
            (Duration(days=-3), "-P3D"),
            (Duration(weeks=1, hours=2), "P1WT2H"),
            (Duration(seconds=1, milliseconds=500), "PT1.5S"),
            (Duration(nanoseconds=1), "PT0.000000001S"),
        ],
    )
    def test_to_string(self, duration: Duration, expected: str) -> None:
        assert duration.to_string() == expected
        assert str(duration) == expected
        assert duration.to_json() == expected


class TestBalancing:
    def test_normalize(self) -> None:
        assert normalize_time_duration(Duration(hours=1, seconds=1)) == 3601 * NS_PER_SECOND

    def test_balance_into_days(self) -> None:
        total = 90061 * NS_PER_SECOND + 5
        result = balance_time_duration(total, TemporalUnit.DAY)
        assert result == Duration(days=1, hours=1, minutes=1, seconds=1, nanoseconds=5)

    def test_balance_negative_truncates(self) -> None:
        result = balance_time_duration(-NS_PER_DAY - 1, TemporalUnit.DAY)
        assert result == Duration(days=-1, nanoseconds=-1)

    def test_balance_under_a_day(self) -> None:
        assert balance_time_duration(NS_PER_DAY - 1, TemporalUnit.DAY).days == 0


class TestDurationConversion:
    def test_from_mapping(self) -> None:
        assert to_temporal_duration({"months": 1, "unknown": 5}) == Duration(months=1)

    def test_from_string(self) -> None:
        assert to_temporal_duration("P1Y") == Duration(years=1)

    def test_passthrough(self) -> None:
        duration = Duration(days=1)
        assert to_temporal_duration(duration) is duration

    def test_empty_mapping(self) -> None:
        with pytest.raises(TemporalTypeError) as exc_info:
            duration_from_fields({})
        assert exc_info.value.kind == ErrorKind.MISSING_FIELD

    def test_wrong_type(self) -> None:
        with pytest.raises(TemporalTypeError):
            to_temporal_duration(3)


class TestRoundingPrimitives:
    """Unsigned rounding table and tie handling"""

    @pytest.mark.parametrize(
        "mode, negative, expected",
        [
            (RoundingMode.CEIL, False, UnsignedRoundingMode.INFINITY),
            (RoundingMode.CEIL, True, UnsignedRoundingMode.ZERO),
            (RoundingMode.FLOOR, False, UnsignedRoundingMode.ZERO),
            (RoundingMode.FLOOR, True, UnsignedRoundingMode.INFINITY),
            (RoundingMode.HALF_CEIL, True, UnsignedRoundingMode.HALF_ZERO),
            (RoundingMode.HALF_EXPAND, True, UnsignedRoundingMode.HALF_INFINITY),
            (RoundingMode.TRUNC, False, UnsignedRoundingMode.ZERO),
            (RoundingMode.HALF_EVEN, True, UnsignedRoundingMode.HALF_EVEN),
        ],
    )
    def test_unsigned_mode(self, mode, negative, expected) -> None:
        assert get_unsigned_rounding_mode(mode, negative) == expected

    def test_ties(self) -> None:
        half = Fraction(3, 2)
        assert apply_unsigned_rounding_mode(half, 1, 2, UnsignedRoundingMode.HALF_ZERO) == 1
        assert apply_unsigned_rounding_mode(half, 1, 2, UnsignedRoundingMode.HALF_INFINITY) == 2
        assert apply_unsigned_rounding_mode(half, 1, 2, UnsignedRoundingMode.HALF_EVEN) == 2
        assert apply_unsigned_rounding_mode(Fraction(5, 2), 2, 3, UnsignedRoundingMode.HALF_EVEN) == 2

    def test_exact_value_not_rounded(self) -> None:
        assert apply_unsigned_rounding_mode(1, 1, 2, UnsignedRoundingMode.INFINITY) == 1

    def test_increment_truncation(self) -> None:
        assert round_number_to_increment_trunc(7, 3) == 6
        assert round_number_to_increment_trunc(-7, 3) == -6


class TestRoundRelativeDuration:
    """Rounding calendar durations against real month and year lengths"""

    iso = get_calendar("iso8601")

    def _round(self, duration, origin, dest, smallest, largest=TemporalUnit.YEAR, increment=1, mode=RoundingMode.TRUNC):
        return round_relative_duration(
            duration,
            get_utc_epoch_nanoseconds(dest),
            origin,
            self.iso,
            None,
            largest,
            increment,
            smallest,
            mode,
        )

    def test_epoch_nanoseconds(self) -> None:
        assert get_utc_epoch_nanoseconds(IsoDate(1970, 1, 2)) == NS_PER_DAY

    def test_round_years_half_expand(self) -> None:
        """Seven months into a year is past the midpoint"""
        result = self._round(
            DateDuration(years=1, months=7),
            IsoDate(2020, 1, 1),
            IsoDate(2021, 8, 1),
            TemporalUnit.YEAR,
            mode=RoundingMode.HALF_EXPAND,
        )
        assert result == DateDuration(years=2)

    def test_round_years_trunc(self) -> None:
        result = self._round(
            DateDuration(years=1, months=7), IsoDate(2020, 1, 1), IsoDate(2021, 8, 1), TemporalUnit.YEAR
        )
        assert result == DateDuration(years=1)

    def test_month_increment_bubbles_into_year(self) -> None:
        result = self._round(
            DateDuration(months=11),
            IsoDate(2020, 1, 1),
            IsoDate(2020, 12, 1),
            TemporalUnit.MONTH,
            increment=6,
            mode=RoundingMode.CEIL,
        )
        assert result == DateDuration(years=1)

    def test_negative_duration(self) -> None:
        result = self._round(
            DateDuration(years=-1, months=-7),
            IsoDate(2021, 8, 1),
            IsoDate(2020, 1, 1),
            TemporalUnit.YEAR,
            mode=RoundingMode.FLOOR,
        )
        assert result == DateDuration(years=-2)

    def test_time_zone_not_supported(self) -> None:
        with pytest.raises(TemporalRangeError):
            round_relative_duration(
                DateDuration(months=1),
                0,
                IsoDate(1970, 1, 1),
                self.iso,
                "UTC",
                TemporalUnit.YEAR,
                1,
                TemporalUnit.MONTH,
                RoundingMode.TRUNC,
            )

    def test_destination_outside_bracket(self) -> None:
        """A duration that does not reach the destination cannot be nudged"""
        with pytest.raises(TemporalRangeError) as exc_info:
            nudge_to_calendar_unit(
                1,
                DateDuration(months=1),
                get_utc_epoch_nanoseconds(IsoDate(2020, 6, 1)),
                IsoDate(2020, 1, 1),
                self.iso,
                1,
                TemporalUnit.MONTH,
                RoundingMode.TRUNC,
            )
        assert exc_info.value.kind == ErrorKind.OUT_OF_RANGE
