"""
Tests for ymlib.parsing
"""

import pytest

from ymlib.duration.core import Duration
from ymlib.errors import ErrorKind, TemporalRangeError, TemporalTypeError
from ymlib.parsing import parse_duration_string, parse_temporal_year_month_string


class TestYearMonthStrings:
    """Accepted year-month and date forms"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2024-06", (2024, 6, 1, None)),
            ("202406", (2024, 6, 1, None)),
            ("+275760-09", (275760, 9, 1, None)),
            ("-001000-03", (-1000, 3, 1, None)),
            ("2024-06-15", (2024, 6, 15, None)),
            ("20240615", (2024, 6, 15, None)),
            ("2024-06-15T12:30", (2024, 6, 15, None)),
            ("2024-06-15 12:30:45.123", (2024, 6, 15, None)),
            ("2024-06-15t1230", (2024, 6, 15, None)),
            ("2024-06-15T12:30+01:00", (2024, 6, 15, None)),
            ("2024-06[u-ca=hebrew]", (2024, 6, 1, "hebrew")),
            ("2024-06-15T00:00-05:00[America/New_York][u-ca=gregory]", (2024, 6, 15, "gregory")),
            ("2024-06-15[!u-ca=coptic]", (2024, 6, 15, "coptic")),
            ("2024-06-15[u-ca=gregory][u-ca=hebrew]", (2024, 6, 15, "gregory")),
            ("2024-06-15[foo=bar]", (2024, 6, 15, None)),
        ],
    )
    def test_accepts(self, text: str, expected) -> None:
        assert parse_temporal_year_month_string(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "2024",
            "2024-13",
            "2024-00",
            "2024-02-30",
            "2024-0615",
            "-000000-01",
            "2024-06-15Z",
            "2024-06-15T12:00Z",
            "2024-06-15T24:00",
            "2024-06T12:00",
            "2024-06-15+01:00",
            "2024-06-15[!u-ca=gregory][u-ca=hebrew]",
            "2024-06-15[!foo=bar]",
            "2024-06-15[u-ca=gregory][Europe/Paris]",
            "2024-06-15[U-CA=gregory]",
            "2024-06x",
        ],
    )
    def test_rejects(self, text: str) -> None:
        with pytest.raises(TemporalRangeError) as exc_info:
            parse_temporal_year_month_string(text)
        assert exc_info.value.kind == ErrorKind.PARSE_FAILURE

    def test_non_string(self) -> None:
        with pytest.raises(TemporalTypeError):
            parse_temporal_year_month_string(202406)


class TestDurationStrings:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("P1Y2M", Duration(years=1, months=2)),
            ("-P1D", Duration(days=-1)),
            ("+P3W", Duration(weeks=3)),
            ("PT1.5H", Duration(hours=1, minutes=30)),
            ("PT0.5S", Duration(milliseconds=500)),
            ("PT1M0.000001S", Duration(minutes=1, microseconds=1)),
            ("P1Y1M1DT1H1M1S", Duration(years=1, months=1, days=1, hours=1, minutes=1, seconds=1)),
            ("p1y", Duration(years=1)),
        ],
    )
    def test_accepts(self, text: str, expected: Duration) -> None:
        assert parse_duration_string(text) == expected

    @pytest.mark.parametrize("text", ["P", "PT", "1Y", "P1Y2", "PT1.5H30M", "PT1.5M1S", "P1.5Y"])
    def test_rejects(self, text: str) -> None:
        with pytest.raises(TemporalRangeError) as exc_info:
            parse_duration_string(text)
        assert exc_info.value.kind == ErrorKind.PARSE_FAILURE
