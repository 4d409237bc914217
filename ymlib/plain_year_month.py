"""
Calendar-aware year-month value type.

A ``PlainYearMonth`` is an ISO anchor (year, month, reference day) plus a
calendar. The reference day pins the calendar month for non-ISO calendars,
whose months do not line up with ISO months; for ``iso8601`` it is 1.

Examples
--------
>>> PlainYearMonth(2020, 2).add({"months": 1}).to_string()
'2020-03'
>>> str(PlainYearMonth(2020, 1).until(PlainYearMonth(2021, 3)))
'P1Y2M'
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional, Union

from ymlib.calendars import DEFAULT_CALENDAR_ID, Calendar, calendar_equals, get_calendar
from ymlib.conventions.options import (
    get_difference_settings,
    get_overflow_option,
    get_show_calendar_option,
)
from ymlib.conventions.types import (
    Overflow,
    TemporalDifference,
    TemporalUnit,
    UnitGroup,
)
from ymlib.duration import rounding
from ymlib.duration.core import (
    DateDuration,
    Duration,
    balance_time_duration,
    normalize_time_duration,
    to_temporal_duration,
)
from ymlib.errors import ErrorKind, TemporalRangeError, TemporalTypeError
from ymlib.fields import (
    DAY,
    MONTH,
    MONTH_CODE,
    YEAR,
    FieldRecord,
    prepare_partial_temporal_fields,
    prepare_temporal_fields,
)
from ymlib.iso.dates import (
    IsoDate,
    IsoYearMonth,
    balance_iso_date,
    compare_iso_date,
    iso_date_within_limits,
    iso_year_month_within_limits,
    throw_if_invalid_iso_date,
)
from ymlib.parsing import parse_temporal_year_month_string
from ymlib.plain_date import PlainDate
from ymlib.serialization import temporal_year_month_to_string
from ymlib.utils.mathutils import coerce_constructor_integer

logger = logging.getLogger(__name__)

YearMonthLike = Union["PlainYearMonth", PlainDate, Mapping, str]

# Units that can never be the smallest or largest unit of a difference
_DISALLOWED_DIFFERENCE_UNITS = tuple(
    unit for unit in TemporalUnit if unit.value >= TemporalUnit.WEEK.value
)

# Keys that mark a mapping as a temporal-like object for with_()
_TEMPORAL_LIKE_KEYS = ("calendar", "time_zone")


def _no_primitive_conversion(*args, **kwargs):
    raise TemporalTypeError(
        ErrorKind.NO_PRIMITIVE_CONVERSION,
        "PlainYearMonth cannot be converted to a primitive; use compare() or equals()",
    )


class PlainYearMonth:
    """
    An immutable calendar year and month.

    Parameters
    ----------
    iso_year : int
        ISO year of the anchor.
    iso_month : int
        ISO month of the anchor.
    calendar : str, optional
        Calendar identifier, default ``"iso8601"``.
    reference_iso_day : int, optional
        ISO day of the anchor, default 1.

    Raises
    ------
    TemporalRangeError
        If an argument is not a finite number, the anchor is not a valid
        ISO date, or the year-month is outside the supported range.
    TemporalTypeError
        If ``calendar`` is not a string.
    """

    __slots__ = ("_iso", "_calendar")

    def __init__(
        self,
        iso_year,
        iso_month,
        calendar: Optional[str] = None,
        reference_iso_day=None,
    ):
        year = coerce_constructor_integer(iso_year, "iso_year")
        month = coerce_constructor_integer(iso_month, "iso_month")
        if calendar is None:
            calendar = DEFAULT_CALENDAR_ID
        if not isinstance(calendar, str):
            raise TemporalTypeError(
                ErrorKind.UNEXPECTED_TYPE, f"calendar must be a string, got {type(calendar).__name__}"
            )
        cal = get_calendar(calendar)
        day = 1 if reference_iso_day is None else coerce_constructor_integer(
            reference_iso_day, "reference_iso_day"
        )
        self._init(IsoDate(year, month, day), cal)

    def _init(self, anchor: IsoDate, calendar: Calendar) -> None:
        throw_if_invalid_iso_date(anchor.year, anchor.month, anchor.day)
        if not iso_year_month_within_limits(anchor.year, anchor.month):
            raise TemporalRangeError(
                ErrorKind.PLAIN_YEAR_MONTH_INVALID,
                f"Year-month {anchor.year}-{anchor.month:02d} outside supported range",
            )
        object.__setattr__(self, "_iso", IsoYearMonth.from_iso_date(anchor))
        object.__setattr__(self, "_calendar", calendar)

    @classmethod
    def _create(cls, anchor: IsoDate, calendar: Calendar) -> "PlainYearMonth":
        """Build from an ISO anchor and a resolved calendar."""
        obj = cls.__new__(cls)
        obj._init(anchor, calendar)
        return obj

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    # Slot state cannot be restored through setattr; rebuild via the constructor
    def __reduce__(self):
        return (PlainYearMonth, (self.iso_year, self.iso_month, self.calendar_id, self.reference_iso_day))

    def __copy__(self) -> "PlainYearMonth":
        return self

    def __deepcopy__(self, memo) -> "PlainYearMonth":
        return self

    # ------------------------------------------------------------------
    # Static constructors
    # ------------------------------------------------------------------
    @classmethod
    def from_(cls, item: YearMonthLike, *, overflow=None) -> "PlainYearMonth":
        """Convert a year-month-like value; see :func:`to_temporal_year_month`."""
        return to_temporal_year_month(item, overflow)

    @staticmethod
    def compare(one: YearMonthLike, two: YearMonthLike) -> int:
        """Order two year-months by ISO anchor; calendars are ignored."""
        one = to_temporal_year_month(one)
        two = to_temporal_year_month(two)
        return compare_iso_date(one.iso_date, two.iso_date)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def iso_date(self) -> IsoDate:
        """ISO anchor as a date (reference day included)."""
        return self._iso.to_iso_date()

    @property
    def iso_year(self) -> int:
        return self._iso.iso_year

    @property
    def iso_month(self) -> int:
        return self._iso.iso_month

    @property
    def reference_iso_day(self) -> int:
        return self._iso.reference_iso_day

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def calendar_id(self) -> str:
        return self._calendar.identifier

    @property
    def era(self) -> Optional[str]:
        return self._calendar.era(self.iso_date)

    @property
    def era_year(self) -> Optional[int]:
        return self._calendar.era_year(self.iso_date)

    @property
    def year(self) -> int:
        return self._calendar.year(self.iso_date)

    @property
    def month(self) -> int:
        return self._calendar.month(self.iso_date)

    @property
    def month_code(self) -> str:
        return self._calendar.month_code(self.iso_date)

    @property
    def days_in_year(self) -> int:
        return self._calendar.days_in_year(self.iso_date)

    @property
    def days_in_month(self) -> int:
        return self._calendar.days_in_month(self.iso_date)

    @property
    def months_in_year(self) -> int:
        return self._calendar.months_in_year(self.iso_date)

    @property
    def in_leap_year(self) -> bool:
        return self._calendar.in_leap_year(self.iso_date)

    # ------------------------------------------------------------------
    # Field helpers
    # ------------------------------------------------------------------
    def _fields(self, names) -> FieldRecord:
        return self._calendar.fields_of(self.iso_date, self._calendar.field_names(names))

    def _first_day(self) -> IsoDate:
        """ISO date of day 1 of this calendar month."""
        fields = self._fields([MONTH_CODE, YEAR])
        fields[DAY] = 1
        return self._calendar.date_from_fields(fields, Overflow.CONSTRAIN)

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------
    def with_(self, fields: Mapping, *, overflow=None) -> "PlainYearMonth":
        """
        Return a copy with some of ``year``, ``month``, ``month_code`` (and
        ``era``/``era_year`` for calendars with eras) replaced.
        """
        if isinstance(fields, (PlainYearMonth, PlainDate)):
            raise TemporalTypeError(
                ErrorKind.TEMPORAL_LIKE_OBJECT, "with_() does not accept a temporal object"
            )
        if not isinstance(fields, Mapping):
            raise TemporalTypeError(
                ErrorKind.UNEXPECTED_TYPE, f"with_() expects a mapping, got {type(fields).__name__}"
            )
        for key in _TEMPORAL_LIKE_KEYS:
            if fields.get(key) is not None:
                raise TemporalTypeError(
                    ErrorKind.TEMPORAL_LIKE_OBJECT, f"with_() does not accept a {key!r} field"
                )
        overflow = get_overflow_option(overflow)

        calendar = self._calendar
        names = calendar.field_names([MONTH, MONTH_CODE, YEAR])
        base = self._fields(names)
        partial = prepare_partial_temporal_fields(fields, names)
        merged = prepare_temporal_fields(calendar.merge_fields(base, partial), names)
        anchor = calendar.year_month_from_fields(merged, overflow)
        return PlainYearMonth._create(anchor, calendar)

    def to_plain_date(self, fields: Mapping, *, overflow=None) -> PlainDate:
        """Combine with a ``day`` to form a :class:`PlainDate`."""
        if not isinstance(fields, Mapping):
            raise TemporalTypeError(
                ErrorKind.UNEXPECTED_TYPE,
                f"to_plain_date() expects a mapping, got {type(fields).__name__}",
            )
        overflow = get_overflow_option(overflow)

        calendar = self._calendar
        receiver = self._fields([MONTH_CODE, YEAR])
        input_fields = prepare_temporal_fields(fields, [DAY], required=[DAY])
        merged = calendar.merge_fields(receiver, input_fields)
        merged = prepare_temporal_fields(merged, list(receiver) + list(input_fields))
        date = calendar.date_from_fields(merged, overflow)
        return PlainDate.from_iso_date(date, calendar)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def _add_duration(self, duration: Duration, overflow) -> "PlainYearMonth":
        overflow = get_overflow_option(overflow)
        calendar = self._calendar

        balanced = balance_time_duration(normalize_time_duration(duration), TemporalUnit.DAY)
        duration_to_add = DateDuration(
            duration.years, duration.months, duration.weeks, duration.days + balanced.days
        )
        sign = duration_to_add.sign

        names = calendar.field_names([MONTH_CODE, YEAR])
        fields = self._fields(names)
        fields_copy = fields.copy()
        fields[DAY] = 1
        intermediate = calendar.date_from_fields(fields, Overflow.CONSTRAIN)

        if sign < 0:
            # Anchor at the last day of the month so that a subtraction
            # smaller than a month stays within it
            next_month = calendar.date_add(intermediate, DateDuration(months=1), Overflow.CONSTRAIN)
            end_of_month = balance_iso_date(next_month.year, next_month.month, next_month.day - 1)
            if not iso_date_within_limits(end_of_month):
                raise TemporalRangeError(
                    ErrorKind.PLAIN_DATE_INVALID, f"Date {end_of_month} outside supported range"
                )
            fields_copy[DAY] = calendar.day(end_of_month)
            date = calendar.date_from_fields(fields_copy, Overflow.CONSTRAIN)
            logger.debug("Negative duration %s: anchored %s at month end %s", duration, self, date)
        else:
            date = intermediate
            logger.debug("Non-negative duration %s: anchored %s at month start %s", duration, self, date)

        added = calendar.date_add(date, duration_to_add, overflow)
        result_fields = calendar.fields_of(added, names)
        anchor = calendar.year_month_from_fields(result_fields, overflow)
        return PlainYearMonth._create(anchor, calendar)

    def add(self, duration, *, overflow=None) -> "PlainYearMonth":
        """
        Add a duration.

        Args:
            duration: ``Duration``, mapping of duration fields, or ISO 8601
                duration string.
            overflow: ``"constrain"`` (default) or ``"reject"``.

        Returns:
            New PlainYearMonth in the same calendar.
        """
        return self._add_duration(to_temporal_duration(duration), overflow)

    def subtract(self, duration, *, overflow=None) -> "PlainYearMonth":
        """Subtract a duration; see :meth:`add`."""
        return self._add_duration(to_temporal_duration(duration).negated(), overflow)

    def _difference(self, operation: TemporalDifference, other: YearMonthLike, options: dict) -> Duration:
        other = to_temporal_year_month(other)
        settings = get_difference_settings(
            operation,
            UnitGroup.DATE,
            _DISALLOWED_DIFFERENCE_UNITS,
            TemporalUnit.MONTH,
            TemporalUnit.YEAR,
            **options,
        )
        calendar = self._calendar
        if not calendar_equals(calendar, other.calendar):
            raise TemporalRangeError(
                ErrorKind.CALENDAR_INCOMPATIBLE,
                f"Cannot compare {calendar.identifier} and {other.calendar_id} year-months",
            )

        if self.iso_date == other.iso_date:
            return Duration()

        this_date = self._first_day()
        other_date = other._first_day()
        until = calendar.date_until(this_date, other_date, settings.largest_unit)
        date_duration = DateDuration(years=until.years, months=until.months)

        if settings.smallest_unit != TemporalUnit.MONTH or settings.rounding_increment != 1:
            date_duration = rounding.round_relative_duration(
                date_duration,
                rounding.get_utc_epoch_nanoseconds(other_date),
                this_date,
                calendar,
                None,
                settings.largest_unit,
                settings.rounding_increment,
                settings.smallest_unit,
                settings.rounding_mode,
            )

        result = Duration(years=date_duration.years, months=date_duration.months)
        if operation == TemporalDifference.SINCE:
            result = result.negated()
        return result

    def until(
        self,
        other: YearMonthLike,
        *,
        largest_unit=None,
        smallest_unit=None,
        rounding_mode=None,
        rounding_increment=None,
    ) -> Duration:
        """
        Duration from this year-month to ``other``.

        Args:
            other: Year-month-like value in the same calendar.
            largest_unit: ``"year"`` (default via ``"auto"``) or ``"month"``.
            smallest_unit: ``"month"`` (default) or ``"year"``.
            rounding_mode: Rounding mode name, default ``"trunc"``.
            rounding_increment: Positive integer, default 1.

        Returns:
            A Duration with only years and months set.
        """
        return self._difference(
            TemporalDifference.UNTIL,
            other,
            dict(
                largest_unit=largest_unit,
                smallest_unit=smallest_unit,
                rounding_mode=rounding_mode,
                rounding_increment=rounding_increment,
            ),
        )

    def since(
        self,
        other: YearMonthLike,
        *,
        largest_unit=None,
        smallest_unit=None,
        rounding_mode=None,
        rounding_increment=None,
    ) -> Duration:
        """Duration from ``other`` to this year-month; see :meth:`until`."""
        return self._difference(
            TemporalDifference.SINCE,
            other,
            dict(
                largest_unit=largest_unit,
                smallest_unit=smallest_unit,
                rounding_mode=rounding_mode,
                rounding_increment=rounding_increment,
            ),
        )

    # ------------------------------------------------------------------
    # Equality
    # ------------------------------------------------------------------
    def equals(self, other: YearMonthLike) -> bool:
        """Same ISO anchor and same calendar."""
        other = to_temporal_year_month(other)
        return self.iso_date == other.iso_date and calendar_equals(self._calendar, other.calendar)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PlainYearMonth):
            return NotImplemented
        return self.iso_date == other.iso_date and calendar_equals(self._calendar, other.calendar)

    def __hash__(self) -> int:
        return hash((self.iso_date, self._calendar.identifier))

    __lt__ = __le__ = __gt__ = __ge__ = _no_primitive_conversion
    __int__ = __float__ = __index__ = _no_primitive_conversion

    def value_of(self):
        _no_primitive_conversion()

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_string(self, *, calendar_name=None) -> str:
        """
        ISO 8601 text, e.g. ``2024-06`` or ``2024-05-09[u-ca=hebrew]``.

        ``calendar_name`` is one of ``auto`` (default), ``always``, ``never``
        or ``critical``.
        """
        show = get_show_calendar_option(calendar_name)
        return temporal_year_month_to_string(self.iso_date, self._calendar, show)

    def to_json(self) -> str:
        return self.to_string()

    def to_locale_string(self, locales=None, options=None) -> str:
        return self.to_string()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"PlainYearMonth({self.to_string(calendar_name='always')!r})"


def _calendar_from_mapping(item: Mapping) -> Calendar:
    value = item.get("calendar")
    if value is None:
        return get_calendar(DEFAULT_CALENDAR_ID)
    if isinstance(value, (PlainYearMonth, PlainDate)):
        return value.calendar
    return get_calendar(value)


def to_temporal_year_month(item: YearMonthLike, overflow=None) -> PlainYearMonth:
    """
    Convert a value to a :class:`PlainYearMonth`.

    Parameters
    ----------
    item : PlainYearMonth, PlainDate, Mapping or str
        Year-month-like value. Mappings carry ``year`` (or ``era`` and
        ``era_year``), ``month`` or ``month_code``, and an optional
        ``calendar``. Strings are ISO 8601 year-months or dates.
    overflow : str or Overflow, optional
        ``constrain`` (default) or ``reject``; applies to mappings.

    Raises
    ------
    TemporalTypeError
        For unsupported input types or missing fields.
    TemporalRangeError
        For unparsable strings or out-of-range values.
    """
    overflow = get_overflow_option(overflow)

    if isinstance(item, PlainYearMonth):
        return item

    if isinstance(item, PlainDate):
        calendar = item.calendar
        names = calendar.field_names([MONTH, MONTH_CODE, YEAR])
        fields = calendar.fields_of(item.iso_date, names)
        return PlainYearMonth._create(calendar.year_month_from_fields(fields, overflow), calendar)

    if isinstance(item, Mapping):
        calendar = _calendar_from_mapping(item)
        names = calendar.field_names([MONTH, MONTH_CODE, YEAR])
        fields = prepare_temporal_fields(item, names)
        return PlainYearMonth._create(calendar.year_month_from_fields(fields, overflow), calendar)

    if isinstance(item, str):
        year, month, day, calendar_id = parse_temporal_year_month_string(item)
        calendar = get_calendar(calendar_id if calendar_id is not None else DEFAULT_CALENDAR_ID)
        if not iso_year_month_within_limits(year, month):
            raise TemporalRangeError(
                ErrorKind.PLAIN_YEAR_MONTH_INVALID, f"Year-month {year}-{month:02d} outside supported range"
            )
        parsed = PlainYearMonth._create(IsoDate(year, month, day), calendar)
        fields = parsed._fields([MONTH_CODE, YEAR])
        return PlainYearMonth._create(
            calendar.year_month_from_fields(fields, Overflow.CONSTRAIN), calendar
        )

    raise TemporalTypeError(
        ErrorKind.UNEXPECTED_TYPE,
        f"Cannot convert {type(item).__name__} to PlainYearMonth",
    )
