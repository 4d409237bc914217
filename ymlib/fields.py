"""
Calendar field records.

A ``FieldRecord`` is an insertion-ordered mapping restricted to the calendar
field vocabulary. Field values read from user mappings are converted and
validated by :func:`prepare_temporal_fields`.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Callable, Dict, Iterable, Iterator, Optional

from ymlib.errors import ErrorKind, TemporalTypeError
from ymlib.utils.mathutils import (
    to_integer_with_truncation,
    to_positive_integer_with_truncation,
)

DAY = "day"
ERA = "era"
ERA_YEAR = "era_year"
MONTH = "month"
MONTH_CODE = "month_code"
YEAR = "year"

# Order in which fields are read from a source mapping
CANONICAL_ORDER = (DAY, ERA, ERA_YEAR, MONTH, MONTH_CODE, YEAR)


def _require_string(value, name: str) -> str:
    if not isinstance(value, str):
        raise TemporalTypeError(
            ErrorKind.UNEXPECTED_TYPE, f"{name} must be a string, got {type(value).__name__}"
        )
    return value


_CONVERTERS: Dict[str, Callable] = {
    DAY: to_positive_integer_with_truncation,
    ERA: _require_string,
    ERA_YEAR: to_integer_with_truncation,
    MONTH: to_positive_integer_with_truncation,
    MONTH_CODE: _require_string,
    YEAR: to_integer_with_truncation,
}


class FieldRecord(MutableMapping):
    """Ordered mapping of calendar field names to values."""

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping] = None):
        self._values: Dict[str, object] = {}
        if values:
            for key, value in values.items():
                self[key] = value

    def __getitem__(self, key: str):
        return self._values[key]

    def __setitem__(self, key: str, value) -> None:
        if key not in _CONVERTERS:
            raise KeyError(f"Unknown calendar field: {key!r}")
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def copy(self) -> "FieldRecord":
        return FieldRecord(self._values)

    def __repr__(self) -> str:
        return f"FieldRecord({self._values!r})"


def sort_field_names(names: Iterable[str]) -> list:
    """Return names in canonical order, dropping duplicates."""
    wanted = set(names)
    return [name for name in CANONICAL_ORDER if name in wanted]


def prepare_temporal_fields(
    source: Mapping,
    field_names: Iterable[str],
    required: Iterable[str] = (),
) -> FieldRecord:
    """
    Read ``field_names`` from ``source`` in the given order.

    Values of ``None`` count as absent. Missing required fields raise a
    type error; present values are converted per field.
    """
    required = set(required)
    result = FieldRecord()
    for name in field_names:
        value = source.get(name)
        if value is None:
            if name in required:
                raise TemporalTypeError(ErrorKind.MISSING_FIELD, f"Missing required field: {name}")
            continue
        result[name] = _CONVERTERS[name](value, name)
    return result


def prepare_partial_temporal_fields(source: Mapping, field_names: Iterable[str]) -> FieldRecord:
    """Like :func:`prepare_temporal_fields` but at least one field must be present."""
    names = list(field_names)
    result = prepare_temporal_fields(source, names)
    if not result:
        raise TemporalTypeError(
            ErrorKind.MISSING_FIELD, f"Expected at least one of: {', '.join(names)}"
        )
    return result
