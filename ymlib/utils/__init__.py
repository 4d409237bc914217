"""Shared numeric helpers."""

from .mathutils import (
    coerce_constructor_integer,
    sign,
    to_integer_if_integral,
    to_integer_with_truncation,
    to_positive_integer_with_truncation,
)

__all__ = [
    "coerce_constructor_integer",
    "sign",
    "to_integer_if_integral",
    "to_integer_with_truncation",
    "to_positive_integer_with_truncation",
]
