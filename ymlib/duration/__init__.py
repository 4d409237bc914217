"""Duration records, balancing, and relative rounding.

Only the core records are re-exported here; import
``ymlib.duration.rounding`` directly for the rounder.
"""

from .core import (
    DURATION_FIELDS,
    DateDuration,
    Duration,
    balance_time_duration,
    duration_from_fields,
    normalize_time_duration,
    to_temporal_duration,
)

__all__ = [
    "DURATION_FIELDS",
    "DateDuration",
    "Duration",
    "balance_time_duration",
    "duration_from_fields",
    "normalize_time_duration",
    "to_temporal_duration",
]
