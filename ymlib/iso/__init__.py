"""ISO 8601 (proleptic Gregorian) date helpers."""

from .dates import (
    MAX_ISO_DATE,
    MAX_ISO_YEAR,
    MIN_ISO_DATE,
    MIN_ISO_YEAR,
    IsoDate,
    IsoYearMonth,
    add_iso_date,
    balance_iso_date,
    compare_iso_date,
    difference_iso_date,
    epoch_days_to_iso_date,
    is_leap_year,
    iso_date_to_epoch_days,
    iso_date_within_limits,
    iso_days_in_month,
    iso_year_month_within_limits,
    regulate_iso_date,
    throw_if_invalid_iso_date,
)
