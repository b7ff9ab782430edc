"""
Age and interval helpers shared by percentile and velocity calculations.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone

# Average days per month (365.25 / 12)
DAYS_PER_MONTH = 30.4375

SECONDS_PER_DAY = 24 * 60 * 60


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def as_utc(value: date | datetime) -> datetime:
    """Aware datetime for a date or datetime; naive values are taken as UTC."""
    value = _as_datetime(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def elapsed_days(start: date | datetime, end: date | datetime) -> float:
    """
    Fractional days from start to end (negative if end is earlier).

    A naive value is taken as UTC, so naive and aware values can be mixed.
    """
    return (as_utc(end) - as_utc(start)).total_seconds() / SECONDS_PER_DAY


def calculate_age_in_months(
    date_of_birth: date | datetime,
    measurement_date: date | datetime,
) -> float:
    """Fractional age in months at the measurement date."""
    return elapsed_days(date_of_birth, measurement_date) / DAYS_PER_MONTH
