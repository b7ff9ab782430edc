"""
Growth velocity.

Velocity is the change in a measurement divided by the time between two
consecutive records, scaled to the requested time unit:

    velocity = (current - previous) / days_between * days_per_unit

Weight velocity is in grams, height and head circumference velocity in
millimeters, per day or per week.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from knowledge.growth import MeasurementType, as_utc, elapsed_days, round_half_up
from src.models import (
    GrowthRecord,
    TimeUnit,
    VelocityDataPoint,
    VelocityReport,
    VelocitySummary,
)

# Field name prefix on VelocityDataPoint / VelocitySummary
_FIELD_NAMES = {
    MeasurementType.WEIGHT: "weight",
    MeasurementType.HEIGHT: "height",
    MeasurementType.HEAD_CIRCUMFERENCE: "head_circumference",
}


def days_between(previous: GrowthRecord, current: GrowthRecord) -> int:
    """Whole days between two records, never less than 1."""
    days = elapsed_days(previous.timestamp, current.timestamp)
    # Round half up
    return max(1, math.floor(days + 0.5))


def calculate_velocity_between(
    previous: GrowthRecord,
    current: GrowthRecord,
    time_unit: TimeUnit = TimeUnit.WEEK,
) -> VelocityDataPoint:
    """
    Calculate velocity between two consecutive measurements.

    A measurement missing from either record gives None for its change
    and velocity; the other measurements are unaffected.
    """
    days = days_between(previous, current)
    multiplier = TimeUnit(time_unit).days

    values: dict[str, float | None] = {}
    for measurement_type, name in _FIELD_NAMES.items():
        before = previous.measurement(measurement_type)
        after = current.measurement(measurement_type)
        if before is None or after is None:
            values[f"{name}_change"] = None
            values[f"{name}_velocity"] = None
            continue
        change = after - before
        values[f"{name}_change"] = change
        values[f"{name}_velocity"] = round_half_up(change / days * multiplier, 2)

    return VelocityDataPoint(
        from_date=previous.timestamp,
        to_date=current.timestamp,
        days_between=days,
        **values,
    )


def _average(values: Iterable[float | None]) -> float | None:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round_half_up(sum(present) / len(present), 2)


def _net_change(
    records: Sequence[GrowthRecord],
    measurement_type: MeasurementType,
) -> float | None:
    present = [
        r.measurement(measurement_type)
        for r in records
        if r.measurement(measurement_type) is not None
    ]
    if len(present) < 2:
        return None
    return present[-1] - present[0]


def calculate_velocity_summary(
    velocity_data: Sequence[VelocityDataPoint],
    records: Sequence[GrowthRecord],
) -> VelocitySummary:
    """
    Summarize velocity over a record sequence.

    Averages are taken over the pairs where the velocity is defined. Net
    change runs from the first to the last record that has the
    measurement, which can differ from the sum of pairwise changes when a
    record in between lacks it.
    """
    summary: dict[str, float | None] = {}
    for measurement_type, name in _FIELD_NAMES.items():
        summary[f"average_{name}_velocity"] = _average(
            getattr(point, f"{name}_velocity") for point in velocity_data
        )
        summary[f"total_{name}_change"] = _net_change(records, measurement_type)
    return VelocitySummary(**summary)


def describe_units(time_unit: TimeUnit) -> str:
    unit = TimeUnit(time_unit).value
    return f"grams/{unit} for weight, mm/{unit} for height and head circumference"


def calculate_growth_velocity(
    records: Iterable[GrowthRecord],
    time_unit: TimeUnit = TimeUnit.WEEK,
) -> VelocityReport:
    """
    Calculate growth velocity across a child's records.

    Args:
        records: Growth records, in any order
        time_unit: day or week

    Returns:
        VelocityReport with one data point per consecutive pair
    """
    time_unit = TimeUnit(time_unit)
    ordered = sorted(records, key=lambda r: as_utc(r.timestamp))

    velocity_data = [
        calculate_velocity_between(previous, current, time_unit)
        for previous, current in zip(ordered, ordered[1:])
    ]

    return VelocityReport(
        time_unit=time_unit,
        unit_description=describe_units(time_unit),
        measurement_count=len(ordered),
        velocity_data=velocity_data,
        summary=calculate_velocity_summary(velocity_data, ordered),
    )
