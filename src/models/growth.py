"""
Growth record and report models.

Measurements are stored the way they are recorded: weight in grams,
length/height and head circumference in millimeters. Percentile results
are unit-less.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from knowledge.growth import ChartRow, MeasurementType, Sex


def generate_id() -> str:
    """Generate a unique identifier."""
    return str(uuid4())[:8]


# =============================================================================
# ENUMS
# =============================================================================


class TimeUnit(str, Enum):
    DAY = "day"
    WEEK = "week"

    @property
    def days(self) -> int:
        return 7 if self is TimeUnit.WEEK else 1


# Divisor from recorded units (g, mm) to reference units (kg, cm)
REFERENCE_UNIT_DIVISORS: dict[MeasurementType, float] = {
    MeasurementType.WEIGHT: 1000.0,
    MeasurementType.HEIGHT: 10.0,
    MeasurementType.HEAD_CIRCUMFERENCE: 10.0,
}


# =============================================================================
# RECORDS
# =============================================================================


class GrowthRecord(BaseModel):
    """A single growth measurement for a child."""
    id: str = Field(default_factory=generate_id)
    timestamp: datetime
    date_of_birth: date | None = None

    # Measurements
    weight_g: float | None = Field(default=None, description="Weight in grams")
    height_mm: float | None = Field(default=None, description="Length/height in millimeters")
    head_circumference_mm: float | None = Field(default=None, description="Head circumference in millimeters")

    class Config:
        frozen = True

    def measurement(self, measurement_type: MeasurementType) -> float | None:
        """Recorded value (g or mm) for a measurement type."""
        return {
            MeasurementType.WEIGHT: self.weight_g,
            MeasurementType.HEIGHT: self.height_mm,
            MeasurementType.HEAD_CIRCUMFERENCE: self.head_circumference_mm,
        }[MeasurementType(measurement_type)]

    def reference_value(self, measurement_type: MeasurementType) -> float | None:
        """Value converted to the reference table's unit (kg or cm)."""
        value = self.measurement(measurement_type)
        if value is None:
            return None
        return value / REFERENCE_UNIT_DIVISORS[MeasurementType(measurement_type)]


class GrowthPercentiles(BaseModel):
    """Percentiles and Z-scores for one growth record."""
    weight_percentile: float | None = None
    height_percentile: float | None = None
    head_percentile: float | None = None

    weight_z: float | None = None
    height_z: float | None = None
    head_z: float | None = None

    class Config:
        frozen = True


# =============================================================================
# CHARTS
# =============================================================================


class ChartMeasurement(BaseModel):
    """A child's own measurement placed on a percentile chart."""
    age_months: float
    value: float
    percentile: float | None = None

    class Config:
        frozen = True


class ChartSeries(BaseModel):
    """Percentile curves for one measurement type and sex."""
    measurement_type: MeasurementType
    sex: Sex
    unit: str
    data: list[ChartRow] = Field(default_factory=list)
    measurements: list[ChartMeasurement] = Field(default_factory=list)

    class Config:
        frozen = True


# =============================================================================
# VELOCITY
# =============================================================================


class VelocityDataPoint(BaseModel):
    """Change between two consecutive growth records."""
    from_date: datetime
    to_date: datetime
    days_between: int = Field(ge=1)

    # Per time unit: grams for weight, mm for height and head circumference
    weight_velocity: float | None = None
    height_velocity: float | None = None
    head_circumference_velocity: float | None = None

    weight_change: float | None = None
    height_change: float | None = None
    head_circumference_change: float | None = None

    class Config:
        frozen = True


class VelocitySummary(BaseModel):
    """Averages and net change across a record sequence."""
    average_weight_velocity: float | None = None
    average_height_velocity: float | None = None
    average_head_circumference_velocity: float | None = None

    total_weight_change: float | None = None
    total_height_change: float | None = None
    total_head_circumference_change: float | None = None

    class Config:
        frozen = True


class VelocityReport(BaseModel):
    """Growth velocity over a child's full record history."""
    time_unit: TimeUnit
    unit_description: str
    measurement_count: int
    velocity_data: list[VelocityDataPoint] = Field(default_factory=list)
    summary: VelocitySummary = Field(default_factory=VelocitySummary)

    class Config:
        frozen = True
