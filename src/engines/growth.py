"""
Growth percentile engine.

Converts recorded measurements (grams, millimeters) into WHO percentiles
and Z-scores, builds percentile charts, and reports growth velocity.
Every method is a pure function of its arguments, the engine settings and
the reference tables.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable

from knowledge.growth import (
    NORMAL_BACKENDS,
    ChartRow,
    MeasurementType,
    PercentileResult,
    Sex,
    as_utc,
    calculate_age_in_months,
    calculate_percentile,
    generate_percentile_chart_data,
    round_half_up,
)
from knowledge.growth.who_2006 import MAX_AGE_MONTHS
from src.config import GrowthSettings, UnknownSexPolicy
from src.models import (
    REFERENCE_UNIT_DIVISORS,
    ChartMeasurement,
    ChartSeries,
    GrowthPercentiles,
    GrowthRecord,
    TimeUnit,
    VelocityReport,
)

from .velocity import calculate_growth_velocity

logger = logging.getLogger(__name__)


class InvalidSexError(ValueError):
    """Sex value is neither male nor female and the policy rejects it."""


# Prefix of the GrowthPercentiles fields for each measurement type
_RESULT_FIELDS = {
    MeasurementType.WEIGHT: "weight",
    MeasurementType.HEIGHT: "height",
    MeasurementType.HEAD_CIRCUMFERENCE: "head",
}


class GrowthEngine:
    """
    Calculates growth percentiles, charts and velocity.

    The engine holds only its settings, so one instance can be shared
    freely between threads.
    """

    def __init__(self, settings: GrowthSettings | None = None):
        self.settings = settings or GrowthSettings.from_env()
        self._cdf, self._quantile = NORMAL_BACKENDS[self.settings.normal_backend]

    def normalize_sex(self, sex: Sex | str | None) -> Sex:
        """
        Map a raw sex value onto the reference tables.

        Only the exact strings "male" and "female" match. Anything else,
        including "Female" or " male", follows the unknown_sex policy:
        treated as male, or rejected with InvalidSexError.
        """
        if isinstance(sex, Sex):
            return sex
        if sex in (Sex.MALE.value, Sex.FEMALE.value):
            return Sex(sex)

        if self.settings.unknown_sex == UnknownSexPolicy.REJECT:
            raise InvalidSexError(f"Unsupported sex value: {sex!r}")

        logger.warning("Unrecognised sex %r; using male reference tables", sex)
        return Sex.MALE

    def calculate_percentile(
        self,
        measurement_type: MeasurementType,
        value: float | None,
        age_months: float,
        sex: Sex | str,
    ) -> PercentileResult | None:
        """
        Calculate the percentile of one measurement in reference units.

        Args:
            measurement_type: weight, height or head_circumference
            value: Weight in kg, or length/head circumference in cm
            age_months: Age in months (may be fractional)
            sex: male or female

        Returns:
            PercentileResult, or None if it cannot be computed
        """
        return calculate_percentile(
            measurement_type, value, age_months, self.normalize_sex(sex), self._cdf
        )

    def calculate_growth_percentiles(
        self,
        weight_g: float | None,
        height_mm: float | None,
        head_circumference_mm: float | None,
        date_of_birth: date | datetime,
        measurement_date: date | datetime,
        sex: Sex | str | None,
    ) -> GrowthPercentiles:
        """
        Calculate all percentiles for a growth entry.

        Args:
            weight_g: Weight in grams (converted to kg)
            height_mm: Length/height in mm (converted to cm)
            head_circumference_mm: Head circumference in mm (converted to cm)
            date_of_birth: Child's date of birth
            measurement_date: Date the measurement was taken
            sex: Child's sex; unrecognised values follow the unknown_sex policy

        Returns:
            GrowthPercentiles; a missing or non-positive measurement leaves
            its percentile and Z-score as None
        """
        age_months = calculate_age_in_months(date_of_birth, measurement_date)
        normalized_sex = self.normalize_sex(sex)

        recorded = {
            MeasurementType.WEIGHT: weight_g,
            MeasurementType.HEIGHT: height_mm,
            MeasurementType.HEAD_CIRCUMFERENCE: head_circumference_mm,
        }

        fields: dict[str, float | None] = {}
        for measurement_type, value in recorded.items():
            if value is None or value <= 0:
                continue
            result = calculate_percentile(
                measurement_type,
                value / REFERENCE_UNIT_DIVISORS[measurement_type],
                age_months,
                normalized_sex,
                self._cdf,
            )
            if result is None:
                continue
            prefix = _RESULT_FIELDS[measurement_type]
            fields[f"{prefix}_percentile"] = result.percentile
            fields[f"{prefix}_z"] = result.z_score

        return GrowthPercentiles(**fields)

    def percentiles_for_record(
        self,
        record: GrowthRecord,
        sex: Sex | str | None,
        date_of_birth: date | datetime | None = None,
    ) -> GrowthPercentiles:
        """Calculate percentiles for a GrowthRecord."""
        birth = date_of_birth or record.date_of_birth
        if birth is None:
            raise ValueError(f"Growth record {record.id} has no date of birth")
        return self.calculate_growth_percentiles(
            record.weight_g,
            record.height_mm,
            record.head_circumference_mm,
            birth,
            record.timestamp,
            sex,
        )

    def generate_percentile_chart_data(
        self,
        measurement_type: MeasurementType,
        sex: Sex | str,
        start_month: int = 0,
        end_month: int = MAX_AGE_MONTHS,
    ) -> list[ChartRow]:
        """Percentile curve rows for each whole month in the range."""
        return generate_percentile_chart_data(
            measurement_type,
            self.normalize_sex(sex),
            start_month,
            end_month,
            self._quantile,
        )

    def build_chart_series(
        self,
        measurement_type: MeasurementType,
        sex: Sex | str,
        records: Iterable[GrowthRecord] = (),
        date_of_birth: date | datetime | None = None,
        start_month: int = 0,
        end_month: int = MAX_AGE_MONTHS,
    ) -> ChartSeries:
        """
        Build a percentile chart with a child's measurements plotted on it.

        Records without the measurement, or without a date of birth, are
        left off the chart.
        """
        measurement_type = MeasurementType(measurement_type)
        normalized_sex = self.normalize_sex(sex)

        measurements = []
        for record in sorted(records, key=lambda r: as_utc(r.timestamp)):
            value = record.reference_value(measurement_type)
            birth = date_of_birth or record.date_of_birth
            if value is None or birth is None:
                continue
            age_months = calculate_age_in_months(birth, record.timestamp)
            result = calculate_percentile(
                measurement_type, value, age_months, normalized_sex, self._cdf
            )
            measurements.append(ChartMeasurement(
                age_months=round_half_up(age_months, 1),
                value=round_half_up(value, 2),
                percentile=result.percentile if result else None,
            ))

        return ChartSeries(
            measurement_type=measurement_type,
            sex=normalized_sex,
            unit=measurement_type.unit,
            data=self.generate_percentile_chart_data(
                measurement_type, normalized_sex, start_month, end_month
            ),
            measurements=measurements,
        )

    def calculate_growth_velocity(
        self,
        records: Iterable[GrowthRecord],
        time_unit: TimeUnit | str | None = None,
    ) -> VelocityReport:
        """Growth velocity across records; defaults to the configured unit."""
        return calculate_growth_velocity(
            records, TimeUnit(time_unit) if time_unit else self.settings.velocity_unit
        )
