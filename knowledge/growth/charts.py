"""
Percentile curves for growth charts.

Each row holds the measurement value (kg or cm) at the standard
percentile lines for one whole month of age.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from .lms import NormalFunction, normal_quantile, round_half_up, value_from_lms_z
from .who_2006 import MAX_AGE_MONTHS, MeasurementType, Sex, get_lms_params

STANDARD_PERCENTILES: tuple[int, ...] = (1, 3, 5, 10, 15, 25, 50, 75, 85, 90, 95, 97, 99)


@dataclass(frozen=True)
class ChartRow:
    """Percentile curve values at one age."""
    age_months: int
    p1: float
    p3: float
    p5: float
    p10: float
    p15: float
    p25: float
    p50: float
    p75: float
    p85: float
    p90: float
    p95: float
    p97: float
    p99: float

    def value_at(self, percentile: int) -> float:
        """Curve value for one of the standard percentiles."""
        if percentile not in STANDARD_PERCENTILES:
            raise ValueError(f"No curve for the {percentile}th percentile")
        return getattr(self, f"p{percentile}")

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def generate_percentile_chart_data(
    measurement_type: MeasurementType,
    sex: Sex,
    start_month: int = 0,
    end_month: int = MAX_AGE_MONTHS,
    quantile: NormalFunction = normal_quantile,
) -> list[ChartRow]:
    """
    Generate percentile curve rows for every whole month in a range.

    Args:
        measurement_type: weight, height or head_circumference
        sex: male or female
        start_month: First month (inclusive)
        end_month: Last month (inclusive)
        quantile: Inverse standard normal CDF to use

    Returns:
        One ChartRow per month, values rounded to 2 decimals. Months with
        no LMS parameters are skipped.
    """
    z_scores = {
        p: 0.0 if p == 50 else quantile(p / 100)
        for p in STANDARD_PERCENTILES
    }

    rows = []
    for month in range(int(start_month), int(end_month) + 1):
        lms = get_lms_params(measurement_type, sex, month)
        if lms is None:
            continue

        rows.append(ChartRow(
            age_months=month,
            **{
                f"p{p}": round_half_up(value_from_lms_z(z, lms), 2)
                for p, z in z_scores.items()
            },
        ))

    return rows
