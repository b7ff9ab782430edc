"""
LMS method transforms.

Reference: Cole TJ, Green PJ. Smoothing reference centile curves: the LMS
method and penalized likelihood. Stat Med 1992;11:1305-19.

The LMS method expresses growth as:
- L (lambda): Box-Cox power transformation
- M (mu): Median
- S (sigma): Coefficient of variation

Z-score = ((value/M)^L - 1) / (L * S)  when L ≠ 0
Z-score = ln(value/M) / S              when L = 0

Value   = M * (1 + L*S*Z)^(1/L)        when L ≠ 0
Value   = M * exp(S*Z)                 when L = 0

Percentile = Φ(Z-score) where Φ is the standard normal CDF
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from scipy import stats

from .who_2006 import LMSParams, MeasurementType, Sex, get_lms_params

# |L| below this is treated as L = 0
L_EPSILON = 0.001

_SQRT_2PI = math.sqrt(2 * math.pi)

# Abramowitz & Stegun 26.2.17 (absolute error < 7.5e-8)
_CDF_P = 0.2316419
# b5..b1, highest power first
_CDF_B = (1.330274429, -1.821255978, 1.781477937, -0.356563782, 0.319381530)

# Acklam's rational approximation to the normal quantile
_Q_A = (
    -3.969683028665376e1, 2.209460984245205e2, -2.759285104469687e2,
    1.383577518672690e2, -3.066479806614716e1, 2.506628277459239e0,
)
_Q_B = (
    -5.447609879822406e1, 1.615858368580409e2, -1.556989798598866e2,
    6.680131188771972e1, -1.328068155288572e1,
)
_Q_C = (
    -7.784894002430293e-3, -3.223964580411365e-1, -2.400758277161838e0,
    -2.549732539343734e0, 4.374664141464968e0, 2.938163982698783e0,
)
_Q_D = (
    7.784695709041462e-3, 3.224671290700398e-1, 2.445134137142996e0,
    3.754408661907416e0,
)
_Q_LOW = 0.02425
_Q_HIGH = 1 - _Q_LOW


@dataclass(frozen=True)
class PercentileResult:
    """Result of a percentile calculation."""
    value: float
    percentile: float
    z_score: float
    interpretation: str


def _horner(coefficients: tuple[float, ...], x: float) -> float:
    result = 0.0
    for c in coefficients:
        result = result * x + c
    return result


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to the given decimals with ties going up (2.5 -> 3, -2.5 -> -2)."""
    if not math.isfinite(value):
        return value
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def normal_cdf(z: float) -> float:
    """Standard normal CDF, Φ(z)."""
    x = abs(z)
    t = 1.0 / (1.0 + _CDF_P * x)
    poly = t * _horner(_CDF_B, t)
    upper = 1.0 - math.exp(-x * x / 2) / _SQRT_2PI * poly
    return upper if z >= 0 else 1.0 - upper


def normal_quantile(p: float) -> float:
    """
    Inverse standard normal CDF.

    Returns -inf for p <= 0 and +inf for p >= 1.
    """
    if p <= 0:
        return -math.inf
    if p >= 1:
        return math.inf
    if p == 0.5:
        return 0.0

    if p < _Q_LOW:
        # Lower tail
        q = math.sqrt(-2 * math.log(p))
        return _horner(_Q_C, q) / (_horner(_Q_D, q) * q + 1)
    if p <= _Q_HIGH:
        # Central region
        q = p - 0.5
        r = q * q
        return _horner(_Q_A, r) * q / (_horner(_Q_B, r) * r + 1)
    # Upper tail
    q = math.sqrt(-2 * math.log(1 - p))
    return -_horner(_Q_C, q) / (_horner(_Q_D, q) * q + 1)


def scipy_normal_cdf(z: float) -> float:
    return float(stats.norm.cdf(z))


def scipy_normal_quantile(p: float) -> float:
    return float(stats.norm.ppf(p))


NormalFunction = Callable[[float], float]

NORMAL_BACKENDS: dict[str, tuple[NormalFunction, NormalFunction]] = {
    "approximation": (normal_cdf, normal_quantile),
    "scipy": (scipy_normal_cdf, scipy_normal_quantile),
}


def z_score_from_lms(value: float, lms: LMSParams) -> float:
    """Calculate Z-score from a measurement and LMS parameters."""
    L, M, S = lms.L, lms.M, lms.S
    if abs(L) < L_EPSILON:
        return math.log(value / M) / S
    return (math.pow(value / M, L) - 1) / (L * S)


def value_from_lms_z(z: float, lms: LMSParams) -> float:
    """
    Calculate a measurement from a Z-score and LMS parameters.

    Z-scores beyond the range the Box-Cox transform can reach map to its
    limit (0 for L > 0, infinity for L < 0).
    """
    L, M, S = lms.L, lms.M, lms.S
    if abs(L) < L_EPSILON:
        return M * math.exp(S * z)
    base = 1 + L * S * z
    if base <= 0:
        return 0.0 if L > 0 else math.inf
    return M * math.pow(base, 1 / L)


def percentile_from_z(z: float, cdf: NormalFunction = normal_cdf) -> float:
    """Convert Z-score to a percentile in [0, 100], rounded to 1 decimal."""
    percentile = min(100.0, max(0.0, cdf(z) * 100))
    return round_half_up(percentile, 1)


def z_from_percentile(
    percentile: float,
    quantile: NormalFunction = normal_quantile,
) -> float:
    """Convert a percentile (0-100) to a Z-score."""
    return quantile(percentile / 100)


_MEASURE_NAMES = {
    MeasurementType.WEIGHT: "weight",
    MeasurementType.HEIGHT: "length",
    MeasurementType.HEAD_CIRCUMFERENCE: "head circumference",
}


def interpret_percentile(percentile: float, measure: str) -> str:
    """Interpret a growth percentile."""
    if percentile < 3:
        return f"Very low {measure} (<3rd percentile)"
    elif percentile < 10:
        return f"Low {measure} (3rd-10th percentile)"
    elif percentile < 25:
        return f"Low-normal {measure} (10th-25th percentile)"
    elif percentile <= 75:
        return f"Normal {measure} (25th-75th percentile)"
    elif percentile <= 90:
        return f"High-normal {measure} (75th-90th percentile)"
    elif percentile <= 97:
        return f"High {measure} (90th-97th percentile)"
    else:
        return f"Very high {measure} (>97th percentile)"


def calculate_percentile(
    measurement_type: MeasurementType,
    value: float | None,
    age_months: float,
    sex: Sex,
    cdf: NormalFunction = normal_cdf,
) -> PercentileResult | None:
    """
    Calculate the percentile of a measurement for an age and sex.

    Args:
        measurement_type: weight, height or head_circumference
        value: Measurement in reference units (kg or cm)
        age_months: Age in months (may be fractional)
        sex: male or female
        cdf: Standard normal CDF to use

    Returns:
        PercentileResult, or None when the value is missing or not
        positive, or no LMS parameters exist for the age
    """
    if value is None or value <= 0:
        return None

    lms = get_lms_params(measurement_type, sex, age_months)
    if lms is None:
        return None

    z = z_score_from_lms(value, lms)
    percentile = percentile_from_z(z, cdf)

    return PercentileResult(
        value=value,
        percentile=percentile,
        z_score=round_half_up(z, 2),
        interpretation=interpret_percentile(
            percentile, _MEASURE_NAMES[MeasurementType(measurement_type)]
        ),
    )
