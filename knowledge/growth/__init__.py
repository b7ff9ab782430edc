"""
Growth chart calculations.
"""

from .age import DAYS_PER_MONTH, as_utc, calculate_age_in_months, elapsed_days
from .charts import STANDARD_PERCENTILES, ChartRow, generate_percentile_chart_data
from .lms import (
    NORMAL_BACKENDS,
    PercentileResult,
    calculate_percentile,
    interpret_percentile,
    normal_cdf,
    normal_quantile,
    percentile_from_z,
    round_half_up,
    value_from_lms_z,
    z_from_percentile,
    z_score_from_lms,
)
from .who_2006 import (
    LMSParams,
    MeasurementType,
    ReferenceRow,
    Sex,
    get_lms_params,
    get_reference_table,
)

__all__ = [
    "DAYS_PER_MONTH",
    "calculate_age_in_months",
    "as_utc",
    "elapsed_days",
    "STANDARD_PERCENTILES",
    "ChartRow",
    "generate_percentile_chart_data",
    "NORMAL_BACKENDS",
    "PercentileResult",
    "calculate_percentile",
    "interpret_percentile",
    "normal_cdf",
    "normal_quantile",
    "percentile_from_z",
    "round_half_up",
    "value_from_lms_z",
    "z_from_percentile",
    "z_score_from_lms",
    "LMSParams",
    "MeasurementType",
    "ReferenceRow",
    "Sex",
    "get_lms_params",
    "get_reference_table",
]
