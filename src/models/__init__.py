"""
Data models for Sprout.
"""

from .growth import (
    REFERENCE_UNIT_DIVISORS,
    ChartMeasurement,
    ChartSeries,
    GrowthPercentiles,
    GrowthRecord,
    TimeUnit,
    VelocityDataPoint,
    VelocityReport,
    VelocitySummary,
    generate_id,
)

__all__ = [
    "REFERENCE_UNIT_DIVISORS",
    "ChartMeasurement",
    "ChartSeries",
    "GrowthPercentiles",
    "GrowthRecord",
    "TimeUnit",
    "VelocityDataPoint",
    "VelocityReport",
    "VelocitySummary",
    "generate_id",
]
