"""
Growth calculation engines.
"""

from .growth import GrowthEngine, InvalidSexError
from .velocity import (
    calculate_growth_velocity,
    calculate_velocity_between,
    calculate_velocity_summary,
    days_between,
)

__all__ = [
    "GrowthEngine",
    "InvalidSexError",
    "calculate_growth_velocity",
    "calculate_velocity_between",
    "calculate_velocity_summary",
    "days_between",
]
