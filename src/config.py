"""
Engine settings.

Settings come from the environment unless built explicitly:

    SPROUT_UNKNOWN_SEX      male (default) or reject
    SPROUT_NORMAL_BACKEND   approximation (default) or scipy
    SPROUT_VELOCITY_UNIT    week (default) or day
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Literal

from pydantic import BaseModel

from src.models import TimeUnit


class UnknownSexPolicy(str, Enum):
    """What to do with a sex value other than male or female."""

    # Stored percentiles were computed this way; keep for compatibility
    MALE = "male"
    REJECT = "reject"


class GrowthSettings(BaseModel):
    """Configuration for the growth engine."""

    unknown_sex: UnknownSexPolicy = UnknownSexPolicy.MALE
    normal_backend: Literal["approximation", "scipy"] = "approximation"
    velocity_unit: TimeUnit = TimeUnit.WEEK

    class Config:
        frozen = True

    @classmethod
    def from_env(cls) -> GrowthSettings:
        """Build settings from SPROUT_* environment variables."""
        values = {
            "unknown_sex": os.environ.get("SPROUT_UNKNOWN_SEX"),
            "normal_backend": os.environ.get("SPROUT_NORMAL_BACKEND"),
            "velocity_unit": os.environ.get("SPROUT_VELOCITY_UNIT"),
        }
        return cls(**{
            key: value.strip().lower()
            for key, value in values.items()
            if value
        })
