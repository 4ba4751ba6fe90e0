"""
Application settings.

Typed, immutable view over the environment (see config.env) passed
explicitly into the statistics pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass

from ico_monitor.config.env import (
    DEFAULT_DAYS_SCALE_MIN_HOURS,
    DEFAULT_DECIMALS,
    DEFAULT_HOURS_SCALE_MIN_HOURS,
    POLICY_RAISE,
    get_default_decimals,
    get_invalid_record_policy,
    get_scale_thresholds,
)


@dataclass(frozen=True)
class Settings:
    default_decimals: int = DEFAULT_DECIMALS
    hours_scale_min_hours: float = DEFAULT_HOURS_SCALE_MIN_HOURS
    days_scale_min_hours: float = DEFAULT_DAYS_SCALE_MIN_HOURS
    invalid_record_policy: str = POLICY_RAISE


def get_settings() -> Settings:
    """Return settings read from the environment (and .env)."""
    hours_min, days_min = get_scale_thresholds()
    return Settings(
        default_decimals=get_default_decimals(),
        hours_scale_min_hours=hours_min,
        days_scale_min_hours=days_min,
        invalid_record_policy=get_invalid_record_policy(),
    )
