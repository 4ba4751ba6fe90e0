"""
Environment variable loading for ICO Monitor.

- ICO_DEFAULT_DECIMALS: token decimals when the sale config has none (default: 18)
- ICO_HOURS_SCALE_MIN_HOURS: shortest sale charted per hour (default: 12)
- ICO_DAYS_SCALE_MIN_HOURS: shortest sale charted per day (default: 96)
- ICO_INVALID_RECORD_POLICY: raise | skip (default: raise)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is ico_monitor/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_DECIMALS = 18
DEFAULT_HOURS_SCALE_MIN_HOURS = 12.0
DEFAULT_DAYS_SCALE_MIN_HOURS = 96.0

POLICY_RAISE = "raise"
POLICY_SKIP = "skip"
INVALID_RECORD_POLICIES = (POLICY_RAISE, POLICY_SKIP)


def load_ico_env() -> None:
    """Load .env from project root. Does not override variables already set."""
    load_dotenv(_ENV_PATH, override=False)


def _env_number(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_default_decimals() -> int:
    load_ico_env()
    return int(_env_number("ICO_DEFAULT_DECIMALS", DEFAULT_DECIMALS))


def get_scale_thresholds() -> tuple[float, float]:
    """Return (hours_scale_min_hours, days_scale_min_hours)."""
    load_ico_env()
    return (
        _env_number("ICO_HOURS_SCALE_MIN_HOURS", DEFAULT_HOURS_SCALE_MIN_HOURS),
        _env_number("ICO_DAYS_SCALE_MIN_HOURS", DEFAULT_DAYS_SCALE_MIN_HOURS),
    )


def get_invalid_record_policy() -> str:
    """
    Return ICO_INVALID_RECORD_POLICY: raise | skip.
    Unknown values fall back to raise.
    """
    load_ico_env()
    raw = (os.getenv("ICO_INVALID_RECORD_POLICY") or POLICY_RAISE).strip().lower()
    return raw if raw in INVALID_RECORD_POLICIES else POLICY_RAISE
