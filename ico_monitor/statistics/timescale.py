"""
Time span and chart time scale of a sale.

The span is taken from the first and last entries of the counting event's
log stream (assumed sorted by timestamp). Its length picks the chart scale:
block numbers for short sales, then hours, then days. Hour and day bucket
keys are 1-based offsets from the sale start.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

import pandas as pd

from ico_monitor.config import Settings
from ico_monitor.core.exceptions import ConfigurationError
from ico_monitor.statistics.models import RawLogEntry, TimeScale, TimeSpan

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


class TimeBucketer:
    """Maps a record (anything with timestamp and block_number) to its bucket key."""

    def __init__(self, scale: TimeScale, start_timestamp: int) -> None:
        self.scale = scale
        self.start_timestamp = start_timestamp

    def __call__(self, record: Any) -> int:
        if self.scale == TimeScale.BLOCKS:
            return int(record.block_number)
        width = SECONDS_PER_HOUR if self.scale == TimeScale.HOURS else SECONDS_PER_DAY
        return int((record.timestamp - self.start_timestamp) // width) + 1

    def __repr__(self) -> str:
        return f"TimeBucketer(scale={self.scale.value}, start_timestamp={self.start_timestamp})"


def get_chart_timescale(
    duration_hours: float,
    start_timestamp: int,
    settings: Settings | None = None,
) -> tuple[TimeScale, TimeBucketer]:
    settings = settings or Settings()
    if duration_hours < settings.hours_scale_min_hours:
        scale = TimeScale.BLOCKS
    elif duration_hours < settings.days_scale_min_hours:
        scale = TimeScale.HOURS
    else:
        scale = TimeScale.DAYS
    return scale, TimeBucketer(scale, start_timestamp)


def get_dates_duration(end_date: datetime, start_date: datetime) -> timedelta:
    return end_date - start_date


def format_duration(duration: timedelta) -> str:
    """Human-readable duration, e.g. '3 Days 4 Hours'."""
    components = pd.Timedelta(duration).components
    parts = [
        f"{amount} {label}"
        for amount, label in (
            (components.days, "Days"),
            (components.hours, "Hours"),
            (components.minutes, "Minutes"),
            (components.seconds, "Seconds"),
        )
        if amount > 0
    ]
    return " ".join(parts) or "0 Seconds"


def get_time_from_logs(transaction_logs: Sequence[RawLogEntry], settings: Settings | None = None) -> TimeSpan:
    if not transaction_logs:
        raise ConfigurationError("The event marked with 'countTransactions' has no log entries")
    start_timestamp = transaction_logs[0].timestamp
    end_timestamp = transaction_logs[-1].timestamp

    start_date = datetime.fromtimestamp(start_timestamp, tz=timezone.utc)
    end_date = datetime.fromtimestamp(end_timestamp, tz=timezone.utc)
    ico_duration = get_dates_duration(end_date, start_date)

    scale, to_time_bucket = get_chart_timescale(
        ico_duration.total_seconds() / SECONDS_PER_HOUR, start_timestamp, settings
    )
    return TimeSpan(
        start_date=start_date,
        end_date=end_date,
        duration=format_duration(ico_duration),
        duration_days=ico_duration.days,
        scale=scale,
        to_time_bucket=to_time_bucket,
    )
