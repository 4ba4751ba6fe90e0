"""
Tests for time span resolution, chart scale thresholds, and duration formatting.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from ico_monitor.config import Settings
from ico_monitor.core.exceptions import ConfigurationError
from ico_monitor.statistics.models import TimeScale
from ico_monitor.statistics.timescale import (
    TimeBucketer,
    format_duration,
    get_chart_timescale,
    get_time_from_logs,
)

from conftest import INVESTOR_A, SALE_START, make_entry

HOUR = 3600
DAY = 86400


def test_chart_timescale_thresholds():
    assert get_chart_timescale(1, SALE_START)[0] == TimeScale.BLOCKS
    assert get_chart_timescale(11.9, SALE_START)[0] == TimeScale.BLOCKS
    assert get_chart_timescale(12, SALE_START)[0] == TimeScale.HOURS
    assert get_chart_timescale(95, SALE_START)[0] == TimeScale.HOURS
    assert get_chart_timescale(96, SALE_START)[0] == TimeScale.DAYS
    assert get_chart_timescale(24 * 30, SALE_START)[0] == TimeScale.DAYS


def test_chart_timescale_thresholds_from_settings():
    settings = Settings(hours_scale_min_hours=1, days_scale_min_hours=24)
    assert get_chart_timescale(2, SALE_START, settings)[0] == TimeScale.HOURS
    assert get_chart_timescale(30, SALE_START, settings)[0] == TimeScale.DAYS


def test_bucketers():
    entry = make_entry(INVESTOR_A, timestamp=SALE_START + DAY + 5 * HOUR, block_number=4_100_000)
    assert TimeBucketer(TimeScale.HOURS, SALE_START)(entry) == 30
    assert TimeBucketer(TimeScale.DAYS, SALE_START)(entry) == 2
    assert TimeBucketer(TimeScale.BLOCKS, SALE_START)(entry) == 4_100_000
    assert TimeBucketer(TimeScale.HOURS, SALE_START)(make_entry(INVESTOR_A, timestamp=SALE_START)) == 1


def test_format_duration():
    assert format_duration(timedelta(days=3, hours=4)) == "3 Days 4 Hours"
    assert format_duration(timedelta(hours=1, minutes=2, seconds=3)) == "1 Hours 2 Minutes 3 Seconds"
    assert format_duration(timedelta(0)) == "0 Seconds"


def test_time_from_logs_days_scale():
    logs = [
        make_entry(INVESTOR_A, timestamp=SALE_START),
        make_entry(INVESTOR_A, timestamp=SALE_START + 10 * DAY + 2 * HOUR),
    ]
    span = get_time_from_logs(logs)
    assert span.start_date == datetime.fromtimestamp(SALE_START, tz=timezone.utc)
    assert span.end_date - span.start_date == timedelta(days=10, hours=2)
    assert span.duration == "10 Days 2 Hours"
    assert span.duration_days == 10
    assert span.scale == TimeScale.DAYS
    assert span.to_time_bucket(logs[-1]) == 11


def test_time_from_logs_short_sale_uses_blocks():
    logs = [
        make_entry(INVESTOR_A, timestamp=SALE_START, block_number=10),
        make_entry(INVESTOR_A, timestamp=SALE_START + 2 * HOUR, block_number=500),
    ]
    span = get_time_from_logs(logs)
    assert span.scale == TimeScale.BLOCKS
    assert span.duration_days == 0
    assert span.to_time_bucket(logs[-1]) == 500


def test_time_from_logs_empty():
    with pytest.raises(ConfigurationError):
        get_time_from_logs([])
