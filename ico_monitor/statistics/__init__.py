"""
Token sale statistics engine.

Modules: extractor, timescale, aggregator, charts, investors, gini, pipeline, export.
"""

from ico_monitor.statistics.models import EventSchema, IcoConfig, RawLogEntry, StatisticsReport
from ico_monitor.statistics.pipeline import get_statistics, init_statistics

__all__ = [
    "EventSchema",
    "IcoConfig",
    "RawLogEntry",
    "StatisticsReport",
    "get_statistics",
    "init_statistics",
]
