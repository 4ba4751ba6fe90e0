"""
Chart series: sparse bucket -> value maps to ordered {name, amount} lists.

Hour and day series are densified to one point per bucket 1..max(key),
missing buckets filled with 0. Buckets before the sale start (key < 1, from
streams that begin before the counting event) are folded into bucket 1.
Block series keep only observed blocks, in ascending order.
"""

from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from ico_monitor.ico_logging import get_logger
from ico_monitor.statistics.models import TimeScale

logger = get_logger(__name__)


def get_chart_data(time_scale: TimeScale, chart_data: Mapping[int, float]) -> list[dict[str, Any]]:
    if not chart_data:
        return []
    series = pd.Series(chart_data).sort_index()
    if time_scale != TimeScale.BLOCKS:
        before_start = series.index < 1
        if before_start.any():
            early_total = series[before_start].sum()
            logger.warning(
                "chart_bucket_before_start",
                scale=time_scale.value,
                buckets=series.index[before_start].tolist(),
                amount=early_total.item(),
            )
            series = series[~before_start]
            series.loc[1] = series.get(1, 0) + early_total
            series = series.sort_index()
        series = series.reindex(range(1, int(series.index.max()) + 1), fill_value=0)
    return [{"name": int(name), "amount": amount} for name, amount in zip(series.index.tolist(), series.tolist())]
