"""
Gini index of token holdings.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def gini_index(ordered_values: Sequence[float]) -> float:
    """
    Gini coefficient of values already sorted ascending.

    0 means equal holdings; n holders with a single non-zero one give (n - 1) / n.
    Empty or all-zero input gives 0.
    """
    values = np.asarray(ordered_values, dtype=float)
    n = values.shape[0]
    total = values.sum()
    if n == 0 or total == 0:
        return 0.0
    index = np.arange(1, n + 1)
    return float(np.sum((2 * index - n - 1) * values) / (n * total))
