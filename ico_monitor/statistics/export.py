"""
CSV export of the flat per-entry record list.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Sequence

CSV_HEADER = ("investor", "tokens", "currency", "timestamp", "block_number")


def write_csv(rows: Iterable[Sequence], path: Path) -> int:
    """Write export rows with a header; returns the number of data rows."""
    count = 0
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for row in rows:
            writer.writerow(row)
            count += 1
    return count
