#!/usr/bin/env python3
"""
Compute token sale statistics from a sale config and its event logs.

Reads the sale config JSON and the logs JSON ({event_name: [entries]}),
writes the statistics report as JSON (stdout by default) and, optionally,
the per-entry export CSV.

Usage:
  python -m ico_monitor.tools.run_statistics --config sale.json --logs logs.json
  python -m ico_monitor.tools.run_statistics --config sale.json --logs logs.json \\
      --output report.json --csv investors.csv
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ico_monitor.config import get_settings
from ico_monitor.config.loader import load_ico_config, load_logs
from ico_monitor.core.exceptions import IcoMonitorError
from ico_monitor.ico_logging import bind_sale, get_logger
from ico_monitor.statistics import get_statistics
from ico_monitor.statistics.export import write_csv

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Token sale statistics from event logs")
    parser.add_argument("--config", type=Path, required=True, help="Sale config JSON")
    parser.add_argument("--logs", type=Path, required=True, help="Event logs JSON, each stream sorted by timestamp")
    parser.add_argument("--output", type=Path, default=None, help="Report JSON path (default: stdout)")
    parser.add_argument("--csv", type=Path, default=None, help="Export CSV path")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> dict:
    ico_config = load_ico_config(args.config)
    sale_logger = bind_sale(ico_config.name or args.config.stem)
    all_logs = load_logs(args.logs)

    report, csv_rows = get_statistics(ico_config, all_logs, get_settings())
    report_dict = report.to_dict()

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json.dumps(report_dict, indent=2), encoding="utf-8")
        sale_logger.info("report_written", path=str(args.output))
    else:
        print(json.dumps(report_dict, indent=2))

    if args.csv:
        rows = write_csv(csv_rows, args.csv)
        sale_logger.info("csv_written", path=str(args.csv), rows=rows)
    return report_dict


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        run(args)
    except IcoMonitorError as e:
        logger.error("run_statistics_failed", error=str(e))
        print(f"[run_statistics] ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
