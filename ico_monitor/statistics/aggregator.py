"""
Aggregator: single pass over every event stream, in log order.

Produces the export rows, per-bucket token volume and transaction counts,
per-investor positions, and grand totals. Each stream must already be
sorted by timestamp; streams are not re-sorted here (an out-of-order
stream is logged as a warning).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from ico_monitor.config.env import POLICY_RAISE, POLICY_SKIP
from ico_monitor.core.exceptions import DataQualityError
from ico_monitor.ico_logging import get_logger
from ico_monitor.statistics.extractor import EventRecordExtractor
from ico_monitor.statistics.models import InvestorBook, RawLogEntry

logger = get_logger(__name__)


@dataclass
class AggregationResult:
    senders: InvestorBook
    total_currency: float = 0.0
    tokens_issued: float = 0.0
    transactions_count: int = 0
    skipped_records: int = 0
    csv_rows: list[tuple[str, float, float, int, int]] = field(default_factory=list)
    tokens_by_bucket: dict[int, float] = field(default_factory=dict)
    transactions_by_bucket: dict[int, int] = field(default_factory=dict)


def aggregate_events(
    extractors: Mapping[str, EventRecordExtractor],
    all_logs: Mapping[str, Sequence[RawLogEntry]],
    investors: InvestorBook,
    to_time_bucket: Callable[[Any], int],
    invalid_record_policy: str = POLICY_RAISE,
) -> AggregationResult:
    """
    Fold all log entries into totals, investor positions and bucket series.

    Only the counting event contributes to transaction counts, once per
    distinct transaction hash (consecutive entries of one transaction count
    once). Entries with neither tokens nor currency are exported but do not
    touch investors or totals.
    """
    result = AggregationResult(senders=investors)

    for event_name, entries in all_logs.items():
        extractor = extractors[event_name]
        counts_transactions = extractor.schema.count_transactions
        prev_tx_hash = None
        prev_timestamp = None
        unsorted_logged = False

        for index, entry in enumerate(entries):
            try:
                record = extractor.extract(entry, index=index)
            except DataQualityError as e:
                if invalid_record_policy != POLICY_SKIP:
                    raise
                result.skipped_records += 1
                logger.warning(
                    "record_skipped_invalid",
                    event_name=event_name,
                    index=index,
                    transaction_hash=entry.transaction_hash,
                    error=str(e),
                )
                continue

            if prev_timestamp is not None and record.timestamp < prev_timestamp and not unsorted_logged:
                logger.warning("log_stream_unsorted", event_name=event_name, index=index)
                unsorted_logged = True
            prev_timestamp = record.timestamp

            result.csv_rows.append(record.as_csv_row())
            time_bucket = to_time_bucket(record)

            if counts_transactions and record.transaction_hash != prev_tx_hash:
                result.transactions_by_bucket[time_bucket] = result.transactions_by_bucket.get(time_bucket, 0) + 1
                prev_tx_hash = record.transaction_hash
                result.transactions_count += 1

            # token-less entries would only add empty points to the chart
            if record.token_amount:
                result.tokens_by_bucket[time_bucket] = (
                    result.tokens_by_bucket.get(time_bucket, 0.0) + record.token_amount
                )

            if record.token_amount > 0 or record.currency_amount > 0:
                investors.upsert(record.investor, record.token_amount, record.currency_amount)
                result.total_currency += record.currency_amount
                result.tokens_issued += record.token_amount

    logger.debug(
        "aggregation_done",
        events=list(all_logs),
        records=len(result.csv_rows),
        skipped=result.skipped_records,
        investors=len(investors),
        transactions=result.transactions_count,
    )
    return result
