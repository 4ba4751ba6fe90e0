"""
Statistics pipeline: sale config + event logs -> (StatisticsReport, export rows).

Single entrypoint for the CLI. Resolves the sale time span from the counting
event, aggregates every stream, then derives chart series, investor
rankings, token holder percentages and the Gini index.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from ico_monitor.config import Settings
from ico_monitor.core.exceptions import ConfigurationError
from ico_monitor.ico_logging import get_logger
from ico_monitor.statistics.aggregator import aggregate_events
from ico_monitor.statistics.charts import get_chart_data
from ico_monitor.statistics.extractor import build_extractors
from ico_monitor.statistics.gini import gini_index
from ico_monitor.statistics.investors import sort_investors_by_ticket, token_holders_percentage
from ico_monitor.statistics.models import IcoConfig, RawLogEntry, StatisticsReport
from ico_monitor.statistics.timescale import get_time_from_logs

logger = get_logger(__name__)


def init_statistics() -> StatisticsReport:
    return StatisticsReport()


def get_transaction_logs(
    ico_config: IcoConfig,
    all_logs: Mapping[str, Sequence[RawLogEntry]],
) -> tuple[str, Sequence[RawLogEntry]]:
    """Return (name, logs) of the single event marked with count_transactions."""
    counting = ico_config.counting_events()
    if not counting:
        raise ConfigurationError("You need to mark at least one event with 'countTransactions'")
    if len(counting) > 1:
        raise ConfigurationError(f"Only one event may be marked with 'countTransactions', got {counting}")
    event_name = counting[0]
    transaction_logs = all_logs.get(event_name)
    if not transaction_logs:
        raise ConfigurationError(f"No logs for event '{event_name}' marked with 'countTransactions'")
    return event_name, transaction_logs


def get_statistics(
    ico_config: IcoConfig,
    all_logs: Mapping[str, Sequence[RawLogEntry]],
    settings: Settings | None = None,
) -> tuple[StatisticsReport, list[tuple[str, float, float, int, int]]]:
    """
    Compute sale statistics from all_logs ({event_name: entries}).

    Each entries list must be sorted by timestamp. Raises ConfigurationError
    before any aggregation when the counting event is missing or has no logs.
    """
    settings = settings or Settings()
    stats_result = init_statistics()

    # time charts are scaled by the span of the event that defines investor transactions
    event_name, transaction_logs = get_transaction_logs(ico_config, all_logs)
    extractors = build_extractors(ico_config, all_logs, settings.default_decimals)

    stats_result.time = get_time_from_logs(transaction_logs, settings)
    logger.info(
        "statistics_block_range",
        sale=ico_config.name,
        counting_event=event_name,
        start_block=transaction_logs[0].block_number,
        end_block=transaction_logs[-1].block_number,
        scale=stats_result.time.scale.value,
    )

    aggregated = aggregate_events(
        extractors,
        all_logs,
        stats_result.investors.senders,
        stats_result.time.to_time_bucket,
        settings.invalid_record_policy,
    )

    stats_result.money.total_currency = aggregated.total_currency
    stats_result.money.tokens_issued = aggregated.tokens_issued
    stats_result.general.transactions_count = aggregated.transactions_count

    scale = stats_result.time.scale
    stats_result.charts.tokens_count = get_chart_data(scale, aggregated.tokens_by_bucket)
    stats_result.charts.transactions_count = get_chart_data(scale, aggregated.transactions_by_bucket)

    by_ticket, by_currency = sort_investors_by_ticket(aggregated.senders)
    stats_result.investors.sorted_by_ticket = by_ticket
    stats_result.investors.sorted_by_currency = by_currency

    stats_result.charts.token_holders = token_holders_percentage(stats_result.money.tokens_issued, by_ticket)

    if stats_result.money.tokens_issued > 0:
        # rankings are descending; gini expects ascending
        tokens = [investor["value"] for investor in by_ticket]
        stats_result.general.gini_index = gini_index(tokens[::-1])

    logger.info(
        "statistics_done",
        sale=ico_config.name,
        transactions=stats_result.general.transactions_count,
        investors=len(aggregated.senders),
        tokens_issued=stats_result.money.tokens_issued,
        total_currency=stats_result.money.total_currency,
        gini_index=stats_result.general.gini_index,
    )
    return stats_result, aggregated.csv_rows
