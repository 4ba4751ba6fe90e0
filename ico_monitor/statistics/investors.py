"""
Investor rankings and token holder concentration.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from ico_monitor.statistics.models import InvestorBook

HOLDER_PERCENTILES = range(10, 101, 10)


def sort_investors_by_ticket(investors: InvestorBook) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """
    Rank investors descending by tokens and by currency contributed.

    Returns (sorted_by_ticket, sorted_by_currency). Equal values keep
    first-seen order.
    """
    by_ticket = [{"address": address, "value": p.tokens} for address, p in investors.items()]
    by_currency = [
        {"address": address, "value": p.currency, "tokens": p.tokens} for address, p in investors.items()
    ]
    by_ticket.sort(key=lambda item: item["value"], reverse=True)
    by_currency.sort(key=lambda item: item["value"], reverse=True)
    return by_ticket, by_currency


def token_holders_percentage(total_tokens: float, sorted_by_ticket: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Share of all tokens held by the top 10%, 20%, ... 100% of investors.

    Each point: {"name": "10%", "amount": percent_of_tokens}.
    """
    count = len(sorted_by_ticket)
    if total_tokens <= 0 or count == 0:
        return []
    points = []
    for percentile in HOLDER_PERCENTILES:
        top = max(1, math.ceil(count * percentile / 100))
        held = sum(item["value"] for item in sorted_by_ticket[:top])
        points.append({"name": f"{percentile}%", "amount": held * 100 / total_tokens})
    return points
