"""
Data models for token sale statistics.

Responsibilities:
- Describe per-event argument schemas (EventSchema) and the sale config (IcoConfig).
- Hold raw node-provided log entries and the normalized records derived from them.
- Accumulate investor positions through a single mutation entry point (InvestorBook.upsert).
- Define the report structure returned by the statistics pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterator, Mapping, Union

# Ether derivation: called with the un-scaled token amount, returns wei
EtherDerivation = Callable[[Union[int, float]], Any]


class EtherSource(str, Enum):
    """Where the currency amount of a log entry comes from."""

    NATIVE = "native"  # hex-encoded native transfer value of the entry
    FIELD = "field"  # named event argument
    DERIVED = "derived"  # function of the un-scaled token amount


class TimeScale(str, Enum):
    """Chart bucket granularity."""

    HOURS = "hours"
    DAYS = "days"
    BLOCKS = "blocks"


@dataclass(frozen=True)
class EventSchema:
    """
    Argument field names for one event type.

    tokens is None for token-less sales. ether is None (native value),
    a field name, or a derivation function of the un-scaled token amount.
    """

    sender: str
    tokens: str | None = None
    ether: str | EtherDerivation | None = None
    count_transactions: bool = False

    @property
    def ether_source(self) -> EtherSource:
        if self.ether is None:
            return EtherSource.NATIVE
        if callable(self.ether):
            return EtherSource.DERIVED
        return EtherSource.FIELD


@dataclass(frozen=True)
class IcoConfig:
    """Sale configuration: token decimals and event schemas keyed by event name."""

    events: Mapping[str, EventSchema]
    decimals: str | int | float | None = None
    name: str | None = None

    def counting_events(self) -> list[str]:
        """Names of events flagged with count_transactions, in config order."""
        return [name for name, schema in self.events.items() if schema.count_transactions]


@dataclass(frozen=True)
class RawLogEntry:
    """
    One decoded event log as returned by the node.

    args holds the named event arguments. value is the hex-encoded native
    currency amount of the transaction (used by value-only events).
    """

    args: Mapping[str, Any]
    timestamp: int
    block_number: int
    transaction_hash: str
    value: str | None = None

    @classmethod
    def from_dict(cls, item: Mapping[str, Any]) -> "RawLogEntry":
        """Build from a node-style log dict (camelCase keys)."""
        return cls(
            args=dict(item.get("args") or {}),
            timestamp=int(item["timestamp"]),
            block_number=int(item["blockNumber"]),
            transaction_hash=str(item["transactionHash"]),
            value=item.get("value"),
        )


@dataclass(frozen=True)
class NormalizedRecord:
    """Investor, scaled token and currency amounts, and position of one log entry."""

    investor: str
    token_amount: float
    currency_amount: float
    timestamp: int
    block_number: int
    transaction_hash: str

    def as_csv_row(self) -> tuple[str, float, float, int, int]:
        return (self.investor, self.token_amount, self.currency_amount, self.timestamp, self.block_number)


@dataclass
class InvestorPosition:
    tokens: float = 0.0
    currency: float = 0.0


class InvestorBook:
    """
    Per-investor token and currency totals.

    upsert() is the only mutation: first sighting creates the position,
    later sightings add to it.
    """

    def __init__(self) -> None:
        self._positions: dict[str, InvestorPosition] = {}

    def upsert(self, investor: str, tokens: float, currency: float) -> InvestorPosition:
        position = self._positions.get(investor)
        if position is None:
            position = InvestorPosition(tokens=tokens, currency=currency)
            self._positions[investor] = position
        else:
            position.tokens += tokens
            position.currency += currency
        return position

    def __contains__(self, investor: object) -> bool:
        return investor in self._positions

    def __getitem__(self, investor: str) -> InvestorPosition:
        return self._positions[investor]

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def items(self) -> Iterator[tuple[str, InvestorPosition]]:
        return iter(self._positions.items())

    def total_tokens(self) -> float:
        return sum(p.tokens for p in self._positions.values())

    def total_currency(self) -> float:
        return sum(p.currency for p in self._positions.values())

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {k: {"tokens": p.tokens, "currency": p.currency} for k, p in self._positions.items()}


@dataclass
class TimeSpan:
    """Sale time span and the bucket function derived from it."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    duration: str = ""
    duration_days: int = 0
    scale: TimeScale = TimeScale.BLOCKS
    to_time_bucket: Callable[[Any], int] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "duration": self.duration,
            "duration_days": self.duration_days,
            "scale": self.scale.value,
        }


@dataclass
class MoneyStats:
    total_currency: float = 0.0
    tokens_issued: float = 0.0


@dataclass
class GeneralStats:
    transactions_count: int = 0
    gini_index: float | None = None


@dataclass
class InvestorStats:
    senders: InvestorBook = field(default_factory=InvestorBook)
    sorted_by_ticket: list[dict[str, Any]] = field(default_factory=list)
    sorted_by_currency: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ChartStats:
    transactions_count: list[dict[str, Any]] = field(default_factory=list)
    tokens_count: list[dict[str, Any]] = field(default_factory=list)
    token_holders: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class StatisticsReport:
    time: TimeSpan = field(default_factory=TimeSpan)
    money: MoneyStats = field(default_factory=MoneyStats)
    general: GeneralStats = field(default_factory=GeneralStats)
    investors: InvestorStats = field(default_factory=InvestorStats)
    charts: ChartStats = field(default_factory=ChartStats)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable view of the report (bucket function omitted)."""
        return {
            "time": self.time.to_dict(),
            "money": {
                "total_currency": self.money.total_currency,
                "tokens_issued": self.money.tokens_issued,
            },
            "general": {
                "transactions_count": self.general.transactions_count,
                "gini_index": self.general.gini_index,
            },
            "investors": {
                "senders": self.investors.senders.to_dict(),
                "sorted_by_ticket": list(self.investors.sorted_by_ticket),
                "sorted_by_currency": list(self.investors.sorted_by_currency),
            },
            "charts": {
                "transactions_count": list(self.charts.transactions_count),
                "tokens_count": list(self.charts.tokens_count),
                "token_holders": list(self.charts.token_holders),
            },
        }
