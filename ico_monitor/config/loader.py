"""
Load sale configs and event logs from JSON files.

Sale config:
    {"name": "...", "decimals": "18",
     "events": {"TokenPurchase": {"args": {"sender": "purchaser", "tokens": "amount", "ether": "value"},
                                  "countTransactions": true}}}

"ether" is a field name, omitted (native transaction value), or
{"tokensPerEther": N} to derive currency from the un-scaled token amount.

Logs: {"TokenPurchase": [{"args": {...}, "timestamp": 1500000000, "blockNumber": 4000000,
                          "transactionHash": "0x..", "value": "0x0"}, ...]}
Key order is the event processing order.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ico_monitor.core.exceptions import ConfigurationError, DataQualityError
from ico_monitor.ico_logging import get_logger
from ico_monitor.statistics.models import EtherDerivation, EventSchema, IcoConfig, RawLogEntry

logger = get_logger(__name__)


class EtherRate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tokens_per_ether: float = Field(alias="tokensPerEther", gt=0)


class EventArgsModel(BaseModel):
    sender: str
    tokens: str | None = None
    ether: Union[str, EtherRate, None] = None


class EventConfigModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    args: EventArgsModel
    count_transactions: bool = Field(False, alias="countTransactions")


class IcoConfigModel(BaseModel):
    name: str | None = None
    decimals: Union[str, int, float, None] = None
    events: dict[str, EventConfigModel]

    def to_ico_config(self) -> IcoConfig:
        events = {}
        for event_name, event in self.events.items():
            ether = event.args.ether
            if isinstance(ether, EtherRate):
                ether = _per_ether(ether.tokens_per_ether)
            events[event_name] = EventSchema(
                sender=event.args.sender,
                tokens=event.args.tokens,
                ether=ether,
                count_transactions=event.count_transactions,
            )
        return IcoConfig(events=events, decimals=self.decimals, name=self.name)


def _per_ether(tokens_per_ether: float) -> EtherDerivation:
    def derive(raw_tokens):
        return raw_tokens / tokens_per_ether

    return derive


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e


def parse_ico_config(data: Any) -> IcoConfig:
    try:
        model = IcoConfigModel.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid sale config: {e}") from e
    return model.to_ico_config()


def load_ico_config(path: Path) -> IcoConfig:
    """Load and validate a sale config JSON file."""
    config = parse_ico_config(_read_json(path))
    logger.info("ico_config_loaded", path=str(path), sale=config.name, events=list(config.events))
    return config


def parse_logs(data: Any) -> dict[str, list[RawLogEntry]]:
    if not isinstance(data, dict):
        raise ConfigurationError("Logs must be a JSON object mapping event name to a list of entries")
    all_logs: dict[str, list[RawLogEntry]] = {}
    for event_name, items in data.items():
        if not isinstance(items, list):
            raise ConfigurationError(f"Logs for event '{event_name}' must be a list")
        entries = []
        for index, item in enumerate(items):
            try:
                entries.append(RawLogEntry.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise DataQualityError(
                    f"Malformed log entry: {e!r}",
                    event_name=event_name,
                    index=index,
                    transaction_hash=item.get("transactionHash") if isinstance(item, dict) else None,
                ) from e
        all_logs[event_name] = entries
    return all_logs


def load_logs(path: Path) -> dict[str, list[RawLogEntry]]:
    """Load event logs JSON file; each stream must already be sorted by timestamp."""
    all_logs = parse_logs(_read_json(path))
    logger.info(
        "logs_loaded",
        path=str(path),
        entries={name: len(entries) for name, entries in all_logs.items()},
    )
    return all_logs
