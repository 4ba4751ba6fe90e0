"""
Event record extractor: raw log entry + event schema -> NormalizedRecord.

Token amount is the token argument scaled by 10^decimals (0 for token-less
events). Currency amount comes from, in order: a derivation function of the
un-scaled token amount, a named ether argument, or the hex native value;
each is scaled by 10^18. Malformed numbers raise DataQualityError.
"""

from __future__ import annotations

import math
import numbers
from decimal import Decimal
from typing import Any, Callable, Mapping, Sequence

from ico_monitor.core.exceptions import ConfigurationError, DataQualityError
from ico_monitor.statistics.models import (
    EtherSource,
    EventSchema,
    IcoConfig,
    NormalizedRecord,
    RawLogEntry,
)

WEI_PER_ETHER = 10**18


def resolve_decimals(decimals: Any, default: int) -> int | float:
    """Sale decimals as a number; default when unset or non-numeric."""
    if decimals is None or isinstance(decimals, bool):
        return default
    try:
        value = float(decimals)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value):
        return default
    return int(value) if value.is_integer() else value


def to_number(value: Any, what: str) -> int | float:
    """
    Parse an event argument as int (exact for uint256 values) or float.

    Integral values (numpy ints included) stay exact; Decimal and other reals
    become floats. Raises ValueError for bools, non-numeric strings, and NaN/inf.
    """
    if isinstance(value, bool):
        raise ValueError(f"{what} is a boolean: {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, (numbers.Real, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise ValueError(f"{what} is not numeric: {value!r}") from None
    else:
        raise ValueError(f"{what} has unsupported type {type(value).__name__}")
    if not math.isfinite(number):
        raise ValueError(f"{what} is not finite: {value!r}")
    return number


class EventRecordExtractor:
    """Normalizes the log entries of one event type."""

    def __init__(self, event_name: str, schema: EventSchema, decimals: int | float) -> None:
        self.event_name = event_name
        self.schema = schema
        self.precision = 10**decimals
        # resolved once per event type, not per entry
        self._currency: Callable[[RawLogEntry, int | float], int | float] = {
            EtherSource.DERIVED: self._derived_currency,
            EtherSource.FIELD: self._field_currency,
            EtherSource.NATIVE: self._native_currency,
        }[schema.ether_source]

    def extract(self, entry: RawLogEntry, index: int | None = None) -> NormalizedRecord:
        try:
            investor = entry.args[self.schema.sender]
            raw_tokens = self._raw_tokens(entry)
            currency = self._currency(entry, raw_tokens)
            token_amount = raw_tokens / self.precision
            currency_amount = currency / WEI_PER_ETHER
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            raise DataQualityError(
                f"Cannot extract record: {e}",
                event_name=self.event_name,
                index=index,
                transaction_hash=entry.transaction_hash,
            ) from e
        return NormalizedRecord(
            investor=str(investor),
            token_amount=token_amount,
            currency_amount=currency_amount,
            timestamp=entry.timestamp,
            block_number=entry.block_number,
            transaction_hash=entry.transaction_hash,
        )

    def _raw_tokens(self, entry: RawLogEntry) -> int | float:
        # token-less sales (no tokens argument) issue nothing
        if self.schema.tokens is None:
            return 0
        return to_number(entry.args[self.schema.tokens], f"tokens argument '{self.schema.tokens}'")

    def _derived_currency(self, entry: RawLogEntry, raw_tokens: int | float) -> int | float:
        return to_number(self.schema.ether(raw_tokens), "derived ether")

    def _field_currency(self, entry: RawLogEntry, raw_tokens: int | float) -> int | float:
        return to_number(entry.args[self.schema.ether], f"ether argument '{self.schema.ether}'")

    def _native_currency(self, entry: RawLogEntry, raw_tokens: int | float) -> int:
        if entry.value is None:
            raise ValueError("native value is missing")
        return int(str(entry.value), 16)


def build_extractors(
    ico_config: IcoConfig,
    all_logs: Mapping[str, Sequence[RawLogEntry]],
    default_decimals: int,
) -> dict[str, EventRecordExtractor]:
    """One extractor per logged event type, in log order. Every logged event needs a schema."""
    decimals = resolve_decimals(ico_config.decimals, default_decimals)
    extractors = {}
    for event_name in all_logs:
        schema = ico_config.events.get(event_name)
        if schema is None:
            raise ConfigurationError(f"Logs contain event '{event_name}' which is not in the sale config")
        extractors[event_name] = EventRecordExtractor(event_name, schema, decimals)
    return extractors
