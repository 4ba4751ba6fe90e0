"""
Pytest fixtures for ICO Monitor tests: sale configs and log entry builders.
"""

from __future__ import annotations

import pytest

from ico_monitor.statistics.models import EventSchema, IcoConfig, RawLogEntry

INVESTOR_A = "0x00000000000000000000000000000000000000a1"
INVESTOR_B = "0x00000000000000000000000000000000000000b2"
INVESTOR_C = "0x00000000000000000000000000000000000000c3"

SALE_START = 1_500_000_000


def make_entry(
    sender: str,
    amount=None,
    value=None,
    timestamp: int = SALE_START,
    block_number: int = 4_000_000,
    tx_hash: str = "0x01",
    native_value: str | None = None,
) -> RawLogEntry:
    """Build a TokenPurchase-style entry with purchaser/amount/value args."""
    args = {"purchaser": sender}
    if amount is not None:
        args["amount"] = amount
    if value is not None:
        args["value"] = value
    return RawLogEntry(
        args=args,
        timestamp=timestamp,
        block_number=block_number,
        transaction_hash=tx_hash,
        value=native_value,
    )


@pytest.fixture
def purchase_schema():
    return EventSchema(sender="purchaser", tokens="amount", ether="value", count_transactions=True)


@pytest.fixture
def ico_config(purchase_schema):
    return IcoConfig(events={"TokenPurchase": purchase_schema}, decimals="18", name="test-sale")


@pytest.fixture
def example_logs():
    """Three purchases: A 1 token, B 3 tokens, A 1 token, distinct transactions."""
    return {
        "TokenPurchase": [
            make_entry(INVESTOR_A, amount=10**18, value=10**17, timestamp=1000, block_number=100, tx_hash="0xa"),
            make_entry(INVESTOR_B, amount=3 * 10**18, value=3 * 10**17, timestamp=1000, block_number=100, tx_hash="0xb"),
            make_entry(INVESTOR_A, amount=10**18, value=10**17, timestamp=2000, block_number=105, tx_hash="0xc"),
        ]
    }
