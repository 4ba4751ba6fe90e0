"""
Tests for the event record extractor: token scaling, the three currency
sources, decimals fallback, and malformed field handling.
"""

from __future__ import annotations

import math
from decimal import Decimal

import numpy as np
import pytest

from ico_monitor.core.exceptions import ConfigurationError, DataQualityError
from ico_monitor.statistics.extractor import (
    EventRecordExtractor,
    build_extractors,
    resolve_decimals,
    to_number,
)
from ico_monitor.statistics.models import EtherSource, EventSchema, IcoConfig

from conftest import INVESTOR_A, make_entry


def test_resolve_decimals():
    assert resolve_decimals("18", 18) == 18
    assert resolve_decimals(8, 18) == 8
    assert resolve_decimals("0", 18) == 0
    assert resolve_decimals(None, 18) == 18
    assert resolve_decimals("abc", 18) == 18
    assert resolve_decimals("nan", 18) == 18
    assert resolve_decimals(True, 18) == 18


def test_to_number():
    assert to_number(5, "x") == 5
    assert to_number("123456789012345678901234567890", "x") == 123456789012345678901234567890
    assert to_number("1e18", "x") == 1e18
    assert to_number(" 2.5 ", "x") == 2.5
    for bad in ("abc", "", None, True, float("nan"), "inf", [1]):
        with pytest.raises(ValueError):
            to_number(bad, "x")


def test_ether_source_tagging():
    assert EventSchema(sender="s").ether_source == EtherSource.NATIVE
    assert EventSchema(sender="s", ether="value").ether_source == EtherSource.FIELD
    assert EventSchema(sender="s", ether=lambda t: t).ether_source == EtherSource.DERIVED


def test_extract_named_ether_field(purchase_schema):
    extractor = EventRecordExtractor("TokenPurchase", purchase_schema, 18)
    entry = make_entry(INVESTOR_A, amount=2 * 10**18, value=5 * 10**17, timestamp=1234, block_number=77, tx_hash="0xab")
    record = extractor.extract(entry)
    assert record.investor == INVESTOR_A
    assert record.token_amount == 2.0
    assert record.currency_amount == 0.5
    assert record.timestamp == 1234
    assert record.block_number == 77
    assert record.transaction_hash == "0xab"
    assert record.as_csv_row() == (INVESTOR_A, 2.0, 0.5, 1234, 77)


def test_extract_string_big_numbers(purchase_schema):
    extractor = EventRecordExtractor("TokenPurchase", purchase_schema, 18)
    record = extractor.extract(make_entry(INVESTOR_A, amount="1500000000000000000000", value="250000000000000000"))
    assert record.token_amount == 1500.0
    assert record.currency_amount == 0.25


def test_extract_native_value_when_no_ether_field():
    schema = EventSchema(sender="purchaser", tokens="amount")
    extractor = EventRecordExtractor("Issued", schema, 18)
    record = extractor.extract(make_entry(INVESTOR_A, amount=10**18, native_value=hex(3 * 10**17)))
    assert record.token_amount == 1.0
    assert math.isclose(record.currency_amount, 0.3)


def test_extract_derived_ether_uses_unscaled_tokens():
    seen = []

    def ether_from_tokens(raw_tokens):
        seen.append(raw_tokens)
        return raw_tokens // 1000

    schema = EventSchema(sender="purchaser", tokens="amount", ether=ether_from_tokens)
    extractor = EventRecordExtractor("Issued", schema, 18)
    record = extractor.extract(make_entry(INVESTOR_A, amount=2000 * 10**18))
    assert seen == [2000 * 10**18]
    assert record.token_amount == 2000.0
    assert record.currency_amount == 2.0


def test_extract_tokenless_event():
    """Sales without tokens (e.g. contribution-only events) give token amount 0."""
    schema = EventSchema(sender="purchaser", ether="value")
    extractor = EventRecordExtractor("Contribution", schema, 18)
    record = extractor.extract(make_entry(INVESTOR_A, value=10**18))
    assert record.token_amount == 0
    assert record.currency_amount == 1.0


def test_extract_respects_decimals(purchase_schema):
    extractor = EventRecordExtractor("TokenPurchase", purchase_schema, 8)
    record = extractor.extract(make_entry(INVESTOR_A, amount=5 * 10**8, value=0))
    assert record.token_amount == 5.0
    assert record.currency_amount == 0.0


@pytest.mark.parametrize(
    "amount,value,native",
    [
        ("not-a-number", 1, None),
        (10**18, "oops", None),
        (None, 1, None),  # token argument missing
    ],
)
def test_extract_malformed_raises_data_quality_error(purchase_schema, amount, value, native):
    extractor = EventRecordExtractor("TokenPurchase", purchase_schema, 18)
    with pytest.raises(DataQualityError) as exc_info:
        extractor.extract(make_entry(INVESTOR_A, amount=amount, value=value, tx_hash="0xbad"), index=3)
    assert exc_info.value.event_name == "TokenPurchase"
    assert exc_info.value.index == 3
    assert exc_info.value.transaction_hash == "0xbad"


def test_extract_malformed_native_value():
    schema = EventSchema(sender="purchaser", tokens="amount")
    extractor = EventRecordExtractor("Issued", schema, 18)
    with pytest.raises(DataQualityError):
        extractor.extract(make_entry(INVESTOR_A, amount=1, native_value="0xzz"))
    with pytest.raises(DataQualityError):
        extractor.extract(make_entry(INVESTOR_A, amount=1, native_value=None))


def test_extract_missing_sender(purchase_schema):
    extractor = EventRecordExtractor("TokenPurchase", purchase_schema, 18)
    entry = make_entry(INVESTOR_A, amount=1, value=1)
    entry.args.pop("purchaser")
    with pytest.raises(DataQualityError):
        extractor.extract(entry)


def test_build_extractors_uses_default_decimals(purchase_schema):
    config = IcoConfig(events={"TokenPurchase": purchase_schema}, decimals=None)
    extractors = build_extractors(config, {"TokenPurchase": []}, default_decimals=6)
    assert extractors["TokenPurchase"].precision == 10**6


def test_build_extractors_unknown_event(purchase_schema):
    config = IcoConfig(events={"TokenPurchase": purchase_schema}, decimals="18")
    with pytest.raises(ConfigurationError, match="Refund"):
        build_extractors(config, {"TokenPurchase": [], "Refund": []}, default_decimals=18)


def test_to_number_accepts_numeric_library_types():
    assert to_number(np.int64(7), "x") == 7
    assert isinstance(to_number(np.int64(7), "x"), int)
    assert to_number(Decimal("2.5"), "x") == 2.5
    assert to_number(np.float64(0.25), "x") == 0.25
    with pytest.raises(ValueError):
        to_number(Decimal("NaN"), "x")


def test_extract_derived_ether_returning_decimal_and_numpy():
    schema = EventSchema(sender="purchaser", tokens="amount", ether=lambda raw: Decimal(raw) / 1000)
    record = EventRecordExtractor("Issued", schema, 18).extract(make_entry(INVESTOR_A, amount=1000 * 10**18))
    assert record.currency_amount == 1.0

    schema = EventSchema(sender="purchaser", tokens="amount", ether=lambda raw: np.int64(5 * 10**17))
    record = EventRecordExtractor("Issued", schema, 18).extract(make_entry(INVESTOR_A, amount=1))
    assert record.currency_amount == 0.5


def test_extract_overflowing_amount_raises_data_quality_error(purchase_schema):
    extractor = EventRecordExtractor("TokenPurchase", purchase_schema, 18)
    with pytest.raises(DataQualityError) as exc_info:
        extractor.extract(make_entry(INVESTOR_A, amount=10**400, value=1, tx_hash="0xbig"), index=0)
    assert exc_info.value.transaction_hash == "0xbig"
