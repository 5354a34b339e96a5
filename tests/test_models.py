"""
Unit tests for request/response models.

Tests validate:
- Decimal fields travel as JSON strings with no precision loss
- Response envelope decoding, including non-string messages
- Float timestamp conversion
"""
import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from p2pb2b.common.models import (
    AccountBalance,
    AccountBalancesResponse,
    AccountCurrencyBalanceRequest,
    CreateOrderRequest,
    MarketsResponse,
    Response,
    timestamp_to_datetime,
)


@pytest.mark.parametrize("value", ["0.123456789012", "1.50000000", "0", "12345678901234567890.000000000001"])
def test_decimal_string_round_trip(value):
    balance = AccountBalance(available=Decimal(value), freeze=Decimal("0"))

    encoded = json.loads(balance.model_dump_json())
    assert encoded["available"] == value

    decoded = AccountBalance.model_validate_json(balance.model_dump_json())
    assert decoded.available == Decimal(value)
    assert str(decoded.available) == value


def test_trailing_zeros_compare_equal():
    decoded = AccountBalance.model_validate_json('{"available": "1.50000000", "freeze": "0.5"}')
    assert decoded.available == Decimal("1.5")
    assert str(decoded.available) == "1.50000000"


def test_request_envelope_fields_come_first():
    req = AccountCurrencyBalanceRequest(request="/api/v2/account/balance", nonce="1", currency="BTC")
    assert list(json.loads(req.model_dump_json())) == ["request", "nonce", "currency"]


def test_order_request_amounts_are_strings():
    req = CreateOrderRequest(market="ETH_BTC", side="buy", amount=Decimal("0.0010"), price=Decimal("0.02"))
    body = json.loads(req.model_dump_json())
    assert body["amount"] == "0.0010"
    assert body["price"] == "0.02"


def test_response_envelope_defaults():
    resp = Response.model_validate_json('{"success": true}')
    assert resp.success is True
    assert resp.message == ""


def test_response_message_non_string_is_kept_as_json():
    resp = Response.model_validate_json('{"success": false, "message": [["Invalid nonce"]]}')
    assert resp.success is False
    assert "Invalid nonce" in resp.message


def test_response_ignores_unknown_fields():
    resp = AccountBalancesResponse.model_validate_json(
        '{"success": true, "message": null, "result": {}, "errorCode": "", "cache_time": 1.0}'
    )
    assert resp.result == {}
    assert resp.message == ""


def test_timestamp_to_datetime():
    dt = timestamp_to_datetime(1594605801.5)
    assert dt == datetime(2020, 7, 13, 2, 3, 21, 500000, tzinfo=timezone.utc)


def test_timestamp_to_datetime_whole_seconds():
    assert timestamp_to_datetime(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_null_result_decodes_to_empty_containers():
    balances = AccountBalancesResponse.model_validate_json(
        '{"success": false, "message": "Invalid payload", "result": null}'
    )
    assert balances.success is False
    assert balances.message == "Invalid payload"
    assert balances.result == {}

    markets = MarketsResponse.model_validate_json('{"success": false, "message": "", "result": null}')
    assert markets.result == []
