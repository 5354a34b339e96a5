"""Tests for AsyncP2PB2BClient against a mocked server."""
from decimal import Decimal

import httpx
import pytest

from p2pb2b.common.errors import StatusMismatchError
from p2pb2b.common.models import AccountCurrencyBalanceRequest

from tests.conftest import TEST_URL, RecordingHandler


@pytest.mark.asyncio
async def test_post_balances(make_async_client):
    handler = RecordingHandler(
        httpx.Response(200, json={"success": True, "message": "", "result": {"BTC": {"available": "1.5", "freeze": "0.5"}}})
    )
    async with make_async_client(handler) as client:
        resp = await client.post_balances()

    assert resp.result["BTC"].available == Decimal("1.5")
    assert resp.result["BTC"].freeze == Decimal("0.5")
    assert str(handler.requests[0].url) == f"{TEST_URL}/account/balances"
    assert "X-TXC-SIGNATURE" in handler.requests[0].headers


@pytest.mark.asyncio
async def test_nonce_is_fresh_for_each_call(make_async_client):
    handler = RecordingHandler(
        httpx.Response(200, json={"success": True, "message": "", "result": {"available": "1", "freeze": "0"}})
    )
    async with make_async_client(handler) as client:
        await client.post_currency_balance(AccountCurrencyBalanceRequest(currency="BTC"))
        await client.post_currency_balance(AccountCurrencyBalanceRequest(currency="BTC"))

    assert int(handler.body(1)["nonce"]) > int(handler.body(0)["nonce"])


@pytest.mark.asyncio
async def test_status_mismatch_includes_server_body(make_async_client):
    handler = RecordingHandler(httpx.Response(400, json={"success": False, "message": "bad nonce"}))
    async with make_async_client(handler) as client:
        with pytest.raises(StatusMismatchError) as exc:
            await client.post_balances()

    assert exc.value.actual == 400
    assert "bad nonce" in str(exc.value)


@pytest.mark.asyncio
async def test_redirect_is_not_followed(make_async_client):
    handler = RecordingHandler(httpx.Response(302, headers={"Location": "https://evil.local/"}))
    async with make_async_client(handler) as client:
        with pytest.raises(StatusMismatchError) as exc:
            await client.get_markets()

    assert exc.value.actual == 302
    assert len(handler.requests) == 1
