"""Client library for the P2PB2B exchange REST API and WebSocket messages.

Typical use:

    from p2pb2b import new_client, AccountCurrencyBalanceRequest

    with new_client(api_key, api_secret) as client:
        resp = client.post_currency_balance(AccountCurrencyBalanceRequest(currency="BTC"))
        print(resp.result.available)
"""
from p2pb2b.common.errors import (
    DeserializationError,
    P2PB2BError,
    SerializationError,
    StatusMismatchError,
    TransportError,
)
from p2pb2b.common.models import (
    AccountBalance,
    AccountBalancesRequest,
    AccountBalancesResponse,
    AccountCurrencyBalanceRequest,
    AccountCurrencyBalanceResponse,
    CancelOrderRequest,
    CreateOrderRequest,
    Market,
    MarketsResponse,
    Order,
    OrderResponse,
    Request,
    Response,
    Ticker,
    TickerResponse,
    timestamp_to_datetime,
)
from p2pb2b.rest.client import AsyncP2PB2BClient, P2PB2BClient, new_client
from p2pb2b.ws.requests import (
    WsRequest,
    new_ping_request,
    new_subscribe_request,
    new_unsubscribe_request,
    new_ws_request,
)

__all__ = [
    "P2PB2BClient",
    "AsyncP2PB2BClient",
    "new_client",
    "P2PB2BError",
    "SerializationError",
    "TransportError",
    "StatusMismatchError",
    "DeserializationError",
    "Request",
    "Response",
    "AccountBalance",
    "AccountBalancesRequest",
    "AccountBalancesResponse",
    "AccountCurrencyBalanceRequest",
    "AccountCurrencyBalanceResponse",
    "CreateOrderRequest",
    "CancelOrderRequest",
    "Order",
    "OrderResponse",
    "Market",
    "MarketsResponse",
    "Ticker",
    "TickerResponse",
    "timestamp_to_datetime",
    "WsRequest",
    "new_ws_request",
    "new_ping_request",
    "new_subscribe_request",
    "new_unsubscribe_request",
]
