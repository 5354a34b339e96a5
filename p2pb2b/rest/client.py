"""P2PB2B REST client.

Every endpoint runs the same sequence:

1. join the base URL with the endpoint path
2. for private endpoints, stamp a fresh `nonce` and the `request` path on a
   copy of the request and serialize it
3. send it through the transport (which signs POST bodies)
4. read the whole body, check for HTTP 200 and decode the typed response

A non-200 status raises `StatusMismatchError` carrying the raw body, so the
server's error message is available without re-issuing the request.

`P2PB2BClient` is blocking; `AsyncP2PB2BClient` has the same methods as
coroutines.
"""
from typing import Any, Dict, Optional, Type, TypeVar
import logging
import threading
import time

import httpx
from pydantic import ValidationError

from p2pb2b.common import config
from p2pb2b.common.errors import (
    DeserializationError,
    SerializationError,
    StatusMismatchError,
)
from p2pb2b.common.models import (
    AccountBalancesRequest,
    AccountBalancesResponse,
    AccountCurrencyBalanceRequest,
    AccountCurrencyBalanceResponse,
    CancelOrderRequest,
    CreateOrderRequest,
    MarketsResponse,
    OrderResponse,
    Request,
    Response,
    TickerResponse,
)
from p2pb2b.rest.http import AsyncHttpTransport, HttpTransport, TransportResponse, check_status
from p2pb2b.rest.signer import Credentials, Signer

logger = logging.getLogger("p2pb2b.client")

ResponseT = TypeVar("ResponseT", bound=Response)

BALANCES_PATH = "/account/balances"
BALANCE_PATH = "/account/balance"
ORDER_NEW_PATH = "/order/new"
ORDER_CANCEL_PATH = "/order/cancel"
MARKETS_PATH = "/public/markets"
TICKER_PATH = "/public/ticker"


class NonceSource:
    """Millisecond nonces that strictly increase per client.

    Two calls within the same millisecond get `last + 1` so a signed body is
    never sent twice with the same nonce.
    """

    def __init__(self, clock=time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            now = int(self._clock() * 1000)
            self._last = max(now, self._last + 1)
            return str(self._last)


class _ClientBase:
    def __init__(
        self,
        api_key: Optional[str],
        api_secret: Optional[str],
        url: Optional[str] = None,
        ws_url: Optional[str] = None,
        nonce_source: Optional[NonceSource] = None,
    ):
        self.url = (url or config.BASE_URL).rstrip("/")
        self.ws_url = ws_url or config.WS_URL
        self.credentials: Optional[Credentials] = None
        self._signer: Optional[Signer] = None
        if bool(api_key) != bool(api_secret):
            raise ValueError("api_key and api_secret must be given together")
        if api_key and api_secret:
            self.credentials = Credentials(api_key=api_key, api_secret=api_secret)
            self._signer = Signer(self.credentials)
        self._nonces = nonce_source or NonceSource()

    def _endpoint(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        url = f"{self.url}{path}"
        if params:
            url = str(httpx.URL(url, params=params))
        return url

    def _encode(self, request: Request, path: str) -> bytes:
        """Stamp a fresh nonce and the API path on a copy of `request` and serialize it."""
        stamped = request.model_copy(
            update={
                "nonce": self._nonces.next(),
                "request": f"{config.API_PATH_PREFIX}{path}",
            }
        )
        try:
            return stamped.model_dump_json(by_alias=True).encode("utf-8")
        except (ValueError, TypeError) as e:
            raise SerializationError(f"error encoding {type(request).__name__}: {e}") from e

    @staticmethod
    def _decode(response: TransportResponse, body: bytes, model: Type[ResponseT]) -> ResponseT:
        text = body.decode("utf-8", errors="replace")
        try:
            check_status(response, 200)
        except StatusMismatchError as e:
            logger.debug(f"unexpected status {response.status_text} for {model.__name__}")
            raise e.with_body(text) from e
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise DeserializationError(f"error decoding {model.__name__}: {e}", body=text) from e


class P2PB2BClient(_ClientBase):
    """Blocking P2PB2B REST client.

    Args:
        api_key: public API key; sent as `X-TXC-APIKEY`
        api_secret: secret used to sign request payloads
        url: REST base URL (default from config, production API)
        ws_url: WebSocket URL exposed for callers building ws messages
        http_client: optional `httpx.Client` (timeouts, proxies, mock transports)
        timeout: timeout in seconds for the client created when none is given
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_secret: Optional[str],
        url: Optional[str] = None,
        ws_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = config.HTTP_TIMEOUT,
        nonce_source: Optional[NonceSource] = None,
    ):
        super().__init__(api_key, api_secret, url=url, ws_url=ws_url, nonce_source=nonce_source)
        self._transport = HttpTransport(signer=self._signer, http_client=http_client, timeout=timeout)

    @classmethod
    def from_env(cls, **kwargs) -> "P2PB2BClient":
        """Create a client with credentials from P2PB2B_API_KEY / P2PB2B_API_SECRET."""
        if not config.API_KEY or not config.API_SECRET:
            raise ValueError(
                "API credentials not found in environment: P2PB2B_API_KEY, P2PB2B_API_SECRET"
            )
        return cls(config.API_KEY, config.API_SECRET, **kwargs)

    def _post(self, path: str, request: Request, model: Type[ResponseT]) -> ResponseT:
        body = self._encode(request, path)
        response = self._transport.send_post(self._endpoint(path), None, body)
        return self._decode(response, response.read(), model)

    def _get(self, path: str, model: Type[ResponseT], params: Optional[Dict[str, Any]] = None) -> ResponseT:
        response = self._transport.send_get(self._endpoint(path, params), None)
        return self._decode(response, response.read(), model)

    def post_balances(self, request: Optional[AccountBalancesRequest] = None) -> AccountBalancesResponse:
        """Balances of every currency on the account."""
        return self._post(BALANCES_PATH, request or AccountBalancesRequest(), AccountBalancesResponse)

    def post_currency_balance(self, request: AccountCurrencyBalanceRequest) -> AccountCurrencyBalanceResponse:
        """Balance of a single currency, e.g. `AccountCurrencyBalanceRequest(currency="BTC")`."""
        return self._post(BALANCE_PATH, request, AccountCurrencyBalanceResponse)

    def post_create_order(self, request: CreateOrderRequest) -> OrderResponse:
        return self._post(ORDER_NEW_PATH, request, OrderResponse)

    def post_cancel_order(self, request: CancelOrderRequest) -> OrderResponse:
        return self._post(ORDER_CANCEL_PATH, request, OrderResponse)

    def get_markets(self) -> MarketsResponse:
        return self._get(MARKETS_PATH, MarketsResponse)

    def get_ticker(self, market: str) -> TickerResponse:
        return self._get(TICKER_PATH, TickerResponse, params={"market": market})

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "P2PB2BClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AsyncP2PB2BClient(_ClientBase):
    """Asyncio P2PB2B REST client; same endpoints as `P2PB2BClient`."""

    def __init__(
        self,
        api_key: Optional[str],
        api_secret: Optional[str],
        url: Optional[str] = None,
        ws_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = config.HTTP_TIMEOUT,
        nonce_source: Optional[NonceSource] = None,
    ):
        super().__init__(api_key, api_secret, url=url, ws_url=ws_url, nonce_source=nonce_source)
        self._transport = AsyncHttpTransport(signer=self._signer, http_client=http_client, timeout=timeout)

    async def _post(self, path: str, request: Request, model: Type[ResponseT]) -> ResponseT:
        body = self._encode(request, path)
        response = await self._transport.send_post(self._endpoint(path), None, body)
        return self._decode(response, await response.aread(), model)

    async def _get(self, path: str, model: Type[ResponseT], params: Optional[Dict[str, Any]] = None) -> ResponseT:
        response = await self._transport.send_get(self._endpoint(path, params), None)
        return self._decode(response, await response.aread(), model)

    async def post_balances(self, request: Optional[AccountBalancesRequest] = None) -> AccountBalancesResponse:
        return await self._post(BALANCES_PATH, request or AccountBalancesRequest(), AccountBalancesResponse)

    async def post_currency_balance(self, request: AccountCurrencyBalanceRequest) -> AccountCurrencyBalanceResponse:
        return await self._post(BALANCE_PATH, request, AccountCurrencyBalanceResponse)

    async def post_create_order(self, request: CreateOrderRequest) -> OrderResponse:
        return await self._post(ORDER_NEW_PATH, request, OrderResponse)

    async def post_cancel_order(self, request: CancelOrderRequest) -> OrderResponse:
        return await self._post(ORDER_CANCEL_PATH, request, OrderResponse)

    async def get_markets(self) -> MarketsResponse:
        return await self._get(MARKETS_PATH, MarketsResponse)

    async def get_ticker(self, market: str) -> TickerResponse:
        return await self._get(TICKER_PATH, TickerResponse, params={"market": market})

    async def close(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> "AsyncP2PB2BClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def new_client(api_key: str, api_secret: str) -> P2PB2BClient:
    """Create a client for the production P2PB2B API."""
    return P2PB2BClient(api_key, api_secret)


__all__ = ["P2PB2BClient", "AsyncP2PB2BClient", "NonceSource", "new_client"]
