"""Shared fixtures: clients wired to an in-process `httpx.MockTransport`."""
import json
from typing import Callable, List

import httpx
import pytest
import pytest_asyncio

from p2pb2b.rest.client import AsyncP2PB2BClient, P2PB2BClient

TEST_URL = "https://api.test.local/api/v2"
TEST_WS_URL = "wss://ws.test.local/"


class RecordingHandler:
    """Mock transport handler that records requests and replays canned responses."""

    def __init__(self, *responses: httpx.Response):
        self.responses: List[httpx.Response] = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def make_client() -> Callable[..., P2PB2BClient]:
    clients = []

    def _make(handler, api_key="K", api_secret="S", **kwargs) -> P2PB2BClient:
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(http_client)
        return P2PB2BClient(api_key, api_secret, url=TEST_URL, ws_url=TEST_WS_URL, http_client=http_client, **kwargs)

    yield _make
    for c in clients:
        c.close()


@pytest_asyncio.fixture(scope="function")
async def make_async_client() -> Callable[..., AsyncP2PB2BClient]:
    clients = []

    def _make(handler, api_key="K", api_secret="S", **kwargs) -> AsyncP2PB2BClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(http_client)
        return AsyncP2PB2BClient(api_key, api_secret, url=TEST_URL, ws_url=TEST_WS_URL, http_client=http_client, **kwargs)

    yield _make
    for c in clients:
        await c.aclose()
