"""Outbound WebSocket messages for the P2PB2B stream API.

Messages are JSON-RPC style: `{"method": ..., "params": [...], "id": ...}`.
`id` is the current Unix time in seconds, so two messages built within the
same second share an id. Nothing here correlates replies by id.
"""
from __future__ import annotations

import time
from typing import List

from pydantic import BaseModel, Field

PING_METHOD = "server.ping"


class WsRequest(BaseModel):
    method: str
    params: List[str] = Field(default_factory=list)
    id: int

    def to_json(self) -> str:
        return self.model_dump_json()


def new_ws_request(method: str, *params: str) -> WsRequest:
    return WsRequest(method=method, params=list(params), id=int(time.time()))


def new_ping_request() -> WsRequest:
    return new_ws_request(PING_METHOD)


def new_subscribe_request(channel: str, *params: str) -> WsRequest:
    """e.g. `new_subscribe_request("price", "ETH_BTC")` -> `price.subscribe`."""
    return new_ws_request(f"{channel}.subscribe", *params)


def new_unsubscribe_request(channel: str) -> WsRequest:
    return new_ws_request(f"{channel}.unsubscribe")


__all__ = [
    "WsRequest",
    "new_ws_request",
    "new_ping_request",
    "new_subscribe_request",
    "new_unsubscribe_request",
]
