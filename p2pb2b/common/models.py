from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Request(BaseModel):
    """Envelope embedded first in every authenticated request body.

    `request` is the literal API path and `nonce` a millisecond timestamp as a
    decimal string. Both are stamped by the client right before sending.
    """

    model_config = ConfigDict(populate_by_name=True)

    request: str = ""
    nonce: str = ""


class Response(BaseModel):
    """Envelope shared by every decoded response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: bool = False
    message: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def _coerce_message(cls, v: Any) -> str:
        # Some error responses carry a list or object here instead of a string.
        if v is None:
            return ""
        if isinstance(v, str):
            return v
        return json.dumps(v)


class AccountBalance(BaseModel):
    available: Decimal = Decimal("0")
    freeze: Decimal = Decimal("0")


class AccountBalancesRequest(Request):
    pass


class AccountBalancesResponse(Response):
    result: Optional[Dict[str, AccountBalance]] = Field(default_factory=dict)

    @field_validator("result", mode="before")
    @classmethod
    def _null_result(cls, v: Any) -> Any:
        # soft failures come back as 200 with `"result": null`
        return {} if v is None else v


class AccountCurrencyBalanceRequest(Request):
    currency: str = ""


class AccountCurrencyBalanceResponse(Response):
    result: Optional[AccountBalance] = None


class CreateOrderRequest(Request):
    market: str = ""
    side: str = ""
    amount: Decimal = Decimal("0")
    price: Decimal = Decimal("0")


class CancelOrderRequest(Request):
    market: str = ""
    order_id: int = Field(default=0, alias="orderId")


class Order(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order_id: int = Field(alias="orderId")
    market: str
    side: str = ""
    type: str = ""
    timestamp: Optional[float] = None
    price: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    left: Optional[Decimal] = None
    deal_money: Optional[Decimal] = Field(default=None, alias="dealMoney")
    deal_stock: Optional[Decimal] = Field(default=None, alias="dealStock")
    deal_fee: Optional[Decimal] = Field(default=None, alias="dealFee")
    taker_fee: Optional[Decimal] = Field(default=None, alias="takerFee")
    maker_fee: Optional[Decimal] = Field(default=None, alias="makerFee")

    @property
    def created_at(self) -> Optional[datetime]:
        if self.timestamp is None:
            return None
        return timestamp_to_datetime(self.timestamp)


class OrderResponse(Response):
    result: Optional[Order] = None


class MarketPrecision(BaseModel):
    money: int
    stock: int
    fee: int


class MarketLimits(BaseModel):
    model_config = ConfigDict(extra="ignore")

    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    step_size: Optional[Decimal] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    tick_size: Optional[Decimal] = None
    min_total: Optional[Decimal] = None


class Market(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    stock: str
    money: str
    precision: Optional[MarketPrecision] = None
    limits: Optional[MarketLimits] = None


class MarketsResponse(Response):
    result: Optional[List[Market]] = Field(default_factory=list)

    @field_validator("result", mode="before")
    @classmethod
    def _null_result(cls, v: Any) -> Any:
        return [] if v is None else v


class Ticker(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bid: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    open: Optional[Decimal] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    last: Optional[Decimal] = None
    volume: Optional[Decimal] = None
    deal: Optional[Decimal] = None
    change: Optional[Decimal] = None


class TickerResponse(Response):
    result: Optional[Ticker] = None


def timestamp_to_datetime(timestamp: float) -> datetime:
    """Convert a float Unix timestamp (seconds) to an aware UTC datetime.

    The exchange reports order and trade times as fractional seconds, e.g.
    `1594605801.49815`; the fractional part is kept down to microseconds.
    """
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)
