"""Canonical, venue-agnostic trading entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, NamedTuple

from deribit_connector.utils.time import iso8601


class OrderSide(StrEnum):
    """Supported order directions."""

    BUY = "buy"
    SELL = "sell"


class OrderStatus(StrEnum):
    """Canonical order lifecycle states."""

    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"


class MarketKind(StrEnum):
    """Instrument families listed by the venue."""

    FUTURE = "future"
    OPTION = "option"


class Audience(StrEnum):
    """JSON-RPC method namespace."""

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class Credential:
    """Leased access token with its absolute expiry in epoch milliseconds."""

    access_token: str
    refresh_token: str | None
    expires_at: int

    def is_expired(self, now: int) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class Market:
    """Tradable instrument."""

    id: str
    symbol: str
    base: str | None
    quote: str | None
    kind: MarketKind | None
    active: bool
    amount_precision: float | None = None
    price_precision: float | None = None
    min_amount: float | None = None
    expiry: int | None = None
    settlement_period: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)


@dataclass(frozen=True)
class Currency:
    """Venue-listed asset."""

    id: str
    code: str
    name: str | None
    active: bool
    withdrawal_fee: float | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)


@dataclass(frozen=True)
class Ticker:
    """Point-in-time price snapshot."""

    symbol: str | None
    timestamp: int | None
    high: float | None
    low: float | None
    bid: float | None
    ask: float | None
    last: float | None
    quote_volume: float | None
    bid_volume: float | None = None
    ask_volume: float | None = None
    mark_price: float | None = None
    index_price: float | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def close(self) -> float | None:
        return self.last

    @property
    def datetime(self) -> str | None:
        return iso8601(self.timestamp)


@dataclass(frozen=True)
class Fee:
    """Fee charged on a trade or order."""

    cost: float | None
    currency: str | None


@dataclass(frozen=True)
class Trade:
    """Executed trade, public or private."""

    id: str
    order_id: str | None
    timestamp: int | None
    symbol: str | None
    side: OrderSide | None
    price: float | None
    amount: float | None
    cost: float | None
    fee: Fee | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def datetime(self) -> str | None:
        return iso8601(self.timestamp)


@dataclass(frozen=True)
class Order:
    """Order view returned by the venue.

    ``status`` is an ``OrderStatus`` for recognised venue states and the raw
    venue string otherwise.
    """

    id: str
    timestamp: int | None
    last_trade_timestamp: int | None
    symbol: str | None
    type: str | None
    side: OrderSide | None
    price: float | None
    amount: float | None
    filled: float | None
    remaining: float | None
    cost: float | None
    average: float | None
    status: OrderStatus | str | None
    fee: Fee | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def datetime(self) -> str | None:
        return iso8601(self.timestamp)


class OHLCV(NamedTuple):
    """One candle: ``[timestamp, open, high, low, close, volume]``."""

    timestamp: int
    open: float | None
    high: float | None
    low: float | None
    close: float | None
    volume: float | None


@dataclass(frozen=True)
class OrderBook:
    """Order book levels as ``(price, amount)`` pairs in venue order."""

    symbol: str | None
    bids: list[tuple[float, float]]
    asks: list[tuple[float, float]]
    timestamp: int | None
    nonce: int | None = None


@dataclass(frozen=True)
class AccountBalance:
    """Per-currency account summary."""

    currency: str
    free: float | None
    used: float | None
    total: float | None


@dataclass(frozen=True)
class DepositAddress:
    """Deposit address for a currency."""

    currency: str
    address: str | None
    tag: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)
