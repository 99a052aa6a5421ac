"""Domain models."""

from .models import (
    OHLCV,
    AccountBalance,
    Audience,
    Credential,
    Currency,
    DepositAddress,
    Fee,
    Market,
    MarketKind,
    Order,
    OrderBook,
    OrderSide,
    OrderStatus,
    Ticker,
    Trade,
)

__all__ = [
    "OHLCV",
    "AccountBalance",
    "Audience",
    "Credential",
    "Currency",
    "DepositAddress",
    "Fee",
    "Market",
    "MarketKind",
    "Order",
    "OrderBook",
    "OrderSide",
    "OrderStatus",
    "Ticker",
    "Trade",
]
