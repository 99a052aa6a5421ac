"""Payload normalization and venue error translation."""

from .error_codes import VENUE_ERROR_KINDS, is_failure, raise_for_error, translate_error
from .frames import ohlcv_to_frame
from .normalize import (
    MarketLookup,
    filter_by_since_limit,
    parse_balance,
    parse_currency,
    parse_market,
    parse_ohlcv,
    parse_order,
    parse_order_book,
    parse_order_status,
    parse_orders,
    parse_ticker,
    parse_trade,
    parse_trades,
)

__all__ = [
    "VENUE_ERROR_KINDS",
    "MarketLookup",
    "filter_by_since_limit",
    "is_failure",
    "ohlcv_to_frame",
    "parse_balance",
    "parse_currency",
    "parse_market",
    "parse_ohlcv",
    "parse_order",
    "parse_order_book",
    "parse_order_status",
    "parse_orders",
    "parse_ticker",
    "parse_trade",
    "parse_trades",
    "raise_for_error",
    "translate_error",
]
