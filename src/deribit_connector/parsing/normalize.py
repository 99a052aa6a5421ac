"""Conversion of raw Deribit payloads into canonical entities.

All functions are pure. Optional fields that are missing or malformed come
back as ``None``; only the fields an entity cannot exist without raise
``MalformedResponse``. Symbols are resolved through a caller-supplied
``MarketLookup`` keyed by the venue instrument name, and an unknown
instrument leaves ``symbol`` as ``None``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from deribit_connector.domain.models import (
    OHLCV,
    AccountBalance,
    Currency,
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
from deribit_connector.errors import MalformedResponse
from deribit_connector.parsing.fields import (
    safe_bool,
    safe_currency_code,
    safe_float,
    safe_integer,
    safe_string,
    safe_value,
    to_float,
    to_integer,
)

MarketLookup = Callable[[str], Market | None]

ORDER_STATUSES = {
    "open": OrderStatus.OPEN,
    "cancelled": OrderStatus.CANCELED,
    "filled": OrderStatus.CLOSED,
}

OHLCV_SERIES = ("ticks", "open", "high", "low", "close", "volume")

_T = TypeVar("_T", Trade, Order, OHLCV)


def _require_string(payload: Any, key: str, entity: str) -> str:
    value = safe_string(payload, key)
    if value is None:
        raise MalformedResponse(f"{entity} payload has no '{key}'", response=payload)
    return value


def _raw(payload: Any) -> dict[str, Any]:
    return dict(payload) if isinstance(payload, Mapping) else {}


def _resolve_market(
    payload: Any,
    lookup: MarketLookup | None,
    market: Market | None,
) -> Market | None:
    instrument = safe_string(payload, "instrument_name")
    if instrument is None:
        return market
    if market is not None and market.id == instrument:
        return market
    if lookup is None:
        return None
    return lookup(instrument)


def _parse_side(value: str | None) -> OrderSide | None:
    if value is None:
        return None
    try:
        return OrderSide(value.strip().lower())
    except ValueError:
        return None


def parse_market(instrument: Any) -> Market:
    market_id = _require_string(instrument, "instrument_name", "instrument")
    kind_value = safe_string(instrument, "kind")
    kind = MarketKind(kind_value) if kind_value in {"future", "option"} else None
    return Market(
        id=market_id,
        symbol=market_id,
        base=safe_currency_code(safe_string(instrument, "base_currency")),
        quote=safe_currency_code(safe_string(instrument, "quote_currency"))
        or safe_currency_code(safe_string(instrument, "currency")),
        kind=kind,
        active=bool(safe_bool(instrument, "is_active", False)),
        amount_precision=safe_float(instrument, "contract_size"),
        price_precision=safe_float(instrument, "tick_size"),
        min_amount=safe_float(instrument, "min_trade_amount"),
        expiry=safe_integer(instrument, "expiration_timestamp"),
        settlement_period=safe_string(instrument, "settlement_period"),
        raw=_raw(instrument),
    )


def parse_currency(currency: Any) -> Currency:
    currency_id = _require_string(currency, "currency", "currency")
    return Currency(
        id=currency_id,
        code=safe_currency_code(currency_id) or currency_id,
        name=safe_string(currency, "currency_long"),
        active=True,
        withdrawal_fee=safe_float(currency, "withdrawal_fee"),
        raw=_raw(currency),
    )


def parse_ticker(
    ticker: Any,
    lookup: MarketLookup | None = None,
    market: Market | None = None,
) -> Ticker:
    resolved = _resolve_market(ticker, lookup, market)
    stats = safe_value(ticker, "stats", {})
    return Ticker(
        symbol=resolved.symbol if resolved else None,
        timestamp=safe_integer(ticker, "timestamp"),
        high=safe_float(stats, "high"),
        low=safe_float(stats, "low"),
        bid=safe_float(ticker, "best_bid_price"),
        ask=safe_float(ticker, "best_ask_price"),
        last=safe_float(ticker, "last_price"),
        quote_volume=safe_float(stats, "volume"),
        bid_volume=safe_float(ticker, "best_bid_amount"),
        ask_volume=safe_float(ticker, "best_ask_amount"),
        mark_price=safe_float(ticker, "mark_price"),
        index_price=safe_float(ticker, "index_price"),
        raw=_raw(ticker),
    )


def parse_trade(
    trade: Any,
    lookup: MarketLookup | None = None,
    market: Market | None = None,
) -> Trade:
    trade_id = _require_string(trade, "trade_id", "trade")
    resolved = _resolve_market(trade, lookup, market)
    price = safe_float(trade, "price")
    amount = safe_float(trade, "amount")
    cost = price * amount if price is not None and amount is not None else None
    fee = None
    fee_cost = safe_float(trade, "fee")
    if fee_cost is not None:
        fee = Fee(
            cost=fee_cost,
            currency=safe_currency_code(safe_string(trade, "fee_currency")),
        )
    return Trade(
        id=trade_id,
        order_id=safe_string(trade, "order_id"),
        timestamp=safe_integer(trade, "timestamp"),
        symbol=resolved.symbol if resolved else None,
        side=_parse_side(safe_string(trade, "direction")),
        price=price,
        amount=amount,
        cost=cost,
        fee=fee,
        raw=_raw(trade),
    )


def parse_order_status(status: str | None) -> OrderStatus | str | None:
    """Map venue order states; unknown states are returned unchanged."""
    if status is None:
        return None
    return ORDER_STATUSES.get(status, status)


def parse_order(
    order: Any,
    lookup: MarketLookup | None = None,
    market: Market | None = None,
) -> Order:
    order_id = _require_string(order, "order_id", "order")
    resolved = _resolve_market(order, lookup, market)
    price = safe_float(order, "price")
    amount = safe_float(order, "amount")
    filled = safe_float(order, "filled_amount")
    remaining = None
    cost = None
    if filled is not None:
        if amount is not None:
            remaining = amount - filled
        if price is not None:
            cost = price * filled
    last_trade_timestamp = None
    if filled is not None and filled > 0:
        last_trade_timestamp = safe_integer(order, "last_update_timestamp")
    fee = None
    commission = safe_float(order, "commission")
    if commission is not None:
        fee = Fee(cost=abs(commission), currency=resolved.base if resolved else None)
    return Order(
        id=order_id,
        timestamp=safe_integer(order, "creation_timestamp"),
        last_trade_timestamp=last_trade_timestamp,
        symbol=resolved.symbol if resolved else None,
        type=safe_string(order, "order_type"),
        side=_parse_side(safe_string(order, "direction")),
        price=price,
        amount=amount,
        filled=filled,
        remaining=remaining,
        cost=cost,
        average=safe_float(order, "average_price"),
        status=parse_order_status(safe_string(order, "order_state")),
        fee=fee,
        raw=_raw(order),
    )


def parse_ohlcv(chart: Any) -> list[OHLCV]:
    """Zip TradingView-style parallel arrays into ascending candles."""
    if not isinstance(chart, Mapping):
        raise MalformedResponse("chart payload is not an object", response=chart)
    series: dict[str, Sequence[Any]] = {}
    for key in OHLCV_SERIES:
        values = chart.get(key)
        if not isinstance(values, list):
            raise MalformedResponse(f"chart payload has no '{key}' array", response=chart)
        series[key] = values
    lengths = {key: len(values) for key, values in series.items()}
    if len(set(lengths.values())) > 1:
        raise MalformedResponse(f"chart arrays differ in length: {lengths}", response=chart)
    bars: list[OHLCV] = []
    for index, tick in enumerate(series["ticks"]):
        timestamp = to_integer(tick)
        if timestamp is None:
            raise MalformedResponse(
                f"chart tick {index} is not a timestamp: {tick!r}", response=chart
            )
        bars.append(
            OHLCV(
                timestamp=timestamp,
                open=to_float(series["open"][index]),
                high=to_float(series["high"][index]),
                low=to_float(series["low"][index]),
                close=to_float(series["close"][index]),
                volume=to_float(series["volume"][index]),
            )
        )
    bars.sort(key=lambda bar: bar.timestamp)
    return bars


def parse_order_book(
    book: Any,
    lookup: MarketLookup | None = None,
    market: Market | None = None,
) -> OrderBook:
    resolved = _resolve_market(book, lookup, market)
    return OrderBook(
        symbol=resolved.symbol if resolved else None,
        bids=_parse_levels(safe_value(book, "bids", [])),
        asks=_parse_levels(safe_value(book, "asks", [])),
        timestamp=safe_integer(book, "timestamp"),
        nonce=safe_integer(book, "change_id"),
    )


def _parse_levels(levels: Any) -> list[tuple[float, float]]:
    if not isinstance(levels, list):
        raise MalformedResponse("order book side is not an array", response=levels)
    parsed: list[tuple[float, float]] = []
    for level in levels:
        # Deribit levels are [price, amount] or ["new", price, amount].
        if not isinstance(level, list) or len(level) < 2:
            raise MalformedResponse(f"order book level is malformed: {level!r}", response=levels)
        price = to_float(level[-2])
        amount = to_float(level[-1])
        if price is None or amount is None:
            raise MalformedResponse(f"order book level is malformed: {level!r}", response=levels)
        parsed.append((price, amount))
    return parsed


def parse_balance(currency: str, summary: Any) -> AccountBalance:
    return AccountBalance(
        currency=safe_currency_code(currency) or currency,
        free=safe_float(summary, "available_funds"),
        used=safe_float(summary, "maintenance_margin"),
        total=safe_float(summary, "equity"),
    )


def filter_by_since_limit(
    items: Iterable[_T],
    since: int | None = None,
    limit: int | None = None,
) -> list[_T]:
    """Keep items at or after ``since`` (ms), then the first ``limit`` of them."""
    result = list(items)
    if since is not None:
        result = [
            item for item in result if item.timestamp is not None and item.timestamp >= since
        ]
    if limit is not None:
        result = result[:limit]
    return result


def _require_list(payload: Any, entity: str) -> list[Any]:
    if not isinstance(payload, list):
        raise MalformedResponse(f"{entity} payload is not an array", response=payload)
    return payload


def parse_trades(
    trades: Any,
    lookup: MarketLookup | None = None,
    market: Market | None = None,
    since: int | None = None,
    limit: int | None = None,
) -> list[Trade]:
    parsed = [parse_trade(item, lookup, market) for item in _require_list(trades, "trades")]
    parsed.sort(key=lambda trade: trade.timestamp or 0)
    return filter_by_since_limit(parsed, since, limit)


def parse_orders(
    orders: Any,
    lookup: MarketLookup | None = None,
    market: Market | None = None,
    since: int | None = None,
    limit: int | None = None,
) -> list[Order]:
    parsed = [parse_order(item, lookup, market) for item in _require_list(orders, "orders")]
    parsed.sort(key=lambda order: order.timestamp or 0)
    return filter_by_since_limit(parsed, since, limit)
