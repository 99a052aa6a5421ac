"""Deribit v2 connector: venue-agnostic operations over JSON-RPC."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Self

from deribit_connector.auth.session import SessionManager
from deribit_connector.auth.signer import RequestSigner
from deribit_connector.config import MAINNET_API_URL, Settings
from deribit_connector.connectors.markets import MarketRegistry
from deribit_connector.connectors.transport import HttpTransport, Transport
from deribit_connector.domain.models import (
    OHLCV,
    AccountBalance,
    Audience,
    Currency,
    DepositAddress,
    Market,
    Order,
    OrderBook,
    OrderSide,
    Ticker,
    Trade,
)
from deribit_connector.errors import (
    ArgumentsRequired,
    BadRequest,
    MalformedResponse,
    OrderNotFound,
)
from deribit_connector.logging.logger import get_logger
from deribit_connector.parsing.error_codes import raise_for_error
from deribit_connector.parsing.fields import safe_currency_code, safe_string, to_integer
from deribit_connector.parsing.normalize import (
    filter_by_since_limit,
    parse_balance,
    parse_currency,
    parse_market,
    parse_ohlcv,
    parse_order,
    parse_order_book,
    parse_orders,
    parse_ticker,
    parse_trades,
)
from deribit_connector.utils.time import milliseconds

TIMEFRAMES = {
    "1m": "1",
    "3m": "3",
    "5m": "5",
    "10m": "10",
    "15m": "15",
    "30m": "30",
    "1h": "60",
    "2h": "120",
    "3h": "180",
    "6h": "360",
    "12h": "720",
    "1d": "1D",
}

TIMEFRAME_SECONDS = {
    "1m": 60,
    "3m": 180,
    "5m": 300,
    "10m": 600,
    "15m": 900,
    "30m": 1800,
    "1h": 3600,
    "2h": 7200,
    "3h": 10800,
    "6h": 21600,
    "12h": 43200,
    "1d": 86400,
}

DEFAULT_TRADES_COUNT = 1000


class DeribitConnector:
    """Deribit adapter implementing ``ExchangeConnector``."""

    def __init__(
        self,
        api_key: str = "",
        secret: str = "",
        base_url: str = MAINNET_API_URL,
        timeout: int = 20,
        transport: Transport | None = None,
        clock: Callable[[], int] | None = None,
        markets: MarketRegistry | None = None,
    ) -> None:
        self.clock = clock or milliseconds
        self.transport = transport or HttpTransport(timeout=timeout)
        self.session = SessionManager(api_key, secret, auth_call=self._auth_call)
        self.signer = RequestSigner(base_url, self.session)
        self.markets = markets if markets is not None else MarketRegistry()
        self.logger = get_logger("connector")

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> Self:
        return cls(
            api_key=settings.api_key,
            secret=settings.secret,
            base_url=settings.base_url(),
            timeout=settings.timeout_seconds,
            **kwargs,
        )

    def request(
        self,
        operation: str,
        audience: Audience | str = Audience.PUBLIC,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Sign, send and error-check one JSON-RPC call; return the full response."""
        signed = self.signer.sign(operation, audience, params, now=self.clock())
        response = self.transport.send(signed)
        raise_for_error(response)
        return response

    def _result(
        self,
        operation: str,
        audience: Audience | str = Audience.PUBLIC,
        params: dict[str, Any] | None = None,
    ) -> Any:
        response = self.request(operation, audience, params)
        if not isinstance(response, Mapping) or "result" not in response:
            raise MalformedResponse(
                f"{audience}/{operation} response has no result", response=response
            )
        return response["result"]

    def _auth_call(self, params: dict[str, Any]) -> Mapping[str, Any]:
        return self.request("auth", Audience.PUBLIC, params)

    # Markets

    def fetch_time(self) -> int:
        result = self._result("get_time")
        timestamp = to_integer(result)
        if timestamp is None:
            raise MalformedResponse("get_time returned no timestamp", response=result)
        return timestamp

    def _currency_payloads(self) -> list[Any]:
        result = self._result("get_currencies")
        if not isinstance(result, list):
            raise MalformedResponse("get_currencies result is not an array", response=result)
        return result

    def fetch_currencies(self) -> dict[str, Currency]:
        currencies: dict[str, Currency] = {}
        for payload in self._currency_payloads():
            currency = parse_currency(payload)
            currencies[currency.code] = currency
        return currencies

    def fetch_markets(self) -> list[Market]:
        markets: list[Market] = []
        for currency in self._currency_payloads():
            currency_id = safe_string(currency, "currency")
            if currency_id is None:
                raise MalformedResponse("currency payload has no 'currency'", response=currency)
            instruments = self._result("get_instruments", params={"currency": currency_id})
            if not isinstance(instruments, list):
                raise MalformedResponse(
                    f"get_instruments result for {currency_id} is not an array",
                    response=instruments,
                )
            markets.extend(parse_market(instrument) for instrument in instruments)
        return markets

    def load_markets(self, reload: bool = False) -> dict[str, Market]:
        if reload or not self.markets.loaded:
            markets = self.fetch_markets()
            self.markets.load(markets)
            self.logger.debug("markets | loaded %s instruments", len(markets))
        return self.markets.markets

    def market(self, symbol: str) -> Market:
        self.load_markets()
        return self.markets.market(symbol)

    # Account

    def fetch_balance(self) -> dict[str, AccountBalance]:
        balances: dict[str, AccountBalance] = {}
        for currency in self._currency_payloads():
            currency_id = safe_string(currency, "currency")
            if currency_id is None:
                raise MalformedResponse("currency payload has no 'currency'", response=currency)
            summary = self._result(
                "get_account_summary", Audience.PRIVATE, {"currency": currency_id}
            )
            balance = parse_balance(currency_id, summary)
            balances[balance.currency] = balance
        return balances

    def fetch_deposit_address(self, code: str) -> DepositAddress:
        currency_id = code.strip().upper()
        summary = self._result(
            "get_account_summary", Audience.PRIVATE, {"currency": currency_id}
        )
        return DepositAddress(
            currency=safe_currency_code(currency_id) or currency_id,
            address=safe_string(summary, "deposit_address"),
            raw=dict(summary) if isinstance(summary, Mapping) else {},
        )

    # Market data

    def fetch_ticker(self, symbol: str) -> Ticker:
        market = self.market(symbol)
        result = self._result("ticker", params={"instrument_name": market.id})
        return parse_ticker(result, self.markets.by_id, market)

    def fetch_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        market = self.market(symbol)
        extra = dict(params or {})
        request: dict[str, Any] = {
            "instrument_name": market.id,
            "count": limit if limit is not None else DEFAULT_TRADES_COUNT,
        }
        if since is not None:
            request["start_timestamp"] = since
            request["end_timestamp"] = extra.pop("to", None) or self.clock()
            operation = "get_last_trades_by_instrument_and_time"
        else:
            operation = "get_last_trades_by_instrument"
        result = self._result(operation, params={**request, **extra})
        trades = result.get("trades", []) if isinstance(result, Mapping) else result
        return parse_trades(trades, self.markets.by_id, market, since, limit)

    def fetch_order_book(
        self,
        symbol: str,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> OrderBook:
        market = self.market(symbol)
        request: dict[str, Any] = {"instrument_name": market.id}
        if limit is not None:
            request["depth"] = limit
        result = self._result("get_order_book", params={**request, **(params or {})})
        return parse_order_book(result, self.markets.by_id, market)

    def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[OHLCV]:
        if since is None and limit is None:
            raise ArgumentsRequired("fetch_ohlcv requires a since or limit argument (or both)")
        if timeframe not in TIMEFRAMES:
            supported = ", ".join(TIMEFRAMES)
            raise BadRequest(f"Unsupported timeframe '{timeframe}'. Supported: {supported}")
        market = self.market(symbol)
        now = self.clock()
        if since is None:
            start, end = now - TIMEFRAME_SECONDS[timeframe] * limit * 1000, now
        elif limit is None:
            start, end = since, now
        else:
            start, end = since, since + TIMEFRAME_SECONDS[timeframe] * limit * 1000
        request = {
            "instrument_name": market.id,
            "resolution": TIMEFRAMES[timeframe],
            "start_timestamp": int(start),
            "end_timestamp": int(end),
        }
        result = self._result("get_tradingview_chart_data", params={**request, **(params or {})})
        return filter_by_since_limit(parse_ohlcv(result), since, limit)

    # Orders

    def fetch_order(self, order_id: str) -> Order:
        self.load_markets()
        result = self._result("get_order_state", Audience.PRIVATE, {"order_id": order_id})
        if not result:
            raise OrderNotFound(f"order {order_id} not found", response=result)
        return parse_order(result, self.markets.by_id)

    def create_order(
        self,
        symbol: str,
        type: str,
        side: OrderSide | str,
        amount: float,
        price: float | None = None,
        params: dict[str, Any] | None = None,
    ) -> Order:
        market = self.market(symbol)
        extra = dict(params or {})
        request: dict[str, Any] = {
            "instrument_name": market.id,
            "amount": amount,
            "type": type,
        }
        if type == "stop_market" and price is not None:
            request["stop_price"] = price
            request["trigger"] = extra.pop("trigger", None) or "last_price"
        elif price is not None:
            request["price"] = price
        method = self.signer.order_method(side)
        result = self._result(method, Audience.PRIVATE, {**request, **extra})
        order = self._order_payload(result, method)
        self.logger.info(
            "order | %s %s %s | amount %s | price %s", method, type, market.id, amount, price
        )
        return parse_order(order, self.markets.by_id, market)

    def edit_order(
        self,
        order_id: str,
        amount: float | None = None,
        price: float | None = None,
        params: dict[str, Any] | None = None,
    ) -> Order:
        self.load_markets()
        request: dict[str, Any] = {"order_id": order_id}
        if amount is not None:
            request["amount"] = amount
        if price is not None:
            request["price"] = price
        result = self._result("edit", Audience.PRIVATE, {**request, **(params or {})})
        self.logger.info("order | edit %s | amount %s | price %s", order_id, amount, price)
        return parse_order(self._order_payload(result, "edit"), self.markets.by_id)

    def cancel_order(self, order_id: str, params: dict[str, Any] | None = None) -> Order:
        self.load_markets()
        result = self._result("cancel", Audience.PRIVATE, {"order_id": order_id, **(params or {})})
        self.logger.info("order | cancel %s", order_id)
        return parse_order(self._order_payload(result, "cancel"), self.markets.by_id)

    def fetch_open_orders(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        market = self.market(symbol)
        result = self._result(
            "get_open_orders_by_instrument",
            Audience.PRIVATE,
            {"instrument_name": market.id, **(params or {})},
        )
        return parse_orders(result, self.markets.by_id, market, since, limit)

    def fetch_closed_orders(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        market = self.market(symbol)
        result = self._result(
            "get_order_history_by_instrument",
            Audience.PRIVATE,
            {"instrument_name": market.id, **(params or {})},
        )
        return parse_orders(result, self.markets.by_id, market, since, limit)

    def fetch_my_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        market = self.market(symbol)
        request: dict[str, Any] = {"instrument_name": market.id}
        if limit is not None:
            request["count"] = limit
        result = self._result(
            "get_user_trades_by_instrument",
            Audience.PRIVATE,
            {**request, **(params or {})},
        )
        trades = result.get("trades", []) if isinstance(result, Mapping) else result
        return parse_trades(trades, self.markets.by_id, market, since, limit)

    @staticmethod
    def _order_payload(result: Any, method: str) -> Mapping[str, Any]:
        # buy/sell/edit wrap the order as {"order": ..., "trades": [...]}; cancel returns it bare.
        if isinstance(result, Mapping):
            order = result.get("order", result)
            if isinstance(order, Mapping) and order:
                return order
        raise MalformedResponse(f"{method} response has no order", response=result)
