"""Venue-agnostic connector contract."""

from __future__ import annotations

from typing import Any, Protocol

from deribit_connector.domain.models import (
    OHLCV,
    AccountBalance,
    Currency,
    DepositAddress,
    Market,
    Order,
    OrderBook,
    OrderSide,
    Ticker,
    Trade,
)


class ExchangeConnector(Protocol):
    """Interface for exchange adapters."""

    def fetch_time(self) -> int:
        """Return venue server time in epoch milliseconds."""

    def fetch_currencies(self) -> dict[str, Currency]:
        """Return listed assets keyed by currency code."""

    def fetch_markets(self) -> list[Market]:
        """Return every listed instrument."""

    def load_markets(self, reload: bool = False) -> dict[str, Market]:
        """Return cached markets keyed by symbol, fetching them on first use."""

    def fetch_balance(self) -> dict[str, AccountBalance]:
        """Return balances keyed by currency code."""

    def fetch_deposit_address(self, code: str) -> DepositAddress:
        """Return the deposit address for a currency."""

    def fetch_ticker(self, symbol: str) -> Ticker:
        """Return the latest ticker for a symbol."""

    def fetch_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        """Return recent public trades."""

    def fetch_order_book(
        self,
        symbol: str,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> OrderBook:
        """Return the current order book."""

    def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[OHLCV]:
        """Return candles in ascending time order."""

    def fetch_order(self, order_id: str) -> Order:
        """Return one order by id."""

    def create_order(
        self,
        symbol: str,
        type: str,
        side: OrderSide | str,
        amount: float,
        price: float | None = None,
        params: dict[str, Any] | None = None,
    ) -> Order:
        """Place an order."""

    def edit_order(
        self,
        order_id: str,
        amount: float | None = None,
        price: float | None = None,
        params: dict[str, Any] | None = None,
    ) -> Order:
        """Amend an open order."""

    def cancel_order(self, order_id: str, params: dict[str, Any] | None = None) -> Order:
        """Cancel an open order."""

    def fetch_open_orders(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        """Return open orders for a symbol."""

    def fetch_closed_orders(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Order]:
        """Return order history for a symbol."""

    def fetch_my_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        params: dict[str, Any] | None = None,
    ) -> list[Trade]:
        """Return the account's own trades for a symbol."""
