"""JSON-RPC envelope construction and credential attachment."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from deribit_connector.auth.session import SessionManager
from deribit_connector.domain.models import Audience, OrderSide
from deribit_connector.errors import InvalidOrder, NotSupported
from deribit_connector.logging.logger import get_logger
from deribit_connector.utils.time import milliseconds

API_VERSION = "v2"

PUBLIC_METHODS = frozenset(
    {
        "auth",
        "hello",
        "test",
        "ticker",
        "get_time",
        "get_summary",
        "get_announcements",
        "get_book_summary_by_currency",
        "get_book_summary_by_instrument",
        "get_contract_size",
        "get_currencies",
        "get_funding_chart_data",
        "get_funding_rate_history",
        "get_funding_rate_value",
        "get_historical_volatility",
        "get_index",
        "get_instruments",
        "get_last_settlements_by_currency",
        "get_last_settlements_by_instrument",
        "get_last_trades_by_currency",
        "get_last_trades_by_currency_and_time",
        "get_last_trades_by_instrument",
        "get_last_trades_by_instrument_and_time",
        "get_order_book",
        "get_trade_volumes",
        "get_tradingview_chart_data",
    }
)

PRIVATE_METHODS = frozenset(
    {
        "buy",
        "sell",
        "get_block_trade",
        "get_last_block_trades_by_currency",
        "verify_block_trade",
        "get_position",
        "get_positions",
        "get_order_state",
        "get_account_summary",
        "get_new_announcements",
        "get_open_orders_by_currency",
        "get_open_orders_by_instrument",
        "get_user_trades_by_instrument",
        "get_user_trades_by_instrument_and_time",
        "get_user_trades_by_currency",
        "get_user_trades_by_currency_and_time",
        "get_user_trades_by_order",
        "get_order_history_by_currency",
        "get_order_history_by_instrument",
        "get_margins",
        "get_order_margin_by_ids",
        "get_stop_order_history",
        "get_settlement_history_by_instrument",
        "get_settlement_history_by_currency",
        "edit",
        "cancel",
        "cancel_all",
        "cancel_all_by_currency",
        "cancel_all_by_instrument",
        "cancel_by_label",
        "close_position",
        "execute_block_trade",
        "invalidate_block_trade_signature",
    }
)

METHODS_BY_AUDIENCE = {
    Audience.PUBLIC: PUBLIC_METHODS,
    Audience.PRIVATE: PRIVATE_METHODS,
}

ORDER_METHODS = {
    OrderSide.BUY: "buy",
    OrderSide.SELL: "sell",
}


@dataclass(frozen=True)
class SignedRequest:
    """Ready-to-send HTTP request."""

    url: str
    method: str
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def rpc_method(self) -> str:
        return str(self.body.get("method", ""))


class RequestSigner:
    """Wrap logical operations in the venue's JSON-RPC envelope.

    Every call is an HTTP POST. Private calls carry the bearer token both as
    an ``Authorization`` header and as a top-level ``access_token`` field.
    """

    def __init__(self, base_url: str, session: SessionManager) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.logger = get_logger("signer")

    @property
    def url(self) -> str:
        return f"{self.base_url}/api/{API_VERSION}"

    def sign(
        self,
        operation: str,
        audience: Audience | str = Audience.PUBLIC,
        params: dict[str, Any] | None = None,
        now: int | None = None,
    ) -> SignedRequest:
        audience = self._resolve_audience(audience)
        if operation not in METHODS_BY_AUDIENCE[audience]:
            raise NotSupported(f"{audience}/{operation} is not a known venue method")
        body: dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": f"{audience}/{operation}",
            "params": dict(params or {}),
        }
        headers = {"Content-Type": "application/json"}
        if audience == Audience.PRIVATE:
            # May block on a public/auth round trip.
            credential = self.session.ensure_valid_credential(
                milliseconds() if now is None else now
            )
            headers["Authorization"] = f"bearer {credential.access_token}"
            body["access_token"] = credential.access_token
        self.logger.debug("sign | %s", body["method"])
        return SignedRequest(url=self.url, method="POST", body=body, headers=headers)

    @staticmethod
    def order_method(side: OrderSide | str) -> str:
        """Return the private placement method for an order side."""
        try:
            return ORDER_METHODS[OrderSide(str(side).strip().lower())]
        except ValueError as exc:
            raise InvalidOrder(f"unsupported order side '{side}'") from exc

    @staticmethod
    def _resolve_audience(audience: Audience | str) -> Audience:
        try:
            return Audience(audience)
        except ValueError as exc:
            raise NotSupported(f"unknown api audience '{audience}'") from exc
