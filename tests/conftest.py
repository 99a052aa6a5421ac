from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from deribit_connector.auth.signer import SignedRequest
from deribit_connector.connectors.deribit import DeribitConnector
from deribit_connector.connectors.markets import MarketRegistry
from deribit_connector.domain.models import Market, MarketKind

START_MS = 1_000_000


class FakeTransport:
    """Replays canned JSON keyed by JSON-RPC method and records every request."""

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes = dict(routes or {})
        self.sent: list[SignedRequest] = []

    def send(self, request: SignedRequest) -> Any:
        self.sent.append(request)
        handler = self.routes[request.rpc_method]
        if callable(handler):
            return handler(request)
        return handler

    def methods(self) -> list[str]:
        return [request.rpc_method for request in self.sent]

    def last(self, method: str) -> SignedRequest:
        return [request for request in self.sent if request.rpc_method == method][-1]


class FakeClock:
    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


def auth_handler(request: SignedRequest) -> dict[str, Any]:
    grant = request.body["params"]["grant_type"]
    if grant == "client_credentials":
        return {"result": {"access_token": "A", "refresh_token": "R", "expires_in": 60}}
    return {"result": {"access_token": "A2", "refresh_token": "R2", "expires_in": 60}}


@pytest.fixture
def btc_perpetual() -> Market:
    return Market(
        id="BTC-PERPETUAL",
        symbol="BTC-PERPETUAL",
        base="BTC",
        quote="USD",
        kind=MarketKind.FUTURE,
        active=True,
        amount_precision=10.0,
        price_precision=0.5,
        min_amount=10.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_connector(
    btc_perpetual: Market, clock: FakeClock
) -> Callable[..., tuple[DeribitConnector, FakeTransport]]:
    def factory(
        routes: dict[str, Any] | None = None,
        api_key: str = "key",
        secret: str = "secret",
        markets: list[Market] | None = None,
    ) -> tuple[DeribitConnector, FakeTransport]:
        transport = FakeTransport({"public/auth": auth_handler, **(routes or {})})
        connector = DeribitConnector(
            api_key=api_key,
            secret=secret,
            base_url="https://test.deribit.com",
            transport=transport,
            clock=clock,
            markets=MarketRegistry(markets if markets is not None else [btc_perpetual]),
        )
        return connector, transport

    return factory
