from __future__ import annotations

from typing import Any

import pytest

from deribit_connector.auth.session import SessionManager
from deribit_connector.auth.signer import RequestSigner
from deribit_connector.domain.models import Audience, OrderSide
from deribit_connector.errors import InvalidOrder, NotSupported


class _DummyAuth:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, params: dict[str, Any]) -> dict[str, Any]:
        self.calls += 1
        return {"result": {"access_token": "TOKEN", "refresh_token": "R", "expires_in": 900}}


def _signer() -> tuple[RequestSigner, _DummyAuth]:
    auth = _DummyAuth()
    session = SessionManager("key", "secret", auth)
    return RequestSigner("https://test.deribit.com/", session), auth


def test_public_request_envelope() -> None:
    signer, auth = _signer()

    request = signer.sign("ticker", Audience.PUBLIC, {"instrument_name": "BTC-PERPETUAL"})

    assert request.url == "https://test.deribit.com/api/v2"
    assert request.method == "POST"
    assert request.body == {
        "jsonrpc": "2.0",
        "method": "public/ticker",
        "params": {"instrument_name": "BTC-PERPETUAL"},
    }
    assert "Authorization" not in request.headers
    assert "access_token" not in request.body
    assert request.rpc_method == "public/ticker"
    assert auth.calls == 0


def test_auth_request_carries_no_token() -> None:
    signer, auth = _signer()

    request = signer.sign("auth", "public", {"grant_type": "client_credentials"})

    assert "Authorization" not in request.headers
    assert "access_token" not in request.body
    assert auth.calls == 0


def test_private_request_carries_bearer_and_body_token() -> None:
    signer, auth = _signer()

    request = signer.sign("get_account_summary", Audience.PRIVATE, {"currency": "BTC"}, now=1)

    assert request.headers["Authorization"] == "bearer TOKEN"
    assert request.body["access_token"] == "TOKEN"
    assert request.body["params"] == {"currency": "BTC"}
    assert request.body["method"] == "private/get_account_summary"
    assert auth.calls == 1


def test_params_are_copied() -> None:
    signer, _ = _signer()
    params = {"depth": 5}

    request = signer.sign("get_order_book", params=params)
    params["depth"] = 10

    assert request.body["params"] == {"depth": 5}


@pytest.mark.parametrize(
    ("operation", "audience"),
    [
        ("does_not_exist", Audience.PUBLIC),
        ("buy", Audience.PUBLIC),
        ("ticker", Audience.PRIVATE),
        ("ticker", "internal"),
    ],
)
def test_unknown_method_is_not_supported(operation: str, audience: str) -> None:
    signer, auth = _signer()

    with pytest.raises(NotSupported):
        signer.sign(operation, audience)
    assert auth.calls == 0


def test_order_method_maps_sides() -> None:
    assert RequestSigner.order_method(OrderSide.BUY) == "buy"
    assert RequestSigner.order_method("SELL") == "sell"


def test_order_method_rejects_unknown_side() -> None:
    with pytest.raises(InvalidOrder):
        RequestSigner.order_method("hold")
