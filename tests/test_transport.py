from __future__ import annotations

from typing import Any

import pytest
import requests

from deribit_connector.auth.signer import SignedRequest
from deribit_connector.connectors.transport import HttpTransport
from deribit_connector.errors import (
    DDoSProtection,
    ExchangeError,
    ExchangeNotAvailable,
    MalformedResponse,
)

REQUEST = SignedRequest(
    url="https://test.deribit.com/api/v2",
    method="POST",
    body={"jsonrpc": "2.0", "method": "public/get_time", "params": {}},
    headers={"Content-Type": "application/json"},
)


class _FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    def __init__(self, response: _FakeResponse | Exception) -> None:
        self.response = response
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> _FakeResponse:
        self.calls.append(kwargs)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _transport(response: _FakeResponse | Exception) -> tuple[HttpTransport, _FakeSession]:
    session = _FakeSession(response)
    return HttpTransport(timeout=7, session=session), session  # type: ignore[arg-type]


def test_success_returns_decoded_body_and_passes_request_fields() -> None:
    transport, session = _transport(_FakeResponse(200, {"jsonrpc": "2.0", "result": 1}))

    assert transport.send(REQUEST) == {"jsonrpc": "2.0", "result": 1}
    assert session.calls == [
        {
            "method": "POST",
            "url": "https://test.deribit.com/api/v2",
            "json": REQUEST.body,
            "headers": {"Content-Type": "application/json"},
            "timeout": 7,
        }
    ]


def test_venue_error_body_is_returned_for_translation() -> None:
    body = {"jsonrpc": "2.0", "error": {"code": 13009, "message": "unauthorized"}}
    transport, _ = _transport(_FakeResponse(400, body, text="unauthorized"))

    assert transport.send(REQUEST) == body


def test_rate_limit_status() -> None:
    transport, _ = _transport(_FakeResponse(429, {}, text="too many"))

    with pytest.raises(DDoSProtection):
        transport.send(REQUEST)


def test_rate_limit_without_json() -> None:
    transport, _ = _transport(_FakeResponse(429, ValueError("no json")))

    with pytest.raises(DDoSProtection):
        transport.send(REQUEST)


def test_server_error_is_exchange_not_available() -> None:
    transport, _ = _transport(_FakeResponse(503, ValueError("html"), text="<html>down</html>"))

    with pytest.raises(ExchangeNotAvailable, match="503"):
        transport.send(REQUEST)


def test_client_error_without_venue_body() -> None:
    transport, _ = _transport(_FakeResponse(404, {"message": "nope"}, text="nope"))

    with pytest.raises(ExchangeError) as excinfo:
        transport.send(REQUEST)

    assert type(excinfo.value) is ExchangeError
    assert excinfo.value.code == "404"


def test_invalid_json_on_success_is_malformed() -> None:
    transport, _ = _transport(_FakeResponse(200, ValueError("bad json")))

    with pytest.raises(MalformedResponse):
        transport.send(REQUEST)


def test_non_object_body_is_malformed() -> None:
    transport, _ = _transport(_FakeResponse(200, [1, 2, 3]))

    with pytest.raises(MalformedResponse):
        transport.send(REQUEST)


def test_connection_failure_is_exchange_not_available() -> None:
    transport, _ = _transport(requests.ConnectionError("refused"))

    with pytest.raises(ExchangeNotAvailable) as excinfo:
        transport.send(REQUEST)

    assert excinfo.value.retryable
