"""HTTP transport for signed JSON-RPC requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

import requests

from deribit_connector.auth.signer import SignedRequest
from deribit_connector.errors import (
    DDoSProtection,
    ExchangeError,
    ExchangeNotAvailable,
    MalformedResponse,
)
from deribit_connector.logging.logger import get_logger


class Transport(Protocol):
    """Executes a signed request and returns the decoded JSON body."""

    def send(self, request: SignedRequest) -> Any:
        """Perform the HTTP call."""


class HttpTransport:
    """Single-shot ``requests`` transport; retries are left to the caller."""

    def __init__(self, timeout: int = 20, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = get_logger("transport")

    def send(self, request: SignedRequest) -> Any:
        try:
            response = self.session.request(
                method=request.method,
                url=request.url,
                json=request.body,
                headers=request.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ExchangeNotAvailable(
                f"Deribit request failed for {request.rpc_method}: {exc}"
            ) from exc

        self.logger.debug("transport | %s | status %s", request.rpc_method, response.status_code)
        payload = self._decode(response)
        # Venue errors arrive with 4xx statuses too; let the error translator classify them.
        if isinstance(payload, Mapping) and payload.get("error") is not None:
            return payload

        path = request.rpc_method
        if response.status_code == 429:
            raise DDoSProtection(f"Deribit rate limit for {path}: {response.text.strip()}")
        if response.status_code >= 500:
            detail = response.text.strip() or "Server error"
            raise ExchangeNotAvailable(
                f"Deribit API error {response.status_code} for {path}: {detail}"
            )
        if response.status_code >= 400:
            detail = response.text.strip() or "Request rejected"
            raise ExchangeError(
                f"Deribit API error {response.status_code} for {path}: {detail}",
                code=str(response.status_code),
            )
        if not isinstance(payload, Mapping):
            raise MalformedResponse(f"Deribit response for {path} was not a JSON object")
        return payload

    def _decode(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            if response.status_code == 429:
                raise DDoSProtection("Deribit rate limit exceeded") from exc
            if response.status_code >= 500:
                raise ExchangeNotAvailable(
                    f"Deribit API error {response.status_code}: {response.text.strip()}"
                ) from exc
            raise MalformedResponse(
                f"Deribit response was not valid JSON (status {response.status_code})"
            ) from exc
