"""OAuth-style token lease for the private API."""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from typing import Any

from deribit_connector.domain.models import Credential
from deribit_connector.errors import AuthenticationFailure, MalformedResponse
from deribit_connector.logging.logger import get_logger
from deribit_connector.parsing.fields import safe_integer, safe_string, safe_value

AuthCall = Callable[[dict[str, Any]], Mapping[str, Any]]


class SessionManager:
    """Hold the single live credential of a connector and keep it valid.

    ``auth_call`` sends its params to ``public/auth`` and returns the decoded
    response. Every acquisition runs under one lock, so callers that raced on
    an expired credential all receive the credential issued by the first one.
    """

    def __init__(self, api_key: str, secret: str, auth_call: AuthCall) -> None:
        self.api_key = api_key
        self.secret = secret
        self._auth_call = auth_call
        self._credential: Credential | None = None
        self._lock = threading.Lock()
        self.logger = get_logger("session")

    @property
    def credential(self) -> Credential | None:
        return self._credential

    def ensure_valid_credential(self, now: int) -> Credential:
        """Return a usable credential, authenticating or refreshing first if needed."""
        with self._lock:
            credential = self._credential
            if credential is None:
                return self._authenticate(now)
            if credential.is_expired(now):
                if not credential.refresh_token:
                    self.logger.info("session | expired without refresh token, re-authenticating")
                    return self._authenticate(now)
                return self._refresh(credential.refresh_token, now)
            return credential

    def refresh(self, now: int) -> Credential:
        """Force a refresh-token grant and replace the stored credential."""
        with self._lock:
            credential = self._credential
            if credential is None or not credential.refresh_token:
                raise AuthenticationFailure("no refresh token available; authenticate first")
            return self._refresh(credential.refresh_token, now)

    def invalidate(self) -> None:
        with self._lock:
            self._credential = None

    def _authenticate(self, now: int) -> Credential:
        if not self.api_key or not self.secret:
            raise AuthenticationFailure("authentication requires an api key and secret")
        params = {
            "grant_type": "client_credentials",
            "client_id": self.api_key,
            "client_secret": self.secret,
        }
        credential = self._issue(params, now)
        self.logger.info("session | authenticated | expires_at %s", credential.expires_at)
        return credential

    def _refresh(self, refresh_token: str, now: int) -> Credential:
        params = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        try:
            credential = self._issue(params, now)
        except AuthenticationFailure:
            # A rejected refresh token is dead; the next call starts a fresh grant.
            self._credential = None
            self.logger.warning("session | refresh rejected, credential dropped")
            raise
        self.logger.info("session | refreshed | expires_at %s", credential.expires_at)
        return credential

    def _issue(self, params: dict[str, Any], now: int) -> Credential:
        response = self._auth_call(params)
        result = safe_value(response, "result")
        access_token = safe_string(result, "access_token")
        if not access_token:
            raise AuthenticationFailure(
                "authentication failed: access token missing from response",
                response=response,
            )
        expires_in = safe_integer(result, "expires_in")
        if expires_in is None:
            raise MalformedResponse(
                "authentication response has no usable 'expires_in'",
                response=response,
            )
        credential = Credential(
            access_token=access_token,
            refresh_token=safe_string(result, "refresh_token"),
            expires_at=now + expires_in * 1000,
        )
        self._credential = credential
        return credential
