"""Exception hierarchy shared by the connector, parsers and transport."""

from __future__ import annotations

from typing import Any


class ConnectorError(Exception):
    """Base exception for all connector errors."""

    retryable = False

    def __init__(
        self,
        message: str = "",
        code: str | None = None,
        response: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.response = response


class ExchangeError(ConnectorError):
    """Venue failure with no more specific classification."""


class AuthenticationFailure(ExchangeError):
    """Credentials are missing, invalid, or were rejected by the venue."""


class PermissionDenied(ExchangeError):
    """The account may not perform the requested operation."""


class BadRequest(ExchangeError):
    """The request was malformed or carried invalid arguments."""


class BadSymbol(BadRequest):
    """Unknown, closed, or expired instrument."""


class ArgumentsRequired(BadRequest):
    """A required call argument was not supplied."""


class InvalidOrder(ExchangeError):
    """The venue rejected the order parameters."""


class OrderNotFound(InvalidOrder):
    """The referenced order does not exist or is not owned by the account."""


class InsufficientFunds(ExchangeError):
    """Account balance does not cover the operation."""


class InvalidAddress(ExchangeError):
    """Deposit or transfer address is invalid."""


class NotSupported(ExchangeError):
    """Operation is not available on this venue."""


class MalformedResponse(ExchangeError):
    """Venue payload lacks the structure needed to build an entity."""


class NetworkError(ExchangeError):
    """Transient failure; the caller may retry."""

    retryable = True


class ExchangeNotAvailable(NetworkError):
    """Venue is unreachable, overloaded, or under maintenance."""


class DDoSProtection(NetworkError):
    """Request rate exceeded; back off before retrying."""
