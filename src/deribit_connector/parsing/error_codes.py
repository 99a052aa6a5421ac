"""Deribit error-code table and the response failure check."""

from __future__ import annotations

import json
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from deribit_connector.errors import (
    AuthenticationFailure,
    BadRequest,
    BadSymbol,
    ConnectorError,
    DDoSProtection,
    ExchangeError,
    ExchangeNotAvailable,
    InsufficientFunds,
    InvalidAddress,
    InvalidOrder,
    NotSupported,
    OrderNotFound,
    PermissionDenied,
)
from deribit_connector.logging.logger import get_logger

logger = get_logger("errors")

NO_ERROR_CODES = frozenset({"0"})

# Keyed by the venue code as a string; JSON-RPC reserved codes are negative.
VENUE_ERROR_KINDS: Mapping[str, type[ConnectorError]] = MappingProxyType(
    {
        "9999": PermissionDenied,
        "10000": AuthenticationFailure,
        "10001": ExchangeError,
        "10002": InvalidOrder,
        "10003": InvalidOrder,
        "10004": OrderNotFound,
        "10005": InvalidOrder,
        "10006": InvalidOrder,
        "10007": InvalidOrder,
        "10008": InvalidOrder,
        "10009": InsufficientFunds,
        "10010": OrderNotFound,
        "10011": InvalidOrder,
        "10012": InvalidOrder,
        "10013": PermissionDenied,
        "10014": PermissionDenied,
        "10015": PermissionDenied,
        "10016": PermissionDenied,
        "10017": PermissionDenied,
        "10019": PermissionDenied,
        "10020": ExchangeError,
        "10022": InvalidOrder,
        "10023": InvalidOrder,
        "10024": InvalidOrder,
        "10025": InvalidOrder,
        "10026": InvalidOrder,
        "10027": InvalidOrder,
        "10028": DDoSProtection,
        "10029": OrderNotFound,
        "10030": ExchangeError,
        "10031": ExchangeError,
        "10032": InvalidOrder,
        "10033": NotSupported,
        "10034": InvalidOrder,
        "10035": InvalidOrder,
        "10036": InvalidOrder,
        "10040": ExchangeNotAvailable,
        "10041": ExchangeNotAvailable,
        "10043": InvalidOrder,
        "10044": InvalidOrder,
        "10045": InvalidOrder,
        "10046": InvalidOrder,
        "10048": PermissionDenied,
        "11008": BadRequest,
        "11029": BadRequest,
        "11030": ExchangeError,
        "11031": ExchangeError,
        "11035": InvalidOrder,
        "11036": InvalidOrder,
        "11037": InvalidOrder,
        "11038": InvalidOrder,
        "11039": InvalidOrder,
        "11041": InvalidOrder,
        "11042": PermissionDenied,
        "11043": BadRequest,
        "11044": BadRequest,
        "11045": BadRequest,
        "11046": InvalidOrder,
        "11047": BadRequest,
        "11048": BadRequest,
        "11049": BadRequest,
        "11050": BadRequest,
        "11051": ExchangeNotAvailable,
        "11052": ExchangeError,
        "11053": ExchangeError,
        "11090": InvalidAddress,
        "11091": InvalidAddress,
        "11092": InvalidAddress,
        "11093": PermissionDenied,
        "11094": ExchangeError,
        "11095": PermissionDenied,
        "11096": ExchangeError,
        "12000": AuthenticationFailure,
        "12001": ExchangeError,
        "12002": ExchangeError,
        "12998": AuthenticationFailure,
        "12003": PermissionDenied,
        "12004": PermissionDenied,
        "12005": PermissionDenied,
        "12100": PermissionDenied,
        "12999": AuthenticationFailure,
        "13000": AuthenticationFailure,
        "13001": AuthenticationFailure,
        "13002": PermissionDenied,
        "13003": AuthenticationFailure,
        "13004": AuthenticationFailure,
        "13005": AuthenticationFailure,
        "13006": AuthenticationFailure,
        "13007": AuthenticationFailure,
        "13008": BadRequest,
        "13009": AuthenticationFailure,
        "13010": BadRequest,
        "13011": BadRequest,
        "13012": BadRequest,
        "13013": BadRequest,
        "13014": ExchangeError,
        "13015": AuthenticationFailure,
        "13016": BadRequest,
        "13017": BadRequest,
        "13018": BadRequest,
        "13019": BadSymbol,
        "13020": BadSymbol,
        "13021": PermissionDenied,
        "-32000": BadRequest,
        "-32601": BadRequest,
        "-32602": BadRequest,
        "-32700": BadRequest,
    }
)


def _error_code(error: Any) -> str | None:
    if isinstance(error, Mapping):
        error = error.get("code")
    if error is None or isinstance(error, bool):
        return None
    if isinstance(error, float) and error.is_integer():
        error = int(error)
    code = str(error).strip()
    return code or None


def is_failure(response: Any) -> bool:
    """Return True when ``response`` carries a venue error other than the no-error sentinel."""
    if not isinstance(response, Mapping):
        return False
    error = response.get("error")
    code = _error_code(error)
    if code is None:
        return isinstance(error, Mapping) and bool(error)
    return code not in NO_ERROR_CODES


def translate_error(code: str | None, message: str, response: Any = None) -> ConnectorError:
    """Map a venue error code to its canonical exception instance.

    Unknown codes become a plain ``ExchangeError``; ``message`` is kept verbatim.
    """
    if code is None:
        return ExchangeError(message, response=response)
    kind = VENUE_ERROR_KINDS.get(str(code), ExchangeError)
    return kind(message, code=str(code), response=response)


def raise_for_error(response: Any) -> None:
    """Raise the canonical error for a failed venue response; do nothing otherwise."""
    if not is_failure(response):
        return
    code = _error_code(response["error"])
    message = json.dumps(response, default=str)
    error = translate_error(code, message, response=response)
    logger.warning("venue error | code %s | %s", code, type(error).__name__)
    raise error
