"""Defensive field accessors for venue JSON payloads.

Every accessor returns ``default`` (``None`` unless given) when the container
is not a mapping, the key is absent, or the value cannot be coerced. None of
them raise.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

COMMON_CURRENCY_CODES = {
    "XBT": "BTC",
    "BCC": "BCH",
    "DRK": "DASH",
}


def safe_value(container: Any, key: str, default: Any = None) -> Any:
    if not isinstance(container, Mapping):
        return default
    value = container.get(key)
    return default if value is None else value


def safe_string(container: Any, key: str, default: str | None = None) -> str | None:
    value = safe_value(container, key)
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, str):
        text = value.strip()
        return text or default
    if isinstance(value, (int, float)):
        return str(value)
    return default


def to_float(value: Any, default: float | None = None) -> float | None:
    """Coerce a scalar JSON value to float."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        parsed = float(value)
    else:
        text = str(value).strip()
        if not text or text.lower() in {"none", "null"}:
            return default
        try:
            parsed = float(text)
        except ValueError:
            return default
    if not math.isfinite(parsed):
        return default
    return parsed


def to_integer(value: Any, default: int | None = None) -> int | None:
    parsed = to_float(value)
    if parsed is None:
        return default
    return int(parsed)


def safe_float(container: Any, key: str, default: float | None = None) -> float | None:
    return to_float(safe_value(container, key), default)


def safe_integer(container: Any, key: str, default: int | None = None) -> int | None:
    return to_integer(safe_value(container, key), default)


def safe_bool(container: Any, key: str, default: bool | None = None) -> bool | None:
    value = safe_value(container, key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    return default


def safe_currency_code(currency_id: str | None) -> str | None:
    """Uppercase a venue currency id and apply well-known aliases."""
    if currency_id is None:
        return None
    code = currency_id.strip().upper()
    if not code:
        return None
    return COMMON_CURRENCY_CODES.get(code, code)
