"""Small time helpers used by the connector."""

from __future__ import annotations

import time
from datetime import UTC, datetime


def milliseconds() -> int:
    """Return current UTC time in epoch milliseconds."""
    return int(time.time() * 1000)


def iso8601(timestamp: int | None) -> str | None:
    """Render epoch milliseconds as an ISO-8601 UTC string."""
    if timestamp is None:
        return None
    moment = datetime.fromtimestamp(timestamp / 1000, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
