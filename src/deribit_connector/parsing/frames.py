"""pandas views over normalized candles."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from deribit_connector.domain.models import OHLCV

OHLCV_COLUMNS = ["open", "high", "low", "close", "volume"]


def ohlcv_to_frame(bars: Sequence[OHLCV]) -> pd.DataFrame:
    """Return candles as a float frame indexed by UTC open time."""
    if not bars:
        empty = pd.DataFrame(columns=OHLCV_COLUMNS, dtype=float)
        empty.index = pd.DatetimeIndex([], tz="UTC", name="time")
        return empty
    frame = pd.DataFrame([bar._asdict() for bar in bars])
    frame.index = pd.to_datetime(frame["timestamp"], unit="ms", utc=True)
    frame.index.name = "time"
    frame = frame.sort_index()
    frame = frame[OHLCV_COLUMNS]
    return frame.apply(pd.to_numeric, errors="coerce")
