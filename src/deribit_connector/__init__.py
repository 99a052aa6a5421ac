"""Deribit v2 exchange connector."""

from .config import Settings
from .connectors import DeribitConnector, ExchangeConnector, MarketRegistry
from .errors import ConnectorError, ExchangeError

__all__ = [
    "ConnectorError",
    "DeribitConnector",
    "ExchangeConnector",
    "ExchangeError",
    "MarketRegistry",
    "Settings",
]

__version__ = "0.1.0"
