"""Exchange connector implementations."""

from .base import ExchangeConnector
from .deribit import DeribitConnector
from .markets import MarketRegistry
from .transport import HttpTransport, Transport

__all__ = [
    "DeribitConnector",
    "ExchangeConnector",
    "HttpTransport",
    "MarketRegistry",
    "Transport",
]
