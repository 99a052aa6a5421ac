"""In-memory symbol resolution."""

from __future__ import annotations

from collections.abc import Iterable

from deribit_connector.domain.models import Market
from deribit_connector.errors import BadSymbol


class MarketRegistry:
    """Markets indexed by canonical symbol and by venue instrument id."""

    def __init__(self, markets: Iterable[Market] = ()) -> None:
        self._by_symbol: dict[str, Market] = {}
        self._by_id: dict[str, Market] = {}
        self.load(markets)

    @property
    def loaded(self) -> bool:
        return bool(self._by_id)

    @property
    def markets(self) -> dict[str, Market]:
        return dict(self._by_symbol)

    def load(self, markets: Iterable[Market]) -> None:
        """Replace the registry contents."""
        by_symbol: dict[str, Market] = {}
        by_id: dict[str, Market] = {}
        for market in markets:
            by_symbol[market.symbol] = market
            by_id[market.id] = market
        self._by_symbol = by_symbol
        self._by_id = by_id

    def by_id(self, market_id: str) -> Market | None:
        return self._by_id.get(market_id)

    def market(self, symbol: str) -> Market:
        market = self._by_symbol.get(symbol) or self._by_id.get(symbol)
        if market is None:
            raise BadSymbol(f"unknown symbol '{symbol}'")
        return market
