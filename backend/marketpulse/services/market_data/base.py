from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List


@dataclass(frozen=True)
class Quote:
    """Price observation for a symbol at a point in time."""
    symbol: str
    price: float
    currency: str
    observed_at: datetime


class QuoteProvider(ABC):
    """Abstract base class for price-quote providers."""

    @abstractmethod
    async def fetch_quote(self, symbol: str) -> Quote:
        """
        Fetch the current quote for one symbol.
        Raises TransportError or DecodeError.
        """
        pass

    @abstractmethod
    async def fetch_quotes(self, symbols: List[str]) -> List[Quote]:
        """
        Fetch quotes for many symbols.
        Individual failures are logged and dropped; may return an empty list.
        """
        pass

    @abstractmethod
    async def search_symbols(self, query: str) -> List[dict[str, Any]]:
        """Search instruments by free text (company name or symbol)."""
        pass
