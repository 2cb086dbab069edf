"""
Quote source abstraction.

QuoteSource ABC: get_quote(symbol) -> Quote | Unavailable.
Implementations: MockQuoteSource (fixed data), FinnhubQuoteSource (HTTP).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stocksim.quotes.types import QuoteResult


class QuoteSource(ABC):
    """
    Read-only price source. Callers fetch a fresh quote right before each trade;
    nothing here caches.
    """

    @abstractmethod
    def get_quote(self, symbol: str) -> QuoteResult:
        """Return the latest quote for symbol, or Unavailable with a reason."""
        ...

    def get_quotes(self, symbols: list[str]) -> dict[str, QuoteResult]:
        """Quotes for several symbols, one request per symbol."""
        return {sym: self.get_quote(sym) for sym in symbols}
