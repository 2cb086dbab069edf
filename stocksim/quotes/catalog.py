"""
Stock catalog: the popular symbols list and a simple search over it.
"""

from __future__ import annotations

from collections.abc import Sequence

from stocksim.quotes.types import StockSymbol


def _common(symbol: str, description: str, type_: str = "Common Stock") -> StockSymbol:
    return StockSymbol(symbol=symbol, description=description, display_symbol=symbol, type=type_)


POPULAR_STOCKS: tuple[StockSymbol, ...] = (
    _common("AAPL", "APPLE INC"),
    _common("MSFT", "MICROSOFT CORP"),
    _common("GOOGL", "ALPHABET INC-CL C"),
    _common("AMZN", "AMAZON.COM INC"),
    _common("TSLA", "TESLA INC"),
    _common("META", "META PLATFORMS INC"),
    _common("NVDA", "NVIDIA CORP"),
    _common("JPM", "JPMORGAN CHASE & CO"),
    _common("JNJ", "JOHNSON & JOHNSON"),
    _common("V", "VISA INC-CLASS A"),
    _common("PYPL", "PAYPAL HOLDINGS INC"),
    _common("DIS", "WALT DISNEY CO"),
    _common("NFLX", "NETFLIX INC"),
    _common("BABA", "ALIBABA GROUP HOLDING LTD-SP ADR", "ADR"),
)


def popular_stocks() -> list[StockSymbol]:
    return list(POPULAR_STOCKS)


def search_stocks(query: str, stocks: Sequence[StockSymbol] | None = None) -> list[StockSymbol]:
    """
    Case-insensitive substring match on symbol or description.
    Blank query returns no results.
    """
    q = query.strip().lower()
    if not q:
        return []
    pool = POPULAR_STOCKS if stocks is None else stocks
    return [s for s in pool if q in s.symbol.lower() or q in s.description.lower()]


def describe(symbol: str) -> str:
    """Catalog description for symbol, or the symbol itself if not listed."""
    for s in POPULAR_STOCKS:
        if s.symbol == symbol:
            return s.description
    return symbol
