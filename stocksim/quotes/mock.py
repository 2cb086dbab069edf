"""
Mock quote source: fixed quotes for a few large caps, used when no API key is configured.
"""

from __future__ import annotations

import logging
from datetime import datetime

from stocksim.quotes.base import QuoteSource
from stocksim.quotes.types import Quote, QuoteResult, Unavailable

logger = logging.getLogger(__name__)

# symbol -> (current, percent change, high, low, open, previous close)
MOCK_QUOTES: dict[str, tuple[float, float, float, float, float, float]] = {
    "AAPL": (170.00, 1.5, 172.00, 168.50, 169.00, 168.00),
    "MSFT": (280.00, -0.5, 282.00, 278.00, 281.00, 281.50),
    "GOOGL": (2700.00, 0.8, 2710.00, 2690.00, 2705.00, 2695.00),
    "AMZN": (135.50, 2.1, 136.00, 133.00, 133.50, 132.70),
    "TSLA": (255.75, -1.2, 260.00, 250.50, 258.00, 258.80),
    "META": (305.00, 0.5, 308.00, 303.00, 304.00, 303.50),
    "NVDA": (450.25, 3.0, 455.00, 448.00, 450.00, 437.14),
}


class MockQuoteSource(QuoteSource):
    """
    Serves MOCK_QUOTES. prices overrides (or adds) the current price per symbol,
    with the other day statistics pinned to that price.
    """

    def __init__(self, prices: dict[str, float] | None = None) -> None:
        self._prices: dict[str, float] = dict(prices or {})

    def set_price(self, symbol: str, price: float) -> None:
        self._prices[symbol] = price

    def get_quote(self, symbol: str) -> QuoteResult:
        now = datetime.now()
        if symbol in self._prices:
            p = float(self._prices[symbol])
            if p <= 0:
                return Unavailable(symbol=symbol, reason="Invalid price")
            return Quote(symbol, p, 0.0, p, p, p, p, now)
        if symbol in MOCK_QUOTES:
            c, dp, h, l, o, pc = MOCK_QUOTES[symbol]
            return Quote(symbol, c, dp, h, l, o, pc, now)
        logger.warning("No mock quote for symbol %s", symbol)
        return Unavailable(symbol=symbol, reason="No mock data for symbol")
