"""
Quote types. A source returns Quote or Unavailable, never a zero-filled quote.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Quote:
    """Current price and day statistics for one symbol."""

    symbol: str
    current_price: float
    percent_change: float
    day_high: float
    day_low: float
    day_open: float
    previous_close: float
    timestamp: datetime


@dataclass(frozen=True)
class Unavailable:
    """No usable quote: network error, unknown symbol, bad key, etc."""

    symbol: str
    reason: str


QuoteResult = Quote | Unavailable


@dataclass(frozen=True)
class StockSymbol:
    """Catalog entry for a tradable symbol."""

    symbol: str
    description: str
    display_symbol: str
    type: str = "Common Stock"
    currency: str = "USD"
