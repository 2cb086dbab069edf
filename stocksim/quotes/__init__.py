"""
Quote layer: read-only price data for trading and valuation.

QuoteSource interface; mock and Finnhub sources; popular-stocks catalog and search.
"""

from __future__ import annotations

from stocksim.config import LedgerConfig
from stocksim.quotes.base import QuoteSource
from stocksim.quotes.catalog import popular_stocks, search_stocks
from stocksim.quotes.finnhub import FinnhubQuoteSource
from stocksim.quotes.mock import MockQuoteSource
from stocksim.quotes.types import Quote, QuoteResult, StockSymbol, Unavailable


def quote_source_from_config(config: LedgerConfig) -> QuoteSource:
    """Finnhub when an API key is configured; mock quotes otherwise."""
    if config.finnhub_api_key:
        return FinnhubQuoteSource(
            config.finnhub_api_key,
            base_url=config.finnhub_base_url,
            timeout=config.request_timeout,
        )
    return MockQuoteSource()


__all__ = [
    "Quote",
    "QuoteResult",
    "QuoteSource",
    "StockSymbol",
    "Unavailable",
    "MockQuoteSource",
    "FinnhubQuoteSource",
    "popular_stocks",
    "search_stocks",
    "quote_source_from_config",
]
