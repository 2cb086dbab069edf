"""
Finnhub quote source: GET {base_url}/quote?symbol=...&token=...

Response fields: c (current), dp (percent change), h, l, o, pc, t (unix seconds).
Every failure becomes Unavailable with a reason; nothing is raised to the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import requests

from stocksim.config import DEFAULT_FINNHUB_BASE_URL
from stocksim.quotes.base import QuoteSource
from stocksim.quotes.types import Quote, QuoteResult, Unavailable

logger = logging.getLogger(__name__)


def parse_quote(symbol: str, data: Any) -> QuoteResult:
    """Map a Finnhub /quote payload to Quote. Missing or zero price means no data."""
    if not isinstance(data, dict):
        return Unavailable(symbol=symbol, reason="Malformed quote payload")
    try:
        price = float(data.get("c") or 0.0)
        quote = Quote(
            symbol=symbol,
            current_price=price,
            percent_change=float(data.get("dp") or 0.0),
            day_high=float(data.get("h") or 0.0),
            day_low=float(data.get("l") or 0.0),
            day_open=float(data.get("o") or 0.0),
            previous_close=float(data.get("pc") or 0.0),
            timestamp=datetime.fromtimestamp(float(data.get("t") or 0.0)),
        )
    except (TypeError, ValueError, OverflowError, OSError) as e:
        return Unavailable(symbol=symbol, reason=f"Malformed quote payload: {e}")
    if price <= 0:
        # Finnhub answers unknown symbols with an all-zero body.
        return Unavailable(symbol=symbol, reason="Unknown symbol or no price")
    return quote


class FinnhubQuoteSource(QuoteSource):
    """
    HTTP quote source. Pass session to share connections (or to stub in tests).
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_FINNHUB_BASE_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Finnhub API key is required")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def get_quote(self, symbol: str) -> QuoteResult:
        url = f"{self._base_url}/quote"
        logger.debug("Fetching quote for %s from %s", symbol, url)
        try:
            resp = self._session.get(
                url,
                params={"symbol": symbol, "token": self._api_key},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 401:
                reason = "Unauthorized: check the Finnhub API key"
            elif status == 429:
                reason = "Finnhub rate limit reached"
            else:
                reason = f"HTTP error {status}"
            logger.warning("Quote request for %s failed: %s", symbol, reason)
            return Unavailable(symbol=symbol, reason=reason)
        except requests.RequestException as e:
            logger.warning("Quote request for %s failed: %s", symbol, e)
            return Unavailable(symbol=symbol, reason=f"Network error: {e}")
        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("Quote response for %s is not JSON: %s", symbol, e)
            return Unavailable(symbol=symbol, reason="Malformed quote payload")
        return parse_quote(symbol, data)
