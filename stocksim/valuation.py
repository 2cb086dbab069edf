"""
Valuation: mark positions to fresh quotes and summarize the portfolio.
"""

from __future__ import annotations

import logging

import pandas as pd

from stocksim.ledger import Ledger
from stocksim.quotes.base import QuoteSource
from stocksim.quotes.types import Quote

logger = logging.getLogger(__name__)

COLUMNS = [
    "symbol",
    "description",
    "quantity",
    "average_cost",
    "current_price",
    "percent_change",
    "market_value",
    "cost_basis",
    "gain_loss",
]


def value_positions(ledger: Ledger, quotes: QuoteSource) -> pd.DataFrame:
    """
    One row per position, in ledger order.

    Positions without a usable quote are marked at average cost (gain_loss 0)
    and percent_change is NaN.
    """
    rows = []
    for pos in ledger.positions.values():
        quote = quotes.get_quote(pos.symbol)
        if isinstance(quote, Quote):
            price, change = quote.current_price, quote.percent_change
        else:
            logger.warning("No quote for %s (%s); marking at average cost", pos.symbol, quote.reason)
            price, change = pos.average_cost, float("nan")
        market_value = pos.quantity * price
        rows.append({
            "symbol": pos.symbol,
            "description": pos.description,
            "quantity": pos.quantity,
            "average_cost": pos.average_cost,
            "current_price": price,
            "percent_change": change,
            "market_value": market_value,
            "cost_basis": pos.cost_basis,
            "gain_loss": market_value - pos.cost_basis,
        })
    return pd.DataFrame(rows, columns=COLUMNS)


def total_value(ledger: Ledger, valuation: pd.DataFrame) -> float:
    """Cash plus market value of all positions."""
    if valuation.empty:
        return float(ledger.cash)
    return float(ledger.cash + valuation["market_value"].sum())


def print_report(ledger: Ledger, quotes: QuoteSource) -> pd.DataFrame:
    """
    Print a portfolio summary and return the valuation frame.
    """
    valuation = value_positions(ledger, quotes)
    print("--- Portfolio ---")
    print(f"Cash:            {ledger.cash:,.2f}")
    for row in valuation.itertuples(index=False):
        sign = "+" if row.gain_loss > 0 else ""
        print(
            f"{row.symbol:<6} x{row.quantity:<5} avg {row.average_cost:,.2f}  "
            f"mkt {row.current_price:,.2f}  value {row.market_value:,.2f}  "
            f"P/L {sign}{row.gain_loss:,.2f}"
        )
    gain = float(valuation["gain_loss"].sum()) if not valuation.empty else 0.0
    print(f"Unrealized P/L:  {gain:,.2f}")
    print(f"Total value:     {total_value(ledger, valuation):,.2f}")
    print("-----------------")
    return valuation
