"""
Paper trading example: trade against a persisted ledger with market-priced fills.

Shows: LedgerService over a file store, buy/sell at mock (or Finnhub) prices,
rejected trades with their messages, and the valuation report.
Set FINNHUB_API_KEY to use live quotes; STOCKSIM_DATA_DIR to choose where the ledger is kept.
"""

from __future__ import annotations

import logging

from stocksim import LedgerConfig, TradeResult, build_service
from stocksim.quotes import search_stocks
from stocksim.valuation import print_report


def show(label: str, result: TradeResult) -> None:
    print(f"  [{label}] {result.status.value}: {result.message}")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    config = LedgerConfig.from_env()
    service = build_service(config)

    print("--- Reset and initialize ---")
    service.reset_ledger()
    result = service.initialize_ledger()
    print(f"Ledger: cash={result.ledger.cash:.2f}, positions={len(result.ledger.positions)}")

    print("\n--- Search ---")
    for stock in search_stocks("inc"):
        print(f"  {stock.display_symbol:<6} {stock.description}")

    print("\n--- Trades ---")
    show("buy AAPL x10", service.buy_at_market("AAPL", 10))
    show("buy NVDA x5", service.buy_at_market("NVDA", 5))
    show("buy GOOGL x100", service.buy_at_market("GOOGL", 100))  # too expensive
    show("sell MSFT x1", service.sell_at_market("MSFT", 1))  # not held
    show("sell AAPL x4", service.sell_at_market("AAPL", 4))
    show("buy JPM x1", service.buy_at_market("JPM", 1))  # no mock quote

    print()
    ledger = service.initialize_ledger().ledger
    print_report(ledger, service.quotes)


if __name__ == "__main__":
    main()
