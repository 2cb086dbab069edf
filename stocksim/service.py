"""
Ledger service: the surface a presentation layer calls.

Wraps TransactionEngine and a QuoteSource. Every call returns a TradeResult;
ledger errors become a status kind plus a user-facing message.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from stocksim.config import LedgerConfig
from stocksim.engine import TransactionEngine
from stocksim.errors import (
    InsufficientFunds,
    InsufficientShares,
    InvalidArgument,
    LedgerError,
    PersistenceFailed,
    PositionNotFound,
    QuoteUnavailable,
    StorageError,
)
from stocksim.gateway import PersistenceGateway
from stocksim.quotes import MockQuoteSource, QuoteSource, quote_source_from_config
from stocksim.quotes.catalog import describe
from stocksim.quotes.types import Quote
from stocksim.storage import FileStore
from stocksim.types import TradeReceipt, TradeResult, TradeStatusKind

logger = logging.getLogger(__name__)

# Order matters: subclasses before their bases.
_STATUS_BY_ERROR: tuple[tuple[type[LedgerError], TradeStatusKind], ...] = (
    (InvalidArgument, TradeStatusKind.INVALID_ARGUMENT),
    (InsufficientFunds, TradeStatusKind.INSUFFICIENT_FUNDS),
    (InsufficientShares, TradeStatusKind.INSUFFICIENT_SHARES),
    (PositionNotFound, TradeStatusKind.POSITION_NOT_FOUND),
    (QuoteUnavailable, TradeStatusKind.QUOTE_UNAVAILABLE),
    (PersistenceFailed, TradeStatusKind.PERSISTENCE_FAILED),
    (StorageError, TradeStatusKind.STORAGE_UNAVAILABLE),
)

MESSAGES: dict[TradeStatusKind, str] = {
    TradeStatusKind.INVALID_ARGUMENT: "Invalid trade: enter a symbol, a whole number of shares, and a positive price.",
    TradeStatusKind.INSUFFICIENT_FUNDS: "Purchase failed: insufficient cash.",
    TradeStatusKind.INSUFFICIENT_SHARES: "Sale failed: not enough shares held.",
    TradeStatusKind.POSITION_NOT_FOUND: "Sale failed: stock not found in portfolio.",
    TradeStatusKind.QUOTE_UNAVAILABLE: "Cannot trade: stock price is unavailable.",
    TradeStatusKind.PERSISTENCE_FAILED: "Trade could not be saved. Reload before trusting balances.",
    TradeStatusKind.STORAGE_UNAVAILABLE: "Portfolio storage is unavailable. Try again later.",
}


def status_for(error: LedgerError) -> TradeStatusKind:
    for error_type, kind in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return kind
    raise error


class LedgerService:
    """
    initialize_ledger / buy / sell / reset_ledger, plus *_at_market helpers that
    price the trade with a fresh quote.
    """

    def __init__(self, engine: TransactionEngine, quotes: QuoteSource | None = None) -> None:
        self.engine = engine
        self.quotes = quotes or MockQuoteSource()

    def _run(self, action: Callable[[], TradeReceipt], success_message: Callable[[TradeReceipt], str]) -> TradeResult:
        try:
            receipt = action()
        except LedgerError as e:
            kind = status_for(e)
            logger.info("Trade failed (%s): %s", kind.value, e)
            return TradeResult(status=kind, message=MESSAGES[kind], ledger=self.engine.ledger)
        return TradeResult(
            status=TradeStatusKind.SUCCESS,
            message=success_message(receipt),
            ledger=self.engine.ledger,
            receipt=receipt,
        )

    def initialize_ledger(self) -> TradeResult:
        """Load or create the ledger; result.ledger is the snapshot to display."""
        try:
            ledger = self.engine.refresh()
        except StorageError as e:
            kind = status_for(e)
            return TradeResult(status=kind, message=MESSAGES[kind])
        return TradeResult(status=TradeStatusKind.SUCCESS, message="Portfolio loaded.", ledger=ledger)

    def buy(self, symbol: str, description: str, quantity: int, price: float) -> TradeResult:
        return self._run(
            lambda: self.engine.buy(symbol, description, quantity, price),
            lambda r: f"Successfully bought {r.quantity} share(s) of {r.symbol}.",
        )

    def sell(self, symbol: str, quantity: int, price: float) -> TradeResult:
        return self._run(
            lambda: self.engine.sell(symbol, quantity, price),
            lambda r: f"Successfully sold {r.quantity} share(s) of {r.symbol}.",
        )

    def reset_ledger(self) -> TradeResult:
        """Delete the stored ledger; the next initialize recreates the default."""
        try:
            self.engine.reset()
        except StorageError as e:
            kind = status_for(e)
            return TradeResult(status=kind, message=MESSAGES[kind], ledger=self.engine.ledger)
        return TradeResult(status=TradeStatusKind.SUCCESS, message="Portfolio reset.")

    def _market_price(self, symbol: str) -> float:
        quote = self.quotes.get_quote(symbol)
        if not isinstance(quote, Quote):
            raise QuoteUnavailable(symbol, quote.reason)
        if quote.current_price <= 0:
            raise QuoteUnavailable(symbol, "Invalid price")
        return quote.current_price

    def buy_at_market(self, symbol: str, quantity: int, description: str | None = None) -> TradeResult:
        """Fetch a fresh quote and buy at its current price."""
        desc = description if description is not None else describe(symbol)
        return self._run(
            lambda: self.engine.buy(symbol, desc, quantity, self._market_price(symbol)),
            lambda r: f"Successfully bought {r.quantity} share(s) of {r.symbol} at {r.price:.2f}.",
        )

    def sell_at_market(self, symbol: str, quantity: int) -> TradeResult:
        """Fetch a fresh quote and sell at its current price."""
        return self._run(
            lambda: self.engine.sell(symbol, quantity, self._market_price(symbol)),
            lambda r: f"Successfully sold {r.quantity} share(s) of {r.symbol} at {r.price:.2f}.",
        )


def build_service(config: LedgerConfig | None = None) -> LedgerService:
    """Wire FileStore -> PersistenceGateway -> TransactionEngine -> LedgerService."""
    config = config or LedgerConfig.from_env()
    store = FileStore(config.data_dir)
    gateway = PersistenceGateway(store, key=config.storage_key, starting_cash=config.starting_cash)
    return LedgerService(TransactionEngine(gateway), quote_source_from_config(config))
