"""
Ledger error taxonomy.

Validation errors (TradeRejected) are raised before any mutation and are safe to retry.
Storage errors come from the key-value substrate or from an unusable snapshot.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for every error raised by the ledger."""


class InvariantViolation(LedgerError):
    """A ledger breaks cash/quantity/cost invariants."""


class TradeRejected(LedgerError):
    """A buy/sell request failed validation. Ledger and snapshot are untouched."""


class InvalidArgument(TradeRejected):
    pass


class InsufficientFunds(TradeRejected):
    def __init__(self, symbol: str, cost: float, cash: float) -> None:
        super().__init__(f"Insufficient cash to buy {symbol}: cost {cost:.2f}, cash {cash:.2f}")
        self.symbol = symbol
        self.cost = cost
        self.cash = cash


class InsufficientShares(TradeRejected):
    def __init__(self, symbol: str, requested: int, held: int) -> None:
        super().__init__(f"Cannot sell {requested} {symbol}: only {held} held")
        self.symbol = symbol
        self.requested = requested
        self.held = held


class PositionNotFound(TradeRejected):
    def __init__(self, symbol: str) -> None:
        super().__init__(f"No position in {symbol}")
        self.symbol = symbol


class QuoteUnavailable(TradeRejected):
    def __init__(self, symbol: str, reason: str) -> None:
        super().__init__(f"No usable quote for {symbol}: {reason}")
        self.symbol = symbol
        self.reason = reason


class StorageError(LedgerError):
    """Failure reading, writing or decoding the persisted snapshot."""


class CorruptState(StorageError):
    """Persisted snapshot cannot be parsed into a valid Ledger."""


class StorageUnavailable(StorageError):
    """The key-value substrate failed a get/set/delete."""


class PersistenceFailed(StorageError):
    """A validated trade could not be saved. The in-memory ledger was rolled back."""
