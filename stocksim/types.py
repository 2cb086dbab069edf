"""
Trading-layer types: trade side, trade receipt, service result.

Immutable records returned to callers; the ledger itself lives in stocksim.ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from stocksim.ledger import Ledger


class Side(Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class TradeReceipt:
    """
    Record of a committed trade. realized_gain is only set for sells and is
    derived from the average cost at the time of sale; it is not stored.
    """

    side: Side
    symbol: str
    quantity: int
    price: float
    cash_after: float
    realized_gain: float | None = None
    timestamp: datetime | None = None

    @property
    def amount(self) -> float:
        return self.quantity * self.price


class TradeStatusKind(Enum):
    """Outcome of a ledger service call. One kind per failure mode."""

    SUCCESS = "success"
    INVALID_ARGUMENT = "invalid_argument"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_SHARES = "insufficient_shares"
    POSITION_NOT_FOUND = "position_not_found"
    QUOTE_UNAVAILABLE = "quote_unavailable"
    PERSISTENCE_FAILED = "persistence_failed"
    STORAGE_UNAVAILABLE = "storage_unavailable"


@dataclass(frozen=True)
class TradeResult:
    """Result of a service call. ledger is the committed snapshot when known."""

    status: TradeStatusKind
    message: str
    ledger: Ledger | None = None
    receipt: TradeReceipt | None = None

    @property
    def ok(self) -> bool:
        return self.status == TradeStatusKind.SUCCESS
