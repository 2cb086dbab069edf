"""
Transaction engine: validate and apply buy/sell requests to the ledger.

Every trade runs inside with_ledger: load (or initialize) -> copy -> validate
and mutate the copy -> check invariants -> save. The committed ledger only
changes after the save succeeds, so a failed save leaves memory and storage
in agreement.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable
from datetime import datetime
from typing import TypeVar

from stocksim.errors import (
    InsufficientFunds,
    InsufficientShares,
    InvalidArgument,
    PersistenceFailed,
    PositionNotFound,
    StorageUnavailable,
)
from stocksim.gateway import PersistenceGateway
from stocksim.ledger import Ledger
from stocksim.position import Position
from stocksim.types import Side, TradeReceipt

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _check_trade_args(symbol: str, quantity: int, price: float) -> None:
    if not isinstance(symbol, str) or not symbol.strip():
        raise InvalidArgument("symbol must be a non-empty string")
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidArgument(f"quantity must be a whole number of shares, got {quantity!r}")
    if quantity <= 0:
        raise InvalidArgument(f"quantity must be positive, got {quantity}")
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise InvalidArgument(f"price must be a number, got {price!r}")
    try:
        amount = float(quantity) * float(price)
    except OverflowError as e:
        raise InvalidArgument("trade amount is out of range") from e
    if not math.isfinite(price) or price <= 0:
        raise InvalidArgument(f"price must be a positive finite number, got {price!r}")
    if not math.isfinite(amount):
        raise InvalidArgument("trade amount is out of range")


class TransactionEngine:
    """
    Applies trades to one ledger persisted through a PersistenceGateway.

    Calls on one engine are serialized with a lock. Two engines (or processes)
    sharing a storage key are not coordinated and can lose updates.
    """

    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway
        self.ledger: Ledger | None = None
        self._lock = threading.Lock()

    def refresh(self) -> Ledger:
        """Reload from storage (initializing the default if needed)."""
        with self._lock:
            self.ledger = self.gateway.initialize()
            return self.ledger

    def with_ledger(self, mutate: Callable[[Ledger], T]) -> T:
        """
        Run mutate on a working copy of the stored ledger and persist it.

        Exceptions from mutate abort the transaction with nothing saved.
        A failed save raises PersistenceFailed and keeps the last committed ledger.
        """
        with self._lock:
            base = self.gateway.initialize()
            self.ledger = base
            working = base.copy()
            result = mutate(working)
            working.check_invariants()
            try:
                self.gateway.save(working)
            except StorageUnavailable as e:
                logger.warning("Trade not saved; keeping last committed ledger: %s", e)
                raise PersistenceFailed(str(e)) from e
            self.ledger = working
            return result

    def buy(self, symbol: str, description: str, quantity: int, price: float) -> TradeReceipt:
        """Buy quantity shares at price. Raises TradeRejected subclasses on validation failure."""
        _check_trade_args(symbol, quantity, price)
        price = float(price)

        def apply(ledger: Ledger) -> TradeReceipt:
            cost = quantity * price
            if ledger.cash < cost:
                logger.warning(
                    "Buy rejected: insufficient cash %.2f for cost %.2f (%s x%d)",
                    ledger.cash, cost, symbol, quantity,
                )
                raise InsufficientFunds(symbol, cost, ledger.cash)
            ledger.cash -= cost
            pos = ledger.position(symbol)
            if pos is not None:
                pos.add(quantity, price)
                logger.info(
                    "Updated position %s: quantity=%d, average_cost=%.4f",
                    symbol, pos.quantity, pos.average_cost,
                )
            else:
                ledger.positions[symbol] = Position(
                    symbol=symbol,
                    description=description,
                    quantity=quantity,
                    average_cost=price,
                )
                logger.info("Added position %s: quantity=%d, price=%.2f", symbol, quantity, price)
            return TradeReceipt(
                side=Side.BUY,
                symbol=symbol,
                quantity=quantity,
                price=price,
                cash_after=ledger.cash,
                timestamp=datetime.now(),
            )

        return self.with_ledger(apply)

    def sell(self, symbol: str, quantity: int, price: float) -> TradeReceipt:
        """Sell quantity shares at price. No partial fills; average cost is unchanged."""
        _check_trade_args(symbol, quantity, price)
        price = float(price)

        def apply(ledger: Ledger) -> TradeReceipt:
            pos = ledger.position(symbol)
            if pos is None:
                logger.warning("Sell rejected: no position in %s", symbol)
                raise PositionNotFound(symbol)
            if pos.quantity < quantity:
                logger.warning(
                    "Sell rejected: %s holds %d, requested %d", symbol, pos.quantity, quantity
                )
                raise InsufficientShares(symbol, quantity, pos.quantity)
            proceeds = quantity * price
            if not math.isfinite(ledger.cash + proceeds):
                raise InvalidArgument("sale proceeds push cash out of range")
            realized = (price - pos.average_cost) * quantity
            ledger.cash += proceeds
            if pos.quantity == quantity:
                del ledger.positions[symbol]
                logger.info("Sold all shares of %s. Position removed.", symbol)
            else:
                pos.quantity -= quantity
                logger.info("Sold %d %s. Remaining quantity: %d", quantity, symbol, pos.quantity)
            return TradeReceipt(
                side=Side.SELL,
                symbol=symbol,
                quantity=quantity,
                price=price,
                cash_after=ledger.cash,
                realized_gain=realized,
                timestamp=datetime.now(),
            )

        return self.with_ledger(apply)

    def reset(self) -> None:
        """Delete the stored ledger. The next trade or refresh recreates the default."""
        with self._lock:
            self.gateway.clear()
            self.ledger = None
