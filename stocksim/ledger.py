"""
Ledger: cash balance and share positions. The unit of persistence.

The ledger holds state and checks its own invariants; it does not trade.
TransactionEngine mutates it and PersistenceGateway stores it.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from typing import Any

from stocksim.config import DEFAULT_STARTING_CASH
from stocksim.errors import CorruptState, InvariantViolation
from stocksim.position import Position


def _as_quantity(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptState(f"quantity must be a number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise CorruptState(f"fractional quantity {value!r}")
        value = int(value)
    return value


def _as_amount(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptState(f"{name} must be a number, got {value!r}")
    try:
        amount = float(value)
    except OverflowError as e:
        raise CorruptState(f"{name} is out of range: {value!r}") from e
    if not math.isfinite(amount):
        raise CorruptState(f"{name} must be finite, got {value!r}")
    return amount


@dataclass
class Ledger:
    """
    Cash and positions keyed by symbol. Insertion order is display order.
    """

    cash: float = DEFAULT_STARTING_CASH
    positions: dict[str, Position] = field(default_factory=dict)

    @classmethod
    def default(cls, starting_cash: float = DEFAULT_STARTING_CASH) -> "Ledger":
        """Fresh ledger: starting cash, no positions."""
        return cls(cash=float(starting_cash), positions={})

    def position(self, symbol: str) -> Position | None:
        """Position held in symbol. None if not present."""
        return self.positions.get(symbol)

    def has_position(self, symbol: str) -> bool:
        return symbol in self.positions

    def quantity(self, symbol: str) -> int:
        """Shares held in symbol. 0 if not present."""
        pos = self.positions.get(symbol)
        return pos.quantity if pos is not None else 0

    def copy(self) -> "Ledger":
        """Deep copy; mutations on the copy never reach this ledger."""
        return copy.deepcopy(self)

    def check_invariants(self) -> None:
        """Raise InvariantViolation if cash, quantities, costs or keys are invalid."""
        if not math.isfinite(self.cash) or self.cash < 0:
            raise InvariantViolation(f"cash must be finite and >= 0, got {self.cash}")
        for key, pos in self.positions.items():
            if not pos.symbol:
                raise InvariantViolation("position with empty symbol")
            if key != pos.symbol:
                raise InvariantViolation(f"position {pos.symbol!r} stored under key {key!r}")
            if pos.quantity <= 0:
                raise InvariantViolation(f"{pos.symbol}: quantity must be > 0, got {pos.quantity}")
            if not math.isfinite(pos.average_cost) or pos.average_cost < 0:
                raise InvariantViolation(f"{pos.symbol}: average cost must be finite and >= 0, got {pos.average_cost}")

    def to_dict(self) -> dict[str, Any]:
        """Snapshot layout: {cash, positions: [{symbol, description, quantity, averageCost}]}."""
        return {
            "cash": self.cash,
            "positions": [
                {
                    "symbol": pos.symbol,
                    "description": pos.description,
                    "quantity": pos.quantity,
                    "averageCost": pos.average_cost,
                }
                for pos in self.positions.values()
            ],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Ledger":
        """
        Build a ledger from a decoded snapshot. Unknown fields are ignored.

        Raises CorruptState when cash/positions are missing, malformed, or
        describe a ledger that breaks the invariants.
        """
        if not isinstance(data, dict):
            raise CorruptState(f"snapshot must be an object, got {type(data).__name__}")
        if "cash" not in data or "positions" not in data:
            raise CorruptState("snapshot is missing 'cash' or 'positions'")
        raw_positions = data["positions"]
        if not isinstance(raw_positions, list):
            raise CorruptState("'positions' must be a list")

        positions: dict[str, Position] = {}
        for raw in raw_positions:
            if not isinstance(raw, dict):
                raise CorruptState(f"position entry must be an object, got {raw!r}")
            try:
                symbol = raw["symbol"]
                quantity = _as_quantity(raw["quantity"])
                average_cost = _as_amount(raw["averageCost"], "averageCost")
            except KeyError as e:
                raise CorruptState(f"position entry missing field {e}") from e
            if not isinstance(symbol, str):
                raise CorruptState(f"symbol must be a string, got {symbol!r}")
            if symbol in positions:
                raise CorruptState(f"duplicate position for {symbol}")
            positions[symbol] = Position(
                symbol=symbol,
                description=str(raw.get("description", "")),
                quantity=quantity,
                average_cost=average_cost,
            )

        ledger = cls(cash=_as_amount(data["cash"], "cash"), positions=positions)
        try:
            ledger.check_invariants()
        except InvariantViolation as e:
            raise CorruptState(str(e)) from e
        return ledger
