"""
Position: holding in one symbol (share count and weighted-average cost).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Position:
    """One held symbol. Mutable; only the engine changes quantity and cost."""

    symbol: str
    description: str
    quantity: int
    average_cost: float

    @property
    def cost_basis(self) -> float:
        """Total amount paid for the shares currently held."""
        return self.quantity * self.average_cost

    def add(self, quantity: int, price: float) -> None:
        """Buy more shares: quantity-weighted mean of old basis and new cost."""
        new_quantity = self.quantity + quantity
        self.average_cost = (self.quantity * self.average_cost + quantity * price) / new_quantity
        self.quantity = new_quantity
