"""
stocksim: paper equity-trading ledger.

Cash and share positions, buy/sell under strict invariants, persisted to a
key-value store. Quotes and valuation are read-only collaborators.
"""

__version__ = "0.1.0"

from stocksim.config import LedgerConfig
from stocksim.position import Position
from stocksim.ledger import Ledger
from stocksim.gateway import PersistenceGateway
from stocksim.engine import TransactionEngine
from stocksim.service import LedgerService, build_service
from stocksim.types import Side, TradeReceipt, TradeResult, TradeStatusKind

__all__ = [
    "LedgerConfig",
    "Position",
    "Ledger",
    "PersistenceGateway",
    "TransactionEngine",
    "LedgerService",
    "build_service",
    "Side",
    "TradeReceipt",
    "TradeResult",
    "TradeStatusKind",
]
