"""
Tests for TransactionEngine: buy, sell, with_ledger, rollback, reset.
"""

import json
import random

import pytest

from stocksim import Ledger, PersistenceGateway, Position, Side, TransactionEngine
from stocksim.errors import (
    InsufficientFunds,
    InsufficientShares,
    InvalidArgument,
    PersistenceFailed,
    PositionNotFound,
)
from stocksim.storage import InMemoryStore

KEY = "@StockSimulatorApp:portfolio"


class FlakyStore(InMemoryStore):
    """Writes fail while fail_set is True."""

    fail_set = False

    def set(self, key, data):
        if self.fail_set:
            raise OSError("write failed")
        super().set(key, data)


def _engine(store=None, cash=100_000.0) -> TransactionEngine:
    store = store if store is not None else InMemoryStore()
    return TransactionEngine(PersistenceGateway(store, key=KEY, starting_cash=cash))


def _stored(store) -> dict:
    return json.loads(store.get(KEY))


# --- Buy ---


def test_buy_new_position():
    store = InMemoryStore()
    engine = _engine(store)
    receipt = engine.buy("AAPL", "APPLE INC", 10, 170.0)
    assert receipt.side == Side.BUY
    assert receipt.cash_after == 98_300.0
    assert receipt.amount == 1_700.0
    assert receipt.realized_gain is None
    assert engine.ledger.cash == 98_300.0
    assert engine.ledger.position("AAPL") == Position("AAPL", "APPLE INC", 10, 170.0)
    assert _stored(store)["cash"] == 98_300.0


def test_buy_twice_weighted_average():
    engine = _engine()
    engine.buy("SPY", "SPDR", 4, 100.0)
    engine.buy("SPY", "SPDR", 6, 110.0)
    pos = engine.ledger.position("SPY")
    assert pos.quantity == 10
    assert pos.average_cost == pytest.approx((4 * 100.0 + 6 * 110.0) / 10)


def test_buy_insufficient_funds_leaves_ledger_unchanged():
    store = InMemoryStore()
    engine = _engine(store, cash=100.0)
    with pytest.raises(InsufficientFunds):
        engine.buy("SPY", "SPDR", 10, 11.0)
    assert engine.ledger.cash == 100.0
    assert engine.ledger.positions == {}
    assert _stored(store) == {"cash": 100.0, "positions": []}


def test_buy_exact_cash_allowed():
    engine = _engine(cash=1_000.0)
    engine.buy("SPY", "SPDR", 10, 100.0)
    assert engine.ledger.cash == 0.0


@pytest.mark.parametrize(
    "symbol,quantity,price",
    [
        ("SPY", 0, 10.0),
        ("SPY", -1, 10.0),
        ("SPY", 1, 0.0),
        ("SPY", 1, -5.0),
        ("SPY", 1.5, 10.0),
        ("SPY", True, 10.0),
        ("SPY", 1, float("nan")),
        ("SPY", 1, float("inf")),
        ("SPY", 10**400, 1.0),
        ("SPY", 1, 10**400),
        ("SPY", 10**200, 1e200),
        ("", 1, 10.0),
    ],
)
def test_buy_invalid_arguments(symbol, quantity, price):
    store = InMemoryStore()
    engine = _engine(store)
    with pytest.raises(InvalidArgument):
        engine.buy(symbol, "desc", quantity, price)
    # Rejected before the ledger is even loaded.
    assert store.get(KEY) is None


# --- Sell ---


def test_sell_partial_keeps_average_cost():
    engine = _engine()
    engine.buy("MSFT", "MICROSOFT CORP", 10, 280.0)
    receipt = engine.sell("MSFT", 4, 300.0)
    assert receipt.side == Side.SELL
    assert receipt.realized_gain == pytest.approx(80.0)
    pos = engine.ledger.position("MSFT")
    assert pos.quantity == 6
    assert pos.average_cost == 280.0
    assert engine.ledger.cash == 100_000.0 - 2_800.0 + 1_200.0


def test_sell_all_removes_position():
    store = InMemoryStore()
    engine = _engine(store)
    engine.buy("TSLA", "TESLA INC", 3, 250.0)
    engine.sell("TSLA", 3, 240.0)
    assert not engine.ledger.has_position("TSLA")
    assert _stored(store)["positions"] == []


def test_sell_insufficient_shares():
    engine = _engine()
    engine.buy("NVDA", "NVIDIA CORP", 5, 450.0)
    cash = engine.ledger.cash
    with pytest.raises(InsufficientShares):
        engine.sell("NVDA", 6, 460.0)
    assert engine.ledger.quantity("NVDA") == 5
    assert engine.ledger.cash == cash


def test_sell_position_not_found():
    engine = _engine()
    with pytest.raises(PositionNotFound):
        engine.sell("AMZN", 1, 135.5)


def test_sell_invalid_arguments():
    engine = _engine()
    engine.buy("AMZN", "AMAZON.COM INC", 1, 135.5)
    with pytest.raises(InvalidArgument):
        engine.sell("AMZN", 0, 135.5)
    with pytest.raises(InvalidArgument):
        engine.sell("AMZN", 1, 0)


# --- Scenario ---


def test_buy_buy_sell_scenario():
    store = InMemoryStore()
    engine = _engine(store)
    engine.refresh()
    assert engine.ledger == Ledger(cash=100_000.0, positions={})

    engine.buy("AAPL", "APPLE INC", 10, 170.0)
    assert engine.ledger.cash == 98_300.0
    assert engine.ledger.position("AAPL") == Position("AAPL", "APPLE INC", 10, 170.0)

    engine.buy("AAPL", "APPLE INC", 5, 180.0)
    pos = engine.ledger.position("AAPL")
    assert engine.ledger.cash == 97_400.0
    assert pos.quantity == 15
    assert pos.average_cost == pytest.approx(173.33, abs=0.01)

    engine.sell("AAPL", 15, 190.0)
    assert engine.ledger.cash == 100_250.0
    assert engine.ledger.positions == {}
    assert _stored(store) == {"cash": 100_250.0, "positions": []}


def test_random_trades_keep_invariants():
    rng = random.Random(7)
    engine = _engine(cash=10_000.0)
    symbols = ["AAPL", "MSFT", "TSLA"]
    for _ in range(300):
        sym = rng.choice(symbols)
        qty = rng.randint(1, 20)
        price = round(rng.uniform(1.0, 500.0), 2)
        try:
            if rng.random() < 0.5:
                engine.buy(sym, sym, qty, price)
            else:
                engine.sell(sym, qty, price)
        except (InsufficientFunds, InsufficientShares, PositionNotFound):
            pass
        engine.ledger.check_invariants()
        assert engine.ledger.cash >= 0
        assert all(p.quantity > 0 for p in engine.ledger.positions.values())


# --- Persistence failure ---


def test_failed_save_rolls_back_in_memory_ledger():
    store = FlakyStore()
    engine = _engine(store)
    engine.buy("AAPL", "APPLE INC", 10, 170.0)
    before = engine.ledger.copy()

    store.fail_set = True
    with pytest.raises(PersistenceFailed):
        engine.buy("AAPL", "APPLE INC", 5, 180.0)
    assert engine.ledger == before
    assert _stored(store)["cash"] == 98_300.0

    store.fail_set = False
    engine.sell("AAPL", 10, 175.0)
    assert engine.ledger.cash == 98_300.0 + 1_750.0


def test_with_ledger_exception_saves_nothing():
    store = InMemoryStore()
    engine = _engine(store)
    engine.refresh()

    def bad(ledger):
        ledger.cash = 1.0
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError):
        engine.with_ledger(bad)
    assert engine.ledger.cash == 100_000.0
    assert _stored(store)["cash"] == 100_000.0


def test_with_ledger_returns_mutator_result():
    engine = _engine()
    assert engine.with_ledger(lambda ledger: len(ledger.positions)) == 0


# --- Reset / refresh ---


def test_reset_then_refresh_recreates_default():
    store = InMemoryStore()
    engine = _engine(store)
    engine.buy("AAPL", "APPLE INC", 10, 170.0)
    engine.reset()
    assert engine.ledger is None
    assert store.get(KEY) is None
    assert engine.refresh() == Ledger.default()


def test_refresh_sees_external_write():
    store = InMemoryStore()
    engine = _engine(store)
    engine.refresh()
    other = _engine(store)
    other.buy("V", "VISA INC-CLASS A", 2, 250.0)
    assert engine.ledger.cash == 100_000.0
    assert engine.refresh().quantity("V") == 2
