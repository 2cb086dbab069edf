"""
Tests for PersistenceGateway: load, save, clear, initialize.
"""

import json
import logging

import pytest

from stocksim import Ledger, PersistenceGateway, Position
from stocksim.errors import CorruptState, InvariantViolation, StorageUnavailable
from stocksim.storage import InMemoryStore

KEY = "@StockSimulatorApp:portfolio"


class BrokenStore(InMemoryStore):
    """Store whose operations can be made to fail with OSError."""

    def __init__(self, fail_get=False, fail_set=False, fail_delete=False):
        super().__init__()
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.fail_delete = fail_delete

    def get(self, key):
        if self.fail_get:
            raise OSError("read failed")
        return super().get(key)

    def set(self, key, data):
        if self.fail_set:
            raise OSError("write failed")
        super().set(key, data)

    def delete(self, key):
        if self.fail_delete:
            raise OSError("delete failed")
        return super().delete(key)


def _sample_ledger() -> Ledger:
    return Ledger(
        cash=97_400.0,
        positions={
            "AAPL": Position("AAPL", "APPLE INC", 15, 2600.0 / 15),
            "MSFT": Position("MSFT", "MICROSOFT CORP", 3, 280.0),
        },
    )


# --- load / save ---


def test_load_absent_returns_none():
    gw = PersistenceGateway(InMemoryStore())
    assert gw.load() is None


def test_save_then_load_roundtrip():
    gw = PersistenceGateway(InMemoryStore())
    ledger = _sample_ledger()
    gw.save(ledger)
    loaded = gw.load()
    assert loaded == ledger
    assert list(loaded.positions) == ["AAPL", "MSFT"]


def test_save_writes_json_layout():
    store = InMemoryStore()
    PersistenceGateway(store, key=KEY).save(Ledger(cash=10.0, positions={"V": Position("V", "VISA", 1, 5.0)}))
    assert json.loads(store.get(KEY)) == {
        "cash": 10.0,
        "positions": [{"symbol": "V", "description": "VISA", "quantity": 1, "averageCost": 5.0}],
    }


def test_save_rejects_invalid_ledger():
    store = InMemoryStore()
    with pytest.raises(InvariantViolation):
        PersistenceGateway(store).save(Ledger(cash=-1.0))
    assert store.keys() == []


def test_load_not_json_is_corrupt():
    gw = PersistenceGateway(InMemoryStore({KEY: b"{not json"}), key=KEY)
    with pytest.raises(CorruptState):
        gw.load()


def test_load_missing_fields_is_corrupt():
    gw = PersistenceGateway(InMemoryStore({KEY: b'{"cash": 5}'}), key=KEY)
    with pytest.raises(CorruptState):
        gw.load()


def test_load_read_failure_is_storage_unavailable():
    gw = PersistenceGateway(BrokenStore(fail_get=True))
    with pytest.raises(StorageUnavailable):
        gw.load()


def test_save_write_failure_is_storage_unavailable():
    gw = PersistenceGateway(BrokenStore(fail_set=True))
    with pytest.raises(StorageUnavailable):
        gw.save(Ledger.default())


# --- clear ---


def test_clear_removes_snapshot():
    store = InMemoryStore()
    gw = PersistenceGateway(store, key=KEY)
    gw.save(Ledger.default())
    gw.clear()
    assert store.get(KEY) is None


def test_clear_absent_is_logged_not_raised(caplog):
    gw = PersistenceGateway(InMemoryStore())
    with caplog.at_level(logging.INFO, logger="stocksim.gateway"):
        gw.clear()
    assert "no snapshot" in caplog.text


def test_clear_failure_is_storage_unavailable():
    with pytest.raises(StorageUnavailable):
        PersistenceGateway(BrokenStore(fail_delete=True)).clear()


# --- initialize ---


def test_initialize_empty_storage_persists_default():
    store = InMemoryStore()
    gw = PersistenceGateway(store, key=KEY)
    ledger = gw.initialize()
    assert ledger == Ledger(cash=100_000.0, positions={})
    assert json.loads(store.get(KEY)) == {"cash": 100_000.0, "positions": []}


def test_initialize_uses_configured_starting_cash():
    gw = PersistenceGateway(InMemoryStore(), starting_cash=2_500.0)
    assert gw.initialize().cash == 2_500.0


def test_initialize_returns_existing():
    gw = PersistenceGateway(InMemoryStore())
    gw.save(_sample_ledger())
    assert gw.initialize() == _sample_ledger()


def test_initialize_corrupt_falls_back_to_default(caplog):
    store = InMemoryStore({KEY: b'{"holdings": []}'})
    gw = PersistenceGateway(store, key=KEY)
    with caplog.at_level(logging.WARNING, logger="stocksim.gateway"):
        ledger = gw.initialize()
    assert ledger == Ledger.default()
    assert json.loads(store.get(KEY)) == {"cash": 100_000.0, "positions": []}
    assert "corrupt" in caplog.text


def test_initialize_after_clear_recreates_default():
    gw = PersistenceGateway(InMemoryStore())
    gw.save(_sample_ledger())
    gw.clear()
    assert gw.initialize() == Ledger.default()


def test_initialize_read_failure_propagates():
    with pytest.raises(StorageUnavailable):
        PersistenceGateway(BrokenStore(fail_get=True)).initialize()


@pytest.mark.parametrize(
    "blob",
    [
        b'{"cash": NaN, "positions": []}',
        b'{"cash": Infinity, "positions": []}',
        b'{"cash": 10, "positions": [{"symbol": "SPY", "quantity": 1, "averageCost": Infinity}]}',
    ],
)
def test_load_non_finite_numbers_is_corrupt(blob):
    gw = PersistenceGateway(InMemoryStore({KEY: blob}), key=KEY)
    with pytest.raises(CorruptState):
        gw.load()
    assert gw.initialize() == Ledger.default()
