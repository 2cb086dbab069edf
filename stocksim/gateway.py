"""
Persistence gateway: translate the Ledger to/from its JSON blob in a KeyValueStore.

initialize() is the entry point trading uses: it always returns a ledger that
is valid and durably stored.
"""

from __future__ import annotations

import json
import logging

from stocksim.config import DEFAULT_STARTING_CASH, DEFAULT_STORAGE_KEY
from stocksim.errors import CorruptState, StorageUnavailable
from stocksim.ledger import Ledger
from stocksim.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class PersistenceGateway:
    """
    Owns one key in the store. load/save/clear map substrate failures to
    StorageUnavailable; load maps unusable snapshots to CorruptState.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        starting_cash: float = DEFAULT_STARTING_CASH,
    ) -> None:
        self.store = store
        self.key = key
        self.starting_cash = starting_cash

    def load(self) -> Ledger | None:
        """Read the snapshot. None if nothing is stored."""
        try:
            blob = self.store.get(self.key)
        except OSError as e:
            logger.exception("Failed to read ledger snapshot %s", self.key)
            raise StorageUnavailable(f"read of {self.key!r} failed: {e}") from e
        if blob is None:
            return None
        try:
            data = json.loads(blob)
        except (UnicodeDecodeError, ValueError) as e:
            raise CorruptState(f"snapshot {self.key!r} is not valid JSON: {e}") from e
        return Ledger.from_dict(data)

    def save(self, ledger: Ledger) -> None:
        """Validate and overwrite the snapshot."""
        ledger.check_invariants()
        blob = json.dumps(ledger.to_dict()).encode("utf-8")
        try:
            self.store.set(self.key, blob)
        except OSError as e:
            logger.exception("Failed to save ledger snapshot %s", self.key)
            raise StorageUnavailable(f"write of {self.key!r} failed: {e}") from e
        logger.debug("Ledger saved: cash=%.2f, positions=%d", ledger.cash, len(ledger.positions))

    def clear(self) -> None:
        """Delete the snapshot. A missing snapshot is logged, not raised."""
        try:
            existed = self.store.delete(self.key)
        except OSError as e:
            logger.exception("Failed to clear ledger snapshot %s", self.key)
            raise StorageUnavailable(f"delete of {self.key!r} failed: {e}") from e
        if existed:
            logger.info("Ledger cleared from storage.")
        else:
            logger.info("Ledger clear requested but no snapshot was stored.")

    def default_ledger(self) -> Ledger:
        return Ledger.default(self.starting_cash)

    def initialize(self) -> Ledger:
        """
        Return the stored ledger, or create, persist and return the default one.

        A corrupt snapshot is replaced by the default; the only durable copy is
        already unusable, so there is nothing to preserve.
        """
        try:
            ledger = self.load()
        except CorruptState as e:
            logger.warning("Ledger snapshot is corrupt (%s); resetting to default.", e)
            ledger = None
        if ledger is not None:
            return ledger
        logger.info("No usable ledger found. Initializing default with cash=%.2f", self.starting_cash)
        ledger = self.default_ledger()
        self.save(ledger)
        return ledger
