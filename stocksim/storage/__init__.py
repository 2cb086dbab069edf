"""
Storage layer: key-value blob substrate for the persisted ledger snapshot.

KeyValueStore interface; in-memory store for tests/sessions; file store for durable state.
"""

from stocksim.storage.base import KeyValueStore
from stocksim.storage.file import FileStore
from stocksim.storage.memory import InMemoryStore

__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "FileStore",
]
