"""
Key-value storage abstraction.

KeyValueStore ABC: get, set, delete of a single named blob.
The ledger owns exactly one key; set must be atomic for that key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """
    Abstract blob store. Same interface for in-memory and on-disk storage.
    Implementations raise OSError (or a subclass) when the substrate fails.
    """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the blob stored under key, or None if absent."""
        ...

    @abstractmethod
    def set(self, key: str, data: bytes) -> None:
        """
        Overwrite the blob under key. A concurrent reader sees either the
        old blob or the new one, never a partial write.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key. Returns False if it was absent."""
        ...
