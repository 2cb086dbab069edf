"""
In-memory key-value store. Lives as long as the process; used for tests and throwaway sessions.
"""

from __future__ import annotations

from stocksim.storage.base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dict-backed store. Blobs are copied in and out as bytes."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        """Stored keys (for debugging/tests)."""
        return list(self._data)
