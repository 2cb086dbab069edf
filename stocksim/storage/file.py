"""
File-backed key-value store: one file per key under a base directory.

Writes go to a temporary file in the same directory and are moved into place
with os.replace, so readers never observe a partially written blob.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import quote

from stocksim.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


def _filename_for(key: str) -> str:
    """Map a key (e.g. '@StockSimulatorApp:portfolio') to a safe file name."""
    return quote(key, safe="") + ".json"


class FileStore(KeyValueStore):
    """
    Durable store rooted at base_dir. The directory is created on first write.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def path_for(self, key: str) -> Path:
        return self.base_dir / _filename_for(key)

    def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, data: bytes) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.base_dir, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            # Leave the previous blob in place; drop the partial temp file.
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        logger.debug("FileStore: wrote %d bytes to %s", len(data), path)

    def delete(self, key: str) -> bool:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            return False
        return True
