from __future__ import annotations

import logging
from pathlib import Path

from json_store import atomic_write_text

from .interfaces import TextFileStore
from .locks import GLOBAL_PATH_LOCKS

logger = logging.getLogger(__name__)


class DiskTextFileStore(TextFileStore):
    """
    Local-disk TextFileStore.

    - Reads and writes UTF-8.
    - Writes go through a temp file and a replace, under a per-path lock.
    - Errors (permissions, missing files, directories) propagate to the caller.
    """

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_text(self, path: Path) -> str:
        with GLOBAL_PATH_LOCKS.locked(path):
            return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, text: str) -> None:
        with GLOBAL_PATH_LOCKS.locked(path):
            atomic_write_text(path, text)
        logger.debug("wrote %d bytes to %s", len(text), path)

    def remove(self, path: Path) -> None:
        with GLOBAL_PATH_LOCKS.locked(path):
            path.unlink()
