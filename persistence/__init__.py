from __future__ import annotations

from .disk_store import DiskTextFileStore
from .interfaces import TextFileStore
from .locks import GLOBAL_PATH_LOCKS, PathLockRegistry

__all__ = [
    "TextFileStore",
    "DiskTextFileStore",
    "PathLockRegistry",
    "GLOBAL_PATH_LOCKS",
]
