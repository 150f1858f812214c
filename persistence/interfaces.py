from __future__ import annotations

from pathlib import Path
from typing import Protocol


class TextFileStore(Protocol):
    """
    The file-system surface `Database.persist` / `Database.restore` need.
    Implementations are synchronous; the database runs them off the event loop.
    """

    def exists(self, path: Path) -> bool:
        ...

    def is_dir(self, path: Path) -> bool:
        ...

    def read_text(self, path: Path) -> str:
        """Return the file contents. Raises FileNotFoundError when missing."""
        ...

    def write_text(self, path: Path, text: str) -> None:
        """Replace the file contents atomically."""
        ...

    def remove(self, path: Path) -> None:
        ...
