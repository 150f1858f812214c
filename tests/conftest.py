from __future__ import annotations

import importlib
from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import docstore...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


class SteppingClock:
    """Deterministic stand-in for docstore.utils.now: every call is one second later."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> SteppingClock:
    from docstore import utils

    stepping = SteppingClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
    monkeypatch.setattr(utils, "now", stepping)
    return stepping


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Point the configured data file at a temp directory so tests never touch real ./data.
    """
    monkeypatch.setenv("DOCSTORE_DATA_FILE", str(tmp_path / "data" / "docstore.json"))
    monkeypatch.setenv("PERSIST_TO_DISK", "0")
    return tmp_path


@pytest.fixture
def reload_endpoints(sandbox_project: Path) -> None:
    """
    Endpoints create the settings and database singletons at import time; reload after sandboxing.
    """
    import endpoints.collection_endpoints as collection_endpoints

    importlib.reload(collection_endpoints)
