from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def encode_json(payload: Any, *, indent: int = 2, sort_keys: bool = False) -> str:
    # NaN/Infinity are not JSON; refuse to write them.
    return json.dumps(payload, indent=indent, sort_keys=sort_keys, ensure_ascii=False, allow_nan=False) + "\n"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not valid JSON")


def decode_json(raw: str) -> Any:
    """
    Parse strict JSON text. Raises json.JSONDecodeError on invalid input and
    ValueError on an empty document or a NaN/Infinity literal.
    """
    if not raw.strip():
        raise ValueError("empty JSON document")
    return json.loads(raw, parse_constant=_reject_constant)


def atomic_write_text(path: Path, text: str) -> None:
    """
    Atomically write text to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(text)
    tmp_path.replace(path)
