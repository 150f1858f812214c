from __future__ import annotations

import copy
import logging
from typing import Any, Mapping

from . import utils
from .errors import PropertyNotFoundError, ReservedKeyError

logger = logging.getLogger(__name__)

ID_KEY = "_id"
CREATED_KEY = "_created"
UPDATED_KEY = "_updated"

# _rev and _key are kept for wire compatibility; nothing writes them yet.
RESERVED_KEYS = ("_rev", "_key", CREATED_KEY, UPDATED_KEY)
IMMUTABLE_KEYS = (ID_KEY,)


def _check_reserved(key: str) -> None:
    if key in RESERVED_KEYS:
        raise ReservedKeyError(key)


def _check_immutable(key: str) -> None:
    if key in IMMUTABLE_KEYS:
        raise ReservedKeyError(key, immutable=True)


class Document:
    """
    One schema-less record plus its system-managed `_id`, `_created` and
    `_updated` keys.

    Build through `Document.create` (caller data, reserved keys rejected) or
    `Document.from_import` (previously serialized data, trusted as-is).
    """

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, Any]):
        # Prefer the factories; this takes ownership of an already-valid record.
        self._data = data

    @classmethod
    def create(cls, record: Mapping[str, Any] | None = None) -> "Document":
        record = record or {}
        for key in record:
            _check_reserved(key)
        return cls._build(record)

    @classmethod
    def from_import(cls, record: Mapping[str, Any]) -> "Document":
        return cls._build(record)

    @classmethod
    def _build(cls, record: Mapping[str, Any]) -> "Document":
        data = copy.deepcopy(dict(record))
        if data.get(ID_KEY) is None:
            data[ID_KEY] = utils.generate_id()
        ts = utils.now_iso()
        data.setdefault(CREATED_KEY, ts)
        data.setdefault(UPDATED_KEY, ts)
        return cls(data)

    @property
    def id(self) -> str | int | float:
        return self._data[ID_KEY]

    @property
    def created(self) -> str:
        return self._data[CREATED_KEY]

    @property
    def updated(self) -> str:
        return self._data[UPDATED_KEY]

    def has_property(self, key: str) -> bool:
        return key in self._data

    def get_property(self, key: str) -> Any:
        try:
            return self._data[key]
        except KeyError:
            raise PropertyNotFoundError(key) from None

    def set_property(self, key: str, value: Any) -> None:
        _check_immutable(key)
        _check_reserved(key)
        self._data[key] = copy.deepcopy(value)
        self._data[UPDATED_KEY] = utils.now_iso()
        logger.debug("document %r: set %s", self._data[ID_KEY], key)

    def object(self) -> dict[str, Any]:
        """Snapshot of the full record; changes to it do not reach the document."""
        return copy.deepcopy(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Document({self._data!r})"
