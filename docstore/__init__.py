from __future__ import annotations

from .collection import Collection, CollectionMeta
from .criteria import AttributeCriterion
from .database import Database, DatabaseMeta
from .document import Document
from .errors import (
    CollectionNotFoundError,
    CorruptPersistedDataError,
    DocStoreError,
    DocumentNotFoundError,
    DuplicateCollectionError,
    NotFoundError,
    PropertyNotFoundError,
    ReservedKeyError,
)

__all__ = [
    "AttributeCriterion",
    "Collection",
    "CollectionMeta",
    "Database",
    "DatabaseMeta",
    "Document",
    "DocStoreError",
    "NotFoundError",
    "DuplicateCollectionError",
    "CollectionNotFoundError",
    "DocumentNotFoundError",
    "PropertyNotFoundError",
    "ReservedKeyError",
    "CorruptPersistedDataError",
]
