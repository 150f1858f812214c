from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping

from pydantic import BaseModel

from . import utils
from .criteria import CriterionLike, parse_criteria
from .document import ID_KEY, Document
from .errors import DocumentNotFoundError

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)


class CollectionMeta(BaseModel):
    name: str
    created: str
    updated: str
    auto_id: int


class Collection:
    """
    A named, ordered set of documents with auto-increment ids.

    A collection may be associated with a `Database`; every mutation then
    refreshes the database's `updated` timestamp too. Detached collections
    just keep their own bookkeeping.

    Renaming with `set_name` does not re-key an owning database. Callers that
    rename an attached collection should use `Database.add_or_replace_collection`.
    """

    def __init__(self, name: str, database: "Database | None" = None):
        self._name = name
        self._database = database
        ts = utils.now_iso()
        self._created = ts
        self._updated = ts
        self._auto_id = 0
        self._documents: list[Document] = []

    @property
    def database(self) -> "Database | None":
        return self._database

    def attach(self, database: "Database | None") -> None:
        self._database = database

    def get_name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        self._name = name

    # DOCUMENTS

    def create_document(self, record: Mapping[str, Any] | None = None) -> Document:
        record = dict(record or {})
        if record.get(ID_KEY) is None:
            # _append moves the counter past this id once the document is valid.
            record[ID_KEY] = self._auto_id
        document = Document.create(record)
        self._append(document)
        return document

    def import_document(self, record: Mapping[str, Any]) -> Document:
        document = Document.from_import(record)
        self._append(document)
        return document

    def add_document(self, document: Document) -> None:
        self._append(document)

    def get_by_id(self, document_id: Any) -> Document:
        index = self._index_of(document_id)
        if index is None:
            raise DocumentNotFoundError(document_id)
        return self._documents[index]

    def get_by_attribute(self, criteria: Iterable[CriterionLike]) -> list[Document]:
        parsed = parse_criteria(criteria)
        if not parsed:
            return list(self._documents)
        return [doc for doc in self._documents if all(c.matches(doc) for c in parsed)]

    def set_document_property(self, document_id: Any, key: str, value: Any) -> Document:
        document = self.get_by_id(document_id)
        document.set_property(key, value)
        self.update()
        return document

    def remove_by_id(self, document_id: Any) -> bool:
        index = self._index_of(document_id)
        if index is None:
            return False
        del self._documents[index]
        logger.debug("collection %s: removed document %r", self._name, document_id)
        self.update()
        return True

    def remove_by_attribute(self, criteria: Iterable[CriterionLike]) -> bool:
        parsed = parse_criteria(criteria)
        if not parsed:
            return False
        before = len(self._documents)
        self._documents = [
            doc for doc in self._documents if not all(c.matches_exactly(doc) for c in parsed)
        ]
        removed = before - len(self._documents)
        if removed == 0:
            return False
        logger.debug("collection %s: removed %d document(s) by attribute", self._name, removed)
        self.update()
        return True

    # META

    def update(self, time: datetime | None = None) -> None:
        moment = time or utils.now()
        self._updated = utils.to_iso(moment)
        if self._database is not None:
            self._database.update(moment)

    def get_collection_meta(self) -> CollectionMeta:
        return CollectionMeta(
            name=self._name,
            created=self._created,
            updated=self._updated,
            auto_id=self._auto_id,
        )

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(list(self._documents))

    def __repr__(self) -> str:
        return f"Collection(name={self._name!r}, documents={len(self._documents)})"

    def _append(self, document: Document) -> None:
        doc_id = document.id
        # Keep the counter ahead of integer ids that arrive from outside.
        if isinstance(doc_id, int) and not isinstance(doc_id, bool) and doc_id >= self._auto_id:
            self._auto_id = doc_id + 1
        self._documents.append(document)
        logger.debug("collection %s: added document %r", self._name, doc_id)
        self.update()

    def _index_of(self, document_id: Any) -> int | None:
        for index, doc in enumerate(self._documents):
            if utils.same_value(doc.id, document_id):
                return index
        return None
