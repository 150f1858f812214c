from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from persistence.disk_store import DiskTextFileStore
from persistence.interfaces import TextFileStore

from . import codec, utils
from .collection import Collection
from .errors import CollectionNotFoundError, CorruptPersistedDataError, DuplicateCollectionError

logger = logging.getLogger(__name__)


class DatabaseMeta(BaseModel):
    created: str
    updated: str


class Database:
    """
    A set of uniquely named collections that can be written to, and read back
    from, a single JSON file.

    Collections created or added here are associated with this database, so
    their mutations refresh `updated`. The index is keyed by each collection's
    name at the time it is looked up.
    """

    def __init__(self) -> None:
        ts = utils.now_iso()
        self._created = ts
        self._updated = ts
        self._collections: list[Collection] = []

    # COLLECTIONS

    def collection(self, name: str) -> Collection:
        if self.has_collection(name):
            return self.get_collection(name)
        return self.create_collection(name)

    def create_collection(self, name: str) -> Collection:
        if self.has_collection(name):
            raise DuplicateCollectionError(name)
        collection = Collection(name, self)
        self._collections.append(collection)
        logger.info("created collection %s", name)
        self.update()
        return collection

    def add_collection(self, collection: Collection) -> None:
        name = collection.get_name()
        if self.has_collection(name):
            raise DuplicateCollectionError(name)
        collection.attach(self)
        self._collections.append(collection)
        logger.info("added collection %s (%d documents)", name, len(collection))
        self.update()

    def get_collection(self, name: str) -> Collection:
        index = self._index_of(name)
        if index is None:
            raise CollectionNotFoundError(name)
        return self._collections[index]

    def has_collection(self, name: str) -> bool:
        return self._index_of(name) is not None

    def remove_collection(self, name: str, ignore_if_missing: bool = False) -> bool:
        index = self._index_of(name)
        if index is None:
            if ignore_if_missing:
                return False
            raise CollectionNotFoundError(name)
        collection = self._collections.pop(index)
        collection.attach(None)
        logger.info("removed collection %s", name)
        self.update()
        return True

    def add_or_replace_collection(self, name: str, collection: Collection) -> None:
        self.remove_collection(name, ignore_if_missing=True)
        if collection.get_name() != name:
            collection.set_name(name)
        self.add_collection(collection)

    def get_collection_names(self) -> list[str]:
        return [c.get_name() for c in self._collections]

    # META

    def update(self, time: datetime | None = None) -> None:
        self._updated = utils.to_iso(time or utils.now())

    def get_db_meta(self) -> DatabaseMeta:
        return DatabaseMeta(created=self._created, updated=self._updated)

    # PERSISTENCE

    def to_json(self) -> list[dict[str, Any]]:
        return codec.encode_collections(self._collections)

    def load_json(self, payload: Any) -> list[str]:
        """
        Validate a parsed file payload and attach its collections. Nothing is
        attached unless every entry validates and no name clashes.
        """
        return self._attach_persisted(codec.validate_payload(payload))

    async def persist(self, path: str | Path, store: TextFileStore | None = None) -> None:
        path = Path(path)
        store = store or DiskTextFileStore()
        text = codec.dump_collections(self._collections)
        await asyncio.to_thread(self._write_file, store, path, text)
        logger.info("persisted %d collection(s) to %s", len(self._collections), path)

    async def restore(self, path: str | Path, store: TextFileStore | None = None) -> list[str]:
        path = Path(path)
        store = store or DiskTextFileStore()
        try:
            raw = await asyncio.to_thread(store.read_text, path)
        except UnicodeDecodeError as e:
            logger.warning("rejected persisted data in %s: %s", path, e)
            raise CorruptPersistedDataError(f"not valid UTF-8 text: {e}") from e
        names = self._attach_persisted(codec.load_collections(raw))
        logger.info("restored %d collection(s) from %s", len(names), path)
        return names

    @staticmethod
    def _write_file(store: TextFileStore, path: Path, text: str) -> None:
        if store.is_dir(path):
            raise IsADirectoryError(f"Can't persist database to `{path}`: it is a directory.")
        if store.exists(path):
            logger.debug("removing stale file %s", path)
            store.remove(path)
        store.write_text(path, text)

    def _attach_persisted(self, entries: list[codec.PersistedCollection]) -> list[str]:
        built: list[Collection] = []
        seen: set[str] = set()
        for entry in entries:
            if entry.name in seen or self.has_collection(entry.name):
                raise DuplicateCollectionError(entry.name)
            seen.add(entry.name)
            collection = Collection(entry.name)
            for doc in entry.data:
                collection.import_document(doc.to_record())
            built.append(collection)

        for collection in built:
            self.add_collection(collection)
        return [c.get_name() for c in built]

    def _index_of(self, name: str) -> int | None:
        for index, collection in enumerate(self._collections):
            if collection.get_name() == name:
                return index
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_collection(name)

    def __repr__(self) -> str:
        return f"Database(collections={self.get_collection_names()!r})"
