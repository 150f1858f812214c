from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body
from pydantic import BaseModel, Field

from docstore import AttributeCriterion, Collection, Database, Document, DocumentNotFoundError, ReservedKeyError
from docstore.document import IMMUTABLE_KEYS, RESERVED_KEYS
from settings import get_settings

router = APIRouter(tags=["collections"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()

# One in-process store per app instance; tests reload this module for a fresh one.
DATABASE = Database()


class CriteriaRequest(BaseModel):
    criteria: list[AttributeCriterion] = Field(default_factory=list)


def _find_document(collection: Collection, raw_id: str) -> Document:
    """
    Path ids arrive as text. Look up the string first, then the integer it
    spells, since auto-assigned ids are integers.
    """
    try:
        return collection.get_by_id(raw_id)
    except DocumentNotFoundError:
        if raw_id.lstrip("-").isdigit():
            return collection.get_by_id(int(raw_id))
        raise


def _documents(docs: list[Document]) -> list[dict[str, Any]]:
    return [doc.object() for doc in docs]


@router.get("/collections")
async def list_collections() -> dict[str, Any]:
    return {"collections": DATABASE.get_collection_names()}


@router.post("/collections/{name}", status_code=201)
async def create_collection(name: str) -> dict[str, Any]:
    collection = DATABASE.create_collection(name)
    return collection.get_collection_meta().model_dump()


@router.get("/collections/{name}")
async def get_collection(name: str) -> dict[str, Any]:
    return DATABASE.get_collection(name).get_collection_meta().model_dump()


@router.delete("/collections/{name}")
async def delete_collection(name: str) -> dict[str, Any]:
    return {"removed": DATABASE.remove_collection(name)}


@router.get("/collections/{name}/documents")
async def list_documents(name: str) -> dict[str, Any]:
    docs = DATABASE.get_collection(name).get_by_attribute([])
    return {"documents": _documents(docs)}


@router.post("/collections/{name}/documents", status_code=201)
async def create_document(name: str, record: dict[str, Any] | None = Body(default=None)) -> dict[str, Any]:
    doc = DATABASE.get_collection(name).create_document(record)
    return doc.object()


@router.post("/collections/{name}/query")
async def query_documents(name: str, body: CriteriaRequest) -> dict[str, Any]:
    docs = DATABASE.get_collection(name).get_by_attribute(body.criteria)
    return {"documents": _documents(docs)}


@router.post("/collections/{name}/remove")
async def remove_documents(name: str, body: CriteriaRequest) -> dict[str, Any]:
    return {"removed": DATABASE.get_collection(name).remove_by_attribute(body.criteria)}


@router.get("/collections/{name}/documents/{doc_id}")
async def get_document(name: str, doc_id: str) -> dict[str, Any]:
    return _find_document(DATABASE.get_collection(name), doc_id).object()


@router.patch("/collections/{name}/documents/{doc_id}")
async def update_document(name: str, doc_id: str, changes: dict[str, Any] = Body(...)) -> dict[str, Any]:
    collection = DATABASE.get_collection(name)
    doc = _find_document(collection, doc_id)
    # Reject the whole patch before applying any of it.
    for key in changes:
        if key in IMMUTABLE_KEYS:
            raise ReservedKeyError(key, immutable=True)
        if key in RESERVED_KEYS:
            raise ReservedKeyError(key)
    for key, value in changes.items():
        collection.set_document_property(doc.id, key, value)
    return doc.object()


@router.delete("/collections/{name}/documents/{doc_id}")
async def delete_document(name: str, doc_id: str) -> dict[str, Any]:
    collection = DATABASE.get_collection(name)
    try:
        doc = _find_document(collection, doc_id)
    except DocumentNotFoundError:
        return {"removed": False}
    return {"removed": collection.remove_by_id(doc.id)}


@router.post("/persist")
async def persist_database() -> dict[str, Any]:
    await DATABASE.persist(SETTINGS.data_file)
    return {"path": str(SETTINGS.data_file), "collections": DATABASE.get_collection_names()}


@router.post("/restore")
async def restore_database() -> dict[str, Any]:
    names = await DATABASE.restore(SETTINGS.data_file)
    return {"path": str(SETTINGS.data_file), "restored": names}
