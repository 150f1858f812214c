from __future__ import annotations

from typing import Any


class DocStoreError(Exception):
    """Base class for every caller-visible docstore failure."""

    code: int = 0

    def __init__(self, message: str, *, code: int | None = None):
        if code is not None:
            self.code = code
        self.detail = message
        super().__init__(f"Error {self.code}: {message}")


class NotFoundError(DocStoreError):
    pass


class DuplicateCollectionError(DocStoreError):
    code = 101

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Can't create collection with name `{name}`, another collection exists with the same name."
        )


class CollectionNotFoundError(NotFoundError):
    code = 102

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Collection with name `{name}` not found.")


class ReservedKeyError(DocStoreError):
    """Raised when a caller tries to write a system-managed key."""

    code = 201

    def __init__(self, key: str, *, immutable: bool = False):
        self.key = key
        if immutable:
            super().__init__(f"Can't set property with key `{key}`, it's immutable.", code=203)
        else:
            super().__init__(f"Can't set property with key `{key}`, it's reserved for the system.")


class PropertyNotFoundError(NotFoundError):
    code = 202

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Property with key `{key}` not found.")


class DocumentNotFoundError(NotFoundError):
    code = 301

    def __init__(self, document_id: Any):
        self.document_id = document_id
        super().__init__(f"Document with key `{document_id}` not found.")


class CorruptPersistedDataError(DocStoreError):
    """Persisted input failed validation; `location` names the offending entry when known."""

    code = 401

    def __init__(self, message: str, *, location: str | None = None):
        self.location = location
        if location:
            message = f"{location}: {message}"
        super().__init__(f"Persisted data is corrupt ({message}).")
