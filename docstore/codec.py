from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Annotated, Any, Iterable, Union

from pydantic import AllowInfNan, BaseModel, ConfigDict, Field, PrivateAttr, Strict, StrictInt, StrictStr, TypeAdapter
from pydantic import ValidationError, field_validator, model_validator

from json_store import decode_json, encode_json

from .document import CREATED_KEY, ID_KEY, UPDATED_KEY
from .errors import CorruptPersistedDataError
from .utils import parse_iso

if TYPE_CHECKING:
    from .collection import Collection

logger = logging.getLogger(__name__)

FiniteStrictFloat = Annotated[float, Strict(), AllowInfNan(False)]


class PersistedDocument(BaseModel):
    """
    One serialized document: `_id`, `_created`, `_updated` plus any other
    top-level fields, which are kept verbatim and in their original order.
    """

    model_config = ConfigDict(extra="allow")

    id: Union[StrictStr, StrictInt, FiniteStrictFloat] = Field(alias=ID_KEY)
    created: StrictStr = Field(alias=CREATED_KEY)
    updated: StrictStr = Field(alias=UPDATED_KEY)

    _key_order: list[str] = PrivateAttr(default_factory=list)

    @model_validator(mode="wrap")
    @classmethod
    def remember_key_order(cls, data: Any, handler: Any) -> "PersistedDocument":
        model = handler(data)
        if isinstance(data, dict):
            model._key_order = list(data)
        return model

    @field_validator("created", "updated")
    @classmethod
    def check_iso_datetime(cls, value: str) -> str:
        try:
            parse_iso(value)
        except ValueError:
            raise ValueError(f"{value!r} is not a valid ISO-8601 date-time") from None
        return value

    def to_record(self) -> dict[str, Any]:
        values: dict[str, Any] = dict(self.model_extra or {})
        values[ID_KEY] = self.id
        values[CREATED_KEY] = self.created
        values[UPDATED_KEY] = self.updated
        record = {key: values.pop(key) for key in self._key_order if key in values}
        record.update(values)
        return record


class PersistedCollection(BaseModel):
    """
    Mirrors one entry of the on-disk file:
      { "name": "<collection>", "data": [ {"_id": ..., "_created": ..., "_updated": ..., ...} ] }
    """

    name: StrictStr
    data: list[PersistedDocument]


_FILE_ADAPTER = TypeAdapter(list[PersistedCollection])


def _format_location(loc: tuple[Any, ...]) -> str:
    out = ""
    for part in loc:
        out += f"[{part}]" if isinstance(part, int) else f".{part}"
    return out.lstrip(".") or "<root>"


def encode_collections(collections: Iterable["Collection"]) -> list[dict[str, Any]]:
    return [
        {
            "name": collection.get_name(),
            "data": [doc.object() for doc in collection.get_by_attribute([])],
        }
        for collection in collections
    ]


def dump_collections(collections: Iterable["Collection"]) -> str:
    return encode_json(encode_collections(collections))


def validate_payload(payload: Any) -> list[PersistedCollection]:
    """
    Validate a parsed file payload. Raises CorruptPersistedDataError naming the
    first offending entry.
    """
    try:
        return _FILE_ADAPTER.validate_python(payload)
    except ValidationError as e:
        first = e.errors()[0]
        location = _format_location(tuple(first["loc"]))
        logger.warning("rejected persisted data at %s: %s (%d error(s))", location, first["msg"], e.error_count())
        raise CorruptPersistedDataError(first["msg"], location=location) from e


def load_collections(raw: str) -> list[PersistedCollection]:
    try:
        payload = decode_json(raw)
    except (json.JSONDecodeError, ValueError) as e:
        logger.warning("rejected persisted data: %s", e)
        raise CorruptPersistedDataError(f"invalid JSON: {e}") from e
    return validate_payload(payload)
