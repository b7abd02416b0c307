from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Record(CamelModel):
    """A stored document. Mongo keeps the integer id in `_id`."""

    id: int

    @classmethod
    def from_doc(cls, doc: dict[str, Any] | None):
        if doc is None:
            return None
        data = {k: v for k, v in doc.items() if k != "_id"}
        return cls(id=doc["_id"], **data)

    def public(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
