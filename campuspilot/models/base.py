"""
Shared base for request bodies.

Documents are schemaless: each model types the fields the API relies on and
keeps everything else in the pydantic extras bag, which is stored as-is.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

# Keys that would collide with the store-generated identifier
RESERVED_KEYS = frozenset({"_id", "id"})


class OpenModel(BaseModel):
    """Typed required fields plus passthrough of any additional attributes."""

    model_config = ConfigDict(extra="allow")

    def extra_attributes(self) -> Dict[str, Any]:
        return {k: v for k, v in (self.model_extra or {}).items() if k not in RESERVED_KEYS}

    def to_document(self) -> Dict[str, Any]:
        """Fields the client actually sent, minus identifier keys."""
        data = {
            name: getattr(self, name)
            for name in type(self).model_fields
            if name in self.model_fields_set and name not in RESERVED_KEYS
        }
        data.update(self.extra_attributes())
        return data

    def was_sent(self, field: str) -> bool:
        return field in self.model_fields_set
