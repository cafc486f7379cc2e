"""
Conversion between MongoDB documents and JSON-safe response bodies,
and between external id strings and ObjectIds.
"""

import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping

from bson import ObjectId
from bson.errors import InvalidId

from campuspilot.errors import ValidationError


def parse_object_id(value: str) -> ObjectId:
    """Parse an external id string; malformed input is a client error."""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid id: {value!r}")
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as e:
        raise ValidationError(f"Invalid id: {value!r}") from e


def _to_json_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, float) and not math.isfinite(value):
        # JSON has no NaN/Infinity
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {k: _to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    return value


def serialize(doc: Mapping[str, Any], with_id: bool = False) -> Dict[str, Any]:
    """
    Make a stored document JSON-safe. with_id adds a plain "id" string
    next to "_id" for clients that index records by it.
    """
    data = _to_json_value(dict(doc))
    if with_id and "_id" in data:
        data["id"] = data["_id"]
    return data


def serialize_many(docs: Iterable[Mapping[str, Any]], with_id: bool = False) -> List[Dict[str, Any]]:
    return [serialize(d, with_id=with_id) for d in docs]
