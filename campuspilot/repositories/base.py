"""
Repository base and helpers shared by the collection repositories.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING

from campuspilot.database import MongoStore


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class Repository:
    """Base class: resolves its collection through the store on every call."""

    collection_name: str = ""

    def __init__(self, store: MongoStore):
        self._store = store

    async def collection(self) -> AsyncIOMotorCollection:
        return await self._store.get_collection(self.collection_name)

    async def _insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert and return the document with its generated _id."""
        collection = await self.collection()
        record = dict(document)
        result = await collection.insert_one(record)
        record["_id"] = result.inserted_id
        return record

    async def _find(
        self,
        query: Optional[Dict[str, Any]] = None,
        newest_first_by: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        collection = await self.collection()
        cursor = collection.find(query or {})
        if newest_first_by:
            cursor = cursor.sort(newest_first_by, DESCENDING)
        return await cursor.to_list(length=None)
