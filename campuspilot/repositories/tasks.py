"""
Task repository (full CRUD).

Update and delete report success whether or not the id matched a document,
mirroring MongoDB's update_one/delete_one. Only malformed ids are errors.
"""

import logging
from typing import Any, Dict, List

from campuspilot.models.serialization import parse_object_id
from campuspilot.models.task import TaskIn
from campuspilot.repositories.base import Repository

logger = logging.getLogger(__name__)


class TaskRepository(Repository):
    collection_name = "tasks"

    async def create(self, data: TaskIn) -> Dict[str, Any]:
        return await self._insert(data.to_document())

    async def list_all(self) -> List[Dict[str, Any]]:
        return await self._find()

    async def update_by_id(self, task_id: str, fields: TaskIn) -> None:
        """Merge the given fields into the task ($set), leaving other fields intact."""
        oid = parse_object_id(task_id)
        changes = fields.to_document()
        if not changes:
            return
        collection = await self.collection()
        result = await collection.update_one({"_id": oid}, {"$set": changes})
        if result.matched_count == 0:
            logger.info("Task update matched nothing (_id=%s)", task_id)

    async def delete_by_id(self, task_id: str) -> None:
        oid = parse_object_id(task_id)
        collection = await self.collection()
        result = await collection.delete_one({"_id": oid})
        if result.deleted_count == 0:
            logger.info("Task delete matched nothing (_id=%s)", task_id)
