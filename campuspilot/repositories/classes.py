"""Class repository. Records are free-form; reads are scoped to an owner."""

from typing import Any, Dict, List, Optional

from campuspilot.errors import ValidationError
from campuspilot.models.classroom import ClassIn
from campuspilot.repositories.base import Repository, is_blank


class ClassRepository(Repository):
    collection_name = "classes"

    async def create(self, data: ClassIn) -> Dict[str, Any]:
        return await self._insert(data.to_document())

    async def list_by_owner(self, uid: Optional[str]) -> List[Dict[str, Any]]:
        if is_blank(uid):
            raise ValidationError("User UID required")
        return await self._find({"uid": uid})
