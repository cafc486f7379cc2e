"""
User repository.

Users are keyed two ways: the generated _id and the Firebase uid. Creation
is get-or-create on uid.
"""

import logging
from typing import Any, Dict, List, Tuple

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError

from campuspilot.errors import NotFoundError, ValidationError
from campuspilot.models.serialization import parse_object_id
from campuspilot.models.user import UserIn
from campuspilot.repositories.base import Repository, is_blank

logger = logging.getLogger(__name__)


class UserRepository(Repository):
    collection_name = "users"

    async def collection(self) -> AsyncIOMotorCollection:
        # Unique index on uid backs the one-user-per-uid rule under concurrent creates
        return await self._store.ensure_index(self.collection_name, "uid", unique=True)

    async def create_if_absent(self, user: UserIn) -> Tuple[bool, Dict[str, Any]]:
        """
        Return (created, record). An existing user with the same uid is
        returned unchanged instead of inserting a duplicate.
        """
        if is_blank(user.uid):
            raise ValidationError("User UID required")

        collection = await self.collection()
        existing = await collection.find_one({"uid": user.uid})
        if existing:
            logger.info("User uid=%s already exists (_id=%s)", user.uid, existing["_id"])
            return False, existing

        try:
            record = await self._insert(user.to_document())
        except DuplicateKeyError:
            # Lost a race with a concurrent create for the same uid
            logger.info("User uid=%s created concurrently; returning stored record", user.uid)
            return False, await collection.find_one({"uid": user.uid})
        logger.info("Created user uid=%s (_id=%s)", user.uid, record["_id"])
        return True, record

    async def list_all(self) -> List[Dict[str, Any]]:
        return await self._find()

    async def get_by_id(self, user_id: str) -> Dict[str, Any]:
        oid = parse_object_id(user_id)
        collection = await self.collection()
        user = await collection.find_one({"_id": oid})
        if not user:
            raise NotFoundError("User not found")
        return user

    async def get_by_uid(self, uid: str) -> Dict[str, Any]:
        collection = await self.collection()
        user = await collection.find_one({"uid": uid})
        if not user:
            raise NotFoundError("User not found")
        return user
