"""
User APIs.

POST /users: get-or-create by Firebase uid.
GET /users, GET /users/{id}, GET /users/uid/{uid}: lookups.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from campuspilot.dependencies import get_user_repository
from campuspilot.models.serialization import serialize, serialize_many
from campuspilot.models.user import UserIn
from campuspilot.repositories import UserRepository

router = APIRouter()

Users = Annotated[UserRepository, Depends(get_user_repository)]


@router.post("", summary="Create a user unless one exists for the uid")
async def create_user(user: UserIn, users: Users) -> dict:
    """
    Idempotent: posting the same uid again returns the stored record with
    created=false instead of inserting a duplicate.
    """
    created, record = await users.create_if_absent(user)
    return {
        "message": "User created" if created else "User already exists",
        "created": created,
        "userId": str(record["_id"]),
        "user": serialize(record),
    }


@router.get("", summary="List users")
async def list_users(users: Users) -> list:
    return serialize_many(await users.list_all())


@router.get("/uid/{uid}", summary="Get a user by Firebase uid")
async def get_user_by_uid(uid: str, users: Users) -> dict:
    return serialize(await users.get_by_uid(uid))


@router.get("/{user_id}", summary="Get a user by id")
async def get_user(user_id: str, users: Users) -> dict:
    return serialize(await users.get_by_id(user_id))
