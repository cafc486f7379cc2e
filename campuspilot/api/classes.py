"""Class APIs. Listing requires the owner as ?uid=."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from campuspilot.dependencies import get_class_repository
from campuspilot.models.classroom import ClassIn
from campuspilot.models.serialization import serialize, serialize_many
from campuspilot.repositories import ClassRepository

router = APIRouter()

Classes = Annotated[ClassRepository, Depends(get_class_repository)]


@router.post("", summary="Add a class")
async def create_class(data: ClassIn, classes: Classes) -> dict:
    record = await classes.create(data)
    return {"success": True, "class": serialize(record, with_id=True)}


@router.get("", summary="List a user's classes")
async def list_classes(classes: Classes, uid: Optional[str] = None) -> list:
    return serialize_many(await classes.list_by_owner(uid), with_id=True)
