"""
Task APIs (full CRUD).

PUT and DELETE answer {"success": true} even when no task has the given id.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from campuspilot.dependencies import get_task_repository
from campuspilot.models.serialization import serialize, serialize_many
from campuspilot.models.task import TaskIn
from campuspilot.repositories import TaskRepository

router = APIRouter()

Tasks = Annotated[TaskRepository, Depends(get_task_repository)]


@router.post("", summary="Add a task")
async def create_task(data: TaskIn, tasks: Tasks) -> dict:
    record = await tasks.create(data)
    return {"success": True, "task": serialize(record, with_id=True)}


@router.get("", summary="List tasks")
async def list_tasks(tasks: Tasks) -> list:
    return serialize_many(await tasks.list_all(), with_id=True)


@router.put("/{task_id}", summary="Update task fields")
async def update_task(task_id: str, data: TaskIn, tasks: Tasks) -> dict:
    await tasks.update_by_id(task_id, data)
    return {"success": True}


@router.delete("/{task_id}", summary="Delete a task")
async def delete_task(task_id: str, tasks: Tasks) -> dict:
    await tasks.delete_by_id(task_id)
    return {"success": True}
