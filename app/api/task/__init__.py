from typing import Any

from fastapi import APIRouter, Depends, Query

from app.models.user import User
from app.services import tasks
from app.services.auth import get_current_user
from app.utils.base import OpenBody, ValidationError


router = APIRouter()


class TaskBody(OpenBody):
    # Untyped so values reach validate_task_fields without coercion
    description: Any = None
    completed: Any = None


def _parse_completed(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.lower()
    if lowered not in ("true", "false"):
        raise ValidationError.single("completed", "completed must be 'true' or 'false'")
    return lowered == "true"


@router.post("", status_code=201)
def create_task(body: TaskBody, current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED: Create a task owned by the current user."""
    task = tasks.create(current_user, body.supplied())
    return task.to_output()


@router.get("")
def list_tasks(
    completed: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    limit: int | None = Query(None),
    skip: int | None = Query(None),
    current_user: User = Depends(get_current_user),
) -> list[dict]:
    """PROTECTED: List the current user's tasks.

    GET /tasks?completed=true
    GET /tasks?limit=10&skip=20
    GET /tasks?sortBy=createdAt:desc
    """
    found = tasks.list_for(
        current_user,
        completed=_parse_completed(completed),
        sort_by=sort_by,
        limit=limit,
        skip=skip,
    )
    return [t.to_output() for t in found]


@router.get("/{task_id}")
def read_task(task_id: str, current_user: User = Depends(get_current_user)) -> dict:
    return tasks.get_by_id(current_user, task_id).to_output()


@router.patch("/{task_id}")
def update_task(task_id: str, body: TaskBody, current_user: User = Depends(get_current_user)) -> dict:
    task = tasks.update(current_user, task_id, body.supplied())
    return task.to_output()


@router.delete("/{task_id}")
def delete_task(task_id: str, current_user: User = Depends(get_current_user)) -> dict:
    return tasks.delete_by_id(current_user, task_id).to_output()
