"""Ownership-scoped task store.

Every query carries the owner, so a task owned by someone else behaves
exactly like a task that does not exist.
"""
from __future__ import annotations

from typing import Any

from bson.objectid import ObjectId

from app.models.task import Task
from app.models.user import User
from app.utils.base import AuthError, NotFound, SortDirection, ValidationError, translate_storage_errors


TASK_FIELDS = ("description", "completed")
UPDATABLE_FIELDS = ("description", "completed")
SORTABLE_FIELDS = ("description", "completed", "created_at", "updated_at")
SORT_ALIASES = {"createdAt": "created_at", "updatedAt": "updated_at"}
# Mongo encodes skip and limit as signed 64-bit integers
MAX_PAGE_VALUE = 2**63 - 1


def validate_task_fields(fields: dict[str, Any], allowed: tuple[str, ...], partial: bool = False) -> list[dict]:
    errors: list[dict] = []
    for key in fields:
        if key not in allowed:
            errors.append({"field": key, "message": "Invalid updates" if partial else f"Unknown field '{key}'"})

    if "description" in fields:
        description = fields["description"]
        if not isinstance(description, str) or not description.strip():
            errors.append({"field": "description", "message": "Description must be a non-empty string"})
    elif not partial:
        errors.append({"field": "description", "message": "'description' is required"})

    if "completed" in fields and not isinstance(fields["completed"], bool):
        errors.append({"field": "completed", "message": "Completed must be a boolean"})
    return errors


def parse_sort(sort_by: str | None) -> str | None:
    """Turn 'field:asc|desc' into a mongoengine order_by key."""
    if not sort_by:
        return None
    field, _, direction = sort_by.partition(":")
    field = SORT_ALIASES.get(field, field)
    errors = []
    if field not in SORTABLE_FIELDS:
        errors.append({"field": "sortBy", "message": f"Cannot sort by '{field}'"})
    try:
        order = SortDirection(direction.lower() or SortDirection.ASC.value)
    except ValueError:
        errors.append({"field": "sortBy", "message": f"Unknown sort direction '{direction}'"})
    if errors:
        raise ValidationError(errors)
    return f"{order.prefix}{field}"


def _owned(owner: User, task_id: str):
    if not ObjectId.is_valid(task_id):
        return None
    return Task.objects(id=task_id, owner=owner).first()


def create(owner: User, fields: dict[str, Any]) -> Task:
    errors = validate_task_fields(fields, TASK_FIELDS)
    if errors:
        raise ValidationError(errors)

    task = Task(
        description=fields["description"].strip(),
        completed=fields.get("completed", False),
        owner=owner,
    )
    with translate_storage_errors("task create"):
        task.save()
        # Owner deleted since this request authenticated
        if not User.objects(id=owner.id).only("id").first():
            task.delete()
            raise AuthError()
    return task


def list_for(
    owner: User,
    completed: bool | None = None,
    sort_by: str | None = None,
    limit: int | None = None,
    skip: int | None = None,
) -> list[Task]:
    """Owner's tasks with optional completed filter, sort and offset/limit paging."""
    order = parse_sort(sort_by)
    for name, value in (("limit", limit), ("skip", skip)):
        if value is not None and not 0 <= value <= MAX_PAGE_VALUE:
            raise ValidationError.single(name, f"'{name}' must be an integer between 0 and {MAX_PAGE_VALUE}")

    query: dict[str, Any] = {"owner": owner}
    if completed is not None:
        query["completed"] = completed

    with translate_storage_errors("task list"):
        tasks = Task.objects(**query)
        if order:
            tasks = tasks.order_by(order)
        if skip:
            tasks = tasks.skip(skip)
        # limit 0 means no limit, as with a Mongo cursor
        if limit:
            tasks = tasks.limit(limit)
        return list(tasks)


def get_by_id(owner: User, task_id: str) -> Task:
    with translate_storage_errors("task fetch"):
        task = _owned(owner, task_id)
    if not task:
        raise NotFound()
    return task


def update(owner: User, task_id: str, fields: dict[str, Any]) -> Task:
    """Apply allow-listed changes to an owned task. Validation happens before any lookup."""
    errors = validate_task_fields(fields, UPDATABLE_FIELDS, partial=True)
    if errors:
        raise ValidationError(errors)

    with translate_storage_errors("task update"):
        task = _owned(owner, task_id)
        if not task:
            raise NotFound()
        for key, value in fields.items():
            setattr(task, key, value.strip() if isinstance(value, str) else value)
        task.save()
    return task


def delete_by_id(owner: User, task_id: str) -> Task:
    with translate_storage_errors("task delete"):
        task = _owned(owner, task_id)
        if not task:
            raise NotFound()
        task.delete()
    return task


def delete_all_for(owner: User) -> int:
    with translate_storage_errors("task cascade delete"):
        return Task.objects(owner=owner).delete()
