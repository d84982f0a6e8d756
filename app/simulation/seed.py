from __future__ import annotations

import logging

from app.models.task import Task
from app.models.user import User
from app.services import tasks, users


logger = logging.getLogger(__name__)

USER_FIXTURES = [
    ("Alice Example", "alice@example.com", "Secret123!"),
    ("Bob Example", "bob@example.com", "Secret123!"),
    ("Carol Example", "carol@example.com", "Secret123!"),
]

TASK_FIXTURES = [
    ("Buy milk", False),
    ("Water the plants", True),
    ("Book dentist appointment", False),
    ("Renew passport", False),
]


def _ensure_users() -> list[User]:
    seeded: list[User] = []
    for name, email, pwd in USER_FIXTURES:
        user = User.objects(email=email).first()
        if not user:
            user = users.register({"name": name, "email": email, "password": pwd})
        seeded.append(user)
    return seeded


def _ensure_tasks(owner: User) -> list[Task]:
    seeded: list[Task] = []
    for description, completed in TASK_FIXTURES:
        task = Task.objects(owner=owner, description=description).first()
        if not task:
            task = tasks.create(owner, {"description": description, "completed": completed})
        seeded.append(task)
    return seeded


def seed() -> dict[str, int]:
    """Create demo users and their tasks. Safe to run repeatedly."""
    seeded_users = _ensure_users()
    task_count = sum(len(_ensure_tasks(user)) for user in seeded_users)
    logger.info("Seeded %d users and %d tasks", len(seeded_users), task_count)
    return {"users": len(seeded_users), "tasks": task_count}
