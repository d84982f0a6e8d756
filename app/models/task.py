from mongoengine import BooleanField, ReferenceField, StringField

from app.models.base import BaseDocument
from app.models.user import User


class Task(BaseDocument):
    """Task document owned by exactly one user.

    Fields:
    - description (str)
    - completed (bool): defaults to False
    - owner (Ref[User]): the creating user, never reassigned
    """
    description = StringField(required=True, null=False)
    completed = BooleanField(required=True, null=False, default=False)
    owner = ReferenceField(document_type=User, required=True, null=False)

    meta = {
        "collection": "tasks",
        "indexes": [
            {"fields": ["owner", "completed"]},
            {"fields": ["owner", "created_at"]},
        ],
    }
