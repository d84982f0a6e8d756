from mongoengine import BinaryField, EmailField, IntField, ListField, StringField
from app.models.base import BaseDocument


class User(BaseDocument):
    """User document.

    Fields:
    - name (str): Display name
    - email (str, unique): Login identifier, stored lower-cased
    - password (str, hashed): Bcrypt hash, never the plaintext
    - age (int): Non-negative, defaults to 0
    - avatar (bytes|None): 250x250 PNG
    - tokens (list[str]): Active session tokens, one per logged-in device
    """
    name = StringField(required=True, null=False)
    email = EmailField(required=True, null=False, unique=True)
    password = StringField(required=True, null=False)
    age = IntField(required=True, null=False, default=0, min_value=0)
    avatar = BinaryField(required=False, null=True)
    tokens = ListField(StringField(), default=list, null=False)

    private_fields = ("password", "tokens", "avatar")

    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["email"], "unique": True},
            {"fields": ["tokens"]},
        ],
    }
