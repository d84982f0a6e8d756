"""Credential store: registration, login lookup, profile changes and account removal.

Validation is explicit and runs before anything is written. Each operation
checks the whole set of requested changes and reports every violation at once.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from bson.objectid import ObjectId
from email_validator import EmailNotValidError, validate_email
from mongoengine.errors import NotUniqueError, ValidationError as DocumentValidationError

from app.models.user import User
from app.services import auth, tasks
from app.services.auth import hash_password, verify_password
from app.utils.base import InvalidCredentials, NotFound, ValidationError, translate_storage_errors


logger = logging.getLogger(__name__)

USER_FIELDS = ("name", "email", "password", "age")
UPDATABLE_FIELDS = ("name", "email", "password", "age")
REQUIRED_FIELDS = ("name", "email", "password")
MIN_PASSWORD_LENGTH = 7


def normalize_user_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Trim string fields and lower-case the email. Other values pass through."""
    data = dict(fields)
    for key in ("name", "email", "password"):
        if isinstance(data.get(key), str):
            data[key] = data[key].strip()
    if isinstance(data.get("email"), str):
        data["email"] = data["email"].lower()
    return data


def _blank(value: Any) -> bool:
    return value is None or value == ""


def validate_user_fields(fields: dict[str, Any], partial: bool = False) -> list[dict]:
    """Return every violation in fields; an empty list means valid.

    With partial=True only the supplied fields are checked (profile updates).
    """
    errors: list[dict] = []

    for key in fields:
        if key not in USER_FIELDS:
            errors.append({"field": key, "message": f"Unknown field '{key}'"})

    for key in REQUIRED_FIELDS:
        missing = key not in fields and not partial
        if missing or (key in fields and _blank(fields[key])):
            errors.append({"field": key, "message": f"'{key}' is required"})

    name = fields.get("name")
    if not _blank(name) and not isinstance(name, str):
        errors.append({"field": "name", "message": "Name must be a string"})

    email = fields.get("email")
    if not _blank(email):
        try:
            if not isinstance(email, str):
                raise EmailNotValidError("not a string")
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            errors.append({"field": "email", "message": "Email is invalid"})

    password = fields.get("password")
    if not _blank(password):
        if not isinstance(password, str):
            errors.append({"field": "password", "message": "Password must be a string"})
        else:
            if len(password) < MIN_PASSWORD_LENGTH:
                errors.append({
                    "field": "password",
                    "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters.",
                })
            if "password" in password.lower():
                errors.append({"field": "password", "message": "Password cannot contain 'password'."})

    if "age" in fields:
        age = fields["age"]
        if isinstance(age, bool) or not isinstance(age, int):
            errors.append({"field": "age", "message": "Age must be an integer."})
        elif age < 0:
            errors.append({"field": "age", "message": "Age must be a positive number."})

    return errors


def _email_taken(email: str, exclude_id: ObjectId | None = None) -> bool:
    query = User.objects(email=email)
    if exclude_id is not None:
        query = query.filter(id__ne=exclude_id)
    return query.first() is not None


def _save(user: User) -> None:
    try:
        user.save()
    except NotUniqueError:
        raise ValidationError.single("email", "Email is already registered")
    except DocumentValidationError as exc:
        raise ValidationError(
            [{"field": key, "message": str(msg)} for key, msg in (exc.errors or {}).items()]
            or [{"field": "user", "message": str(exc)}]
        )


def register(fields: dict[str, Any]) -> User:
    """Create a user from raw fields; the password is hashed before it is stored."""
    data = normalize_user_fields(fields)
    errors = validate_user_fields(data)
    if errors:
        raise ValidationError(errors)

    with translate_storage_errors("user register"):
        if _email_taken(data["email"]):
            raise ValidationError.single("email", "Email is already registered")
        user = User(
            name=data["name"],
            email=data["email"],
            password=hash_password(data["password"]),
            age=data.get("age", 0),
        )
        _save(user)

    logger.info("Registered user %s", user.id)
    return user


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-account")


def find_by_credentials(email: Any, password: Any) -> User:
    """Look up a user by email and check the password.

    Unknown email and wrong password fail identically, and both pay for one
    bcrypt comparison.
    """
    if not isinstance(email, str) or not isinstance(password, str):
        raise InvalidCredentials()

    with translate_storage_errors("credential lookup"):
        user = User.objects(email=email.strip().lower()).first()

    if not user:
        verify_password(password, _dummy_hash())
        logger.info("Failed login attempt")
        raise InvalidCredentials()
    if not verify_password(password, user.password):
        logger.info("Failed login attempt")
        raise InvalidCredentials()
    return user


def update_profile(user: User, fields: dict[str, Any]) -> User:
    """Apply allow-listed profile changes; nothing is mutated unless all are valid."""
    errors = [
        {"field": key, "message": "Invalid updates!"}
        for key in fields if key not in UPDATABLE_FIELDS
    ]
    data = normalize_user_fields({k: v for k, v in fields.items() if k in UPDATABLE_FIELDS})
    errors.extend(validate_user_fields(data, partial=True))
    if errors:
        raise ValidationError(errors)

    with translate_storage_errors("profile update"):
        if "email" in data and data["email"] != user.email and _email_taken(data["email"], exclude_id=user.id):
            raise ValidationError.single("email", "Email is already registered")

        for key, value in data.items():
            if key == "password":
                value = hash_password(value)
            setattr(user, key, value)
        _save(user)

    return user


def delete_account(user: User) -> int:
    """Delete user and every task they own. Returns the number of tasks removed.

    Sessions are revoked before anything is deleted, and tasks are swept again
    after the user record is gone to catch a create that was already past
    authentication. An interruption leaves the user with fewer tasks, never
    tasks without a user, and repeating the call finishes it.
    """
    with translate_storage_errors("account delete"):
        auth.revoke_all(user)
        removed = tasks.delete_all_for(user)
        user.delete()
        removed += tasks.delete_all_for(user)
    logger.info("Deleted user %s and %d task(s)", user.id, removed)
    return removed


def set_avatar(user: User, image: bytes) -> None:
    with translate_storage_errors("avatar save"):
        user.avatar = image
        user.save()


def clear_avatar(user: User) -> None:
    with translate_storage_errors("avatar delete"):
        user.avatar = None
        user.save()


def get_avatar(user_id: str) -> bytes:
    if not ObjectId.is_valid(user_id):
        raise NotFound()
    with translate_storage_errors("avatar fetch"):
        user = User.objects(id=user_id).only("avatar").first()
    if not user or not user.avatar:
        raise NotFound()
    return bytes(user.avatar)
