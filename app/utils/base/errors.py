"""Error taxonomy shared by the stores and the HTTP layer.

Every error carries the HTTP status it maps to. Auth, not-found and storage
errors keep a fixed generic message so callers cannot tell which check failed.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from mongoengine.errors import OperationError
from pymongo.errors import PyMongoError


logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(AppError):
    """Bad input shape or value. Lists every violation found, not just the first."""
    status_code = 400
    default_detail = "Invalid request"

    def __init__(self, errors: list[dict] | None = None, detail: str | None = None):
        self.errors = errors or []
        if detail is None and len(self.errors) == 1:
            detail = self.errors[0]["message"]
        super().__init__(detail)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])


class AuthError(AppError):
    status_code = 401
    default_detail = "Please authenticate."

    def __init__(self):
        super().__init__(self.default_detail)


class InvalidCredentials(AuthError):
    """Login failed. Same message for unknown email and wrong password."""
    status_code = 400
    default_detail = "Unable to login"


class NotFound(AppError):
    status_code = 404
    default_detail = "Not found"

    def __init__(self):
        super().__init__(self.default_detail)


class RateLimited(AppError):
    status_code = 429
    default_detail = "Rate limited"


class StorageError(AppError):
    status_code = 500
    default_detail = "Internal server error"


@contextmanager
def translate_storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver failures inside the block as an opaque StorageError."""
    try:
        yield
    except (PyMongoError, OperationError) as exc:
        logger.exception("Storage failure during %s", operation)
        raise StorageError() from exc
