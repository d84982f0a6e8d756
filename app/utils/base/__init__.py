from app.utils.base.enums import SortDirection
from app.utils.base.errors import (
    AppError,
    AuthError,
    InvalidCredentials,
    NotFound,
    RateLimited,
    StorageError,
    ValidationError,
    translate_storage_errors,
)
from app.utils.base.body import OpenBody
