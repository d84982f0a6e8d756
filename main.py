import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import AsyncExitStack

from app.connections import mongo_lifespan
from app.connections.redis import redis_lifespan
from app.api.user import router as user_router
from app.api.task import router as task_router
from app.utils.base import AppError, ValidationError
from app.utils.config import configure_logging, settings


logger = logging.getLogger(__name__)


async def combined_lifespan(app: FastAPI):
    async with AsyncExitStack() as stack:
        await stack.enter_async_context(mongo_lifespan(app))
        await stack.enter_async_context(redis_lifespan(app))

        yield


def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    body: dict = {"detail": exc.detail}
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=body)


def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies and query strings are client errors like any other bad input
    errors = [
        {"field": ".".join(str(p) for p in err["loc"][1:]) or str(err["loc"][0]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return app_error_handler(request, ValidationError(errors))


configure_logging()

app = FastAPI(title="Task Manager (Mongo)", version="0.1.0", lifespan=combined_lifespan, debug=settings.debug)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.include_router(user_router, prefix="/users")
app.include_router(task_router, prefix="/tasks")


@app.get("/health")
def health() -> dict:
    return {"status": True, "app": settings.app_name, "environment": settings.environment}
