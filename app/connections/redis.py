import redis
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from fastapi import FastAPI

from app.utils.config import settings


_redis_client: Optional[redis.Redis] = None


def get_redis() -> redis.Redis:
    assert _redis_client is not None, "Redis not initialized"
    return _redis_client


def set_redis(client: Optional[redis.Redis]) -> None:
    """Install an already-built client, e.g. a fake one in tests."""
    global _redis_client
    _redis_client = client


def init_redis() -> None:
    set_redis(redis.Redis(
        db=settings.redis_db,
        port=settings.redis_port,
        host=settings.redis_host,
        password=settings.redis_password,
        socket_timeout=2.0,
    ))


def close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        try:
            _redis_client.close()
        finally:
            _redis_client = None


@asynccontextmanager
async def redis_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_redis()
    try:
        yield
    finally:
        close_redis()
