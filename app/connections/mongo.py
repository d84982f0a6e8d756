import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import certifi
from fastapi import FastAPI
from mongoengine import connect, disconnect

from app.utils.config import settings


logger = logging.getLogger(__name__)


def init_mongo() -> None:
    kwargs = {"tlsCAFile": certifi.where()} if settings.mongo_scheme == "mongodb+srv" else {}
    connect(host=settings.mongo_uri, alias="default", tz_aware=True, **kwargs)
    logger.info("Connected to MongoDB database %s", settings.mongo_db)


def close_mongo() -> None:
    disconnect(alias="default")


@asynccontextmanager
async def mongo_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_mongo()
    try:
        yield
    finally:
        close_mongo()
