import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import certifi
from fastapi import FastAPI
from mongoengine import connect, disconnect

from app.utils.config import settings


logger = logging.getLogger(__name__)


def init_mongo(**kwargs) -> None:
    uri = settings.connection_uri
    if uri.startswith("mongodb+srv://"):
        kwargs.setdefault("tlsCAFile", certifi.where())
    connect(host=uri, alias="default", tz_aware=True, **kwargs)
    logger.info("MongoDB connection registered for database %s", settings.mongo_db)


def close_mongo() -> None:
    disconnect(alias="default")


@asynccontextmanager
async def mongo_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_mongo()
    try:
        yield
    finally:
        close_mongo()
