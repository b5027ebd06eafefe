"""
Application lifespan management for FastAPI.

Startup:
    - Validate DATABASE_URL and open the connection pool
    - Ping the database and create the images table if absent
    - Build the S3 client and the image catalog, publish them on ``app.state``

Shutdown:
    - Dispose the connection pool

Any startup failure propagates and aborts the server; there is no degraded
mode and no retry.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from image_dock.core.database import AsyncDBPool
from image_dock.main_config import get_database_config, get_storage_config
from image_dock.models import Base
from image_dock.services.catalog import ImageCatalog
from image_dock.services.object_store import S3ObjectStore

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events."""
    logger.info("database_initializing")
    try:
        await AsyncDBPool.init(get_database_config())
        await AsyncDBPool.ping()
        await AsyncDBPool.ensure_schema(Base.metadata)
    except Exception:
        logger.exception("database_startup_failed")
        await AsyncDBPool.dispose()
        raise
    logger.info("database_ready")

    app.state.object_store = S3ObjectStore.from_config(get_storage_config())
    app.state.image_catalog = ImageCatalog(AsyncDBPool.session_maker())

    yield

    await AsyncDBPool.dispose()
    logger.info("database_disposed")
