"""
Application lifespan management for FastAPI.

Startup builds every process-wide resource the catalog needs, in order:
database pool, HTTP client pool, local mirror, then the ProductCatalog that
composes them (stored on ``app.state.catalog``). Shutdown disposes the pools.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from app.core.database import AsyncDBPool
from app.core.rest_api import ClientConfig, StorageClientPool
from app.main_config import (
    CatalogConfig,
    ObjectStorageConfig,
    catalog_config,
    database_config,
    storage_config,
)
from app.repository import ImageRepository, MirrorRepository, ProductRepository
from app.services.catalog import ProductCatalog

logger = structlog.get_logger(__name__)


async def build_catalog(
    catalog: CatalogConfig | None = None,
    storage: ObjectStorageConfig | None = None,
) -> ProductCatalog:
    """Create the catalog service with a loaded mirror."""
    catalog = catalog or catalog_config
    storage = storage or storage_config

    mirror = MirrorRepository(catalog.mirror_path, seed_samples=catalog.seed_samples)
    await mirror.load()

    return ProductCatalog(
        remote=ProductRepository(),
        mirror=mirror,
        images=ImageRepository(storage),
        image_fallback=catalog.image_fallback,
        placeholder_images=catalog.placeholder_images,
        upload_timeout=storage.upload_timeout,
    )


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Startup:
        - Initialize database connection pool (and tables if configured)
        - Initialize HTTP client connection pool
        - Load the local mirror and build the catalog service

    Shutdown:
        - Cleanup database pool
        - Cleanup HTTP client pool
    """
    await AsyncDBPool.init(database_config)
    if database_config.create_tables:
        try:
            await AsyncDBPool.create_tables()
        except Exception as e:
            # The mirror keeps the catalog readable while the database is down
            logger.error("create_tables_failed", error=str(e))

    StorageClientPool.configure(ClientConfig.from_storage(storage_config))
    await StorageClientPool.get_client()

    app.state.catalog = await build_catalog()
    logger.info("catalog_ready", image_fallback=catalog_config.image_fallback.value)

    yield

    await AsyncDBPool.dispose()
    await StorageClientPool.dispose()
