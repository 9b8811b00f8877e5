"""Health check endpoints for monitoring."""
from fastapi import APIRouter

from app.core.database import AsyncDBPool
from app.main_config import fastapi_config

router = APIRouter(
    prefix="/api",
    tags=["health"],
)


@router.get("/")
async def root() -> dict:
    """API root endpoint."""
    return {
        "message": fastapi_config.title,
        "version": fastapi_config.version,
        "docs": fastapi_config.docs_url,
    }


@router.get("/health")
async def health_check() -> dict:
    """Liveness check.

    The service stays healthy while the product store is down (lists come
    from the local mirror); ``remote_store`` tells the two situations apart.
    """
    remote_up = await AsyncDBPool.ping()
    return {"status": "healthy", "remote_store": "up" if remote_up else "down"}
