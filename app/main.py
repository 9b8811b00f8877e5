"""
FastAPI application entry point for the storefront catalog API.

This module initializes the FastAPI application with:
- Structured logging with request correlation IDs
- Lifespan-managed database pool, HTTP pool and product catalog
- CORS middleware configuration
- Product and product-image routes

Architecture:
    - Logging configured before app creation (JSON/console)
    - Lifespan context manager builds the ProductCatalog (remote store,
      local mirror, image storage) and disposes pools on shutdown
    - Configuration is loaded from environment-specific .env files
"""

import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core import setup_logging
from app.core.exceptions import register_exception_handlers
from app.core.lifespan import app_lifespan
from app.main_config import cors_config, fastapi_config, settings
from app.routes import health, product, product_image

# =============================================================================
# Setup Logging (before app creation)
# =============================================================================
setup_logging()

app = FastAPI(
    title=fastapi_config.title,
    description=fastapi_config.description,
    version=fastapi_config.version,
    docs_url=fastapi_config.docs_url,
    redoc_url=fastapi_config.redoc_url,
    openapi_url=fastapi_config.openapi_url,
    lifespan=app_lifespan,
    debug=fastapi_config.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_config.origins_list,
    allow_credentials=cors_config.allow_credentials,
    allow_methods=cors_config.methods_list,
    allow_headers=cors_config.headers_list,
)

# Adds request_id to the logging context
app.add_middleware(
    CorrelationIdMiddleware,
    header_name="X-Request-ID",
    generator=lambda: uuid.uuid4().hex[:16],
    validator=None,
    transformer=lambda x: x,
)

register_exception_handlers(app)

# =============================================================================
# Routes
# =============================================================================
app.include_router(health.router)
app.include_router(product.router)
app.include_router(product_image.router)

if __name__ == "__main__":
    import uvicorn

    # Use our structured logging config, disable uvicorn's default logging
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,
    )
