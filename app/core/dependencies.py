"""
FastAPI dependency injection functions.

The catalog service is created once in the lifespan and handed to routes
through ``get_catalog``. Tests swap it with ``app.dependency_overrides``:

    app.dependency_overrides[get_catalog] = lambda: fake_catalog
"""

from fastapi import Request

from app.core.exceptions import ServiceUnavailableError
from app.services.catalog import ProductCatalog


def get_catalog(request: Request) -> ProductCatalog:
    """Return the process-wide ProductCatalog.

    Raises:
        ServiceUnavailableError: The lifespan has not built it (yet)
    """
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise ServiceUnavailableError(message="Catalog not initialized")
    return catalog
