"""Shared fixtures: in-memory remote store, mock object storage, catalog wiring."""

import inspect
import uuid
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from app.core.base_repository import ProductStore
from app.core.exceptions import RemoteStoreUnavailableError
from app.main_config import ObjectStorageConfig
from app.models.enums import ImageFallbackPolicy
from app.repository import ImageRepository, MirrorRepository
from app.schemas.product import Product, ProductCreate
from app.services.catalog import ProductCatalog

STORAGE_URL = "http://storage.test/bucket"
PLACEHOLDERS = (
    "https://images.example.com/placeholder-1.jpg",
    "https://images.example.com/placeholder-2.jpg",
)


class InMemoryProductStore(ProductStore):
    """Remote store double that can be switched offline."""

    name = "remote"

    def __init__(self) -> None:
        self.products: dict[str, Product] = {}
        self.online = True

    def _check(self, operation: str) -> None:
        if not self.online:
            raise RemoteStoreUnavailableError(detail={"operation": operation})

    async def list_recent(self) -> list[Product]:
        self._check("list")
        # Newest insert wins ties on created_at
        newest_first = list(reversed(self.products.values()))
        return sorted(newest_first, key=lambda p: p.created_at, reverse=True)

    async def get(self, product_id: str) -> Product | None:
        self._check("get")
        return self.products.get(product_id)

    async def insert(self, product: Product) -> Product:
        self._check("insert")
        stored = product.model_copy(update={"id": product.id or uuid.uuid4().hex})
        self.products[stored.id] = stored
        return stored

    async def update(self, product_id: str, changes: dict[str, Any]) -> Product | None:
        self._check("update")
        current = self.products.get(product_id)
        if current is None:
            return None
        merged = current.merged(changes)
        self.products[product_id] = merged
        return merged

    async def delete(self, product_id: str) -> bool:
        self._check("delete")
        return self.products.pop(product_id, None) is not None


class StorageRecorder:
    """httpx.MockTransport handler that records requests and plays back a response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responder: Callable[[httpx.Request], Any] = lambda request: httpx.Response(200)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responder(request)
        if inspect.isawaitable(response):
            response = await response
        return response


def product_payload(**overrides: Any) -> ProductCreate:
    data = {
        "name": "Classic Denim Jacket",
        "price": 89.99,
        "description": "Timeless denim jacket with a relaxed fit.",
        "category": "Jackets",
        "sizes": ["S", "M", "L"],
        "colors": [{"name": "Blue", "value": "#1E3A8A"}],
        "images": ["https://images.example.com/jacket.jpg"],
        "features": ["100% Cotton Denim"],
    }
    data.update(overrides)
    return ProductCreate.model_validate(data)


@pytest.fixture
def storage_config() -> ObjectStorageConfig:
    return ObjectStorageConfig(upload_url=STORAGE_URL, public_base_url=STORAGE_URL, token="test-token")


@pytest.fixture
def storage() -> StorageRecorder:
    return StorageRecorder()


@pytest.fixture
async def http_client(storage: StorageRecorder):
    async with httpx.AsyncClient(transport=httpx.MockTransport(storage)) as client:
        yield client


@pytest.fixture
def images(storage_config: ObjectStorageConfig, http_client: httpx.AsyncClient) -> ImageRepository:
    return ImageRepository(storage_config, client=http_client)


@pytest.fixture
def remote() -> InMemoryProductStore:
    return InMemoryProductStore()


@pytest.fixture
async def mirror(tmp_path) -> MirrorRepository:
    repo = MirrorRepository(tmp_path / "products_mirror.json")
    await repo.load()
    return repo


@pytest.fixture
def make_catalog(remote: InMemoryProductStore, mirror: MirrorRepository, images: ImageRepository):
    def _make(**kwargs: Any) -> ProductCatalog:
        kwargs.setdefault("placeholder_images", PLACEHOLDERS)
        return ProductCatalog(remote, mirror, images, **kwargs)

    return _make


@pytest.fixture
def catalog(make_catalog) -> ProductCatalog:
    return make_catalog(image_fallback=ImageFallbackPolicy.STRICT)
