"""
Tests for product and product-image routes.
The catalog service is replaced with an AsyncMock through dependency_overrides.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

from app.core.dependencies import get_catalog
from app.core.exceptions import (
    ImageUploadTimeoutError,
    NotFoundError,
    RemoteStoreUnavailableError,
    register_exception_handlers,
)
from app.models.enums import WriteOutcome
from app.routes import health, product, product_image
from app.schemas.product import Product, ProductUpdate
from app.services.catalog import ProductCatalog
from tests.conftest import product_payload

NOW = datetime(2024, 6, 1, 10, 0, tzinfo=UTC)


def stored(product_id: str, **overrides) -> Product:
    return Product.new(product_payload(**overrides), NOW).model_copy(update={"id": product_id})


@pytest.fixture
def mock_catalog():
    return AsyncMock(spec=ProductCatalog)


@pytest.fixture
def app(mock_catalog) -> FastAPI:
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(health.router)
    test_app.include_router(product.router)
    test_app.include_router(product_image.router)
    test_app.dependency_overrides[get_catalog] = lambda: mock_catalog
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


class TestProductRoutes:
    """Product CRUD endpoints"""

    def test_list_products(self, client, mock_catalog):
        mock_catalog.list_products.return_value = [stored("b"), stored("a")]

        response = client.get("/api/products/")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == ["b", "a"]

    def test_list_products_by_category(self, client, mock_catalog):
        mock_catalog.list_products.return_value = [
            stored("jacket"),
            stored("hoodie", category="Hoodies"),
        ]

        response = client.get("/api/products/", params={"category": "Hoodies"})

        assert [p["id"] for p in response.json()] == ["hoodie"]

    def test_list_products_unknown_category(self, client):
        response = client.get("/api/products/", params={"category": "Shoes"})

        assert response.status_code == 422
        assert response.json()["error_code"] == "ValidationError"

    def test_get_product(self, client, mock_catalog):
        mock_catalog.get_product.return_value = stored("p1")

        response = client.get("/api/products/p1")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "p1"
        assert data["category"] == "Jackets"
        assert data["colors"] == [{"name": "Blue", "value": "#1E3A8A"}]
        mock_catalog.get_product.assert_awaited_once_with("p1")

    def test_get_missing_product(self, client, mock_catalog):
        mock_catalog.get_product.return_value = None

        response = client.get("/api/products/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == {"product_id": "missing"}

    def test_get_product_store_down(self, client, mock_catalog):
        mock_catalog.get_product.side_effect = RemoteStoreUnavailableError()

        response = client.get("/api/products/p1")

        assert response.status_code == 503
        assert response.json()["error_code"] == "RemoteStoreUnavailableError"

    def test_create_product(self, client, mock_catalog):
        mock_catalog.create_product.return_value = "new-id"

        response = client.post("/api/products/", json=product_payload().model_dump(mode="json"))

        assert response.status_code == 201
        assert response.json() == {"id": "new-id"}
        created = mock_catalog.create_product.await_args.args[0]
        assert created.name == "Classic Denim Jacket"

    def test_create_product_invalid(self, client, mock_catalog):
        payload = product_payload().model_dump(mode="json")
        payload["price"] = -5

        response = client.post("/api/products/", json=payload)

        assert response.status_code == 422
        mock_catalog.create_product.assert_not_awaited()

    def test_update_product(self, client, mock_catalog):
        mock_catalog.update_product.return_value = WriteOutcome.LOCAL_ONLY

        response = client.put("/api/products/p1", json={"price": 10})

        assert response.status_code == 200
        assert response.json() == {"id": "p1", "outcome": "local_only"}
        product_id, update = mock_catalog.update_product.await_args.args
        assert product_id == "p1"
        assert isinstance(update, ProductUpdate)
        assert update.changes() == {"price": 10.0}

    def test_update_product_without_fields(self, client, mock_catalog):
        response = client.put("/api/products/p1", json={"images": None})

        assert response.status_code == 400
        mock_catalog.update_product.assert_not_awaited()

    def test_update_missing_product(self, client, mock_catalog):
        mock_catalog.update_product.side_effect = NotFoundError(message="Product with id x not found")

        response = client.put("/api/products/x", json={"name": "New"})

        assert response.status_code == 404

    def test_delete_product(self, client, mock_catalog):
        response = client.delete("/api/products/p1")

        assert response.status_code == 204
        mock_catalog.delete_product.assert_awaited_once_with("p1")


class TestProductImageRoutes:
    """Image upload/delete endpoints"""

    def test_upload_image(self, client, mock_catalog):
        mock_catalog.upload_product_image.return_value = "http://storage.test/bucket/products/p1/1_a.png"

        response = client.post(
            "/api/product-images/",
            files={"file": ("a.png", b"png-bytes", "image/png")},
            data={"product_id": "p1"},
        )

        assert response.status_code == 201
        assert response.json() == {"url": "http://storage.test/bucket/products/p1/1_a.png"}
        mock_catalog.upload_product_image.assert_awaited_once_with(
            filename="a.png",
            content=b"png-bytes",
            product_id="p1",
            content_type="image/png",
        )

    def test_upload_rejects_non_images(self, client, mock_catalog):
        response = client.post(
            "/api/product-images/",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            data={"product_id": "p1"},
        )

        assert response.status_code == 400
        mock_catalog.upload_product_image.assert_not_awaited()

    def test_upload_rejects_empty_file(self, client, mock_catalog):
        response = client.post(
            "/api/product-images/",
            files={"file": ("a.png", b"", "image/png")},
            data={"product_id": "p1"},
        )

        assert response.status_code == 400

    def test_upload_rejects_oversized_file(self, client, mock_catalog, monkeypatch):
        monkeypatch.setattr(product_image.catalog_config, "max_image_bytes", 4)

        response = client.post(
            "/api/product-images/",
            files={"file": ("a.png", b"12345", "image/png")},
            data={"product_id": "p1"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["max_bytes"] == 4

    def test_upload_rejects_oversized_file_before_reading_it(self, client, mock_catalog, monkeypatch):
        monkeypatch.setattr(product_image.catalog_config, "max_image_bytes", 4)
        read = AsyncMock(side_effect=AssertionError("upload body was read"))
        monkeypatch.setattr(UploadFile, "read", read)

        response = client.post(
            "/api/product-images/",
            files={"file": ("a.png", b"12345", "image/png")},
            data={"product_id": "p1"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == {"size": 5, "max_bytes": 4}
        read.assert_not_awaited()
        mock_catalog.upload_product_image.assert_not_awaited()

    def test_upload_requires_product_id(self, client):
        response = client.post(
            "/api/product-images/",
            files={"file": ("a.png", b"png-bytes", "image/png")},
        )

        assert response.status_code == 422

    def test_upload_timeout(self, client, mock_catalog):
        mock_catalog.upload_product_image.side_effect = ImageUploadTimeoutError()

        response = client.post(
            "/api/product-images/",
            files={"file": ("a.png", b"png-bytes", "image/png")},
            data={"product_id": "p1"},
        )

        assert response.status_code == 504
        assert response.json()["message"] == "Image upload timed out"

    def test_delete_image(self, client, mock_catalog):
        response = client.delete(
            "/api/product-images/", params={"url": "http://storage.test/bucket/products/p1/1_a.png"}
        )

        assert response.status_code == 204
        mock_catalog.delete_product_image.assert_awaited_once_with(
            "http://storage.test/bucket/products/p1/1_a.png"
        )


class TestWiring:
    """Health and dependency wiring"""

    def test_health_without_database(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "remote_store": "down"}

    def test_catalog_not_initialized(self):
        bare = FastAPI()
        register_exception_handlers(bare)
        bare.include_router(product.router)

        response = TestClient(bare).get("/api/products/")

        assert response.status_code == 503
        assert response.json()["message"] == "Catalog not initialized"

    def test_application_routes(self):
        from app.main import app as main_app

        paths = {route.path for route in main_app.routes}

        assert {"/api/health", "/api/products/", "/api/products/{product_id}", "/api/product-images/"} <= paths
