"""Tests for the object storage image repository (httpx.MockTransport)."""

import httpx
import pytest

from app.core.exceptions import (
    BadRequestError,
    ImageStorageError,
    ImageUploadTimeoutError,
    NotFoundError,
)
from tests.conftest import STORAGE_URL


async def test_upload_puts_object_and_returns_public_locator(images, storage):
    locator = await images.upload("products/p1/1700000000000_shirt.png", b"png-bytes", "image/png")

    assert locator == f"{STORAGE_URL}/products/p1/1700000000000_shirt.png"

    request = storage.requests[0]
    assert request.method == "PUT"
    assert str(request.url) == f"{STORAGE_URL}/products/p1/1700000000000_shirt.png"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["Content-Type"] == "image/png"
    assert request.content == b"png-bytes"


async def test_upload_rejected_by_storage(images, storage):
    storage.responder = lambda request: httpx.Response(500)

    with pytest.raises(ImageStorageError) as exc_info:
        await images.upload("products/p1/1_a.png", b"x")

    assert exc_info.value.detail["status_code"] == 500


async def test_upload_transport_timeout(images, storage):
    def timeout(request):
        raise httpx.WriteTimeout("write timed out", request=request)

    storage.responder = timeout

    with pytest.raises(ImageUploadTimeoutError):
        await images.upload("products/p1/1_a.png", b"x")


async def test_upload_unreachable_storage(images, storage):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    storage.responder = refuse

    with pytest.raises(ImageStorageError):
        await images.upload("products/p1/1_a.png", b"x")


async def test_delete_sends_delete_for_locator_path(images, storage):
    await images.delete(f"{STORAGE_URL}/products/p1/1_a.png")

    request = storage.requests[0]
    assert request.method == "DELETE"
    assert str(request.url) == f"{STORAGE_URL}/products/p1/1_a.png"


async def test_delete_missing_object(images, storage):
    storage.responder = lambda request: httpx.Response(404)

    with pytest.raises(NotFoundError):
        await images.delete(f"{STORAGE_URL}/products/p1/1_a.png")


async def test_delete_storage_failure(images, storage):
    storage.responder = lambda request: httpx.Response(503)

    with pytest.raises(ImageStorageError):
        await images.delete(f"{STORAGE_URL}/products/p1/1_a.png")


async def test_delete_foreign_locator(images, storage):
    with pytest.raises(BadRequestError):
        await images.delete("https://images.example.com/placeholder-1.jpg")

    assert storage.requests == []


async def test_path_for_strips_query_and_unquotes(images):
    assert images.path_for(f"{STORAGE_URL}/products/p1/1_a%20b.png?v=2") == "products/p1/1_a b.png"


async def test_owns(images):
    assert images.owns(f"{STORAGE_URL}/products/p1/1_a.png")
    assert not images.owns("https://images.example.com/placeholder-1.jpg")
