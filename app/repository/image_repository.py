"""Image repository over an HTTP object storage endpoint.

Objects are written with ``PUT {upload_url}/{path}`` and removed with
``DELETE {upload_url}/{path}``; the public locator of an object is
``{public_base_url}/{path}``.
"""

from urllib.parse import quote, unquote

import httpx
import structlog

from app.core.exceptions import (
    BadRequestError,
    ImageStorageError,
    ImageUploadTimeoutError,
    NotFoundError,
)
from app.core.rest_api import StorageClientPool
from app.main_config import ObjectStorageConfig

logger = structlog.get_logger(__name__)


class ImageRepository:
    """Upload, resolve and delete product images in object storage."""

    def __init__(self, config: ObjectStorageConfig, client: httpx.AsyncClient | None = None) -> None:
        """Initialize ImageRepository.

        Args:
            config: Object storage endpoint settings
            client: HTTP client to use; defaults to the shared StorageClientPool client
        """
        self.config = config
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return await StorageClientPool.get_client()

    def _headers(self, content_type: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.config.token is not None:
            headers["Authorization"] = f"Bearer {self.config.token.get_secret_value()}"
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def public_url(self, path: str) -> str:
        """Resolve a storage path to its public locator."""
        return f"{self.config.public_base_url}/{quote(path)}"

    def path_for(self, locator: str) -> str:
        """Resolve a public locator back to its storage path.

        Raises:
            BadRequestError: If the locator does not belong to this store
        """
        prefix = f"{self.config.public_base_url}/"
        if not locator.startswith(prefix) or len(locator) == len(prefix):
            raise BadRequestError(
                message="Image locator is not managed by this storage",
                detail={"locator": locator},
            )
        return unquote(locator[len(prefix):].split("?", 1)[0])

    def owns(self, locator: str) -> bool:
        return locator.startswith(f"{self.config.public_base_url}/")

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        """Store ``content`` under ``path`` and return its public locator.

        Raises:
            ImageUploadTimeoutError: The storage endpoint did not answer in time
            ImageStorageError: Any other transport or HTTP failure
        """
        client = await self._get_client()
        url = f"{self.config.upload_url}/{quote(path)}"
        try:
            response = await client.put(url, content=content, headers=self._headers(content_type))
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise ImageUploadTimeoutError(detail={"path": path}) from e
        except httpx.HTTPStatusError as e:
            raise ImageStorageError(
                message="Image upload rejected by storage",
                detail={"path": path, "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise ImageStorageError(
                message="Image storage unreachable", detail={"path": path, "error": str(e)}
            ) from e

        locator = self.public_url(path)
        logger.info("image_uploaded", path=path, size=len(content))
        return locator

    async def delete(self, locator: str) -> None:
        """Remove the object behind ``locator``.

        Raises:
            BadRequestError: Locator not managed by this storage
            NotFoundError: No object at that path
            ImageStorageError: Any other failure
        """
        path = self.path_for(locator)
        client = await self._get_client()
        try:
            response = await client.delete(
                f"{self.config.upload_url}/{quote(path)}", headers=self._headers()
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == httpx.codes.NOT_FOUND:
                raise NotFoundError(message="Image not found", detail={"locator": locator}) from e
            raise ImageStorageError(
                message="Image delete rejected by storage",
                detail={"locator": locator, "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise ImageStorageError(
                message="Image storage unreachable", detail={"locator": locator, "error": str(e)}
            ) from e

        logger.info("image_deleted", path=path)
