"""
Product catalog service: the single place where the fallback policy lives.

The remote store is the system of record; the mirror is a local copy that
answers list reads while the remote store is down and keeps writes made
during an outage visible.

Policy per operation:
    list_products    remote, mirror refreshed; any remote failure -> mirror (never raises)
    get_product      remote only; failures propagate
    create_product   remote, synthesized id on remote outage; always mirrored
    update_product   remote, mirror-only when remote is down or lacks the id
    delete_product   remote (failures propagate), then mirror
    image upload     bounded by a timeout; strict or placeholder policy
    image delete     object storage; failures propagate
"""

import asyncio
import random
import re
import time
from collections.abc import Awaitable, Sequence
from typing import TypeVar

import structlog

from app.core.base_repository import ProductStore
from app.core.exceptions import (
    AppError,
    ImageUploadTimeoutError,
    InternalServerError,
    NotFoundError,
    RemoteStoreUnavailableError,
)
from app.models.base import utc_now
from app.models.enums import ImageFallbackPolicy, WriteOutcome
from app.repository.image_repository import ImageRepository
from app.repository.mirror_repository import MirrorRepository
from app.schemas.product import Product, ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_UPLOAD_TIMEOUT = 30.0

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_filename(name: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9.-]`` with ``_``."""
    return _UNSAFE_CHARS.sub("_", name) or "_"


def image_path(product_id: str, filename: str, timestamp_ms: int) -> str:
    """Storage path of an uploaded image, namespaced by product."""
    return f"products/{sanitize_filename(product_id)}/{timestamp_ms}_{sanitize_filename(filename)}"


def _epoch_ms() -> int:
    return time.time_ns() // 1_000_000


class ProductCatalog:
    """Facade over the remote store, the local mirror and image storage."""

    def __init__(
        self,
        remote: ProductStore,
        mirror: MirrorRepository,
        images: ImageRepository,
        *,
        image_fallback: ImageFallbackPolicy = ImageFallbackPolicy.STRICT,
        placeholder_images: Sequence[str] = (),
        upload_timeout: float = DEFAULT_UPLOAD_TIMEOUT,
    ) -> None:
        if image_fallback == ImageFallbackPolicy.PLACEHOLDER and not placeholder_images:
            raise ValueError("Placeholder image policy needs at least one placeholder locator")
        self.remote = remote
        self.mirror = mirror
        self.images = images
        self.image_fallback = ImageFallbackPolicy(image_fallback)
        self.placeholder_images = tuple(placeholder_images)
        self.upload_timeout = upload_timeout

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def list_products(self) -> list[Product]:
        """All products, most recently created first.

        Never raises: if the remote store fails in any way the last mirrored
        snapshot is returned unchanged.
        """
        try:
            products = await self.remote.list_recent()
        except Exception as e:
            logger.warning("remote_list_failed", error=str(e), error_type=type(e).__name__)
            mirrored = await self.mirror.list_recent()
            logger.info("products_listed", source=self.mirror.name, count=len(mirrored))
            return mirrored

        try:
            await self.mirror.replace_all(products)
        except OSError as e:
            logger.error("mirror_sync_failed", error=str(e))

        logger.info("products_listed", source=self.remote.name, count=len(products))
        return products

    async def get_product(self, product_id: str) -> Product | None:
        """Read one product from the remote store; None when it does not exist."""
        return await self.remote.get(product_id)

    async def create_product(self, data: ProductCreate) -> str:
        """Create a product and return its id.

        A remote outage does not fail the call: the product gets a
        millisecond-timestamp id and lives in the mirror only.

        Raises:
            InternalServerError: Remote down and the mirror could not be written
        """
        product = Product.new(data, utc_now())

        try:
            product = await self.remote.insert(product)
        except RemoteStoreUnavailableError as e:
            product = await self._mirror_write(self.mirror.insert_local(product, _epoch_ms()))
            logger.warning(
                "product_created_locally",
                product_id=product.id,
                outcome=WriteOutcome.LOCAL_ONLY.value,
                error=str(e),
            )
            return product.id

        logger.info("product_created", product_id=product.id, outcome=WriteOutcome.REMOTE.value)
        await self._mirror_upsert(product)
        return product.id

    async def update_product(self, product_id: str, data: ProductUpdate) -> WriteOutcome:
        """Merge the set fields of ``data`` into the product.

        Returns:
            WriteOutcome.REMOTE when the system of record took the change,
            WriteOutcome.LOCAL_ONLY when only the mirror did.

        Raises:
            NotFoundError: Neither tier holds ``product_id``
            RemoteStoreUnavailableError: Remote down and the mirror lacks ``product_id``
            InternalServerError: Only the mirror could take the change and its write failed
        """
        changes = data.changes()

        try:
            updated = await self.remote.update(product_id, changes)
        except RemoteStoreUnavailableError:
            if await self._mirror_write(self.mirror.update(product_id, changes)) is None:
                raise
            logger.warning("product_updated_locally", product_id=product_id, reason="remote_unavailable")
            return WriteOutcome.LOCAL_ONLY

        if updated is None:
            # Created during an outage, never reached the remote store
            if await self._mirror_write(self.mirror.update(product_id, changes)) is None:
                raise NotFoundError(
                    message=f"Product with id {product_id} not found",
                    detail={"product_id": product_id},
                )
            logger.warning("product_updated_locally", product_id=product_id, reason="remote_missing")
            return WriteOutcome.LOCAL_ONLY

        await self._mirror_upsert(updated)
        logger.info("product_updated", product_id=product_id, fields=sorted(changes))
        return WriteOutcome.REMOTE

    async def delete_product(self, product_id: str) -> None:
        """Delete from the remote store, then from the mirror.

        A remote failure propagates and leaves the mirror untouched. A mirror
        write failure after a remote delete is logged, not raised.
        """
        removed_remote = await self.remote.delete(product_id)
        try:
            removed_local = await self.mirror.delete(product_id)
        except OSError as e:
            logger.error("mirror_write_failed", product_id=product_id, error=str(e))
            removed_local = False

        if not (removed_remote or removed_local):
            raise NotFoundError(
                message=f"Product with id {product_id} not found",
                detail={"product_id": product_id},
            )
        logger.info(
            "product_deleted",
            product_id=product_id,
            remote=removed_remote,
            mirror=removed_local,
        )

    async def _mirror_upsert(self, product: Product) -> None:
        try:
            await self.mirror.insert(product)
        except OSError as e:
            logger.error("mirror_write_failed", product_id=product.id, error=str(e))

    async def _mirror_write(self, write: Awaitable[T]) -> T:
        """Await a mirror write that is the only copy of the change."""
        try:
            return await write
        except OSError as e:
            logger.error("mirror_write_failed", error=str(e))
            raise InternalServerError(message="Mirror write failed") from e

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def upload_product_image(
        self,
        filename: str,
        content: bytes,
        product_id: str,
        content_type: str | None = None,
    ) -> str:
        """Store an image for ``product_id`` (may be a temporary id) and return its locator.

        Raises (strict policy only):
            ImageUploadTimeoutError: Upload exceeded ``upload_timeout``
            ImageStorageError: Storage failed
        """
        path = image_path(product_id, filename, _epoch_ms())

        try:
            return await asyncio.wait_for(
                self.images.upload(path, content, content_type),
                timeout=self.upload_timeout,
            )
        except TimeoutError as e:
            if self.image_fallback == ImageFallbackPolicy.STRICT:
                logger.warning("image_upload_failed", path=path, error="timeout")
                raise ImageUploadTimeoutError(
                    message=f"Image upload exceeded {self.upload_timeout:g}s",
                    detail={"path": path},
                ) from e
            return self._placeholder(path, "timeout")
        except AppError as e:
            if self.image_fallback == ImageFallbackPolicy.STRICT:
                logger.warning("image_upload_failed", path=path, error=e.message)
                raise
            return self._placeholder(path, e.message)

    def _placeholder(self, path: str, reason: str) -> str:
        locator = random.choice(self.placeholder_images)
        logger.warning("image_upload_placeholder", path=path, reason=reason, locator=locator)
        return locator

    async def delete_product_image(self, locator: str) -> None:
        """Remove an uploaded image. Placeholder locators are not stored objects."""
        if locator in self.placeholder_images and not self.images.owns(locator):
            logger.info("image_delete_skipped", locator=locator, reason="placeholder")
            return
        await self.images.delete(locator)
