"""
Storage interface shared by every tier that holds product documents.

Two implementations exist: the remote product store (system of record,
``app.repository.product_repository``) and the local product mirror
(``app.repository.mirror_repository``). The catalog service composes them and
owns the fallback policy; the stores themselves never fall back.

Usage:
    class MyStore(ProductStore):
        async def list_recent(self) -> list[Product]:
            ...

    store = MyStore()
    saved = await store.insert(Product.new(payload, utc_now()))
    updated = await store.update(saved.id, {"price": 10})
"""

from abc import ABC, abstractmethod
from typing import Any

from app.schemas.product import Product

__all__ = ["ProductStore"]


class ProductStore(ABC):
    """Async CRUD contract over product documents."""

    name: str = "store"

    @abstractmethod
    async def list_recent(self) -> list[Product]:
        """Return every product, most recently created first."""

    @abstractmethod
    async def get(self, product_id: str) -> Product | None:
        """Return the product with ``product_id`` or None."""

    @abstractmethod
    async def insert(self, product: Product) -> Product:
        """Persist ``product`` and return it as stored (with its id)."""

    @abstractmethod
    async def update(self, product_id: str, changes: dict[str, Any]) -> Product | None:
        """Merge ``changes`` into the stored product.

        Args:
            product_id: Identifier of the product to change
            changes: Field values to overwrite; other fields are kept

        Returns:
            The merged product with a refreshed ``updated_at``, or None if
            no product has that id.
        """

    @abstractmethod
    async def delete(self, product_id: str) -> bool:
        """Remove the product. Returns True if something was removed."""
