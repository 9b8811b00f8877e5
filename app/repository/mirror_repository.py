"""Local durable mirror of the product list.

A single named slot (one JSON file) holding every product the process knows
about. It is read once at startup, kept in memory, and flushed as a whole on
every write (temp file + atomic rename). Contents that cannot be read or parsed are
treated as an empty mirror.
"""

import asyncio
import os
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from app.core.base_repository import ProductStore
from app.models.base import utc_now
from app.schemas.product import PRODUCT_LIST, Product

logger = structlog.get_logger(__name__)


def sample_products() -> list[Product]:
    """Starter catalogue used to seed a mirror that has never existed."""
    now = utc_now()
    return PRODUCT_LIST.validate_python(
        [
            {
                "id": "sample-1",
                "name": "Premium Cotton T-Shirt",
                "price": 29.99,
                "description": "Made from 100% organic cotton with a classic fit. Perfect for everyday wear.",
                "category": "T-Shirts",
                "sizes": ["S", "M", "L", "XL"],
                "colors": [
                    {"name": "White", "value": "#FFFFFF"},
                    {"name": "Black", "value": "#000000"},
                ],
                "images": [
                    "https://images.pexels.com/photos/6786894/pexels-photo-6786894.jpeg?auto=compress&cs=tinysrgb&w=800"
                ],
                "features": ["100% Organic Cotton", "Machine Washable"],
                "rating": 4.8,
                "reviews": 124,
                "created_at": now,
                "updated_at": now,
            },
            {
                "id": "sample-2",
                "name": "Cozy Pullover Hoodie",
                "price": 59.99,
                "description": "Comfortable hoodie perfect for casual wear and layering.",
                "category": "Hoodies",
                "sizes": ["M", "L", "XL"],
                "colors": [
                    {"name": "Gray", "value": "#6B7280"},
                    {"name": "Black", "value": "#000000"},
                ],
                "images": [
                    "https://images.pexels.com/photos/3253490/pexels-photo-3253490.jpeg?auto=compress&cs=tinysrgb&w=800"
                ],
                "features": ["Cotton Blend", "Kangaroo Pocket"],
                "rating": 4.9,
                "reviews": 87,
                "created_at": now,
                "updated_at": now,
            },
        ]
    )


class MirrorRepository(ProductStore):
    """File-backed product mirror.

    Owned by the catalog service and injected into it; one instance per
    process. All mutations take ``_lock`` so a read-modify-write of the whole
    collection cannot interleave with another one.
    """

    name = "mirror"

    def __init__(self, path: str | Path, *, seed_samples: bool = False) -> None:
        """Initialize the mirror.

        Args:
            path: JSON file backing the mirror
            seed_samples: Seed with sample_products() when the file does not exist
        """
        self.path = Path(path)
        self.seed_samples = seed_samples
        self._products: list[Product] = []
        self._loaded = False
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Read the slot into memory (idempotent). Never raises."""
        async with self._lock:
            await self._load_unlocked()

    async def _load_unlocked(self) -> None:
        if self._loaded:
            return
        self._loaded = True

        try:
            raw = await asyncio.to_thread(self._read)
        except OSError as e:
            logger.warning("mirror_unreadable", path=str(self.path), error=str(e))
            self._products = []
            return

        if raw is None:
            self._products = sample_products() if self.seed_samples else []
            if self._products:
                try:
                    await self._write_unlocked(self._products)
                except OSError as e:
                    logger.error("mirror_write_failed", path=str(self.path), error=str(e))
                logger.info("mirror_seeded", path=str(self.path), count=len(self._products))
            return

        try:
            self._products = PRODUCT_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning("mirror_malformed", path=str(self.path), errors=e.error_count())
            self._products = []
        else:
            logger.info("mirror_loaded", path=str(self.path), count=len(self._products))

    async def _commit(self, products: list[Product]) -> None:
        """Write ``products`` to disk, then make them the in-memory state.

        A failed write raises OSError and leaves memory as it was.
        """
        await self._write_unlocked(products)
        self._products = products

    async def _write_unlocked(self, products: list[Product]) -> None:
        payload = PRODUCT_LIST.dump_json(products)
        await asyncio.to_thread(self._write, payload)

    def _read(self) -> bytes | None:
        """Raw slot contents; None when the slot has never been written."""
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None

    def _write(self, payload: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_bytes(payload)
        os.replace(tmp_path, self.path)

    # ------------------------------------------------------------------
    # ProductStore
    # ------------------------------------------------------------------

    def _index(self, product_id: str) -> int | None:
        for index, product in enumerate(self._products):
            if product.id == product_id:
                return index
        return None

    def _position_for(self, product: Product) -> int:
        if product.created_at is None:
            return 0
        for index, existing in enumerate(self._products):
            if existing.created_at is None or existing.created_at <= product.created_at:
                return index
        return len(self._products)

    def _upserted(self, product: Product) -> list[Product]:
        products = list(self._products)
        index = self._index(product.id)
        if index is None:
            products.insert(self._position_for(product), product)
        else:
            products[index] = product
        return products

    async def list_recent(self) -> list[Product]:
        """Return the mirrored products in stored order."""
        async with self._lock:
            await self._load_unlocked()
            return list(self._products)

    async def get(self, product_id: str) -> Product | None:
        async with self._lock:
            await self._load_unlocked()
            index = self._index(product_id)
            return self._products[index] if index is not None else None

    async def contains(self, product_id: str) -> bool:
        return await self.get(product_id) is not None

    async def insert(self, product: Product) -> Product:
        """Upsert by id; new products are placed by created_at, most recent first."""
        if not product.id:
            raise ValueError("Mirrored products need an id")
        async with self._lock:
            await self._load_unlocked()
            await self._commit(self._upserted(product))
        return product

    async def insert_local(self, product: Product, candidate: int) -> Product:
        """Insert ``product`` under the first free numeric id from ``candidate`` up.

        Picking the id and storing the product happen under one lock hold,
        so concurrent callers with the same candidate get distinct ids.
        """
        async with self._lock:
            await self._load_unlocked()
            while self._index(str(candidate)) is not None:
                candidate += 1
            stored = product.model_copy(update={"id": str(candidate)})
            await self._commit(self._upserted(stored))
        return stored

    async def replace_all(self, products: list[Product]) -> None:
        """Overwrite the slot with a fresh snapshot of the remote store."""
        async with self._lock:
            self._loaded = True
            await self._commit(list(products))

    async def update(self, product_id: str, changes: dict[str, Any]) -> Product | None:
        async with self._lock:
            await self._load_unlocked()
            index = self._index(product_id)
            if index is None:
                return None
            merged = self._products[index].merged(changes)
            products = list(self._products)
            products[index] = merged
            await self._commit(products)
        return merged

    async def delete(self, product_id: str) -> bool:
        async with self._lock:
            await self._load_unlocked()
            index = self._index(product_id)
            if index is None:
                return False
            products = list(self._products)
            del products[index]
            await self._commit(products)
        return True
