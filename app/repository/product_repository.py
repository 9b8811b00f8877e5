"""Remote product store backed by an async SQLAlchemy database."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.base_repository import ProductStore
from app.core.database import AsyncDBPool
from app.core.exceptions import ConflictError, RemoteStoreUnavailableError
from app.models.product import ProductRecord, new_product_id
from app.schemas.product import Product

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]

# Driver-level failures: refused connections, DNS, timeouts
_UNAVAILABLE = (SQLAlchemyError, OSError)


class ProductRepository(ProductStore):
    """System of record for product documents.

    Every failure of the database or the network path to it is raised as
    RemoteStoreUnavailableError so callers deal with a single error type.
    """

    name = "remote"

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        """Initialize ProductRepository.

        Args:
            session_factory: Callable returning an async session context;
                defaults to the process-wide AsyncDBPool
        """
        self.model = ProductRecord
        self._session_factory = session_factory or AsyncDBPool.get_session

    @staticmethod
    def _to_product(record: ProductRecord) -> Product:
        return Product.model_validate(record.to_dict())

    @staticmethod
    def _unavailable(operation: str, exc: BaseException) -> RemoteStoreUnavailableError:
        logger.warning("remote_store_error", operation=operation, error=str(exc))
        return RemoteStoreUnavailableError(
            message=f"Product store unavailable during {operation}",
            detail={"operation": operation},
        )

    async def list_recent(self) -> list[Product]:
        query = select(self.model).order_by(self.model.created_at.desc(), self.model.id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return [self._to_product(record) for record in result.scalars().all()]
        except _UNAVAILABLE as e:
            raise self._unavailable("list", e) from e

    async def get(self, product_id: str) -> Product | None:
        try:
            async with self._session_factory() as session:
                record = await session.get(self.model, product_id)
                return self._to_product(record) if record is not None else None
        except _UNAVAILABLE as e:
            raise self._unavailable("get", e) from e

    async def insert(self, product: Product) -> Product:
        """Insert a new document; the store assigns the id when absent."""
        stored = product.model_copy(update={"id": product.id or new_product_id()})
        record = self.model(
            id=stored.id,
            created_at=product.created_at,
            updated_at=product.updated_at,
            **product.document(),
        )
        try:
            async with self._session_factory() as session:
                session.add(record)
                await session.commit()
        except IntegrityError as e:
            raise ConflictError(
                message="Product already exists", detail={"product_id": record.id}
            ) from e
        except _UNAVAILABLE as e:
            raise self._unavailable("insert", e) from e
        return stored

    async def update(self, product_id: str, changes: dict[str, Any]) -> Product | None:
        try:
            async with self._session_factory() as session:
                record = await session.get(self.model, product_id)
                if record is None:
                    return None

                merged = self._to_product(record).merged(changes)
                await session.execute(
                    update(self.model)
                    .where(self.model.id == product_id)
                    .values(updated_at=merged.updated_at, **merged.document())
                )
                await session.commit()
        except _UNAVAILABLE as e:
            raise self._unavailable("update", e) from e
        return merged

    async def delete(self, product_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    delete(self.model).where(self.model.id == product_id)
                )
                await session.commit()
        except _UNAVAILABLE as e:
            raise self._unavailable("delete", e) from e
        return result.rowcount > 0
