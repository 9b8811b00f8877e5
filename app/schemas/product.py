"""Pydantic schemas for product documents.

``Product`` is the shape every tier (remote store, local mirror, HTTP API)
exchanges. ``ProductCreate`` and ``ProductUpdate`` are the caller-supplied
payloads for the create and partial-update operations.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from app.models.base import as_utc, next_timestamp
from app.models.enums import ProductCategory, WriteOutcome

DEFAULT_RATING = 4.5
DEFAULT_REVIEWS = 0

# Fields a caller may never set directly.
SERVER_FIELDS = frozenset({"id", "created_at", "updated_at"})


class ColorOption(BaseModel):
    """A display label paired with a color specifier (e.g. ``#FFFFFF``)."""

    name: str = Field(..., min_length=1, max_length=64)
    value: str = Field(..., min_length=1, max_length=64)


def _unique_in_order(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


class ProductFields(BaseModel):
    """Fields shared by stored products and create payloads."""

    model_config = ConfigDict(use_enum_values=True, from_attributes=True)

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    price: float = Field(..., ge=0, description="Price, never negative")
    description: str = Field(default="", description="Free text description")
    category: ProductCategory
    sizes: list[str] = Field(default_factory=list, description="Size labels, display order")
    colors: list[ColorOption] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list, description="Locators, first is primary")
    features: list[str] = Field(default_factory=list)

    @field_validator("sizes")
    @classmethod
    def _dedupe_sizes(cls, v: list[str]) -> list[str]:
        return _unique_in_order(v)


class ProductCreate(ProductFields):
    """Schema for creating a product."""

    rating: float | None = Field(None, ge=0, le=5)
    reviews: int | None = Field(None, ge=0)


class ProductUpdate(BaseModel):
    """Schema for a partial product update.

    Only fields explicitly present in the payload are merged; ``null`` leaves
    the stored value untouched.
    """

    model_config = ConfigDict(use_enum_values=True)

    name: str | None = Field(None, min_length=1, max_length=255)
    price: float | None = Field(None, ge=0)
    description: str | None = None
    category: ProductCategory | None = None
    sizes: list[str] | None = None
    colors: list[ColorOption] | None = None
    images: list[str] | None = None
    features: list[str] | None = None
    rating: float | None = Field(None, ge=0, le=5)
    reviews: int | None = Field(None, ge=0)

    @field_validator("sizes")
    @classmethod
    def _dedupe_sizes(cls, v: list[str] | None) -> list[str] | None:
        return _unique_in_order(v) if v is not None else v

    def changes(self) -> dict[str, Any]:
        """Return the fields to merge, as plain JSON-compatible values."""
        return {
            field: value
            for field, value in self.model_dump(mode="json", exclude_unset=True).items()
            if value is not None
        }


class Product(ProductFields):
    """A persisted (or locally mirrored) product."""

    id: str | None = None
    rating: float = DEFAULT_RATING
    reviews: int = Field(default=DEFAULT_REVIEWS, ge=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware_timestamps(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else v

    @classmethod
    def new(cls, data: ProductCreate, now: datetime) -> "Product":
        """Build an unsaved product from a create payload."""
        payload = data.model_dump(mode="json")
        if payload.get("rating") is None:
            payload["rating"] = DEFAULT_RATING
        if payload.get("reviews") is None:
            payload["reviews"] = DEFAULT_REVIEWS
        return cls.model_validate({**payload, "created_at": now, "updated_at": now})

    def merged(self, changes: dict[str, Any]) -> "Product":
        """Return a copy with ``changes`` applied and ``updated_at`` refreshed.

        Server-managed fields in ``changes`` are ignored.
        """
        allowed = {k: v for k, v in changes.items() if k not in SERVER_FIELDS}
        return type(self).model_validate(
            {
                **self.model_dump(),
                **allowed,
                "updated_at": next_timestamp(self.updated_at),
            }
        )

    def document(self) -> dict[str, Any]:
        """Field values for the store, without id and timestamps."""
        return self.model_dump(mode="json", exclude=set(SERVER_FIELDS))


PRODUCT_LIST = TypeAdapter(list[Product])


class ProductCreated(BaseModel):
    """Response for a create request."""

    id: str


class ProductWriteResult(BaseModel):
    """Response for an update request."""

    id: str
    outcome: WriteOutcome


class ImageLocator(BaseModel):
    """Response for an image upload."""

    url: str
