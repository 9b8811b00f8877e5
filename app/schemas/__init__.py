"""Pydantic schemas exchanged between the stores, the catalog and the API."""

from .product import (
    PRODUCT_LIST,
    ColorOption,
    ImageLocator,
    Product,
    ProductCreate,
    ProductCreated,
    ProductUpdate,
    ProductWriteResult,
)

__all__ = [
    "PRODUCT_LIST",
    "ColorOption",
    "ImageLocator",
    "Product",
    "ProductCreate",
    "ProductCreated",
    "ProductUpdate",
    "ProductWriteResult",
]
