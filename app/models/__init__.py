"""
SQLAlchemy models and enumerations for the storefront catalog.
"""

from .base import Base
from .enums import ImageFallbackPolicy, ProductCategory, WriteOutcome
from .product import ProductRecord

__all__: list[str] = [
    "Base",
    "ImageFallbackPolicy",
    "ProductCategory",
    "ProductRecord",
    "WriteOutcome",
]
