"""Service layer composing the repositories."""

from .catalog import ProductCatalog

__all__ = ["ProductCatalog"]
