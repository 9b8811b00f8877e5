"""
Core infrastructure components for the application.

This module contains the storage interface, database and HTTP pools,
dependency injection helpers, lifespan and logging setup.
"""

from .base_repository import ProductStore
from .database import AsyncDBPool
from .logging_config import setup_logging
from .rest_api import ClientConfig, StorageClientPool

__all__ = [
    "AsyncDBPool",
    "ClientConfig",
    "StorageClientPool",
    "ProductStore",
    "setup_logging",
]
