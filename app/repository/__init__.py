"""Repository layer for product and image storage.

- ProductRepository: remote product store (system of record)
- MirrorRepository: local durable mirror of the product list
- ImageRepository: object storage for product images
"""

from .image_repository import ImageRepository
from .mirror_repository import MirrorRepository, sample_products
from .product_repository import ProductRepository

__all__ = ["ImageRepository", "MirrorRepository", "ProductRepository", "sample_products"]
