"""
Product document model for the remote product store.
"""

import uuid

from sqlalchemy import JSON, Column, Float, Integer, String, Text

from .base import Base, TimestampMixin, as_utc


def new_product_id() -> str:
    """Store-assigned opaque identifier."""
    return uuid.uuid4().hex


class ProductRecord(Base, TimestampMixin):
    """
    Product document as persisted by the remote store.

    Ordered sequences (sizes, colors, images, features) are kept as JSON
    arrays so a row holds the whole document.

    Attributes:
        id: Store-assigned identifier
        name: Display name
        price: Non-negative price
        description: Free text description
        category: One of ProductCategory values
        sizes: Size labels in display order
        colors: List of {"name", "value"} pairs
        images: Image locators, first one is the primary image
        features: Feature bullets
        rating: Average rating
        reviews: Review count
        created_at: Timestamp when the product was created
        updated_at: Timestamp when the product was last updated
    """

    __tablename__ = "products"

    id = Column(String(64), primary_key=True, default=new_product_id)
    name = Column(String(255), nullable=False, index=True)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(64), nullable=False, index=True)
    sizes = Column(JSON, nullable=False, default=list)
    colors = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    features = Column(JSON, nullable=False, default=list)
    rating = Column(Float, nullable=False, default=4.5)
    reviews = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ProductRecord(id={self.id}, name='{self.name}', category='{self.category}')>"

    def to_dict(self) -> dict:
        """Convert the row into a plain document."""
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "description": self.description,
            "category": self.category,
            "sizes": list(self.sizes or []),
            "colors": list(self.colors or []),
            "images": list(self.images or []),
            "features": list(self.features or []),
            "rating": self.rating,
            "reviews": self.reviews,
            "created_at": as_utc(self.created_at) if self.created_at else None,
            "updated_at": as_utc(self.updated_at) if self.updated_at else None,
        }
