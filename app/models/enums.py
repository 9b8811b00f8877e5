"""Enumerations shared by the product catalog."""

from enum import Enum


class ProductCategory(str, Enum):
    """Fixed set of catalog categories offered by the admin form."""

    T_SHIRTS = "T-Shirts"
    HOODIES = "Hoodies"
    JACKETS = "Jackets"
    SWEATSHIRTS = "Sweatshirts"
    PANTS = "Pants"
    ACCESSORIES = "Accessories"


class ImageFallbackPolicy(str, Enum):
    """What an image upload does when object storage fails or times out."""

    STRICT = "strict"  # raise to the caller
    PLACEHOLDER = "placeholder"  # hand back a stock image locator


class WriteOutcome(str, Enum):
    """Where a write ended up."""

    REMOTE = "remote"
    LOCAL_ONLY = "local_only"
