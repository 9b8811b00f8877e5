"""
Async script to load products into the remote product store.

Loads the built-in sample catalogue, or a JSON file holding a list of product
payloads, through the catalog service so the local mirror is refreshed too.

Usage:
    uv run python scripts/seed_products.py
    uv run python scripts/seed_products.py data/products.json
"""
import asyncio
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter

from app.core import AsyncDBPool, setup_logging
from app.core.lifespan import build_catalog
from app.main_config import database_config
from app.repository import sample_products
from app.schemas.product import ProductCreate

PAYLOADS = TypeAdapter(list[ProductCreate])


def load_payloads(json_file: str | None) -> list[ProductCreate]:
    """Read product payloads from a JSON file, or fall back to the samples."""
    if json_file is None:
        return [
            ProductCreate.model_validate(product.model_dump(exclude={"id", "created_at", "updated_at"}))
            for product in sample_products()
        ]
    with open(json_file, "r") as f:
        return PAYLOADS.validate_python(json.load(f))


async def seed(json_file: str | None) -> int:
    """Create every payload; returns how many were created."""
    payloads = load_payloads(json_file)
    print(f"Seeding {len(payloads)} product(s) from {json_file or 'built-in samples'}...")

    await AsyncDBPool.init(database_config)
    try:
        await AsyncDBPool.create_tables()
        catalog = await build_catalog()
        # Oldest first so the list order matches the file order
        for payload in reversed(payloads):
            product_id = await catalog.create_product(payload)
            print(f"  - {payload.name} -> {product_id}")
    finally:
        await AsyncDBPool.dispose()

    return len(payloads)


if __name__ == "__main__":
    setup_logging()
    source = sys.argv[1] if len(sys.argv) > 1 else None
    if source is not None and not Path(source).exists():
        sys.exit(f"File not found: {source}")
    count = asyncio.run(seed(source))
    print(f"Done: {count} product(s) created.")
