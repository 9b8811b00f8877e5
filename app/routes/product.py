"""Product routes for catalog reads and admin writes."""

from fastapi import APIRouter, Depends, Query, Response

from app.core.dependencies import get_catalog
from app.core.exceptions import BadRequestError, NotFoundError
from app.models.enums import ProductCategory
from app.schemas.product import (
    Product,
    ProductCreate,
    ProductCreated,
    ProductUpdate,
    ProductWriteResult,
)
from app.services.catalog import ProductCatalog

router = APIRouter(
    prefix="/api/products",
    tags=["product"],
)


@router.get("/", response_model=list[Product])
async def list_products(
    category: ProductCategory | None = Query(None, description="Only products in this category"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """List products, most recent first. Served from the local mirror while the store is down."""
    products = await catalog.list_products()
    if category is not None:
        products = [p for p in products if p.category == category.value]
    return products


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    """Get a specific product by ID."""
    product = await catalog.get_product(product_id)
    if product is None:
        raise NotFoundError(
            message=f"Product with id {product_id} not found",
            detail={"product_id": product_id},
        )
    return product


@router.post("/", response_model=ProductCreated, status_code=201)
async def create_product(product: ProductCreate, catalog: ProductCatalog = Depends(get_catalog)):
    """Create a new product."""
    product_id = await catalog.create_product(product)
    return ProductCreated(id=product_id)


@router.put("/{product_id}", response_model=ProductWriteResult)
async def update_product(
    product_id: str,
    product_update: ProductUpdate,
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Update only the provided fields of a product."""
    if not product_update.changes():
        raise BadRequestError(message="No fields to update", detail={"product_id": product_id})

    outcome = await catalog.update_product(product_id, product_update)
    return ProductWriteResult(id=product_id, outcome=outcome)


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    """Delete a product."""
    await catalog.delete_product(product_id)
    return Response(status_code=204)
