"""Product image upload/delete routes used by the admin form."""

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile

from app.core.dependencies import get_catalog
from app.core.exceptions import BadRequestError
from app.main_config import catalog_config
from app.schemas.product import ImageLocator
from app.services.catalog import ProductCatalog

router = APIRouter(
    prefix="/api/product-images",
    tags=["product-image"],
)


@router.post("/", response_model=ImageLocator, status_code=201)
async def upload_product_image(
    file: UploadFile = File(..., description="Image payload"),
    product_id: str = Form(..., min_length=1, description="Owning product, may be a temporary id"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Upload an image and return its public locator."""
    if not (file.content_type or "").startswith("image/"):
        raise BadRequestError(
            message="Only image uploads are accepted",
            detail={"content_type": file.content_type},
        )

    # Multipart parsing already spooled the body; reject before loading it into memory
    if file.size is not None and file.size > catalog_config.max_image_bytes:
        raise BadRequestError(
            message="Image exceeds the upload size limit",
            detail={"size": file.size, "max_bytes": catalog_config.max_image_bytes},
        )

    content = await file.read()
    if not content:
        raise BadRequestError(message="Empty upload", detail={"filename": file.filename})
    if len(content) > catalog_config.max_image_bytes:
        raise BadRequestError(
            message="Image exceeds the upload size limit",
            detail={"size": len(content), "max_bytes": catalog_config.max_image_bytes},
        )

    url = await catalog.upload_product_image(
        filename=file.filename or "image",
        content=content,
        product_id=product_id,
        content_type=file.content_type,
    )
    return ImageLocator(url=url)


@router.delete("/", status_code=204)
async def delete_product_image(
    url: str = Query(..., min_length=1, description="Locator returned by the upload"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Delete a previously uploaded image."""
    await catalog.delete_product_image(url)
    return Response(status_code=204)
