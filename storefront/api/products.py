"""Product catalog: public reads, authenticated writes."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status

from storefront.api.deps import get_product_service, get_settings_dep, require_auth
from storefront.api.uploads import require_image
from storefront.core.config import Settings
from storefront.schemas.common import MessageResponse
from storefront.schemas.products import (
    ProductCreate,
    ProductOut,
    ProductResponse,
    ProductsListResponse,
    ProductUpdate,
)
from storefront.services.products import ProductService

router = APIRouter()
protected = APIRouter(dependencies=[Depends(require_auth)])


@router.get("", response_model=ProductsListResponse)
def list_products(
    products: Annotated[ProductService, Depends(get_product_service)],
) -> ProductsListResponse:
    return ProductsListResponse(
        products=[ProductOut.model_validate(p) for p in products.list_products()]
    )


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    products: Annotated[ProductService, Depends(get_product_service)],
) -> ProductResponse:
    return ProductResponse(product=ProductOut.model_validate(products.get(product_id)))


@protected.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    products: Annotated[ProductService, Depends(get_product_service)],
) -> ProductResponse:
    return ProductResponse(product=ProductOut.model_validate(products.create(body)))


@protected.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    body: ProductUpdate,
    products: Annotated[ProductService, Depends(get_product_service)],
) -> ProductResponse:
    """Partial update: only fields present in the body change, so price 0 is a real value."""
    return ProductResponse(product=ProductOut.model_validate(products.update(product_id, body)))


@protected.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    products: Annotated[ProductService, Depends(get_product_service)],
) -> MessageResponse:
    products.delete(product_id)
    return MessageResponse(message="Product deleted successfully")


@protected.post("/{product_id}/image", response_model=ProductResponse)
def upload_product_image(
    product_id: int,
    products: Annotated[ProductService, Depends(get_product_service)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
    image: Annotated[UploadFile | None, File()] = None,
) -> ProductResponse:
    """Replace the product image with the multipart field `image`."""
    # Look the product up first so a bad id is a 404 rather than a wasted upload.
    products.get(product_id)
    upload = require_image(image, settings.ALLOWED_IMAGE_TYPES)
    try:
        product = products.set_image(product_id, upload.file, upload.filename)
    finally:
        upload.file.close()
    return ProductResponse(product=ProductOut.model_validate(product))
