"""Product catalog operations."""

import logging
from typing import BinaryIO

from storefront.core.errors import NotFoundError
from storefront.models import Product
from storefront.repositories import ProductRepository
from storefront.schemas.products import ProductCreate, ProductUpdate
from storefront.services.file_store import PRODUCTS_NAMESPACE, FileStore
from storefront.services.images import replace_image

logger = logging.getLogger(__name__)

# Fields ProductUpdate may change, applied only when present in the request.
UPDATABLE_FIELDS = ("name", "description", "price", "quantity")


class ProductService:
    def __init__(self, products: ProductRepository, files: FileStore) -> None:
        self.products = products
        self.files = files

    def create(self, data: ProductCreate) -> Product:
        product = self.products.add(Product(**data.model_dump()))
        logger.info("Product created", extra={"product_id": product.id})
        return product

    def get(self, product_id: int) -> Product:
        product = self.products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def list_products(self) -> list[Product]:
        return self.products.list_all()

    def update(self, product_id: int, data: ProductUpdate) -> Product:
        product = self.get(product_id)
        for field in UPDATABLE_FIELDS:
            if field in data.model_fields_set:
                setattr(product, field, getattr(data, field))
        return self.products.save(product)

    def set_image(self, product_id: int, stream: BinaryIO, filename: str | None) -> Product:
        product = self.get(product_id)
        return replace_image(self.products, self.files, product, stream, PRODUCTS_NAMESPACE, filename)

    def delete(self, product_id: int) -> None:
        """Delete the product, then its image (best-effort)."""
        product = self.get(product_id)
        image_path = product.image_path
        self.products.delete(product)
        self.files.discard(image_path)
        logger.info("Product deleted", extra={"product_id": product_id})
