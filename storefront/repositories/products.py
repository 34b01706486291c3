"""Product persistence."""

from storefront.models import Product
from storefront.repositories.base import Repository


class ProductRepository(Repository[Product]):
    model = Product
    entity_name = "product"
