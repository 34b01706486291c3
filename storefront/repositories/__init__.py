"""Repositories wrapping a SQLAlchemy session per entity."""

from storefront.repositories.products import ProductRepository
from storefront.repositories.users import UserRepository

__all__ = ["ProductRepository", "UserRepository"]
