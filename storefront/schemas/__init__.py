"""Pydantic request/response schemas."""

from storefront.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from storefront.schemas.common import HealthResponse, MessageResponse
from storefront.schemas.products import (
    ProductCreate,
    ProductOut,
    ProductResponse,
    ProductsListResponse,
    ProductUpdate,
)
from storefront.schemas.users import UserOut, UserResponse, UsersListResponse, UserUpdate

__all__ = [
    "AuthResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "ProductCreate",
    "ProductOut",
    "ProductResponse",
    "ProductUpdate",
    "ProductsListResponse",
    "RegisterRequest",
    "UserOut",
    "UserResponse",
    "UserUpdate",
    "UsersListResponse",
]
