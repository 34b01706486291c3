"""HTTP routes."""

from fastapi import APIRouter

from storefront.api import admin, auth, health, products, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(products.router, prefix="/products", tags=["products"])
router.include_router(products.protected, prefix="/products", tags=["products"])
