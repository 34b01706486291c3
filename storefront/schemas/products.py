"""Request/response schemas for product catalog endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from storefront.schemas.common import ApiModel

PRODUCT_NAME_MAX_LEN = 255
PRODUCT_DESCRIPTION_MAX_LEN = 10_000


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field} must not be blank")
    return value.strip()


class ProductCreate(BaseModel):
    """New catalog entry."""

    name: str = Field(..., max_length=PRODUCT_NAME_MAX_LEN)
    description: str = Field(..., max_length=PRODUCT_DESCRIPTION_MAX_LEN)
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price, non-negative")
    quantity: int = Field(..., ge=0, description="Units in stock, non-negative")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_text(v, "name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _require_text(v, "description")


class ProductUpdate(BaseModel):
    """
    Partial product update. A field is applied only when present in the body,
    so an explicit 0 for price or quantity is a real update. Nulls are rejected.
    """

    name: str | None = Field(default=None, max_length=PRODUCT_NAME_MAX_LEN)
    description: str | None = Field(default=None, max_length=PRODUCT_DESCRIPTION_MAX_LEN)
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    quantity: int | None = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str:
        return _require_text(v, "name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str:
        return _require_text(v, "description")

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def reject_null(cls, v: object, info: ValidationInfo) -> object:
        if v is None:
            raise ValueError(f"{info.field_name} must not be null")
        return v


class ProductOut(ApiModel):
    id: int
    name: str
    description: str
    price: float
    quantity: int
    image_path: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductResponse(BaseModel):
    product: ProductOut


class ProductsListResponse(BaseModel):
    products: list[ProductOut]
