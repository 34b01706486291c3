"""Request/response schemas for user profile and admin endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from storefront.core.security import (
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    check_password_bytes,
)
from storefront.schemas.common import ApiModel


class UserOut(ApiModel):
    """Public view of a user. Never carries the password hash."""

    id: int
    name: str
    email: str
    image_path: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserResponse(BaseModel):
    user: UserOut


class UsersListResponse(BaseModel):
    users: list[UserOut]


class UserUpdate(BaseModel):
    """
    Partial profile update. Only fields present in the request body are applied.

    An empty password counts as "not supplied"; name and email may not be
    cleared.
    """

    name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    email: EmailStr | None = None
    password: str | None = Field(default=None, max_length=PASSWORD_MAX_LEN)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str:
        if v is None or not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_present(cls, v: object) -> object:
        if v is None:
            raise ValueError("email must not be null")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        if not v:
            return None
        if len(v) < PASSWORD_MIN_LEN:
            raise ValueError(f"password must be at least {PASSWORD_MIN_LEN} characters")
        return check_password_bytes(v)
