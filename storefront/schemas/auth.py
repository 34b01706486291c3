"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from storefront.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    check_password_bytes,
)
from storefront.schemas.users import UserOut


class RegisterRequest(BaseModel):
    """New account details."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN, description="Display name")
    email: EmailStr = Field(..., description="Login email; must be unique")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        return check_password_bytes(v)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class AuthResponse(BaseModel):
    """User plus a bearer token, returned by register and login."""

    user: UserOut
    token: str = Field(..., description="JWT; send as Authorization: Bearer <token>")
