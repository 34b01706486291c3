"""Registration and login. Both return the user and a fresh bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_token_issuer, get_user_service
from storefront.core.security import TokenIssuer
from storefront.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from storefront.schemas.users import UserOut
from storefront.services.users import UserService

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    users: Annotated[UserService, Depends(get_user_service)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AuthResponse:
    """Create an account. 400 if the email is already registered or the payload is invalid."""
    user = users.register(body)
    return AuthResponse(user=UserOut.model_validate(user), token=tokens.issue(user.id))


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    users: Annotated[UserService, Depends(get_user_service)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns the user and a JWT.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = users.authenticate(str(body.email), body.password)
    return AuthResponse(user=UserOut.model_validate(user), token=tokens.issue(user.id))
