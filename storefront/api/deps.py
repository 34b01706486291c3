"""Request-scoped dependencies: repositories, services and the bearer-token gate."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.core.config import Settings
from storefront.core.database import get_db
from storefront.core.security import TokenIssuer, TokenState
from storefront.models import User
from storefront.repositories import ProductRepository, UserRepository
from storefront.services.file_store import FileStore
from storefront.services.products import ProductService
from storefront.services.users import UserService

security = HTTPBearer(auto_error=False)


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    files: Annotated[FileStore, Depends(get_file_store)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
) -> UserService:
    return UserService(UserRepository(db), files, bcrypt_rounds=settings.BCRYPT_ROUNDS)


def get_product_service(
    db: Annotated[Session, Depends(get_db)],
    files: Annotated[FileStore, Depends(get_file_store)],
) -> ProductService:
    return ProductService(ProductRepository(db), files)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_auth(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> int:
    """
    Gate for protected routes: require a valid Bearer JWT.

    Stores the subject id on request.state.user_id and returns it. Raises 401
    if the header is missing or the token is expired or invalid; the handler
    is never invoked in that case.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    check = tokens.verify(credentials.credentials)
    if check.state is TokenState.EXPIRED:
        raise _unauthorized("Token expired")
    if not check.is_valid:
        raise _unauthorized("Invalid token")
    request.state.user_id = check.subject_id
    return check.subject_id


def get_current_user(
    user_id: Annotated[int, Depends(require_auth)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Resolve the authenticated subject to a User; 401 if the account no longer exists."""
    user = UserRepository(db).get(user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user
