"""User administration. Guarded by authentication only; there is no admin role."""

from typing import Annotated

from fastapi import APIRouter, Depends

from storefront.api.deps import get_user_service, require_auth
from storefront.schemas.common import MessageResponse
from storefront.schemas.users import UserOut, UserResponse, UsersListResponse
from storefront.services.users import UserService

router = APIRouter(dependencies=[Depends(require_auth)])


@router.get("/users", response_model=UsersListResponse)
def list_users(
    users: Annotated[UserService, Depends(get_user_service)],
) -> UsersListResponse:
    return UsersListResponse(users=[UserOut.model_validate(u) for u in users.list_users()])


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    return UserResponse(user=UserOut.model_validate(users.get(user_id)))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    users: Annotated[UserService, Depends(get_user_service)],
) -> MessageResponse:
    """Delete a user and, best-effort, their avatar file."""
    users.delete(user_id)
    return MessageResponse(message="User deleted successfully")
