"""Profile endpoints for the authenticated user."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from storefront.api.deps import get_current_user, get_settings_dep, get_user_service, require_auth
from storefront.api.uploads import require_image
from storefront.core.config import Settings
from storefront.models import User
from storefront.schemas.users import UserOut, UserResponse, UserUpdate
from storefront.services.users import UserService

router = APIRouter(dependencies=[Depends(require_auth)])


@router.get("/me", response_model=UserResponse)
def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    return UserResponse(user=UserOut.model_validate(current_user))


@router.put("/me", response_model=UserResponse)
def update_profile(
    body: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Update name, email and/or password. Omitted fields are left unchanged."""
    user = users.update_profile(current_user.id, body)
    return UserResponse(user=UserOut.model_validate(user))


@router.post("/me/image", response_model=UserResponse)
def upload_profile_image(
    current_user: Annotated[User, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
    image: Annotated[UploadFile | None, File()] = None,
) -> UserResponse:
    """Replace the avatar with the multipart field `image` (jpeg, png or gif by default)."""
    upload = require_image(image, settings.ALLOWED_IMAGE_TYPES)
    try:
        user = users.set_image(current_user.id, upload.file, upload.filename)
    finally:
        upload.file.close()
    return UserResponse(user=UserOut.model_validate(user))
