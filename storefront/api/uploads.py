"""Helpers for multipart image fields."""

from fastapi import HTTPException, UploadFile, status

from storefront.services.file_store import validate_content_type


def require_image(image: UploadFile | None, allowed_types: list[str]) -> UploadFile:
    """Return the uploaded image if present and of an allowed declared type."""
    if image is None or not image.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    validate_content_type(image.content_type, allowed_types)
    return image
