"""User account operations: registration, login, profile updates, avatars, deletion."""

import logging
from typing import BinaryIO

from storefront.core.errors import AuthenticationError, NotFoundError
from storefront.core.security import BCRYPT_ROUNDS, hash_password, verify_password
from storefront.models import User
from storefront.repositories import UserRepository
from storefront.schemas.auth import RegisterRequest
from storefront.schemas.users import UserUpdate
from storefront.services.file_store import USERS_NAMESPACE, FileStore
from storefront.services.images import replace_image

logger = logging.getLogger(__name__)


class UserService:
    """
    Orchestrates the user repository, password hashing and the file store.

    Hashing is an explicit step here (hash, then persist); the ORM model has no
    hooks, so a User row never holds a plain password.
    """

    def __init__(self, users: UserRepository, files: FileStore, bcrypt_rounds: int = BCRYPT_ROUNDS) -> None:
        self.users = users
        self.files = files
        self.bcrypt_rounds = bcrypt_rounds

    def register(self, data: RegisterRequest) -> User:
        """Create an account. Raises ConflictError if the email is taken."""
        user = User(
            name=data.name,
            email=str(data.email),
            password_hash=hash_password(data.password, self.bcrypt_rounds),
        )
        user = self.users.add(user)
        logger.info("User registered", extra={"user_id": user.id})
        return user

    def authenticate(self, email: str, password: str) -> User:
        """Return the user for valid credentials; AuthenticationError otherwise."""
        user = self.users.get_by_email(email)
        # Same message for unknown email and wrong password.
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login failed")
            raise AuthenticationError("Invalid credentials")
        return user

    def get(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def list_users(self) -> list[User]:
        return self.users.list_all()

    def update_profile(self, user_id: int, data: UserUpdate) -> User:
        """Apply only the fields present in data; rehash only for a new, non-empty password."""
        user = self.get(user_id)
        fields = data.model_fields_set
        if "name" in fields and data.name is not None:
            user.name = data.name
        if "email" in fields and data.email is not None:
            user.email = str(data.email)
        if data.password and not verify_password(data.password, user.password_hash):
            user.password_hash = hash_password(data.password, self.bcrypt_rounds)
        return self.users.save(user)

    def set_image(self, user_id: int, stream: BinaryIO, filename: str | None) -> User:
        """Store a new avatar and drop the previous one once the record points at the new file."""
        user = self.get(user_id)
        return replace_image(self.users, self.files, user, stream, USERS_NAMESPACE, filename)

    def delete(self, user_id: int) -> None:
        """Delete the account, then its avatar (best-effort)."""
        user = self.get(user_id)
        image_path = user.image_path
        self.users.delete(user)
        self.files.discard(image_path)
        logger.info("User deleted", extra={"user_id": user_id})
