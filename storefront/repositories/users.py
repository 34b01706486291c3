"""User persistence. Email uniqueness is enforced by the unique index on users.email."""

from storefront.models import User
from storefront.repositories.base import Repository


class UserRepository(Repository[User]):
    model = User
    entity_name = "user"
    conflict_message = "Email already registered"

    def get_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()
