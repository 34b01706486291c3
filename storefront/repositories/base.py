"""Shared commit/rollback handling for repositories."""

import logging
from typing import Generic, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.errors import ConflictError, StorageError
from storefront.models import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """CRUD over one mapped class. Each write is committed on its own."""

    model: type[ModelT]
    entity_name: str = "record"
    # Message used when a write hits a unique constraint; None means "not expected".
    conflict_message: str | None = None

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, entity_id: int) -> ModelT | None:
        """Return the row with entity_id, or None if absent."""
        return self.session.get(self.model, entity_id)

    def list_all(self) -> list[ModelT]:
        return list(self.session.query(self.model).order_by(self.model.id).all())

    def add(self, entity: ModelT) -> ModelT:
        self.session.add(entity)
        self._commit("insert", refresh=entity)
        return entity

    def save(self, entity: ModelT) -> ModelT:
        self._commit("update", refresh=entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        self.session.delete(entity)
        self._commit("delete")

    def _commit(self, operation: str, refresh: ModelT | None = None) -> None:
        """Commit, then reload refresh if given. Any failure is rolled back and mapped."""
        try:
            self.session.commit()
            if refresh is not None:
                self.session.refresh(refresh)
        except IntegrityError as e:
            self.session.rollback()
            if self.conflict_message is not None and _is_unique_violation(e):
                raise ConflictError(self.conflict_message) from e
            logger.error(
                "Integrity error on %s %s",
                operation,
                self.entity_name,
                extra={"reason": str(e.orig)[:500]},
            )
            raise StorageError(f"Failed to {operation} {self.entity_name}") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Database error on %s %s", operation, self.entity_name)
            raise StorageError(f"Failed to {operation} {self.entity_name}") from e


def _is_unique_violation(error: IntegrityError) -> bool:
    """True for unique-constraint failures on PostgreSQL (23505) and SQLite."""
    pgcode = getattr(error.orig, "pgcode", None)
    if pgcode is not None:
        return pgcode == "23505"
    return "unique" in str(error.orig).lower()
