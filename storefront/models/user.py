"""ORM model for application users."""

from sqlalchemy import Column, DateTime, Integer, String, func

from storefront.models.base import Base


class User(Base):
    """
    Registered customer account.

    password_hash holds the bcrypt digest and must never be serialized.
    image_path is the public path of the current avatar, if any.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    image_path = Column(String(1024), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
