"""User model. Accounts are created by the auth service and never hard-deleted."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from database import Base

from .base import TimestampMixin


class User(TimestampMixin, Base):
    """Model representing a registered user."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"
