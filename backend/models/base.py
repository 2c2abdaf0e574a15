"""Base model mixins and utilities."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Mapped, mapped_column


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamp columns."""

    created_at: Mapped[datetime] = mapped_column(
        default=func.now(),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=func.now(),
        server_default=func.now(),
        onupdate=func.now(),
    )


class SoftDeleteMixin:
    """Mixin for rows that are hidden rather than removed.

    A row is live while ``deleted_at`` is NULL. Queries over soft-deletable
    tables must filter on ``is_live()`` explicitly.
    """

    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True, default=None)

    @classmethod
    def is_live(cls):
        return cls.deleted_at.is_(None)
