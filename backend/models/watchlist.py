"""Watchlist entries with optional price targets."""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from database import Base

from .base import TimestampMixin


class WatchlistEntry(TimestampMixin, Base):
    """A symbol followed by a user."""

    __tablename__ = "watchlist"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    stock_symbol: Mapped[str] = mapped_column(String(20))
    target_price: Mapped[float | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "stock_symbol", name="uq_watchlist_user_symbol"),
    )

    def __repr__(self) -> str:
        return f"<WatchlistEntry(user_id={self.user_id}, symbol={self.stock_symbol!r})>"
