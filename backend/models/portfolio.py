"""Portfolio models for tracking NEPSE holdings."""

import enum

from sqlalchemy import ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from database import Base

from .base import SoftDeleteMixin, TimestampMixin


class TransactionType(str, enum.Enum):
    """Side of a recorded holding row."""

    BUY = "Buy"
    SELL = "Sell"


class Portfolio(TimestampMixin, SoftDeleteMixin, Base):
    """Model representing a user's portfolio.

    Names are unique per user among live (non-deleted) rows through a partial
    unique index. The per-user portfolio limit is enforced by PortfolioService.
    """

    __tablename__ = "portfolios"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    initial_balance: Mapped[float] = mapped_column(default=0.0)
    current_balance: Mapped[float] = mapped_column(default=0.0)

    __table_args__ = (
        Index("ix_portfolios_user_live", "user_id", "deleted_at"),
        Index(
            "uq_portfolios_user_live_name",
            "user_id",
            "name",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Portfolio(id={self.id}, user_id={self.user_id}, name={self.name!r})>"


class PortfolioHolding(TimestampMixin, Base):
    """A single Buy or Sell transaction within a portfolio.

    Rows are never merged into a running position; ``average_price`` is the
    per-share price of this transaction.
    """

    __tablename__ = "portfolio_holdings"

    id: Mapped[int] = mapped_column(primary_key=True)
    portfolio_id: Mapped[int] = mapped_column(
        ForeignKey("portfolios.id", ondelete="CASCADE"),
        index=True,
    )
    stock_symbol: Mapped[str] = mapped_column(String(20), index=True)
    quantity: Mapped[int] = mapped_column()
    average_price: Mapped[float] = mapped_column()
    transaction_type: Mapped[str] = mapped_column(
        String(10),
        default=TransactionType.BUY.value,
    )
    cash_dividend: Mapped[float] = mapped_column(default=0.0)
    right_share: Mapped[int] = mapped_column(default=0)
    bonus_share: Mapped[int] = mapped_column(default=0)
    other_note: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<PortfolioHolding(id={self.id}, portfolio_id={self.portfolio_id}, "
            f"symbol={self.stock_symbol!r}, {self.transaction_type} {self.quantity}@{self.average_price})>"
        )
