"""Dividend records (cash, bonus shares, right shares) per portfolio."""

import enum
import datetime

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from database import Base

from .base import TimestampMixin


class DividendType(str, enum.Enum):
    """Known dividend kinds. Stored values keep the caller's casing."""

    CASH = "cash"
    BONUS = "bonus"
    RIGHT = "right"


class Dividend(TimestampMixin, Base):
    """Model representing a dividend entry.

    ``value`` is a currency amount for cash dividends and a share count for
    bonus/right issues. ``stock_symbol`` is free text, not a reference to a
    holding row.
    """

    __tablename__ = "dividends"

    id: Mapped[int] = mapped_column(primary_key=True)
    portfolio_id: Mapped[int] = mapped_column(
        ForeignKey("portfolios.id", ondelete="CASCADE"),
        index=True,
    )
    stock_symbol: Mapped[str] = mapped_column(String(20))
    type: Mapped[str] = mapped_column(String(10))
    value: Mapped[float] = mapped_column()
    date: Mapped[datetime.date] = mapped_column()
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Dividend(id={self.id}, symbol={self.stock_symbol!r}, type={self.type!r}, value={self.value})>"
