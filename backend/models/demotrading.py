"""Paper-trading account and its transaction journal."""

import enum

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from database import Base

from .base import TimestampMixin


class TradeSide(str, enum.Enum):
    """Side of a demo trade."""

    BUY = "BUY"
    SELL = "SELL"


class DemoTradingAccount(TimestampMixin, Base):
    """Virtual cash account, one per user.

    Recording a transaction does not move ``current_balance``; the balance is
    only changed through an explicit update.
    """

    __tablename__ = "demotrading"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, index=True)
    current_balance: Mapped[float] = mapped_column()

    def __repr__(self) -> str:
        return f"<DemoTradingAccount(id={self.id}, user_id={self.user_id}, balance={self.current_balance})>"


class DemoTradingTransaction(TimestampMixin, Base):
    """A recorded demo trade."""

    __tablename__ = "demotrading_transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    demotrading_id: Mapped[int] = mapped_column(
        ForeignKey("demotrading.id", ondelete="CASCADE"),
        index=True,
    )
    stock_symbol: Mapped[str] = mapped_column(String(20))
    side: Mapped[str] = mapped_column(String(4))
    quantity: Mapped[int] = mapped_column()
    price: Mapped[float] = mapped_column()

    def __repr__(self) -> str:
        return f"<DemoTradingTransaction(id={self.id}, {self.side} {self.quantity} {self.stock_symbol!r}@{self.price})>"
