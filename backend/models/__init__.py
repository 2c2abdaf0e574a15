"""Database models package."""

from .base import SoftDeleteMixin, TimestampMixin
from .demotrading import DemoTradingAccount, DemoTradingTransaction, TradeSide
from .dividend import Dividend, DividendType
from .portfolio import Portfolio, PortfolioHolding, TransactionType
from .user import User
from .watchlist import WatchlistEntry

__all__ = [
    "TimestampMixin",
    "SoftDeleteMixin",
    "User",
    # Portfolio models
    "Portfolio",
    "PortfolioHolding",
    "TransactionType",
    "Dividend",
    "DividendType",
    "WatchlistEntry",
    # Demo trading models
    "DemoTradingAccount",
    "DemoTradingTransaction",
    "TradeSide",
]
