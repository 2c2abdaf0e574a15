from schemas.base import ApiResponse, ok
from schemas.demotrading import (
    DemoAccountResponse,
    DemoBalanceUpdate,
    DemoTradingRequest,
    DemoTransactionResponse,
)
from schemas.dividend import DividendCreate, DividendResponse
from schemas.health import HealthResponse
from schemas.portfolio import (
    DividendSummaryResponse,
    HoldingCreate,
    HoldingResponse,
    PortfolioCreate,
    PortfolioResponse,
    PortfolioSummaryResponse,
    PortfolioUpdate,
    PortfolioValuationResponse,
    PositionResponse,
)
from schemas.quote import Quote, QuoteSnapshot, resolve_live_price
from schemas.user import UserResponse
from schemas.watchlist import (
    WatchlistAdd,
    WatchlistAlertResponse,
    WatchlistEntryResponse,
    WatchlistRemove,
    WatchlistUpdate,
)

__all__ = [
    "ApiResponse",
    "DemoAccountResponse",
    "DemoBalanceUpdate",
    "DemoTradingRequest",
    "DemoTransactionResponse",
    "DividendCreate",
    "DividendResponse",
    "DividendSummaryResponse",
    "HealthResponse",
    "HoldingCreate",
    "HoldingResponse",
    "PortfolioCreate",
    "PortfolioResponse",
    "PortfolioSummaryResponse",
    "PortfolioUpdate",
    "PortfolioValuationResponse",
    "PositionResponse",
    "Quote",
    "QuoteSnapshot",
    "UserResponse",
    "WatchlistAdd",
    "WatchlistAlertResponse",
    "WatchlistEntryResponse",
    "WatchlistRemove",
    "WatchlistUpdate",
    "ok",
    "resolve_live_price",
]
