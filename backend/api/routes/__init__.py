"""API routes package - Combines all route modules."""

from fastapi import APIRouter

from api.routes.auth import router as auth_router
from api.routes.demotrading import router as demotrading_router
from api.routes.dividends import router as dividends_router
from api.routes.health import router as health_router
from api.routes.holdings import router as holdings_router
from api.routes.market import router as market_router
from api.routes.portfolios import router as portfolios_router
from api.routes.watchlist import router as watchlist_router

# Combined router for all routes
router = APIRouter()

# Include route modules
router.include_router(health_router, tags=["health"])
router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(portfolios_router, prefix="/portfolios", tags=["portfolios"])
router.include_router(holdings_router, prefix="/portfolio-holdings", tags=["holdings"])
router.include_router(dividends_router, prefix="/dividends", tags=["dividends"])
router.include_router(watchlist_router, prefix="/watchlist", tags=["watchlist"])
router.include_router(demotrading_router, prefix="/demotrading", tags=["demotrading"])
router.include_router(market_router, prefix="/nepse-proxy", tags=["market"])

__all__ = ["router"]
