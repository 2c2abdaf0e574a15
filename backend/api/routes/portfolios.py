"""Portfolio API routes: CRUD and live valuation."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status

from api.deps import AppSettings, Cache, CurrentUser, DbSession, MarketData
from schemas.base import ApiResponse, ok
from schemas.portfolio import (
    DividendSummaryResponse,
    PortfolioCreate,
    PortfolioResponse,
    PortfolioSummaryResponse,
    PortfolioUpdate,
    PortfolioValuationResponse,
    PositionResponse,
)
from services.cache import holdings_key, portfolios_key
from services.dividends import DividendService
from services.holdings import HoldingService
from services.portfolios import PortfolioService
from services.valuation import summarize_dividends, value_portfolio

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ApiResponse[list[PortfolioSummaryResponse]])
async def list_portfolios(
    user: CurrentUser,
    db: DbSession,
    cache: Cache,
    settings: AppSettings,
):
    """List the caller's portfolios with holding counts and stored-price totals."""
    key = portfolios_key(user.id)
    cached = cache.get(key)
    if cached is not None:
        return ok(cached)

    service = PortfolioService(db, max_portfolios=settings.MAX_PORTFOLIOS_PER_USER)
    aggregates = await service.list_portfolios(user.id)
    data = [
        PortfolioSummaryResponse(
            **PortfolioResponse.model_validate(agg.portfolio).model_dump(),
            holdings_count=agg.holdings_count,
            total_value=agg.total_value,
        ).model_dump(mode="json")
        for agg in aggregates
    ]
    cache.set(key, data, settings.READ_CACHE_TTL_SECONDS)
    return ok(data)


@router.post(
    "",
    response_model=ApiResponse[PortfolioResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_portfolio(
    body: PortfolioCreate,
    user: CurrentUser,
    db: DbSession,
    cache: Cache,
    settings: AppSettings,
):
    """Create a portfolio. At most ``MAX_PORTFOLIOS_PER_USER`` may be live."""
    service = PortfolioService(db, max_portfolios=settings.MAX_PORTFOLIOS_PER_USER)
    portfolio = await service.create_portfolio(
        user.id,
        name=body.name,
        initial_balance=body.initial_balance,
        description=body.description,
    )
    cache.invalidate(portfolios_key(user.id))
    return ok(PortfolioResponse.model_validate(portfolio), message="Portfolio created")


@router.get("/{portfolio_id}", response_model=ApiResponse[PortfolioResponse])
async def get_portfolio(portfolio_id: int, user: CurrentUser, db: DbSession):
    portfolio = await PortfolioService(db).get_portfolio(user.id, portfolio_id)
    return ok(PortfolioResponse.model_validate(portfolio))


@router.put("/{portfolio_id}", response_model=ApiResponse[PortfolioResponse])
async def update_portfolio(
    portfolio_id: int,
    body: PortfolioUpdate,
    user: CurrentUser,
    db: DbSession,
    cache: Cache,
):
    """Rename, re-describe or change the initial balance of a portfolio."""
    portfolio = await PortfolioService(db).update_portfolio(
        user.id, portfolio_id, body.model_dump(exclude_unset=True)
    )
    cache.invalidate(portfolios_key(user.id))
    return ok(PortfolioResponse.model_validate(portfolio), message="Portfolio updated")


@router.delete("/{portfolio_id}", response_model=ApiResponse)
async def delete_portfolio(
    portfolio_id: int,
    user: CurrentUser,
    db: DbSession,
    cache: Cache,
):
    """Soft-delete an empty portfolio."""
    await PortfolioService(db).delete_portfolio(user.id, portfolio_id)
    cache.invalidate(portfolios_key(user.id), holdings_key(user.id, portfolio_id))
    return ok(message="Portfolio deleted")


@router.get("/{portfolio_id}/valuation", response_model=ApiResponse[PortfolioValuationResponse])
async def get_valuation(
    portfolio_id: int,
    user: CurrentUser,
    db: DbSession,
    market_data: MarketData,
):
    """Value a portfolio against the live snapshot.

    When the quote feed is down every holding is priced at its own average
    price and ``live_prices`` is false.
    """
    holdings = await HoldingService(db).list_holdings(user.id, portfolio_id)
    dividends = await DividendService(db).list_dividends(user.id, portfolio_id)
    snapshot = await market_data.get_snapshot_or_empty()

    valuation = value_portfolio(holdings, snapshot)
    response = PortfolioValuationResponse(
        portfolio_id=portfolio_id,
        total_investment=valuation.total_investment,
        total_disposed=valuation.total_disposed,
        net_investment=valuation.net_investment,
        current_value=valuation.current_value,
        profit_loss=valuation.profit_loss,
        profit_loss_percent=valuation.profit_loss_percent,
        holdings_count=valuation.holdings_count,
        positions=[PositionResponse.model_validate(p) for p in valuation.positions],
        dividends=DividendSummaryResponse.model_validate(summarize_dividends(dividends)),
        live_prices=len(snapshot) > 0,
        valued_at=datetime.now(timezone.utc),
    )
    return ok(response)
