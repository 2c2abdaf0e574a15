"""Holding API routes. Each row is one Buy or Sell transaction."""

import logging

from fastapi import APIRouter, status

from api.deps import AppSettings, Cache, CurrentUser, DbSession
from schemas.base import ApiResponse, ok
from schemas.portfolio import HoldingCreate, HoldingResponse
from services.cache import holdings_key, portfolios_key
from services.holdings import HoldingService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ApiResponse[list[HoldingResponse]])
async def list_holdings(
    portfolio_id: int,
    user: CurrentUser,
    db: DbSession,
    cache: Cache,
    settings: AppSettings,
):
    key = holdings_key(user.id, portfolio_id)
    cached = cache.get(key)
    if cached is not None:
        return ok(cached)

    holdings = await HoldingService(db).list_holdings(user.id, portfolio_id)
    data = [HoldingResponse.model_validate(h).model_dump(mode="json") for h in holdings]
    cache.set(key, data, settings.READ_CACHE_TTL_SECONDS)
    return ok(data)


@router.post(
    "",
    response_model=ApiResponse[HoldingResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_holding(body: HoldingCreate, user: CurrentUser, db: DbSession, cache: Cache):
    """Record a Buy or Sell row in one of the caller's portfolios."""
    holding = await HoldingService(db).add_holding(
        user.id,
        body.portfolio_id,
        stock_symbol=body.stock_symbol,
        quantity=body.quantity,
        average_price=body.average_price,
        transaction_type=body.transaction_type.value,
        cash_dividend=body.cash_dividend,
        right_share=body.right_share,
        bonus_share=body.bonus_share,
        other_note=body.other_note,
    )
    cache.invalidate(holdings_key(user.id, body.portfolio_id), portfolios_key(user.id))
    logger.info("Invalidated holdings and portfolio caches for user %s", user.id)
    return ok(HoldingResponse.model_validate(holding), message="Holding added")


@router.delete("/{holding_id}", response_model=ApiResponse)
async def delete_holding(holding_id: int, user: CurrentUser, db: DbSession, cache: Cache):
    portfolio_id = await HoldingService(db).delete_holding(user.id, holding_id)
    cache.invalidate(holdings_key(user.id, portfolio_id), portfolios_key(user.id))
    logger.info("Invalidated holdings and portfolio caches for user %s", user.id)
    return ok(message="Holding deleted")
