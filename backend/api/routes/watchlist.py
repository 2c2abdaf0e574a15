"""Watchlist API routes, including target-price alerts."""

import logging

from fastapi import APIRouter, status

from api.deps import AppSettings, Cache, CurrentUser, DbSession, MarketData
from schemas.base import ApiResponse, ok
from schemas.watchlist import (
    WatchlistAdd,
    WatchlistAlertResponse,
    WatchlistEntryResponse,
    WatchlistRemove,
    WatchlistUpdate,
)
from services.cache import watchlist_key
from services.watchlist import WatchlistService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ApiResponse[list[WatchlistEntryResponse]])
async def list_watchlist(user: CurrentUser, db: DbSession, cache: Cache, settings: AppSettings):
    key = watchlist_key(user.id)
    cached = cache.get(key)
    if cached is not None:
        return ok(cached)

    entries = await WatchlistService(db).list_watchlist(user.id)
    data = [WatchlistEntryResponse.model_validate(e).model_dump(mode="json") for e in entries]
    cache.set(key, data, settings.READ_CACHE_TTL_SECONDS)
    return ok(data)


@router.post(
    "",
    response_model=ApiResponse[WatchlistEntryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_to_watchlist(body: WatchlistAdd, user: CurrentUser, db: DbSession, cache: Cache):
    entry = await WatchlistService(db).add_to_watchlist(
        user.id,
        body.stock_symbol,
        target_price=body.target_price,
        notes=body.notes,
    )
    cache.invalidate(watchlist_key(user.id))
    return ok(WatchlistEntryResponse.model_validate(entry), message="Added to watchlist")


@router.post("/remove", response_model=ApiResponse[WatchlistEntryResponse])
async def remove_from_watchlist(
    body: WatchlistRemove,
    user: CurrentUser,
    db: DbSession,
    cache: Cache,
):
    entry = await WatchlistService(db).remove_from_watchlist(user.id, body.stock_symbol)
    cache.invalidate(watchlist_key(user.id))
    return ok(WatchlistEntryResponse.model_validate(entry), message="Removed from watchlist")


@router.get("/alerts", response_model=ApiResponse[list[WatchlistAlertResponse]])
async def list_alerts(user: CurrentUser, db: DbSession, market_data: MarketData):
    """Compare each entry that has a target price with the live price.

    ``target_reached`` is true once the live price is at or above the target.
    Entries whose symbol has no live quote report ``live_price`` as null and
    are never reached.
    """
    entries = await WatchlistService(db).list_watchlist(user.id)
    watched = [e for e in entries if e.target_price]
    if not watched:
        return ok([])

    snapshot = await market_data.get_snapshot_or_empty()
    alerts = []
    for entry in watched:
        quote = snapshot.get(entry.stock_symbol)
        live_price = quote.live_price if quote is not None else None
        alerts.append(
            WatchlistAlertResponse(
                stock_symbol=entry.stock_symbol,
                target_price=entry.target_price,
                live_price=live_price,
                target_reached=live_price is not None and live_price >= entry.target_price,
                progress_percent=(
                    live_price * 100 / entry.target_price if live_price is not None else None
                ),
            )
        )
    return ok(alerts)


@router.put("/{stock_symbol}", response_model=ApiResponse[WatchlistEntryResponse])
async def update_watchlist_entry(
    stock_symbol: str,
    body: WatchlistUpdate,
    user: CurrentUser,
    db: DbSession,
    cache: Cache,
):
    """Set or clear the target price and notes of a followed symbol."""
    entry = await WatchlistService(db).update_entry(
        user.id,
        stock_symbol.strip().upper(),
        body.model_dump(exclude_unset=True),
    )
    cache.invalidate(watchlist_key(user.id))
    return ok(WatchlistEntryResponse.model_validate(entry), message="Watchlist entry updated")
