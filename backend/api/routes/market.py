"""Live quote proxy over the cached NEPSE snapshot."""

from fastapi import APIRouter

from api.deps import MarketData
from schemas.base import ok

router = APIRouter()


@router.get("")
async def get_live_data(market_data: MarketData):
    """Pass through the upstream payload, refreshed at most once per quote TTL."""
    return ok(await market_data.get_raw_snapshot())


@router.get("/{symbol}")
async def get_symbol_quote(symbol: str, market_data: MarketData):
    quote = await market_data.get_quote(symbol)
    return ok(quote.model_dump(by_alias=True))
