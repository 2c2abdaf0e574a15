"""Quote snapshot service: the NEPSE adapter behind the TTL cache."""

import logging
from typing import Any, Protocol

import httpx

from errors import DataSourceError, NotFoundError
from schemas.quote import Quote, QuoteSnapshot
from services.cache import QUOTE_SNAPSHOT_KEY, CacheBackend

logger = logging.getLogger(__name__)

SOURCE_NAME = "NEPSE"


class QuoteSource(Protocol):
    async def fetch_live_data(self) -> Any: ...


class MarketDataService:
    """Serves the live market snapshot with at most one upstream call per TTL.

    Concurrent misses may each hit the upstream once; the last writer wins
    and every writer stores an equivalent snapshot.
    """

    def __init__(self, source: QuoteSource, cache: CacheBackend, ttl_seconds: float = 30):
        self.source = source
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    async def get_raw_snapshot(self) -> Any:
        """Return the upstream payload, from cache when fresh.

        Raises:
            DataSourceError: If the upstream cannot be reached, answers with a
                non-2xx status, or returns a body that is not JSON.
        """
        cached = self.cache.get(QUOTE_SNAPSHOT_KEY)
        if cached is not None:
            return cached

        logger.info("Quote snapshot cache miss, fetching from upstream")
        try:
            payload = await self.source.fetch_live_data()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("NEPSE feed returned HTTP %s", status)
            raise DataSourceError(SOURCE_NAME, f"upstream returned HTTP {status}") from exc
        except httpx.RequestError as exc:
            logger.warning("NEPSE feed unreachable: %s", exc)
            raise DataSourceError(SOURCE_NAME, "upstream unreachable") from exc
        except ValueError as exc:
            logger.warning("NEPSE feed returned invalid JSON: %s", exc)
            raise DataSourceError(SOURCE_NAME, "invalid upstream response") from exc

        self.cache.set(QUOTE_SNAPSHOT_KEY, payload, self.ttl_seconds)
        return payload

    async def get_snapshot(self) -> QuoteSnapshot:
        """Parsed snapshot. Raises DataSourceError like ``get_raw_snapshot``."""
        return QuoteSnapshot.from_payload(await self.get_raw_snapshot())

    async def get_snapshot_or_empty(self) -> QuoteSnapshot:
        """Parsed snapshot, or an empty one when the upstream is down.

        Valuation uses this so an outage prices every holding at its own
        transaction price instead of failing the request.
        """
        try:
            return await self.get_snapshot()
        except DataSourceError as exc:
            logger.warning("Valuing without live prices: %s", exc)
            return QuoteSnapshot()

    async def get_quote(self, symbol: str) -> Quote:
        """Look up one symbol in the current snapshot."""
        snapshot = await self.get_snapshot()
        quote = snapshot.get(symbol)
        if quote is None:
            raise NotFoundError("Stock", symbol.upper())
        return quote
