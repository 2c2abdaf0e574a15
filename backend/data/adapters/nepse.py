"""NEPSE live market data adapter.

Fetches the full live snapshot (every traded symbol) from a single upstream
endpoint. The payload is returned as decoded JSON without normalization;
parsing into quotes happens in ``schemas.quote``.
"""

import logging
from typing import Any, Optional

import httpx

from config import get_settings

logger = logging.getLogger(__name__)


class NepseAdapter:
    """Adapter for the NEPSE live-data feed.

    The feed has no authentication and no per-symbol endpoint, so every call
    downloads the whole market. Callers should go through
    ``MarketDataService``, which caches the result.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            url: Live-data endpoint. Defaults to ``NEPSE_API_URL``.
            timeout: Request timeout in seconds. Defaults to ``NEPSE_API_TIMEOUT``.
            client: Pre-built HTTP client, mainly for tests.
        """
        settings = get_settings()
        self.url = url or settings.NEPSE_API_URL
        self.timeout = timeout if timeout is not None else settings.NEPSE_API_TIMEOUT
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def fetch_live_data(self) -> Any:
        """Download the current market snapshot.

        Returns:
            Decoded JSON body as sent by the upstream.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
            httpx.RequestError: On connection failures and timeouts.
        """
        client = await self._get_client()
        response = await client.get(self.url)
        response.raise_for_status()
        logger.debug("Fetched NEPSE live data (%d bytes)", len(response.content))
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
