"""Tests for the NEPSE adapter, quote parsing and the cached market data service."""

from __future__ import annotations

import httpx
import pytest

from data.adapters.nepse import NepseAdapter
from errors import DataSourceError, NotFoundError
from schemas.quote import QuoteSnapshot, resolve_live_price
from services.cache import QUOTE_SNAPSHOT_KEY, TTLCache
from services.market_data import MarketDataService

FEED_URL = "https://feed.test/api/nepse/live-data"


def _adapter(handler) -> NepseAdapter:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NepseAdapter(url=FEED_URL, timeout=5, client=client)


# ---------------------------------------------------------------------------
# QuoteSnapshot parsing
# ---------------------------------------------------------------------------


class TestQuoteSnapshot:
    def test_parses_bare_list(self):
        snapshot = QuoteSnapshot.from_payload(
            [{"symbol": "nabil", "lastTradedPrice": 550.5, "securityName": "Nabil Bank"}]
        )

        quote = snapshot.get("NABIL")
        assert quote is not None
        assert quote.last_traded_price == 550.5
        assert quote.security_name == "Nabil Bank"

    @pytest.mark.parametrize("wrapper", ["liveCompanyData", "data", "stocks"])
    def test_parses_wrapped_list(self, wrapper):
        snapshot = QuoteSnapshot.from_payload({wrapper: [{"symbol": "NIMB", "ltp": 200}]})

        assert snapshot.get("nimb").live_price == 200

    def test_unrecognized_payload_is_empty(self):
        assert len(QuoteSnapshot.from_payload({"message": "maintenance"})) == 0
        assert len(QuoteSnapshot.from_payload(None)) == 0

    def test_skips_rows_without_symbol_or_with_bad_numbers(self):
        snapshot = QuoteSnapshot.from_payload(
            [
                {"lastTradedPrice": 10},
                {"symbol": "BAD", "lastTradedPrice": "n/a"},
                {"symbol": "GOOD", "closingPrice": 99},
            ]
        )

        assert len(snapshot) == 1
        assert snapshot.get("GOOD").live_price == 99

    def test_live_price_chain_prefers_last_traded(self):
        snapshot = QuoteSnapshot.from_payload(
            [
                {"symbol": "A", "lastTradedPrice": 10, "closingPrice": 9, "ltp": 8},
                {"symbol": "B", "lastTradedPrice": 0, "closingPrice": 9, "ltp": 8},
                {"symbol": "C", "ltp": 8},
                {"symbol": "D"},
            ]
        )

        assert snapshot.get("A").live_price == 10
        assert snapshot.get("B").live_price == 9
        assert snapshot.get("C").live_price == 8
        assert snapshot.get("D").live_price is None

    def test_unknown_fields_are_kept(self):
        snapshot = QuoteSnapshot.from_payload([{"symbol": "A", "openPrice": 5}])

        assert snapshot.get("A").model_dump(by_alias=True)["openPrice"] == 5

    def test_resolve_live_price_falls_back_to_average_price(self):
        snapshot = QuoteSnapshot.from_payload([{"symbol": "A", "lastTradedPrice": 12}])

        class Holding:
            stock_symbol = "B"
            average_price = 7.5

        assert resolve_live_price(Holding(), snapshot) == 7.5


# ---------------------------------------------------------------------------
# NepseAdapter
# ---------------------------------------------------------------------------


class TestNepseAdapter:
    async def test_fetch_live_data_returns_json(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"symbol": "NABIL", "lastTradedPrice": 550}])

        adapter = _adapter(handler)
        payload = await adapter.fetch_live_data()
        await adapter.close()

        assert payload == [{"symbol": "NABIL", "lastTradedPrice": 550}]
        assert str(seen[0].url) == FEED_URL

    async def test_non_2xx_raises_status_error(self):
        adapter = _adapter(lambda request: httpx.Response(503))

        with pytest.raises(httpx.HTTPStatusError):
            await adapter.fetch_live_data()
        await adapter.close()

    async def test_non_json_body_raises_value_error(self):
        adapter = _adapter(lambda request: httpx.Response(200, text="<html>down</html>"))

        with pytest.raises(ValueError):
            await adapter.fetch_live_data()
        await adapter.close()


# ---------------------------------------------------------------------------
# MarketDataService
# ---------------------------------------------------------------------------


class TestMarketDataService:
    async def test_snapshot_is_cached_within_ttl(self, quote_source, clock):
        service = MarketDataService(quote_source, TTLCache(clock=clock), ttl_seconds=30)

        first = await service.get_raw_snapshot()
        clock.advance(29)
        second = await service.get_raw_snapshot()

        assert first == second
        assert quote_source.calls == 1

    async def test_snapshot_is_refetched_after_ttl(self, quote_source, clock):
        service = MarketDataService(quote_source, TTLCache(clock=clock), ttl_seconds=30)

        await service.get_raw_snapshot()
        clock.advance(30)
        await service.get_raw_snapshot()

        assert quote_source.calls == 2

    async def test_http_status_failure_maps_to_data_source_error(self, clock):
        adapter = _adapter(lambda request: httpx.Response(500))
        cache = TTLCache(clock=clock)
        service = MarketDataService(adapter, cache)

        with pytest.raises(DataSourceError) as exc_info:
            await service.get_raw_snapshot()
        await adapter.close()

        assert exc_info.value.source == "NEPSE"
        assert "500" in str(exc_info.value)
        assert QUOTE_SNAPSHOT_KEY not in cache

    async def test_connection_failure_maps_to_data_source_error(self, clock):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        adapter = _adapter(handler)
        service = MarketDataService(adapter, TTLCache(clock=clock))

        with pytest.raises(DataSourceError):
            await service.get_snapshot()
        await adapter.close()

    async def test_invalid_json_maps_to_data_source_error(self, clock):
        adapter = _adapter(lambda request: httpx.Response(200, content=b"not json"))
        service = MarketDataService(adapter, TTLCache(clock=clock))

        with pytest.raises(DataSourceError):
            await service.get_raw_snapshot()
        await adapter.close()

    async def test_snapshot_or_empty_swallows_outage(self, quote_source, clock):
        quote_source.error = httpx.ConnectError("down")
        service = MarketDataService(quote_source, TTLCache(clock=clock))

        snapshot = await service.get_snapshot_or_empty()

        assert len(snapshot) == 0

    async def test_get_quote(self, quote_source, clock):
        service = MarketDataService(quote_source, TTLCache(clock=clock))

        quote = await service.get_quote("nabil")

        assert quote.symbol == "NABIL"
        assert quote.live_price == 550.0

    async def test_get_quote_unknown_symbol(self, quote_source, clock):
        service = MarketDataService(quote_source, TTLCache(clock=clock))

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_quote("zzz")

        assert exc_info.value.identifier == "ZZZ"


# ---------------------------------------------------------------------------
# /nepse-proxy routes
# ---------------------------------------------------------------------------


class TestNepseProxyRoutes:
    async def test_proxy_returns_upstream_payload(self, client, quote_source):
        response = await client.get("/api/v1/nepse-proxy")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == quote_source.payload

    async def test_proxy_hits_upstream_once_per_ttl(self, client, quote_source):
        await client.get("/api/v1/nepse-proxy")
        await client.get("/api/v1/nepse-proxy")
        await client.get("/api/v1/nepse-proxy/NABIL")

        assert quote_source.calls == 1

    async def test_proxy_outage_returns_502(self, client, quote_source):
        quote_source.error = httpx.ConnectError("down")

        response = await client.get("/api/v1/nepse-proxy")

        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert body["source"] == "NEPSE"

    async def test_symbol_quote(self, client):
        response = await client.get("/api/v1/nepse-proxy/nabil")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["symbol"] == "NABIL"
        assert data["lastTradedPrice"] == 550.0

    async def test_unknown_symbol_returns_404(self, client):
        response = await client.get("/api/v1/nepse-proxy/NOPE")

        assert response.status_code == 404
        assert response.json()["error"] == "Stock with id 'NOPE' not found"
