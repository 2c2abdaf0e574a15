"""Tests for the /api/v1/watchlist endpoints."""

from __future__ import annotations

import httpx
from httpx import AsyncClient

URL = "/api/v1/watchlist"


class TestWatchlist:
    async def test_add_normalizes_symbol(self, client: AsyncClient, auth_headers):
        response = await client.post(
            URL, json={"stock_symbol": " nabil ", "target_price": 600}, headers=auth_headers
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["stock_symbol"] == "NABIL"
        assert data["target_price"] == 600

    async def test_duplicate_returns_409(self, client: AsyncClient, auth_headers):
        await client.post(URL, json={"stock_symbol": "NABIL"}, headers=auth_headers)

        response = await client.post(URL, json={"stock_symbol": "nabil"}, headers=auth_headers)

        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "Stock already in watchlist"}

    async def test_same_symbol_for_different_users(
        self, client: AsyncClient, auth_headers, other_headers
    ):
        first = await client.post(URL, json={"stock_symbol": "NABIL"}, headers=auth_headers)
        second = await client.post(URL, json={"stock_symbol": "NABIL"}, headers=other_headers)

        assert (first.status_code, second.status_code) == (201, 201)

    async def test_list_newest_first_and_scoped(
        self, client: AsyncClient, auth_headers, other_headers
    ):
        await client.post(URL, json={"stock_symbol": "NABIL"}, headers=auth_headers)
        await client.post(URL, json={"stock_symbol": "NIMB"}, headers=auth_headers)
        await client.post(URL, json={"stock_symbol": "HIDCL"}, headers=other_headers)

        response = await client.get(URL, headers=auth_headers)

        assert [e["stock_symbol"] for e in response.json()["data"]] == ["NIMB", "NABIL"]

    async def test_add_invalidates_cached_list(self, client: AsyncClient, auth_headers):
        assert (await client.get(URL, headers=auth_headers)).json()["data"] == []

        await client.post(URL, json={"stock_symbol": "NABIL"}, headers=auth_headers)
        response = await client.get(URL, headers=auth_headers)

        assert len(response.json()["data"]) == 1

    async def test_remove_accepts_camel_case(self, client: AsyncClient, auth_headers):
        await client.post(URL, json={"stock_symbol": "NABIL"}, headers=auth_headers)
        await client.get(URL, headers=auth_headers)

        response = await client.post(
            f"{URL}/remove", json={"stockSymbol": "nabil"}, headers=auth_headers
        )
        listing = await client.get(URL, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["stock_symbol"] == "NABIL"
        assert listing.json()["data"] == []

    async def test_remove_missing_returns_404(self, client: AsyncClient, auth_headers):
        response = await client.post(
            f"{URL}/remove", json={"stock_symbol": "NABIL"}, headers=auth_headers
        )

        assert response.status_code == 404

    async def test_remove_without_symbol_returns_400(self, client: AsyncClient, auth_headers):
        response = await client.post(f"{URL}/remove", json={}, headers=auth_headers)

        assert response.status_code == 400

    async def test_update_target_and_notes(self, client: AsyncClient, auth_headers):
        await client.post(
            URL, json={"stock_symbol": "NABIL", "target_price": 600, "notes": "watch"},
            headers=auth_headers,
        )

        response = await client.put(
            f"{URL}/nabil", json={"target_price": 650}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["target_price"] == 650
        assert data["notes"] == "watch"

    async def test_update_can_clear_target(self, client: AsyncClient, auth_headers):
        await client.post(URL, json={"stock_symbol": "NABIL", "target_price": 600}, headers=auth_headers)

        response = await client.put(f"{URL}/NABIL", json={"target_price": None}, headers=auth_headers)

        assert response.json()["data"]["target_price"] is None

    async def test_update_other_users_entry_returns_404(
        self, client: AsyncClient, auth_headers, other_headers
    ):
        await client.post(URL, json={"stock_symbol": "NABIL"}, headers=auth_headers)

        response = await client.put(f"{URL}/NABIL", json={"notes": "mine"}, headers=other_headers)

        assert response.status_code == 404


class TestAlerts:
    async def test_alerts_compare_live_price_with_target(
        self, client: AsyncClient, auth_headers
    ):
        # Stub prices: NABIL 550, NIMB 200
        await client.post(URL, json={"stock_symbol": "NABIL", "target_price": 500}, headers=auth_headers)
        await client.post(URL, json={"stock_symbol": "NIMB", "target_price": 400}, headers=auth_headers)
        await client.post(URL, json={"stock_symbol": "HIDCL", "target_price": 300}, headers=auth_headers)
        await client.post(URL, json={"stock_symbol": "NICA"}, headers=auth_headers)

        response = await client.get(f"{URL}/alerts", headers=auth_headers)

        assert response.status_code == 200
        alerts = {a["stock_symbol"]: a for a in response.json()["data"]}
        assert set(alerts) == {"NABIL", "NIMB", "HIDCL"}
        assert alerts["NABIL"]["target_reached"] is True
        assert alerts["NABIL"]["progress_percent"] == 110.0
        assert alerts["NIMB"]["target_reached"] is False
        assert alerts["NIMB"]["progress_percent"] == 50.0
        assert alerts["HIDCL"]["live_price"] is None
        assert alerts["HIDCL"]["target_reached"] is False

    async def test_alerts_survive_quote_outage(
        self, client: AsyncClient, auth_headers, quote_source
    ):
        quote_source.error = httpx.ConnectError("down")
        await client.post(URL, json={"stock_symbol": "NABIL", "target_price": 500}, headers=auth_headers)

        response = await client.get(f"{URL}/alerts", headers=auth_headers)

        assert response.status_code == 200
        (alert,) = response.json()["data"]
        assert alert["live_price"] is None
        assert alert["target_reached"] is False

    async def test_no_targets_skips_quote_fetch(
        self, client: AsyncClient, auth_headers, quote_source
    ):
        await client.post(URL, json={"stock_symbol": "NABIL"}, headers=auth_headers)

        response = await client.get(f"{URL}/alerts", headers=auth_headers)

        assert response.json()["data"] == []
        assert quote_source.calls == 0
