"""
Unit tests for the price oracle client.

A local aiohttp server stands in for the simple-price API.
"""

import asyncio
from decimal import Decimal

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from app.models.enums import Network
from app.services.conversion.price_oracle import PriceOracleClient

FULL_RESPONSE = {
    "bitcoin": {"usd": 61000.5},
    "ethereum": {"usd": 2400},
    "tron": {"usd": 0.12},
    "tether": {"usd": 1.0},
    "binancecoin": {"usd": 580},
    "solana": {"usd": 150.25},
}


async def _fetch(handler, timeout=5.0):
    app = web.Application()
    app.router.add_get("/simple/price", handler)
    async with TestServer(app) as server:
        client = PriceOracleClient(
            base_url=str(server.make_url("/simple/price")), timeout=timeout
        )
        try:
            return await client.fetch_live_rates()
        finally:
            await client.close()


class TestFetchLiveRates:
    """Test live rate fetching."""

    @pytest.mark.asyncio
    async def test_parses_all_networks(self):
        """Every supported network is mapped from its oracle id."""
        seen = {}

        async def handler(request):
            seen.update(request.query)
            return web.json_response(FULL_RESPONSE)

        rates = await _fetch(handler)

        assert rates == {
            Network.BTC: Decimal("61000.5"),
            Network.ETH: Decimal("2400"),
            Network.TRON: Decimal("0.12"),
            Network.USDT: Decimal("1.0"),
            Network.BNB: Decimal("580"),
            Network.SOL: Decimal("150.25"),
        }
        assert seen["vs_currencies"] == "usd"
        assert set(seen["ids"].split(",")) == set(
            ["bitcoin", "ethereum", "tron", "tether", "binancecoin", "solana"]
        )

    @pytest.mark.asyncio
    async def test_partial_response(self):
        """Networks missing from the response are left out."""
        async def handler(request):
            return web.json_response({"bitcoin": {"usd": 60000}, "solana": {}})

        rates = await _fetch(handler)

        assert rates == {Network.BTC: Decimal("60000")}

    @pytest.mark.asyncio
    async def test_http_error_returns_none(self):
        async def handler(request):
            return web.json_response({"error": "rate limited"}, status=429)

        assert await _fetch(handler) is None

    @pytest.mark.asyncio
    async def test_invalid_json_returns_none(self):
        async def handler(request):
            return web.Response(text="<html>oops</html>", content_type="text/html")

        assert await _fetch(handler) is None

    @pytest.mark.asyncio
    async def test_empty_payload_returns_none(self):
        async def handler(request):
            return web.json_response({})

        assert await _fetch(handler) is None

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self):
        async def handler(request):
            await asyncio.sleep(1)
            return web.json_response(FULL_RESPONSE)

        assert await _fetch(handler, timeout=0.05) is None

    @pytest.mark.asyncio
    async def test_connection_error_returns_none(self):
        """Unreachable oracle yields None."""
        client = PriceOracleClient(
            base_url="http://127.0.0.1:1/simple/price", timeout=1
        )
        try:
            assert await client.fetch_live_rates() is None
        finally:
            await client.close()
