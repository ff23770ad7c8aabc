"""
Price oracle client.

Best-effort USD price lookup from a CoinGecko-compatible simple-price API.
"""

import asyncio
from decimal import Decimal

import aiohttp
from loguru import logger

from app.config.business_constants import PRICE_ORACLE_IDS
from app.config.settings import settings
from app.models.enums import Network
from app.utils.validation import to_decimal


class PriceOracleClient:
    """HTTP client for live network prices."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize price oracle client.

        Args:
            base_url: Simple-price endpoint (defaults to settings)
            timeout: Total request timeout in seconds (defaults to settings)
        """
        self.base_url = base_url or settings.price_oracle_url
        self.timeout = timeout or settings.price_oracle_timeout
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def fetch_live_rates(self) -> dict[Network, Decimal] | None:
        """
        Fetch USD prices for all supported networks.

        Networks missing from the response are left out.

        Returns:
            Mapping of network -> USD price, or None on any failure
        """
        params = {
            "ids": ",".join(PRICE_ORACLE_IDS.values()),
            "vs_currencies": "usd",
        }

        try:
            session = await self._get_session()
            async with session.get(
                self.base_url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status != 200:
                    logger.warning(
                        f"Price oracle error: HTTP {response.status}"
                    )
                    return None
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Price oracle request failed: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning("Price oracle returned unexpected payload")
            return None

        rates: dict[Network, Decimal] = {}
        for network, coin_id in PRICE_ORACLE_IDS.items():
            entry = data.get(coin_id)
            price = to_decimal(entry.get("usd")) if isinstance(entry, dict) else None
            if price is None or price <= 0:
                logger.bind(coin_id=coin_id).warning(
                    f"Price oracle has no USD price for {network.value}"
                )
                continue
            rates[network] = price

        if not rates:
            return None

        logger.info(f"Fetched live prices for {len(rates)} networks")
        return rates

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
