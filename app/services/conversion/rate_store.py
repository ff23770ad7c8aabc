"""
Conversion rate store.

Process-wide network -> USD rate table with a TTL cache in front of the
database. Falls back to the default table when nothing is stored and to
the last good snapshot when storage fails, so readers never see an error.
"""

import time
from collections.abc import Callable
from decimal import Decimal
from typing import Protocol

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config.business_constants import get_default_rates
from app.config.settings import settings
from app.models.enums import Network
from app.repositories.conversion_rate_repository import (
    ConversionRateRepository,
)


class RateSource(Protocol):
    """Persistent source of conversion rates."""

    async def load_rates(self) -> dict[Network, Decimal]:
        ...


class LiveRateProvider(Protocol):
    """External provider of current market rates."""

    async def fetch_live_rates(self) -> dict[Network, Decimal] | None:
        ...


class DatabaseRateSource:
    """Loads rates from the conversion_rates table in a fresh session."""

    def __init__(
        self, session_maker: async_sessionmaker[AsyncSession]
    ) -> None:
        self.session_maker = session_maker

    async def load_rates(self) -> dict[Network, Decimal]:
        async with self.session_maker() as session:
            return await ConversionRateRepository(session).load_rate_map()


class ConversionRateStore:
    """
    Cached conversion rate table.

    Constructed once at process start and shared by all requests.
    Concurrent reloads are harmless (last writer wins), so no lock is held.
    """

    def __init__(
        self,
        source: RateSource,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        live_provider: LiveRateProvider | None = None,
    ) -> None:
        """
        Initialize rate store.

        Args:
            source: Persistent rate source
            ttl_seconds: Cache lifetime (defaults to settings)
            clock: Monotonic clock in seconds
            live_provider: Price oracle for fetch_live_rates
        """
        self.source = source
        self.ttl_seconds = (
            settings.conversion_rate_cache_ttl
            if ttl_seconds is None
            else ttl_seconds
        )
        self.clock = clock
        self.live_provider = live_provider
        self._cache: dict[Network, Decimal] | None = None
        self._cached_at: float = 0.0

    @property
    def is_cached(self) -> bool:
        """True while a snapshot younger than the TTL is held."""
        return (
            self._cache is not None
            and (self.clock() - self._cached_at) < self.ttl_seconds
        )

    async def get_rates(self) -> dict[Network, Decimal]:
        """
        Get current rates.

        Returns:
            Copy of the network -> USD rate mapping (never empty)
        """
        if self.is_cached:
            return dict(self._cache)

        try:
            rates = await self.source.load_rates()
        except Exception as e:
            logger.bind(has_cache=self._cache is not None).error(
                f"Failed to load conversion rates: {e}"
            )
            if self._cache is not None:
                return dict(self._cache)
            return get_default_rates()

        if not rates:
            logger.warning("No conversion rates stored, using default rates")
            rates = get_default_rates()

        self._cache = dict(rates)
        self._cached_at = self.clock()
        logger.debug(f"Conversion rates loaded: {len(rates)} networks")
        return dict(rates)

    def invalidate(self) -> None:
        """Drop the cached snapshot; the next read reloads from storage."""
        self._cache = None
        self._cached_at = 0.0

    async def fetch_live_rates(self) -> dict[Network, Decimal] | None:
        """
        Fetch current market rates from the price oracle.

        Never persists anything by itself.

        Returns:
            Mapping of network -> USD rate, or None if unavailable
        """
        if self.live_provider is None:
            logger.warning("No price oracle configured")
            return None
        return await self.live_provider.fetch_live_rates()
