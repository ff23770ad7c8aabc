"""
API Initialization - Services Module.

Module: services.py
Builds the process-wide components shared by all requests.
"""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config.settings import settings
from app.services.conversion.price_oracle import PriceOracleClient
from app.services.conversion.rate_store import (
    ConversionRateStore,
    DatabaseRateSource,
)
from app.services.reward.distribution_engine import RewardDistributionEngine


@dataclass
class SharedServices:
    """Components constructed once at process start."""

    price_oracle: PriceOracleClient
    rate_store: ConversionRateStore
    distribution_engine: RewardDistributionEngine


def initialize_shared_services(
    session_maker: async_sessionmaker[AsyncSession],
) -> SharedServices:
    """Create rate store, price oracle and distribution engine."""
    price_oracle = PriceOracleClient()
    rate_store = ConversionRateStore(
        DatabaseRateSource(session_maker),
        ttl_seconds=settings.conversion_rate_cache_ttl,
        live_provider=price_oracle,
    )
    engine = RewardDistributionEngine(
        fallback_rate=settings.distribution_fallback_rate
    )
    logger.info(
        f"Conversion rate cache TTL: {settings.conversion_rate_cache_ttl}s"
    )
    return SharedServices(
        price_oracle=price_oracle,
        rate_store=rate_store,
        distribution_engine=engine,
    )
