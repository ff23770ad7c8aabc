"""Scheduled conversion rate refresh from the price oracle."""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.services.conversion.rate_service import ConversionRateService
from app.services.conversion.rate_store import ConversionRateStore


async def refresh_conversion_rates(
    session_maker: async_sessionmaker[AsyncSession],
    rate_store: ConversionRateStore,
) -> None:
    """
    Refresh automatically maintained conversion rates.

    Skipped while an admin manages rates manually; a failed oracle call
    keeps the stored rates.
    """
    logger.debug("Starting conversion rate refresh...")

    try:
        async with session_maker() as session:
            service = ConversionRateService(session, rate_store)
            rates = await service.refresh_from_oracle()
    except Exception as e:
        logger.exception(f"Conversion rate refresh failed: {e}")
        return

    if rates:
        logger.info(
            "Conversion rates refreshed: "
            + ", ".join(f"{n.value}={r}" for n, r in rates.items())
        )
