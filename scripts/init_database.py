#!/usr/bin/env python3
"""Initialize database tables and seed default conversion rates."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger  # noqa: E402

from app.config.business_constants import DEFAULT_CONVERSION_RATES  # noqa: E402
from app.config.database import create_engine, create_session_maker  # noqa: E402
from app.models import Base  # noqa: E402
from app.repositories.conversion_rate_repository import (  # noqa: E402
    ConversionRateRepository,
)

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create all database tables and store default rates if none exist."""
    logger.info("Connecting to database...")
    engine = create_engine(echo=False)

    async with engine.begin() as conn:
        logger.info("Creating tables (checkfirst=True)...")
        await conn.run_sync(
            Base.metadata.create_all,
            checkfirst=True
        )

    session_maker = create_session_maker(engine)
    async with session_maker() as session:
        repository = ConversionRateRepository(session)
        if await repository.count():
            logger.info("Conversion rates already present, skipping seed")
        else:
            for network, rate in DEFAULT_CONVERSION_RATES.items():
                await repository.upsert(network, rate, is_auto=False)
            await session.commit()
            logger.info(
                f"Seeded {len(DEFAULT_CONVERSION_RATES)} default conversion rates"
            )

    await engine.dispose()
    logger.success("Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_database())
