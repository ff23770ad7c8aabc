"""
Background job scheduler.

Runs periodic jobs on the API event loop with APScheduler.
"""

from datetime import UTC, datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config.settings import settings
from app.services.conversion.rate_store import ConversionRateStore
from jobs.health import set_scheduler
from jobs.tasks.conversion_rate_refresh import refresh_conversion_rates

# Global scheduler instance for shutdown handling
scheduler_instance: AsyncIOScheduler | None = None

RATE_REFRESH_JOB_ID = "conversion_rate_refresh"


def create_scheduler(
    session_maker: async_sessionmaker[AsyncSession],
    rate_store: ConversionRateStore,
) -> AsyncIOScheduler | None:
    """
    Create the scheduler with all periodic jobs.

    Returns:
        Scheduler (not started), or None if no job is enabled
    """
    global scheduler_instance

    if not settings.rate_refresh_enabled:
        logger.info("Conversion rate refresh disabled, scheduler not created")
        set_scheduler(None)
        return None

    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        refresh_conversion_rates,
        "interval",
        minutes=settings.rate_refresh_interval_minutes,
        args=[session_maker, rate_store],
        id=RATE_REFRESH_JOB_ID,
        name="Conversion rate refresh",
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(UTC),
    )
    logger.info(
        f"Conversion rate refresh scheduled every "
        f"{settings.rate_refresh_interval_minutes} min"
    )

    scheduler_instance = scheduler
    set_scheduler(scheduler)
    return scheduler
