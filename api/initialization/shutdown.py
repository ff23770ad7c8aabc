"""
API Initialization - Shutdown Module.

Module: shutdown.py
Handles graceful shutdown of the API.
Stops scheduler, closes the price oracle session and database connections.
"""

from aiohttp import web
from loguru import logger

from api.context import PRICE_ORACLE_KEY


async def shutdown_handler(app: web.Application) -> None:
    """Handle graceful shutdown."""
    logger.info("Graceful shutdown initiated...")

    # Stop scheduler if running
    try:
        from jobs.scheduler import scheduler_instance
        if scheduler_instance and scheduler_instance.running:
            scheduler_instance.shutdown(wait=False)
            logger.info("Scheduler stopped")
    except Exception as e:
        logger.warning(f"Error stopping scheduler: {e}")

    # Close price oracle HTTP session
    oracle = app.get(PRICE_ORACLE_KEY)
    if oracle is not None:
        try:
            await oracle.close()
        except Exception as e:
            logger.warning(f"Error closing price oracle session: {e}")

    # Close database connections
    try:
        from app.config.database import engine
        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning(f"Error closing database: {e}")

    logger.info("Graceful shutdown complete")
