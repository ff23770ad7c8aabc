"""
Health check endpoints.

Reports API process, database and rate refresh scheduler state.
"""

from aiohttp import web
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger
from sqlalchemy import text

from api.context import RATE_STORE_KEY, SESSION_MAKER_KEY

# Global scheduler reference for health checks
_scheduler: AsyncIOScheduler | None = None


def set_scheduler(scheduler: AsyncIOScheduler | None) -> None:
    """
    Set the scheduler instance for health checks.

    Args:
        scheduler: AsyncIOScheduler instance to monitor (None when disabled)
    """
    global _scheduler
    _scheduler = scheduler
    if scheduler is not None:
        logger.info("Scheduler registered for health checks")


def _scheduler_info() -> dict:
    if _scheduler is None:
        return {"enabled": False, "running": False, "jobs": []}
    return {
        "enabled": True,
        "running": _scheduler.running,
        "jobs": [
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
            }
            for job in _scheduler.get_jobs()
        ],
    }


async def health_handler(request: web.Request) -> web.Response:
    """
    Health check endpoint.

    Returns:
        JSON response with scheduler and rate cache status
    """
    scheduler = _scheduler_info()
    stopped = scheduler["enabled"] and not scheduler["running"]
    return web.json_response(
        {
            "status": "degraded" if stopped else "healthy",
            "scheduler": scheduler,
            "rate_cache_warm": request.app[RATE_STORE_KEY].is_cached,
        }
    )


async def readiness_handler(request: web.Request) -> web.Response:
    """
    Readiness check endpoint.

    Returns:
        JSON response indicating if the database is reachable
    """
    try:
        async with request.app[SESSION_MAKER_KEY]() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return web.json_response(
            {
                "status": "not_ready",
                "ready": False,
            },
            status=503,
        )

    return web.json_response(
        {
            "status": "ready",
            "ready": True,
        }
    )


async def liveness_handler(request: web.Request) -> web.Response:
    """
    Liveness check endpoint.

    Returns:
        JSON response indicating if the process is alive
    """
    return web.json_response(
        {
            "status": "alive",
            "alive": True,
        }
    )


def setup_health_routes(app: web.Application) -> None:
    """Register health check routes."""
    app.router.add_get("/health", health_handler)
    app.router.add_get("/health/ready", readiness_handler)
    app.router.add_get("/health/live", liveness_handler)
