"""
API application factory.

Wires middlewares, routes, shared services and the background scheduler
into an aiohttp application.
"""

from aiohttp import web
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.context import (
    DISTRIBUTION_ENGINE_KEY,
    PRICE_ORACLE_KEY,
    RATE_STORE_KEY,
    SESSION_MAKER_KEY,
)
from api.handlers import setup_routes
from api.initialization.services import (
    SharedServices,
    initialize_shared_services,
)
from api.initialization.shutdown import shutdown_handler
from api.middlewares import auth_middleware, error_middleware
from jobs.health import setup_health_routes
from jobs.scheduler import create_scheduler


def create_app(
    session_maker: async_sessionmaker[AsyncSession] | None = None,
    services: SharedServices | None = None,
    run_background_jobs: bool = True,
) -> web.Application:
    """
    Create the API application.

    Args:
        session_maker: Session factory (the global one if omitted)
        services: Prebuilt shared services (built from settings if omitted)
        run_background_jobs: Start the rate refresh scheduler and dispose
            global resources on shutdown

    Returns:
        Configured aiohttp application
    """
    if session_maker is None:
        from app.config.database import async_session_maker

        session_maker = async_session_maker
    if services is None:
        services = initialize_shared_services(session_maker)

    # Error middleware must wrap auth so auth failures become envelopes
    app = web.Application(middlewares=[error_middleware, auth_middleware])
    app[SESSION_MAKER_KEY] = session_maker
    app[RATE_STORE_KEY] = services.rate_store
    app[PRICE_ORACLE_KEY] = services.price_oracle
    app[DISTRIBUTION_ENGINE_KEY] = services.distribution_engine

    setup_routes(app)
    setup_health_routes(app)

    if run_background_jobs:
        scheduler = create_scheduler(session_maker, services.rate_store)

        async def start_scheduler(app: web.Application) -> None:
            if scheduler is not None:
                scheduler.start()
                logger.info("Scheduler started")

        app.on_startup.append(start_scheduler)
        app.on_cleanup.append(shutdown_handler)

    return app
