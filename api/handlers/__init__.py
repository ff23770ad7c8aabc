"""
API handlers.

Each module exposes ``setup_routes(app)``.
"""

from aiohttp import web

from api.handlers import conversion_rates, levels, network_rewards, tiers, users


def setup_routes(app: web.Application) -> None:
    """Register all API routes."""
    for module in (conversion_rates, network_rewards, levels, users, tiers):
        module.setup_routes(app)


__all__ = ["setup_routes"]
