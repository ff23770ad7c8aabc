"""
Network reward handlers.
"""

from aiohttp import web

from api.context import (
    get_auth,
    open_session,
    rate_store,
    read_json,
    require_admin,
)
from api.responses import success_response
from app.services.network_reward_service import NetworkRewardService


def _service(request: web.Request, session) -> NetworkRewardService:
    return NetworkRewardService(session, rate_store(request))


async def list_network_rewards(request: web.Request) -> web.Response:
    """GET /api/network-rewards[?level=N]"""
    get_auth(request)
    async with open_session(request) as session:
        data = await _service(request, session).list_rewards(
            request.query.get("level")
        )
    return success_response(data)


async def get_level_network_rewards(request: web.Request) -> web.Response:
    """GET /api/network-rewards/level/{level}"""
    get_auth(request)
    async with open_session(request) as session:
        data = await _service(request, session).get_level_rewards(
            request.match_info["level"]
        )
    return success_response(data)


async def get_network_rewards_summary(request: web.Request) -> web.Response:
    """GET /api/network-rewards/summary"""
    get_auth(request)
    async with open_session(request) as session:
        data = await _service(request, session).get_summary()
    return success_response(data)


async def get_tier_prices(request: web.Request) -> web.Response:
    """GET /api/network-rewards/tier-prices"""
    get_auth(request)
    async with open_session(request) as session:
        data = await _service(request, session).get_tier_prices()
    return success_response(data)


async def upsert_network_reward(request: web.Request) -> web.Response:
    """POST /api/network-rewards"""
    auth = require_admin(request)
    body = await read_json(request)
    async with open_session(request) as session:
        data = await _service(request, session).upsert_reward(
            body, auth.user_id
        )
    return success_response(data, message="Network reward saved")


async def update_level_network_rewards(request: web.Request) -> web.Response:
    """PUT /api/network-rewards/level  body: {"level": 1, "rewards": {...}}"""
    auth = require_admin(request)
    body = await read_json(request)
    async with open_session(request) as session:
        data = await _service(request, session).update_level_rewards(
            body.get("level"),
            body.get("rewards"),
            user_id=auth.user_id,
            commission_percent=body.get("commissionPercent"),
        )
    return success_response(data, message="Level rewards updated")


async def delete_network_reward(request: web.Request) -> web.Response:
    """DELETE /api/network-rewards/{level}/{network}"""
    require_admin(request)
    async with open_session(request) as session:
        data = await _service(request, session).delete_reward(
            request.match_info["level"], request.match_info["network"]
        )
    return success_response(data, message="Network reward deleted")


def setup_routes(app: web.Application) -> None:
    """Register network reward routes."""
    app.router.add_get("/api/network-rewards", list_network_rewards)
    app.router.add_post("/api/network-rewards", upsert_network_reward)
    app.router.add_get(
        "/api/network-rewards/summary", get_network_rewards_summary
    )
    app.router.add_get("/api/network-rewards/tier-prices", get_tier_prices)
    app.router.add_put(
        "/api/network-rewards/level", update_level_network_rewards
    )
    app.router.add_get(
        "/api/network-rewards/level/{level}", get_level_network_rewards
    )
    app.router.add_delete(
        "/api/network-rewards/{level}/{network}", delete_network_reward
    )
