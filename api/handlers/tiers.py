"""
Tier handlers.
"""

from aiohttp import web

from api.context import get_auth, open_session, read_json, require_admin
from api.responses import success_response
from app.services.tiers.tier_service import TierService
from app.utils.validation import parse_user_id


async def list_tiers(request: web.Request) -> web.Response:
    """GET /api/tiers (public)"""
    return success_response(TierService.list_tiers())


async def get_my_tier(request: web.Request) -> web.Response:
    """GET /api/tiers/me"""
    auth = get_auth(request)
    async with open_session(request) as session:
        info = await TierService(session).get_user_tier_info(auth.user_id)
    return success_response(info)


async def set_user_tier(request: web.Request) -> web.Response:
    """PUT /api/tiers/user  body: {"userId": 1, "tier": 3}"""
    require_admin(request)
    body = await read_json(request)
    user_id = parse_user_id(body.get("userId"))
    async with open_session(request) as session:
        data = await TierService(session).set_user_tier(
            user_id, body.get("tier")
        )
    return success_response(data, message=f"User tier set to {data['tier']}")


def setup_routes(app: web.Application) -> None:
    """Register tier routes."""
    app.router.add_get("/api/tiers", list_tiers)
    app.router.add_get("/api/tiers/me", get_my_tier)
    app.router.add_put("/api/tiers/user", set_user_tier)
