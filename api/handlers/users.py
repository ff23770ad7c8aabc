"""
User reward handlers.
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
from app.services.reward.animation_completion import AnimationCompletionHandler
from app.services.reward.user_rewards import UserRewardManager
from app.utils.validation import parse_user_id


async def mark_animation_watched(request: web.Request) -> web.Response:
    """POST /api/users/mark-animation-watched  body: {"level": 1}"""
    auth = get_auth(request)
    body = await read_json(request)
    async with open_session(request) as session:
        handler = AnimationCompletionHandler(session, rate_store(request))
        result = await handler.mark_animation_watched(
            auth.user_id, body.get("level")
        )
    message = (
        "Animation marked as watched and reward added"
        if result.reward_added
        else "Animation already watched"
    )
    return success_response(result.to_dict(), message=message)


async def update_user_level_rewards(request: web.Request) -> web.Response:
    """PUT /api/users/{id}/level-rewards  body: {"level": 1, "networkRewards": {...}}"""
    require_admin(request)
    user_id = parse_user_id(request.match_info["id"])
    body = await read_json(request)
    async with open_session(request) as session:
        manager = UserRewardManager(session, rate_store(request))
        data = await manager.set_level_rewards(
            user_id, body.get("level"), body.get("networkRewards")
        )
    return success_response(data, message="Level rewards updated")


async def seed_user_rewards(request: web.Request) -> web.Response:
    """POST /api/users/{id}/seed-rewards"""
    require_admin(request)
    user_id = parse_user_id(request.match_info["id"])
    async with open_session(request) as session:
        manager = UserRewardManager(session, rate_store(request))
        data = await manager.seed_from_global_rewards(user_id)
    return success_response(data, message="User rewards seeded")


def setup_routes(app: web.Application) -> None:
    """Register user routes."""
    app.router.add_post(
        "/api/users/mark-animation-watched", mark_animation_watched
    )
    app.router.add_put(
        "/api/users/{id}/level-rewards", update_user_level_rewards
    )
    app.router.add_post("/api/users/{id}/seed-rewards", seed_user_rewards)
