"""
Level template handlers.

``?userId=`` renders templates with that user's distributed rewards;
non-admins may only render their own.
"""

from aiohttp import web

from api.context import (
    distribution_engine,
    get_auth,
    open_session,
    rate_store,
    read_json,
    require_admin,
)
from api.responses import success_response
from app.services.level_service import LevelService
from app.utils.exceptions import PermissionDeniedError
from app.utils.validation import parse_user_id


def _service(request: web.Request, session) -> LevelService:
    return LevelService(
        session, rate_store(request), engine=distribution_engine(request)
    )


def _target_user_id(request: web.Request) -> int | None:
    auth = get_auth(request)
    raw = request.query.get("userId")
    if raw is None:
        return None
    user_id = parse_user_id(raw)
    if user_id != auth.user_id and not auth.is_admin:
        raise PermissionDeniedError("Cannot view another user's rewards")
    return user_id


async def list_levels(request: web.Request) -> web.Response:
    """GET /api/levels[?userId=N]"""
    user_id = _target_user_id(request)
    async with open_session(request) as session:
        levels = await _service(request, session).list_levels(user_id)
    return success_response(levels)


async def get_level(request: web.Request) -> web.Response:
    """GET /api/levels/{level}[?userId=N]"""
    user_id = _target_user_id(request)
    async with open_session(request) as session:
        level = await _service(request, session).get_level(
            request.match_info["level"], user_id
        )
    return success_response(level)


async def create_level(request: web.Request) -> web.Response:
    """POST /api/levels"""
    require_admin(request)
    body = await read_json(request)
    async with open_session(request) as session:
        level = await _service(request, session).create_level(body)
    return success_response(level, message="Level created", status=201)


async def update_level(request: web.Request) -> web.Response:
    """PUT /api/levels/{level}"""
    require_admin(request)
    body = await read_json(request)
    async with open_session(request) as session:
        level = await _service(request, session).update_level(
            request.match_info["level"], body
        )
    return success_response(level, message="Level updated")


async def delete_level(request: web.Request) -> web.Response:
    """DELETE /api/levels/{level}"""
    require_admin(request)
    async with open_session(request) as session:
        level = await _service(request, session).delete_level(
            request.match_info["level"]
        )
    return success_response(level, message="Level deleted")


def setup_routes(app: web.Application) -> None:
    """Register level routes."""
    app.router.add_get("/api/levels", list_levels)
    app.router.add_post("/api/levels", create_level)
    app.router.add_get("/api/levels/{level}", get_level)
    app.router.add_put("/api/levels/{level}", update_level)
    app.router.add_delete("/api/levels/{level}", delete_level)
