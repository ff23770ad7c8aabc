"""
Global error handler middleware.

Translates domain exceptions into JSON error envelopes. Unexpected
exceptions are logged with traceback and reported as a generic 500;
technical details never reach the client.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web
from loguru import logger

from api.responses import error_response
from app.utils.exceptions import ServiceError

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def error_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Execute middleware."""
    try:
        return await handler(request)
    except ServiceError as e:
        log = logger.warning if e.status_code < 500 else logger.error
        log(
            f"{request.method} {request.path} -> {e.status_code}: {e.message}"
        )
        return error_response(e.message, e.status_code)
    except web.HTTPException as e:
        if e.status < 400:
            raise
        return error_response(e.reason, e.status)
    except Exception as e:
        logger.exception(
            f"Unhandled exception in {request.method} {request.path}: {e}"
        )
        return error_response("Internal server error", 500)
