"""
Authentication middleware.

Validates the bearer token of every API request outside the public
routes and stores the caller's AuthContext on the request.
"""

from aiohttp import web

from api.context import AUTH_KEY
from api.middlewares.error_handler import Handler
from app.utils.exceptions import AuthenticationError
from app.utils.security import decode_access_token

# (method, path) pairs reachable without a token
PUBLIC_ROUTES = {
    ("GET", "/api/tiers"),
}
PUBLIC_PREFIXES = ("/health",)


def is_public(request: web.Request) -> bool:
    """Check whether a request targets a public route."""
    if request.path.startswith(PUBLIC_PREFIXES):
        return True
    if not request.path.startswith("/api/"):
        return True
    return (request.method, request.path.rstrip("/")) in PUBLIC_ROUTES


@web.middleware
async def auth_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Execute middleware."""
    if is_public(request):
        return await handler(request)

    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Missing bearer token")

    request[AUTH_KEY] = decode_access_token(token.strip())
    return await handler(request)
