"""
Request context helpers.

Application keys for shared components and accessors used by handlers.
"""

from typing import Any

from aiohttp import web
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.services.conversion.price_oracle import PriceOracleClient
from app.services.conversion.rate_store import ConversionRateStore
from app.services.reward.distribution_engine import RewardDistributionEngine
from app.utils.exceptions import (
    AuthenticationError,
    PermissionDeniedError,
    ValidationError,
)
from app.utils.security import AuthContext

SESSION_MAKER_KEY = web.AppKey("session_maker", async_sessionmaker)
RATE_STORE_KEY = web.AppKey("rate_store", ConversionRateStore)
PRICE_ORACLE_KEY = web.AppKey("price_oracle", PriceOracleClient)
DISTRIBUTION_ENGINE_KEY = web.AppKey(
    "distribution_engine", RewardDistributionEngine
)

# Request-level key set by the auth middleware
AUTH_KEY = "auth"


def open_session(request: web.Request) -> AsyncSession:
    """New database session for this request (use as async context manager)."""
    return request.app[SESSION_MAKER_KEY]()


def rate_store(request: web.Request) -> ConversionRateStore:
    return request.app[RATE_STORE_KEY]


def distribution_engine(request: web.Request) -> RewardDistributionEngine:
    return request.app[DISTRIBUTION_ENGINE_KEY]


def get_auth(request: web.Request) -> AuthContext:
    """
    Get the authenticated caller.

    Raises:
        AuthenticationError: If the request is not authenticated
    """
    auth = request.get(AUTH_KEY)
    if auth is None:
        raise AuthenticationError()
    return auth


def require_admin(request: web.Request) -> AuthContext:
    """
    Get the authenticated caller and check the admin flag.

    Raises:
        AuthenticationError: If the request is not authenticated
        PermissionDeniedError: If the caller is not an admin
    """
    auth = get_auth(request)
    if not auth.is_admin:
        raise PermissionDeniedError()
    return auth


async def read_json(request: web.Request) -> dict[str, Any]:
    """
    Parse the JSON request body.

    Raises:
        ValidationError: If the body is not a JSON object
    """
    try:
        body = await request.json()
    except ValueError as exc:
        raise ValidationError("Request body must be valid JSON") from exc
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body
