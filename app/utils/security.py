"""
Security utilities for API bearer tokens.

Tokens are issued by the platform's login service; this module only
validates them. ``sub`` carries the user ID, ``is_admin`` the admin flag.
"""

import time
from dataclasses import dataclass

import jwt
from jwt import InvalidTokenError

from app.config.settings import settings
from app.utils.exceptions import AuthenticationError


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller of an API request."""

    user_id: int
    is_admin: bool = False


def issue_access_token(
    user_id: int, is_admin: bool = False, ttl_minutes: int = 60
) -> str:
    """
    Issue a signed access token.

    Used by tooling and tests; production tokens come from the login
    service sharing the same secret.
    """
    now = int(time.time())
    payload = {
        "sub": str(user_id),
        "is_admin": is_admin,
        "iat": now,
        "exp": now + ttl_minutes * 60,
    }
    return jwt.encode(
        payload, settings.jwt_secret, algorithm=settings.jwt_algorithm
    )


def decode_access_token(token: str) -> AuthContext:
    """
    Validate a bearer token.

    Args:
        token: Encoded JWT

    Returns:
        AuthContext of the caller

    Raises:
        AuthenticationError: If the token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except InvalidTokenError as exc:
        raise AuthenticationError("Invalid or expired token") from exc

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid token subject") from exc

    return AuthContext(user_id=user_id, is_admin=bool(payload.get("is_admin")))
