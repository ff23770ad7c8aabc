"""
Exception types.

Domain exceptions raised by services and translated into JSON responses
by the API error middleware.
"""


class ServiceError(Exception):
    """Base class for errors reported to API clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Raised when request data is malformed or out of range."""

    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(ServiceError):
    """Raised when the bearer token is missing or invalid."""

    status_code = 401
    default_message = "Authentication required"


class PermissionDeniedError(ServiceError):
    """Raised when a non-admin calls an admin operation."""

    status_code = 403
    default_message = "Admin access required"


class TierTooLowError(ServiceError):
    """Raised when a user acts on a level above their tier."""

    status_code = 403
    default_message = "Tier too low for this level"

    def __init__(self, tier: int, level: int) -> None:
        self.tier = tier
        self.level = level
        super().__init__(
            f"Tier {tier} cannot access level {level}. "
            f"Upgrade to tier {level} first."
        )


class NotFoundError(ServiceError):
    """Raised when a requested entity does not exist."""

    status_code = 404
    default_message = "Not found"


class ConflictError(ServiceError):
    """Raised when creating an entity that already exists."""

    status_code = 409
    default_message = "Already exists"


class ExternalServiceError(ServiceError):
    """Raised when an upstream service (price oracle) is unavailable."""

    status_code = 503
    default_message = "External service unavailable"
