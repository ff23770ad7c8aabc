"""
Validation utilities.

Parsing helpers for request data. Each ``parse_*`` helper raises
ValidationError with a client-facing message.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from app.config.business_constants import (
    MAX_COMMISSION_PERCENT,
    MAX_LEVEL,
    MIN_LEVEL,
    is_valid_level,
)
from app.models.enums import Network
from app.utils.exceptions import ValidationError


def to_decimal(value: Any) -> Decimal | None:
    """
    Convert a raw numeric value to Decimal.

    Floats go through str() so 0.1 stays 0.1.

    Args:
        value: int, float, str or Decimal

    Returns:
        Finite Decimal or None if the value is not a number
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    else:
        return None
    if not result.is_finite():
        return None
    return result


def parse_level(value: Any) -> int:
    """
    Parse a level number from a path segment or JSON body.

    Raises:
        ValidationError: If not an integer within 1..5
    """
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not is_valid_level(value):
        raise ValidationError(
            f"Invalid level. Must be between {MIN_LEVEL} and {MAX_LEVEL}"
        )
    return value


def parse_network(value: Any) -> Network:
    """
    Parse a network symbol.

    Raises:
        ValidationError: If the network is not supported
    """
    network = Network.parse(value)
    if network is None:
        supported = ", ".join(n.value for n in Network)
        raise ValidationError(
            f"Unsupported network: {value}. Supported: {supported}"
        )
    return network


def parse_amount(value: Any, field: str = "amount") -> Decimal:
    """
    Parse a non-negative amount.

    Raises:
        ValidationError: If not a number or negative
    """
    amount = to_decimal(value)
    if amount is None or amount < 0:
        raise ValidationError(f"{field} must be a non-negative number")
    return amount


def parse_rate(value: Any, field: str = "rateToUSD") -> Decimal:
    """
    Parse a USD conversion rate.

    Raises:
        ValidationError: If not a positive number
    """
    rate = to_decimal(value)
    if rate is None or rate <= 0:
        raise ValidationError(f"{field} must be a positive number")
    return rate


def parse_percent(value: Any, field: str = "commissionPercent") -> Decimal:
    """
    Parse a percent within 0..100.

    Raises:
        ValidationError: If out of range
    """
    percent = parse_amount(value, field)
    if percent > MAX_COMMISSION_PERCENT:
        raise ValidationError(f"{field} must be between 0 and 100")
    return percent


def parse_user_id(value: Any) -> int:
    """
    Parse a positive user ID.

    Raises:
        ValidationError: If not a positive integer
    """
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError("Invalid user ID")
    return value
