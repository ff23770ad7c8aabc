"""
Formatters utility.

Money rounding and serialization helpers shared by services and handlers.
"""

from decimal import ROUND_HALF_UP, Decimal

from app.config.business_constants import USD_QUANT


def round_usd(value: Decimal) -> Decimal:
    """
    Round a USD amount to cents (half-up).

    Args:
        value: Amount in USD

    Returns:
        Amount quantized to 0.01
    """
    return Decimal(value).quantize(USD_QUANT, rounding=ROUND_HALF_UP)


def format_usd(value: Decimal | None) -> str:
    """
    Format USD amount for log messages.

    Args:
        value: Amount in USD

    Returns:
        Formatted string like "$1,234.56"
    """
    if value is None:
        return "$0.00"
    return f"${round_usd(value):,.2f}"


def decimal_map_to_json(values: dict) -> dict[str, float]:
    """
    Convert a mapping of Decimal values to JSON-friendly floats.

    Enum keys are replaced with their values.
    """
    return {
        getattr(key, "value", key): float(value)
        for key, value in values.items()
    }
