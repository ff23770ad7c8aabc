"""
Conversion services package.

- rate_store: cached network -> USD rate table
- converter: pure USD conversion of reward amounts
- price_oracle: live market prices
- rate_service: admin rate management and scheduled refresh
"""

from app.services.conversion.converter import (
    ConversionResult,
    NetworkBreakdown,
    RewardConverter,
    parse_reward_mapping,
)
from app.services.conversion.price_oracle import PriceOracleClient
from app.services.conversion.rate_service import ConversionRateService
from app.services.conversion.rate_store import (
    ConversionRateStore,
    DatabaseRateSource,
)

__all__ = [
    "ConversionRateService",
    "ConversionRateStore",
    "ConversionResult",
    "DatabaseRateSource",
    "NetworkBreakdown",
    "PriceOracleClient",
    "RewardConverter",
    "parse_reward_mapping",
]
