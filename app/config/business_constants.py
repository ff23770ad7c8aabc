"""
Business logic constants.

Central location for business rules and constants used across the application.
This module can be imported by services, jobs and API handlers without circular dependencies.
"""

from decimal import Decimal

from app.models.enums import Network

# Number of reward levels (and tiers)
MIN_LEVEL = 1
MAX_LEVEL = 5
LEVEL_NUMBERS = tuple(range(MIN_LEVEL, MAX_LEVEL + 1))

# Fallback conversion table (USD per 1 unit), used when storage has no rates
DEFAULT_CONVERSION_RATES: dict[Network, Decimal] = {
    Network.BTC: Decimal("45000"),
    Network.ETH: Decimal("3000"),
    Network.TRON: Decimal("0.1"),
    Network.USDT: Decimal("1"),
    Network.BNB: Decimal("300"),
    Network.SOL: Decimal("100"),
}

# Price oracle ids (CoinGecko) for each network
PRICE_ORACLE_IDS: dict[Network, str] = {
    Network.BTC: "bitcoin",
    Network.ETH: "ethereum",
    Network.TRON: "tron",
    Network.USDT: "tether",
    Network.BNB: "binancecoin",
    Network.SOL: "solana",
}

# Money precision
USD_QUANT = Decimal("0.01")
BALANCE_QUANT = Decimal("0.00000001")  # DECIMAL(18, 8)

# Smallest visible share of a distributed reward on a level node
MIN_NODE_SHARE_USD = Decimal("0.01")

# Commission percent bounds for network rewards
MAX_COMMISSION_PERCENT = Decimal("100")


def get_default_rates() -> dict[Network, Decimal]:
    """Return a fresh copy of the fallback conversion table."""
    return dict(DEFAULT_CONVERSION_RATES)


def is_valid_level(level: object) -> bool:
    """Check that level is an int within 1..5."""
    return isinstance(level, int) and not isinstance(level, bool) and MIN_LEVEL <= level <= MAX_LEVEL
