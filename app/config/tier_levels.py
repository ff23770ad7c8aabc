"""
Single source of truth for the tier configuration.

Tier N unlocks level N of the reward flow. Upgrade prices here are the
defaults; an admin may override them per user.
"""

from decimal import Decimal
from typing import NamedTuple

from app.config.business_constants import MAX_LEVEL, MIN_LEVEL


class TierConfig(NamedTuple):
    """Tier configuration."""

    tier: int
    name: str
    description: str
    features: tuple[str, ...]
    max_balance: Decimal
    api_limit: int
    upgrade_price: Decimal  # Default USD price to upgrade into this tier

    def as_dict(self) -> dict:
        """Serialize for API responses."""
        return {
            "tier": self.tier,
            "name": self.name,
            "description": self.description,
            "features": list(self.features),
            "maxBalance": float(self.max_balance),
            "apiLimit": self.api_limit,
            "upgradePrice": float(self.upgrade_price),
        }


TIERS: dict[int, TierConfig] = {
    1: TierConfig(
        tier=1,
        name="Basic",
        description="Entry-level tier with basic features",
        features=(
            "Basic analytics",
            "Standard support",
            "Limited API calls",
        ),
        max_balance=Decimal("1000"),
        api_limit=100,
        upgrade_price=Decimal("0"),  # Base tier is free
    ),
    2: TierConfig(
        tier=2,
        name="Standard",
        description="Enhanced features for regular users",
        features=(
            "Advanced analytics",
            "Priority support",
            "Increased API calls",
            "Custom branding",
        ),
        max_balance=Decimal("5000"),
        api_limit=500,
        upgrade_price=Decimal("50"),
    ),
    3: TierConfig(
        tier=3,
        name="Professional",
        description="Professional features for businesses",
        features=(
            "Premium analytics",
            "24/7 support",
            "High API limits",
            "White-label options",
            "Custom integrations",
        ),
        max_balance=Decimal("25000"),
        api_limit=2000,
        upgrade_price=Decimal("100"),
    ),
    4: TierConfig(
        tier=4,
        name="Enterprise",
        description="Enterprise-grade features",
        features=(
            "Enterprise analytics",
            "Dedicated support",
            "Unlimited API calls",
            "Custom development",
            "SLA guarantees",
        ),
        max_balance=Decimal("100000"),
        api_limit=10000,
        upgrade_price=Decimal("250"),
    ),
    5: TierConfig(
        tier=5,
        name="Premium",
        description="Highest tier with all features",
        features=(
            "All premium features",
            "Personal account manager",
            "Unlimited everything",
            "Custom solutions",
            "VIP treatment",
        ),
        max_balance=Decimal("1000000"),
        api_limit=50000,
        upgrade_price=Decimal("500"),
    ),
}


def get_tier_config(tier: int) -> TierConfig:
    """
    Get tier configuration.

    Args:
        tier: Tier number; out-of-range values resolve to the base tier

    Returns:
        Tier configuration
    """
    return TIERS.get(tier, TIERS[MIN_LEVEL])


def get_upgrade_options(current_tier: int) -> list[TierConfig]:
    """
    Get tiers a user can upgrade into.

    Args:
        current_tier: User's current tier

    Returns:
        Tiers above the current one, ascending
    """
    start = max(current_tier, MIN_LEVEL - 1) + 1
    return [TIERS[tier] for tier in range(start, MAX_LEVEL + 1)]
