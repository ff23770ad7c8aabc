"""
Tier services package.
"""

from app.services.tiers.tier_price_calculator import TierPriceCalculator
from app.services.tiers.tier_service import TierService

__all__ = ["TierPriceCalculator", "TierService"]
