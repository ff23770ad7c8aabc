"""
Tier service.

Tier information for users and the admin set-tier operation.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import LEVEL_NUMBERS, is_valid_level
from app.config.tier_levels import TIERS, get_tier_config, get_upgrade_options
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService, transaction
from app.services.tiers.tier_price_calculator import TierPriceCalculator
from app.utils.exceptions import NotFoundError, ValidationError


class TierService(BaseService):
    """User tier management."""

    def __init__(
        self,
        session: AsyncSession,
        calculator: TierPriceCalculator | None = None,
    ) -> None:
        super().__init__(session)
        self.calculator = calculator or TierPriceCalculator()
        self.user_repository = UserRepository(session)

    @staticmethod
    def list_tiers() -> list[dict[str, Any]]:
        """All tier configurations, ascending."""
        return [config.as_dict() for config in TIERS.values()]

    async def get_user_tier_info(self, user_id: int) -> dict[str, Any]:
        """
        Get a user's tier, unlocked levels and upgrade options.

        Upgrade prices include the user's custom overrides.

        Raises:
            NotFoundError: User not found
        """
        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        tier = user.effective_tier
        upgrades = []
        for config in get_upgrade_options(tier):
            option = config.as_dict()
            option["upgradePrice"] = float(
                self.calculator.effective_price(user, config.tier)
            )
            upgrades.append(option)

        return {
            "tier": tier,
            "tierInfo": get_tier_config(tier).as_dict(),
            "unlockedLevels": [
                level for level in LEVEL_NUMBERS if level <= tier
            ],
            "animationFlags": user.animation_flags(),
            "balance": float(user.balance),
            "upgradeOptions": upgrades,
        }

    @transaction
    async def set_user_tier(self, user_id: int, tier: Any) -> dict[str, Any]:
        """
        Set a user's tier (admin).

        Watched flags of levels at or above the new tier are reset.

        Raises:
            ValidationError: Tier outside 1..5
            NotFoundError: User not found
        """
        if not is_valid_level(tier):
            raise ValidationError("Invalid tier. Must be between 1 and 5")

        user = await self.user_repository.set_tier(user_id, tier)
        if not user:
            raise NotFoundError("User not found")

        self.logger.bind(user_id=user_id).info(
            f"User tier set to {tier}"
        )
        return {
            "userId": user.id,
            "tier": user.tier,
            "animationFlags": user.animation_flags(),
        }
