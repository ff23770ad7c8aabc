"""
User reward management.

Copies the global network reward table into a user's per-level reward
mappings and keeps the derived USD fields (tier prices, level rewards,
level commissions) in step with it.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import LEVEL_NUMBERS
from app.models.user import level_reward_field, network_rewards_field
from app.repositories.network_reward_repository import NetworkRewardRepository
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService, transaction
from app.services.conversion.converter import RewardConverter
from app.services.conversion.rate_store import ConversionRateStore
from app.services.tiers.tier_price_calculator import TierPriceCalculator
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.formatters import decimal_map_to_json, round_usd
from app.utils.validation import parse_amount, parse_level, parse_network


class UserRewardManager(BaseService):
    """Manages user-specific reward mappings."""

    def __init__(
        self,
        session: AsyncSession,
        rate_store: ConversionRateStore,
        calculator: TierPriceCalculator | None = None,
    ) -> None:
        super().__init__(session)
        self.rate_store = rate_store
        self.calculator = calculator or TierPriceCalculator()
        self.converter: RewardConverter = self.calculator.converter
        self.user_repository = UserRepository(session)
        self.reward_repository = NetworkRewardRepository(session)

    @transaction
    async def seed_from_global_rewards(self, user_id: int) -> dict[str, Any]:
        """
        Seed all level reward mappings of a user from active global rewards.

        Also stores the tier prices, level rewards and level commissions
        computed from the same records at the current rates.

        Raises:
            NotFoundError: User not found
        """
        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        records = await self.reward_repository.find_active()
        rates = await self.rate_store.get_rates()

        data: dict[str, Any] = {}
        for level in LEVEL_NUMBERS:
            data[network_rewards_field(level)] = {
                record.network: float(record.reward_amount)
                for record in records
                if record.level == level
            }
        data.update(self.calculator.calculate_tier_prices(records, rates))
        data.update(self.calculator.calculate_level_rewards(records, rates))
        data.update(self.calculator.calculate_level_commissions(records, rates))

        await self.user_repository.update(user.id, **data)
        self.logger.bind(user_id=user.id, records=len(records)).info(
            "User rewards seeded from global rewards"
        )
        return {
            key: value if isinstance(value, dict) else float(value)
            for key, value in data.items()
        }

    @transaction
    async def set_level_rewards(
        self, user_id: int, level: Any, raw_rewards: Any
    ) -> dict[str, Any]:
        """
        Replace a user's network reward mapping for one level.

        The display USD total of the level is recomputed at current rates.

        Raises:
            ValidationError: Invalid level, network or amount
            NotFoundError: User not found
        """
        level = parse_level(level)
        if not isinstance(raw_rewards, dict):
            raise ValidationError("networkRewards must be an object")

        rewards = {
            parse_network(network).value: float(
                parse_amount(amount, f"Reward for {network}")
            )
            for network, amount in raw_rewards.items()
        }

        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        rates = await self.rate_store.get_rates()
        conversion = self.converter.convert_mapping(rewards, rates)
        level_reward = round_usd(conversion.total_usd)

        await self.user_repository.update(
            user.id,
            **{
                network_rewards_field(level): rewards,
                level_reward_field(level): level_reward,
            },
        )
        self.logger.bind(user_id=user.id, networks=list(rewards)).info(
            f"Level {level} rewards updated"
        )
        return {
            "level": level,
            "networkRewards": rewards,
            "totalUSD": float(level_reward),
            "breakdown": decimal_map_to_json(
                self.converter.convert_all_to_usd(rewards, rates)
            ),
        }
