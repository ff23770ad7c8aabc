"""
Network reward service.

Admin management of the global reward table (reward per network and
level) and the prices derived from it.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import LEVEL_NUMBERS
from app.repositories.network_reward_repository import NetworkRewardRepository
from app.services.base_service import BaseService, transaction
from app.services.conversion.rate_store import ConversionRateStore
from app.services.tiers.tier_price_calculator import TierPriceCalculator
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.formatters import round_usd
from app.utils.validation import (
    parse_amount,
    parse_level,
    parse_network,
    parse_percent,
)


class NetworkRewardService(BaseService):
    """Global network reward management."""

    def __init__(
        self,
        session: AsyncSession,
        rate_store: ConversionRateStore,
        calculator: TierPriceCalculator | None = None,
    ) -> None:
        super().__init__(session)
        self.rate_store = rate_store
        self.calculator = calculator or TierPriceCalculator()
        self.repository = NetworkRewardRepository(session)

    async def list_rewards(self, level: Any = None) -> dict[str, Any]:
        """
        List rewards, grouped by level.

        Args:
            level: Optional level filter
        """
        if level is not None:
            level = parse_level(level)
        rewards = await self.repository.find_rewards(level=level)

        by_level: dict[str, list[dict]] = {}
        for reward in rewards:
            by_level.setdefault(str(reward.level), []).append(reward.to_dict())
        return {
            "rewards": [reward.to_dict() for reward in rewards],
            "byLevel": by_level,
        }

    async def get_level_rewards(self, level: Any) -> dict[str, Any]:
        """Active rewards of one level as a ``{network: amount}`` map."""
        level = parse_level(level)
        rewards = await self.repository.find_active(level=level)
        return {
            "level": level,
            "rewards": {
                reward.network: float(reward.reward_amount)
                for reward in rewards
            },
        }

    @transaction
    async def upsert_reward(
        self, payload: dict[str, Any], user_id: int | None = None
    ) -> dict[str, Any]:
        """
        Create or update one reward.

        Payload keys: level, network, rewardAmount, and optionally
        isActive and commissionPercent.

        Raises:
            ValidationError: On invalid fields
        """
        level = parse_level(payload.get("level"))
        network = parse_network(payload.get("network"))
        amount = parse_amount(payload.get("rewardAmount"), "rewardAmount")
        commission = None
        if payload.get("commissionPercent") is not None:
            commission = parse_percent(payload["commissionPercent"])

        reward = await self.repository.upsert(
            level,
            network,
            amount,
            is_active=bool(payload.get("isActive", True)),
            commission_percent=commission,
            user_id=user_id,
        )
        self.logger.bind(user_id=user_id).info(
            f"Network reward saved: level {level} {network.value} = {amount}"
        )
        return reward.to_dict()

    @transaction
    async def update_level_rewards(
        self,
        level: Any,
        raw_rewards: Any,
        user_id: int | None = None,
        commission_percent: Any = None,
    ) -> list[dict[str, Any]]:
        """
        Bulk upsert the rewards of one level from a ``{network: amount}`` map.

        The whole map is validated before anything is written.

        Raises:
            ValidationError: On invalid level, network or amount
        """
        level = parse_level(level)
        if not isinstance(raw_rewards, dict) or not raw_rewards:
            raise ValidationError("rewards must be a non-empty object")
        commission = (
            parse_percent(commission_percent)
            if commission_percent is not None
            else None
        )

        rewards = {
            parse_network(network): parse_amount(amount, f"Reward for {network}")
            for network, amount in raw_rewards.items()
        }
        saved = [
            await self.repository.upsert(
                level,
                network,
                amount,
                commission_percent=commission,
                user_id=user_id,
            )
            for network, amount in rewards.items()
        ]
        self.logger.bind(user_id=user_id).info(
            f"Level {level} rewards updated: {len(saved)} networks"
        )
        return [reward.to_dict() for reward in saved]

    @transaction
    async def delete_reward(self, level: Any, network: Any) -> dict[str, Any]:
        """
        Delete one reward.

        Raises:
            NotFoundError: If no reward exists for (level, network)
        """
        level = parse_level(level)
        network = parse_network(network)
        deleted = await self.repository.delete_reward(level, network)
        if deleted is None:
            raise NotFoundError(
                f"No reward for {network.value} on level {level}"
            )
        return deleted.to_dict()

    async def get_summary(self) -> dict[str, Any]:
        """
        Summarize active rewards.

        Returns:
            USD totals per level, native totals per network and the
            overall USD total at current rates
        """
        records = await self.repository.find_active()
        rates = await self.rate_store.get_rates()
        converter = self.calculator.converter

        by_level: dict[str, dict[str, Any]] = {}
        by_network: dict[str, Decimal] = {}
        total_usd = Decimal("0")
        for level in LEVEL_NUMBERS:
            level_records = [r for r in records if r.level == level]
            level_usd = Decimal("0")
            networks: dict[str, float] = {}
            for record in level_records:
                amount = Decimal(record.reward_amount)
                networks[record.network] = float(amount)
                by_network[record.network] = (
                    by_network.get(record.network, Decimal("0")) + amount
                )
                level_usd += converter.to_usd(amount, record.network, rates)
            by_level[str(level)] = {
                "networks": networks,
                "totalUSD": float(round_usd(level_usd)),
            }
            total_usd += level_usd

        return {
            "byLevel": by_level,
            "byNetwork": {
                network: float(amount) for network, amount in by_network.items()
            },
            "totalUSD": float(round_usd(total_usd)),
        }

    async def get_tier_prices(self) -> dict[str, float]:
        """Upgrade price of every tier at current rates."""
        records = await self.repository.find_active()
        rates = await self.rate_store.get_rates()
        prices = self.calculator.calculate_tier_prices(records, rates)
        return {key: float(value) for key, value in prices.items()}
