"""
Network reward repository.

Data access layer for NetworkReward model.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import Network
from app.models.network_reward import NetworkReward
from app.repositories.base import BaseRepository


class NetworkRewardRepository(BaseRepository[NetworkReward]):
    """Network reward repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize network reward repository."""
        super().__init__(NetworkReward, session)

    async def find_rewards(
        self, level: int | None = None, active_only: bool = False
    ) -> list[NetworkReward]:
        """
        Find rewards ordered by level and network.

        Args:
            level: Restrict to one level
            active_only: Only active rewards

        Returns:
            List of rewards
        """
        stmt = select(NetworkReward)
        if level is not None:
            stmt = stmt.where(NetworkReward.level == level)
        if active_only:
            stmt = stmt.where(NetworkReward.is_active.is_(True))
        stmt = stmt.order_by(NetworkReward.level, NetworkReward.network)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_active(self, level: int | None = None) -> list[NetworkReward]:
        """Find active rewards, optionally for one level."""
        return await self.find_rewards(level=level, active_only=True)

    async def upsert(
        self,
        level: int,
        network: Network,
        reward_amount: Decimal,
        is_active: bool = True,
        commission_percent: Decimal | None = None,
        user_id: int | None = None,
    ) -> NetworkReward:
        """
        Create or update the reward for (level, network).

        Args:
            level: Level (1-5)
            network: Network
            reward_amount: Reward in native units
            is_active: Active flag
            commission_percent: Commission percent (None keeps the stored value)
            user_id: Admin user ID

        Returns:
            Stored NetworkReward
        """
        now = datetime.now(UTC)
        values = {
            "reward_amount": reward_amount,
            "is_active": is_active,
            "updated_by": user_id,
            "updated_at": now,
        }
        if commission_percent is not None:
            values["commission_percent"] = commission_percent

        stmt = (
            insert(NetworkReward)
            .values(
                level=level,
                network=network.value,
                created_by=user_id,
                created_at=now,
                commission_percent=commission_percent or Decimal("0"),
                **{k: v for k, v in values.items() if k != "commission_percent"},
            )
            .on_conflict_do_update(
                constraint="uq_network_reward_level_network",
                set_=values,
            )
            .returning(NetworkReward)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def delete_reward(
        self, level: int, network: Network
    ) -> NetworkReward | None:
        """
        Delete the reward for (level, network).

        Returns:
            Deleted reward or None if not found
        """
        stmt = (
            delete(NetworkReward)
            .where(
                NetworkReward.level == level,
                NetworkReward.network == network.value,
            )
            .returning(NetworkReward)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
