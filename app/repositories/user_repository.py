"""
User repository.

Data access layer for User model.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import LEVEL_NUMBERS
from app.models.user import (
    User,
    anim_field,
    credited_field,
    network_rewards_field,
)
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def mark_level_watched_and_credit(
        self, user_id: int, level: int, amount: Decimal
    ) -> Decimal | None:
        """
        Atomically mark a level animation as watched and credit the reward.

        The row is only touched while the watched flag is still false, so
        concurrent or repeated calls credit the balance at most once.

        Args:
            user_id: User ID
            level: Level (1-5)
            amount: USD amount to credit

        Returns:
            New balance, or None if the level was already watched
            (or the user does not exist)
        """
        anim_column = getattr(User, anim_field(level))
        stmt = (
            update(User)
            .where(User.id == user_id, anim_column.is_(False))
            .values(
                {
                    anim_field(level): True,
                    credited_field(level): amount,
                    "balance": User.balance + amount,
                    "total_earned": User.total_earned + amount,
                }
            )
            .returning(User.balance)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_level_network_rewards(
        self, user_id: int, level: int, rewards: dict[str, float]
    ) -> User | None:
        """
        Replace the network reward mapping of one level.

        Args:
            user_id: User ID
            level: Level (1-5)
            rewards: Mapping of network symbol to native amount

        Returns:
            Updated user or None if not found
        """
        return await self.update(
            user_id, **{network_rewards_field(level): dict(rewards)}
        )

    async def set_tier(self, user_id: int, tier: int) -> User | None:
        """
        Set user tier and reset watched state of levels from that tier up.

        Levels at or above the new tier must be watched again once unlocked.

        Args:
            user_id: User ID
            tier: New tier (1-5)

        Returns:
            Updated user or None if not found
        """
        data: dict[str, Any] = {"tier": tier}
        for level in LEVEL_NUMBERS:
            if level >= tier:
                data[anim_field(level)] = False
                data[credited_field(level)] = None
        return await self.update(user_id, for_update=True, **data)
