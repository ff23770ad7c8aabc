"""
Animation completion handler.

Credits a user's level reward the first time the level animation is
watched. The credit and the watched flag are written by one conditional
UPDATE, so repeated or concurrent requests credit at most once.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    BALANCE_QUANT,
    MAX_LEVEL,
    MIN_LEVEL,
    is_valid_level,
)
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService, transaction
from app.services.conversion.converter import ConversionResult, RewardConverter
from app.services.conversion.rate_store import ConversionRateStore
from app.utils.exceptions import (
    NotFoundError,
    TierTooLowError,
    ValidationError,
)
from app.utils.formatters import format_usd


@dataclass
class AnimationCompletionResult:
    """Outcome of marking a level animation as watched."""

    level: int
    reward_added: bool
    reward_amount: Decimal
    new_balance: Decimal
    conversion: ConversionResult | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "level": self.level,
            "rewardAdded": self.reward_added,
            "rewardAmount": float(self.reward_amount),
            "newBalance": float(self.new_balance),
        }
        if self.conversion is not None:
            data["breakdown"] = self.conversion.to_dict()["breakdown"]
        return data


class AnimationCompletionHandler(BaseService):
    """Handles the NotWatched -> Watched transition of a level."""

    def __init__(
        self,
        session: AsyncSession,
        rate_store: ConversionRateStore,
        converter: RewardConverter | None = None,
    ) -> None:
        super().__init__(session)
        self.rate_store = rate_store
        self.converter = converter or RewardConverter()
        self.user_repository = UserRepository(session)

    @transaction
    async def mark_animation_watched(
        self, user_id: int, level: Any
    ) -> AnimationCompletionResult:
        """
        Mark a level animation watched and credit its reward once.

        Args:
            user_id: User ID
            level: Level (1-5)

        Returns:
            AnimationCompletionResult; ``reward_added`` is False when the
            level had already been watched

        Raises:
            ValidationError: Invalid level
            NotFoundError: User not found
            TierTooLowError: User tier below the level
        """
        if not is_valid_level(level):
            raise ValidationError(
                f"Invalid level. Must be between {MIN_LEVEL} and {MAX_LEVEL}"
            )

        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if user.effective_tier < level:
            raise TierTooLowError(user.effective_tier, level)

        if user.is_level_watched(level):
            return self._already_watched(user, level)

        rates = await self.rate_store.get_rates()
        conversion = self.converter.convert_mapping(
            user.get_level_network_rewards(level), rates
        )
        amount = conversion.total_usd.quantize(BALANCE_QUANT)

        new_balance = await self.user_repository.mark_level_watched_and_credit(
            user.id, level, amount
        )
        if new_balance is None:
            # Another request completed the level first
            await self.session.refresh(user)
            return self._already_watched(user, level)

        self.logger.bind(user_id=user.id, level=level).info(
            f"Level {level} reward credited: {format_usd(amount)}"
        )
        return AnimationCompletionResult(
            level=level,
            reward_added=True,
            reward_amount=amount,
            new_balance=new_balance,
            conversion=conversion,
        )

    def _already_watched(self, user: Any, level: int) -> AnimationCompletionResult:
        self.logger.bind(user_id=user.id, level=level).debug(
            f"Level {level} animation already watched"
        )
        return AnimationCompletionResult(
            level=level,
            reward_added=False,
            reward_amount=user.get_level_credited(level),
            new_balance=user.balance,
        )
