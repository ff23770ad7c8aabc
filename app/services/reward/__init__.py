"""
Reward services package.

- distribution_engine: per-node display distribution of level rewards
- animation_completion: one-time crediting of watched levels
- user_rewards: per-user reward mappings seeded from global rewards

All components are re-exported for easy importing.
"""

from app.services.reward.animation_completion import (
    AnimationCompletionHandler,
    AnimationCompletionResult,
)
from app.services.reward.distribution_engine import RewardDistributionEngine
from app.services.reward.user_rewards import UserRewardManager

__all__ = [
    "AnimationCompletionHandler",
    "AnimationCompletionResult",
    "RewardDistributionEngine",
    "UserRewardManager",
]
