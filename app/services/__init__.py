"""
Services.

Business logic layer.
"""

# Base Service Infrastructure
from app.services.base_service import (
    BaseService,
    log_operation,
    transaction,
)

# Conversion Services
from app.services.conversion import (
    ConversionRateService,
    ConversionRateStore,
    DatabaseRateSource,
    PriceOracleClient,
    RewardConverter,
)
from app.services.level_service import LevelService
from app.services.network_reward_service import NetworkRewardService

# Reward Services
from app.services.reward import (
    AnimationCompletionHandler,
    RewardDistributionEngine,
    UserRewardManager,
)

# Tier Services
from app.services.tiers import TierPriceCalculator, TierService

__all__ = [
    "AnimationCompletionHandler",
    "BaseService",
    "ConversionRateService",
    "ConversionRateStore",
    "DatabaseRateSource",
    "LevelService",
    "NetworkRewardService",
    "PriceOracleClient",
    "RewardConverter",
    "RewardDistributionEngine",
    "TierPriceCalculator",
    "TierService",
    "UserRewardManager",
    "log_operation",
    "transaction",
]
