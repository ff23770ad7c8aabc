"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.base import Base
from app.models.conversion_rate import ConversionRate
from app.models.enums import Network, NodeTransactionStatus, NodeType
from app.models.level import Level
from app.models.network_reward import NetworkReward
from app.models.user import User

__all__ = [
    "Base",
    "ConversionRate",
    "Level",
    "Network",
    "NetworkReward",
    "NodeTransactionStatus",
    "NodeType",
    "User",
]
