"""
Network reward model.

Global reward amount per (level, network), in native crypto units.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class NetworkReward(Base):
    """Reward configured for a network on a level."""

    __tablename__ = "network_rewards"
    __table_args__ = (
        UniqueConstraint("level", "network", name="uq_network_reward_level_network"),
        CheckConstraint("level >= 1 AND level <= 5", name="check_network_reward_level"),
        CheckConstraint("reward_amount >= 0", name="check_network_reward_amount"),
        CheckConstraint(
            "commission_percent >= 0 AND commission_percent <= 100",
            name="check_network_reward_commission",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    level: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    network: Mapped[str] = mapped_column(String(10), nullable=False)

    reward_amount: Mapped[Decimal] = mapped_column(
        Numeric(24, 8), nullable=False
    )

    # Commission for this network on this level, percent (0-100)
    commission_percent: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), nullable=False
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, index=True, nullable=False
    )

    created_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    updated_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def to_dict(self) -> dict:
        """Serialize for API responses."""
        return {
            "id": self.id,
            "level": self.level,
            "network": self.network,
            "rewardAmount": float(self.reward_amount),
            "commissionPercent": float(self.commission_percent or 0),
            "isActive": bool(self.is_active),
        }

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<NetworkReward(level={self.level}, network={self.network}, "
            f"reward_amount={self.reward_amount}, is_active={self.is_active})>"
        )
