"""
User model.

Represents a platform user together with the per-level reward state used by
the reward engine: tier, balance, per-level network reward mappings, watched
flags and custom tier prices.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    DECIMAL,
    Boolean,
    CheckConstraint,
    DateTime,
    Integer,
    String,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


def anim_field(level: int) -> str:
    """Column name of the watched flag for a level."""
    return f"lvl{level}_anim"


def credited_field(level: int) -> str:
    """Column name of the credited USD amount for a level."""
    return f"lvl{level}_credited"


def network_rewards_field(level: int) -> str:
    """Column name of the network reward mapping for a level."""
    return f"lvl{level}_network_rewards"


def level_reward_field(level: int) -> str:
    """Column name of the display USD reward for a level."""
    return f"lvl{level}_reward"


def level_commission_field(level: int) -> str:
    """Column name of the USD commission for a level."""
    return f"lvl{level}_commission"


def tier_price_field(tier: int) -> str:
    """Column name of the custom upgrade price for a tier."""
    return f"tier{tier}_price"


def _money(nullable: bool = False, **kwargs: Any) -> Mapped[Any]:
    if nullable:
        return mapped_column(DECIMAL(18, 8), nullable=True, **kwargs)
    return mapped_column(
        DECIMAL(18, 8), default=Decimal("0"), nullable=False, **kwargs
    )


def _mapping() -> Mapped[dict]:
    return mapped_column(JSONB, default=dict, nullable=False)


def _flag() -> Mapped[bool]:
    return mapped_column(Boolean, default=False, nullable=False)


class User(Base):
    """User model - registered platform users."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            'balance >= 0', name='check_user_balance_non_negative'
        ),
        CheckConstraint(
            'total_earned >= 0',
            name='check_user_total_earned_non_negative'
        ),
        CheckConstraint(
            'tier >= 1 AND tier <= 5', name='check_user_tier_range'
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Profile
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    # Tier (tier N unlocks level N)
    tier: Mapped[int] = mapped_column(
        Integer, default=1, nullable=False
    )

    # Balances (USD)
    balance: Mapped[Decimal] = _money()
    total_earned: Mapped[Decimal] = _money()

    # Level animation watched flags
    lvl1_anim: Mapped[bool] = _flag()
    lvl2_anim: Mapped[bool] = _flag()
    lvl3_anim: Mapped[bool] = _flag()
    lvl4_anim: Mapped[bool] = _flag()
    lvl5_anim: Mapped[bool] = _flag()

    # USD amount credited when the level animation was watched
    lvl1_credited: Mapped[Decimal | None] = _money(nullable=True)
    lvl2_credited: Mapped[Decimal | None] = _money(nullable=True)
    lvl3_credited: Mapped[Decimal | None] = _money(nullable=True)
    lvl4_credited: Mapped[Decimal | None] = _money(nullable=True)
    lvl5_credited: Mapped[Decimal | None] = _money(nullable=True)

    # Per-level network rewards in native crypto units: {"BTC": 0.001, ...}
    lvl1_network_rewards: Mapped[dict] = _mapping()
    lvl2_network_rewards: Mapped[dict] = _mapping()
    lvl3_network_rewards: Mapped[dict] = _mapping()
    lvl4_network_rewards: Mapped[dict] = _mapping()
    lvl5_network_rewards: Mapped[dict] = _mapping()

    # Display USD totals per level (computed from global rewards)
    lvl1_reward: Mapped[Decimal] = _money()
    lvl2_reward: Mapped[Decimal] = _money()
    lvl3_reward: Mapped[Decimal] = _money()
    lvl4_reward: Mapped[Decimal] = _money()
    lvl5_reward: Mapped[Decimal] = _money()

    # USD commission per level
    lvl1_commission: Mapped[Decimal] = _money()
    lvl2_commission: Mapped[Decimal] = _money()
    lvl3_commission: Mapped[Decimal] = _money()
    lvl4_commission: Mapped[Decimal] = _money()
    lvl5_commission: Mapped[Decimal] = _money()

    # Custom tier upgrade prices (NULL = use tier default)
    tier1_price: Mapped[Decimal | None] = _money(nullable=True)
    tier2_price: Mapped[Decimal | None] = _money(nullable=True)
    tier3_price: Mapped[Decimal | None] = _money(nullable=True)
    tier4_price: Mapped[Decimal | None] = _money(nullable=True)
    tier5_price: Mapped[Decimal | None] = _money(nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    @property
    def effective_tier(self) -> int:
        """Tier used for access checks (unset tier counts as the base tier)."""
        return self.tier or 1

    def is_level_watched(self, level: int) -> bool:
        """Check whether the level animation has been watched."""
        return bool(getattr(self, anim_field(level), False))

    def get_level_credited(self, level: int) -> Decimal:
        """Get USD amount credited for the level (0 if none)."""
        value = getattr(self, credited_field(level), None)
        return value if value is not None else Decimal("0")

    def get_level_network_rewards(self, level: int) -> dict:
        """Get raw network reward mapping for the level."""
        return dict(getattr(self, network_rewards_field(level), None) or {})

    def get_custom_tier_price(self, tier: int) -> Decimal | None:
        """Get admin-set upgrade price for the tier, if any."""
        return getattr(self, tier_price_field(tier), None)

    def animation_flags(self) -> dict[str, bool]:
        """Watched flags for all levels, keyed by column name."""
        return {
            anim_field(level): self.is_level_watched(level)
            for level in range(1, 6)
        }

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(id={self.id}, email={self.email}, "
            f"tier={self.tier}, balance={self.balance})>"
        )
