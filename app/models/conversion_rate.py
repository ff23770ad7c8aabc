"""
Conversion rate model.

USD value of one unit of a reward network.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class ConversionRate(Base):
    """Conversion rate to USD for a network."""

    __tablename__ = "conversion_rates"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Network symbol: BTC, ETH, TRON, USDT, BNB, SOL
    network: Mapped[str] = mapped_column(
        String(10), unique=True, index=True, nullable=False
    )

    rate_to_usd: Mapped[Decimal] = mapped_column(
        Numeric(24, 8), nullable=False
    )

    # Maintained by the scheduled price oracle refresh
    is_auto: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
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
            "network": self.network,
            "rateToUSD": float(self.rate_to_usd),
            "isAuto": bool(self.is_auto),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ConversionRate(network={self.network}, "
            f"rate_to_usd={self.rate_to_usd}, is_auto={self.is_auto})>"
        )
