"""
Level graph template model.

Nodes and edges of a level's visualization graph. The template is shared by
all users; per-user reward amounts are applied to a copy at read time.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Level(Base):
    """Level graph template."""

    __tablename__ = "levels"

    id: Mapped[int] = mapped_column(primary_key=True)

    level: Mapped[int] = mapped_column(
        Integer, unique=True, index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # React Flow style graph
    nodes: Mapped[list] = mapped_column(JSONB, default=list, nullable=False)
    edges: Mapped[list] = mapped_column(JSONB, default=list, nullable=False)

    version: Mapped[str] = mapped_column(
        String(20), default="1.0.0", nullable=False
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

    def to_template(self) -> dict:
        """Plain graph template consumed by the distribution engine."""
        return {
            "level": self.level,
            "name": self.name,
            "description": self.description,
            "nodes": self.nodes or [],
            "edges": self.edges or [],
            "version": self.version,
        }

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Level(level={self.level}, name={self.name}, "
            f"nodes={len(self.nodes or [])}, edges={len(self.edges or [])})>"
        )
