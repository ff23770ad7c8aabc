"""
Level repository.

Data access layer for Level graph templates.
"""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.level import Level
from app.repositories.base import BaseRepository


class LevelRepository(BaseRepository[Level]):
    """Level repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize level repository."""
        super().__init__(Level, session)

    async def get_by_level(self, level: int) -> Level | None:
        """Get template by level number."""
        return await self.get_by(level=level)

    async def find_all_ordered(self) -> list[Level]:
        """Get all templates ordered by level number."""
        stmt = select(Level).order_by(Level.level)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_level(self, level: int, **data: Any) -> Level | None:
        """
        Update template by level number.

        Args:
            level: Level number
            **data: Updated fields

        Returns:
            Updated template or None if not found
        """
        entity = await self.get_by_level(level)
        if not entity:
            return None
        return await self.update(entity.id, **data)

    async def delete_level(self, level: int) -> Level | None:
        """
        Delete template by level number.

        Returns:
            Deleted template or None if not found
        """
        stmt = delete(Level).where(Level.level == level).returning(Level)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
