"""
Level service.

Level graph template management and per-user level rendering.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.level_repository import LevelRepository
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService, transaction
from app.services.conversion.rate_store import ConversionRateStore
from app.services.reward.distribution_engine import RewardDistributionEngine
from app.utils.exceptions import ConflictError, NotFoundError, ValidationError
from app.utils.validation import parse_level

TEMPLATE_FIELDS = ("name", "description", "nodes", "edges", "version")


def _template_data(payload: dict[str, Any], partial: bool) -> dict[str, Any]:
    data = {key: payload[key] for key in TEMPLATE_FIELDS if key in payload}
    if not partial and not data.get("name"):
        raise ValidationError("name is required")
    for key in ("nodes", "edges"):
        if key in data and not isinstance(data[key], list):
            raise ValidationError(f"{key} must be a list")
    return data


class LevelService(BaseService):
    """Level template management."""

    def __init__(
        self,
        session: AsyncSession,
        rate_store: ConversionRateStore,
        engine: RewardDistributionEngine | None = None,
    ) -> None:
        super().__init__(session)
        self.rate_store = rate_store
        self.engine = engine or RewardDistributionEngine()
        self.repository = LevelRepository(session)
        self.user_repository = UserRepository(session)

    async def _get_user(self, user_id: int):
        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def list_levels(self, user_id: int | None = None) -> list[dict]:
        """
        List all level templates.

        With a user ID, each template carries that user's distributed
        rewards.
        """
        templates = [
            level.to_template()
            for level in await self.repository.find_all_ordered()
        ]
        if user_id is None:
            return templates

        user = await self._get_user(user_id)
        rates = await self.rate_store.get_rates()
        return [
            self.engine.render_level_for_user(template, user, rates)
            for template in templates
        ]

    async def get_level(
        self, level: Any, user_id: int | None = None
    ) -> dict[str, Any]:
        """
        Get one level template, optionally rendered for a user.

        Raises:
            NotFoundError: Level or user not found
        """
        level = parse_level(level)
        entity = await self.repository.get_by_level(level)
        if not entity:
            raise NotFoundError(f"Level {level} not found")

        template = entity.to_template()
        if user_id is None:
            return template

        user = await self._get_user(user_id)
        rates = await self.rate_store.get_rates()
        return self.engine.render_level_for_user(template, user, rates)

    @transaction
    async def create_level(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Create a level template.

        Raises:
            ValidationError: Invalid payload
            ConflictError: Level already exists
        """
        level = parse_level(payload.get("level"))
        data = _template_data(payload, partial=False)
        if await self.repository.get_by_level(level):
            raise ConflictError(f"Level {level} already exists")

        entity = await self.repository.create(level=level, **data)
        self.logger.info(f"Level {level} template created")
        return entity.to_template()

    @transaction
    async def update_level(
        self, level: Any, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Update a level template.

        Raises:
            NotFoundError: Level not found
        """
        level = parse_level(level)
        data = _template_data(payload, partial=True)
        entity = await self.repository.update_level(level, **data)
        if not entity:
            raise NotFoundError(f"Level {level} not found")
        self.logger.bind(fields=list(data)).info(
            f"Level {level} template updated"
        )
        return entity.to_template()

    @transaction
    async def delete_level(self, level: Any) -> dict[str, Any]:
        """
        Delete a level template.

        Raises:
            NotFoundError: Level not found
        """
        level = parse_level(level)
        entity = await self.repository.delete_level(level)
        if not entity:
            raise NotFoundError(f"Level {level} not found")
        self.logger.info(f"Level {level} template deleted")
        return entity.to_template()
