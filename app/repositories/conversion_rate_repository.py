"""
Conversion rate repository.

Data access layer for ConversionRate model.
"""

from datetime import UTC, datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.conversion_rate import ConversionRate
from app.models.enums import Network
from app.repositories.base import BaseRepository


class ConversionRateRepository(BaseRepository[ConversionRate]):
    """Conversion rate repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize conversion rate repository."""
        super().__init__(ConversionRate, session)

    async def find_all_ordered(self) -> list[ConversionRate]:
        """Get all stored rates ordered by network."""
        stmt = select(ConversionRate).order_by(ConversionRate.network)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_network(
        self, network: Network
    ) -> ConversionRate | None:
        """
        Get rate for a network.

        Args:
            network: Network

        Returns:
            ConversionRate or None
        """
        return await self.get_by(network=network.value)

    async def load_rate_map(self) -> dict[Network, Decimal]:
        """
        Load all stored rates as a network -> rate mapping.

        Rows with a network outside the supported set are skipped.

        Returns:
            Mapping of network to USD rate (empty if nothing is stored)
        """
        rates: dict[Network, Decimal] = {}
        for row in await self.find_all_ordered():
            network = Network.parse(row.network)
            if network is None:
                logger.bind(network=row.network).warning(
                    "Skipping conversion rate for unsupported network"
                )
                continue
            rates[network] = Decimal(row.rate_to_usd)
        return rates

    async def has_auto_rates(self) -> bool:
        """Check whether any stored rate is maintained automatically."""
        return await self.count(is_auto=True) > 0

    async def upsert(
        self,
        network: Network,
        rate_to_usd: Decimal,
        updated_by: int | None = None,
        is_auto: bool | None = None,
    ) -> ConversionRate:
        """
        Create or update the rate for a network.

        Args:
            network: Network
            rate_to_usd: USD value of one unit
            updated_by: Admin user ID (None for system updates)
            is_auto: New auto flag (None keeps the stored value)

        Returns:
            Stored ConversionRate
        """
        now = datetime.now(UTC)
        values = {
            "network": network.value,
            "rate_to_usd": rate_to_usd,
            "updated_by": updated_by,
            "updated_at": now,
        }
        if is_auto is not None:
            values["is_auto"] = is_auto

        stmt = (
            insert(ConversionRate)
            .values(created_at=now, **values)
            .on_conflict_do_update(
                index_elements=[ConversionRate.network],
                set_=values,
            )
            .returning(ConversionRate)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
