"""
Conversion rate service.

Admin read/write path for the conversion rate table and the scheduled
price oracle refresh. Every write invalidates the shared rate cache once
the transaction is committed.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import DEFAULT_CONVERSION_RATES
from app.models.enums import Network
from app.repositories.conversion_rate_repository import (
    ConversionRateRepository,
)
from app.services.base_service import BaseService, log_operation, transaction
from app.services.conversion.rate_store import ConversionRateStore
from app.utils.exceptions import ValidationError
from app.utils.validation import parse_network, parse_rate


class ConversionRateService(BaseService):
    """Conversion rate management."""

    def __init__(
        self, session: AsyncSession, rate_store: ConversionRateStore
    ) -> None:
        super().__init__(session)
        self.rate_store = rate_store
        self.repository = ConversionRateRepository(session)

    async def list_rates(self) -> list[dict[str, Any]]:
        """
        List all stored rates.

        An empty table is initialized with the default rates first.
        """
        rows = await self.repository.find_all_ordered()
        if not rows:
            self.logger.info("Conversion rate table empty, storing defaults")
            rows = await self._store_rates(DEFAULT_CONVERSION_RATES, None, False)
            self.rate_store.invalidate()
        return [row.to_dict() for row in rows]

    async def get_rate(self, network: Any) -> dict[str, Any]:
        """
        Get the rate for one network.

        Falls back to the default rate (flagged ``isDefault``) when the
        network has no stored row.

        Raises:
            ValidationError: If the network is not supported
        """
        parsed = parse_network(network)
        row = await self.repository.get_by_network(parsed)
        if row is None:
            return {
                "network": parsed.value,
                "rateToUSD": float(DEFAULT_CONVERSION_RATES[parsed]),
                "isAuto": False,
                "isDefault": True,
            }
        return {**row.to_dict(), "isDefault": False}

    async def update_rates(
        self, raw_rates: Any, user_id: int | None = None
    ) -> list[dict[str, Any]]:
        """
        Bulk upsert rates from a ``{network: rate}`` mapping.

        The whole mapping is validated before anything is written.

        Raises:
            ValidationError: On an empty mapping, unknown network or bad rate
        """
        if not isinstance(raw_rates, dict) or not raw_rates:
            raise ValidationError("rates must be a non-empty object")

        rates = {
            parse_network(network): parse_rate(rate, f"Rate for {network}")
            for network, rate in raw_rates.items()
        }
        rows = await self._store_rates(rates, user_id, False)
        self.rate_store.invalidate()
        self.logger.bind(user_id=user_id).info(
            f"Conversion rates updated: {', '.join(n.value for n in rates)}"
        )
        return [row.to_dict() for row in rows]

    async def update_single_rate(
        self, network: Any, raw_rate: Any, user_id: int | None = None
    ) -> dict[str, Any]:
        """
        Upsert the rate of one network.

        Raises:
            ValidationError: On unknown network or bad rate
        """
        parsed = parse_network(network)
        rate = parse_rate(raw_rate)
        rows = await self._store_rates({parsed: rate}, user_id, False)
        self.rate_store.invalidate()
        return rows[0].to_dict()

    @log_operation
    async def refresh_from_oracle(
        self, force: bool = False
    ) -> dict[Network, Decimal] | None:
        """
        Pull live prices and store them as automatic rates.

        Unless forced, the refresh is skipped when rates are stored and
        none of them is maintained automatically (admin manages rates).

        Args:
            force: Refresh even when rates are managed manually

        Returns:
            Stored live rates, or None if skipped or the oracle failed
        """
        if not force:
            stored = await self.repository.count()
            if stored and not await self.repository.has_auto_rates():
                self.logger.debug("Rates managed manually, skipping refresh")
                return None

        live_rates = await self.rate_store.fetch_live_rates()
        if not live_rates:
            self.logger.warning("Live rates unavailable, keeping stored rates")
            return None

        await self._store_rates(live_rates, None, True)
        self.rate_store.invalidate()
        return live_rates

    @transaction
    async def _store_rates(
        self,
        rates: dict[Network, Decimal],
        user_id: int | None,
        is_auto: bool,
    ) -> list:
        return [
            await self.repository.upsert(
                network, rate, updated_by=user_id, is_auto=is_auto
            )
            for network, rate in rates.items()
        ]
