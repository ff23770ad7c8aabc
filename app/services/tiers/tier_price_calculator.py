"""
Tier price calculator.

Derives tier upgrade prices, level reward totals and level commissions
from the global network reward records and the current rate table.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from app.config.business_constants import LEVEL_NUMBERS, MAX_LEVEL, MIN_LEVEL
from app.config.tier_levels import get_tier_config
from app.models.enums import Network
from app.models.user import (
    level_commission_field,
    level_reward_field,
    tier_price_field,
)
from app.services.conversion.converter import RewardConverter
from app.utils.formatters import round_usd

ZERO = Decimal("0")


class TierPriceCalculator:
    """
    Tier price calculator.

    Records are any objects exposing ``level``, ``network``,
    ``reward_amount``, ``is_active`` and ``commission_percent``
    (NetworkReward rows in production).
    """

    def __init__(self, converter: RewardConverter | None = None) -> None:
        self.converter = converter or RewardConverter()

    def _level_usd(
        self,
        level: int,
        records: Iterable[Any],
        rates: dict[Network, Decimal],
    ) -> Decimal:
        return sum(
            (
                self.converter.to_usd(record.reward_amount, record.network, rates)
                for record in records
                if record.level == level and record.is_active
            ),
            ZERO,
        )

    def price_for_tier(
        self,
        tier: int,
        records: Iterable[Any],
        rates: dict[Network, Decimal],
    ) -> Decimal:
        """
        Calculate the upgrade price of a tier.

        The base tier is free and unknown tiers cost nothing.

        Args:
            tier: Tier number
            records: Network reward records
            rates: Rate table

        Returns:
            USD price rounded to cents
        """
        if tier <= MIN_LEVEL or tier > MAX_LEVEL:
            return round_usd(ZERO)
        return round_usd(self._level_usd(tier, records, rates))

    def effective_price(self, user: Any, tier: int) -> Decimal:
        """
        Get the price a user pays to upgrade into a tier.

        Returns:
            Admin override for the user if set, else the tier default
        """
        custom = user.get_custom_tier_price(tier) if user is not None else None
        if custom is not None:
            return Decimal(custom)
        if tier < MIN_LEVEL or tier > MAX_LEVEL:
            return ZERO
        return get_tier_config(tier).upgrade_price

    def calculate_tier_prices(
        self, records: Iterable[Any], rates: dict[Network, Decimal]
    ) -> dict[str, Decimal]:
        """Upgrade prices for all tiers keyed by ``tierN_price``."""
        records = list(records)
        return {
            tier_price_field(tier): self.price_for_tier(tier, records, rates)
            for tier in LEVEL_NUMBERS
        }

    def calculate_level_rewards(
        self, records: Iterable[Any], rates: dict[Network, Decimal]
    ) -> dict[str, Decimal]:
        """USD reward totals for all levels keyed by ``lvlN_reward``."""
        records = list(records)
        return {
            level_reward_field(level): round_usd(
                self._level_usd(level, records, rates)
            )
            for level in LEVEL_NUMBERS
        }

    def calculate_level_commissions(
        self, records: Iterable[Any], rates: dict[Network, Decimal]
    ) -> dict[str, Decimal]:
        """USD commissions for all levels keyed by ``lvlN_commission``."""
        records = list(records)
        commissions = {}
        for level in LEVEL_NUMBERS:
            total = ZERO
            for record in records:
                if record.level != level or not record.is_active:
                    continue
                usd = self.converter.to_usd(
                    record.reward_amount, record.network, rates
                )
                percent = Decimal(record.commission_percent or 0)
                total += usd * percent / 100
            commissions[level_commission_field(level)] = round_usd(total)
        return commissions
