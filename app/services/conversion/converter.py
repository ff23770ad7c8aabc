"""
Reward converter.

Pure conversion of native network amounts into USD. No I/O: callers pass
the rate table they obtained from ConversionRateStore.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from loguru import logger

from app.config.business_constants import get_default_rates
from app.models.enums import Network
from app.utils.validation import to_decimal

ZERO = Decimal("0")


@dataclass
class NetworkBreakdown:
    """Converted value of one network entry."""

    original: Decimal
    usd: Decimal

    def to_dict(self) -> dict[str, float]:
        return {"original": float(self.original), "usd": float(self.usd)}


@dataclass
class ConversionResult:
    """Result of converting a whole reward mapping."""

    total_usd: Decimal = ZERO
    breakdown: dict[str, NetworkBreakdown] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalUSD": float(self.total_usd),
            "breakdown": {
                network: item.to_dict()
                for network, item in self.breakdown.items()
            },
        }


def parse_reward_mapping(raw: Any) -> dict[Network, Decimal]:
    """
    Parse a stored network reward mapping.

    Unknown networks are dropped and malformed or negative amounts count
    as zero; both are logged. Alias keys (TRX) are merged into their
    network.

    Args:
        raw: Mapping of network symbol to native amount

    Returns:
        Mapping keyed by Network
    """
    if not isinstance(raw, dict):
        return {}

    parsed: dict[Network, Decimal] = {}
    for key, value in raw.items():
        network = Network.parse(key)
        if network is None:
            logger.bind(network=str(key)).warning(
                f"Ignoring reward for unsupported network: {key}"
            )
            continue
        amount = to_decimal(value)
        if amount is None or amount < 0:
            logger.bind(amount=str(value)).warning(
                f"Ignoring invalid reward amount for {network.value}"
            )
            amount = ZERO
        parsed[network] = parsed.get(network, ZERO) + amount
    return parsed


class RewardConverter:
    """Converts native network amounts into USD."""

    def to_usd(
        self,
        amount: Any,
        network: Any,
        rates: dict[Network, Decimal] | None = None,
    ) -> Decimal:
        """
        Convert an amount of a network's native unit into USD.

        Args:
            amount: Native amount
            network: Network or symbol
            rates: Rate table (defaults to the fallback table)

        Returns:
            USD value, 0 if the amount is not positive, malformed or the
            network has no rate

        Example:
            >>> RewardConverter().to_usd(2, "BTC", {Network.BTC: Decimal("45000")})
            Decimal('90000')
        """
        value = to_decimal(amount)
        if value is None or value <= 0:
            return ZERO

        if rates is None:
            rates = get_default_rates()

        parsed = Network.parse(network)
        rate = to_decimal(rates.get(parsed)) if parsed is not None else None
        if rate is None:
            logger.bind(network=str(network)).warning(
                f"No conversion rate for network: {network}"
            )
            return ZERO

        return value * rate

    def convert_mapping(
        self,
        mapping: Any,
        rates: dict[Network, Decimal] | None = None,
    ) -> ConversionResult:
        """
        Convert a whole network reward mapping into USD.

        Args:
            mapping: Mapping of network symbol to native amount
            rates: Rate table (defaults to the fallback table)

        Returns:
            ConversionResult with per-network breakdown and total
        """
        if rates is None:
            rates = get_default_rates()

        result = ConversionResult()
        for network, amount in parse_reward_mapping(mapping).items():
            usd = self.to_usd(amount, network, rates)
            result.breakdown[network.value] = NetworkBreakdown(
                original=amount, usd=usd
            )
            result.total_usd += usd
        return result

    def convert_all_to_usd(
        self,
        mapping: Any,
        rates: dict[Network, Decimal] | None = None,
    ) -> dict[str, Decimal]:
        """Convert a mapping and return USD value per network."""
        result = self.convert_mapping(mapping, rates)
        return {
            network: item.usd for network, item in result.breakdown.items()
        }

    def usd_to_crypto(
        self,
        usd_amount: Any,
        network: Any,
        rates: dict[Network, Decimal] | None = None,
    ) -> Decimal:
        """
        Convert a USD amount into a network's native unit.

        Returns:
            Native amount, 0 if the amount or rate is not positive
        """
        value = to_decimal(usd_amount)
        if value is None or value <= 0:
            return ZERO

        if rates is None:
            rates = get_default_rates()

        parsed = Network.parse(network)
        rate = to_decimal(rates.get(parsed)) if parsed is not None else None
        if rate is None or rate <= 0:
            logger.bind(network=str(network)).warning(
                f"No usable conversion rate for network: {network}"
            )
            return ZERO

        return value / rate
