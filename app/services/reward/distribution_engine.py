"""
Reward distribution engine.

Spreads a user's per-network reward over the fingerprint nodes of a level
graph for display. Each network's USD value is split across that
network's Success nodes with random stick-breaking weights.

The shared template is never mutated; every call works on a deep copy.
"""

import copy
import random
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from loguru import logger

from app.config.business_constants import MIN_NODE_SHARE_USD, is_valid_level
from app.models.enums import Network, NodeTransactionStatus, NodeType
from app.services.conversion.converter import parse_reward_mapping
from app.utils.formatters import round_usd

ZERO = Decimal("0")


class RewardDistributionEngine:
    """Distributes network rewards across level graph nodes."""

    def __init__(
        self,
        rng: random.Random | None = None,
        fallback_rate: Decimal | None = None,
    ) -> None:
        """
        Initialize distribution engine.

        Args:
            rng: Random source (fresh generator if omitted)
            fallback_rate: Rate used for networks missing from the rate
                table; None zeroes those networks instead
        """
        self.rng = rng or random.Random()
        self.fallback_rate = fallback_rate

    def generate_random_weights(self, count: int) -> list[float]:
        """
        Generate non-negative weights summing to 1.

        Stick-breaking: sort count-1 uniform cut points on [0, 1] and
        take the gaps between consecutive points (including 0 and 1).

        Args:
            count: Number of weights

        Returns:
            List of weights (empty for count <= 0)
        """
        if count <= 0:
            return []
        if count == 1:
            return [1.0]

        cuts = sorted(self.rng.random() for _ in range(count - 1))
        points = [0.0, *cuts, 1.0]
        return [points[i + 1] - points[i] for i in range(count)]

    def _success_nodes_by_network(
        self, nodes: Sequence[Any]
    ) -> dict[Network, list[dict]]:
        groups: dict[Network, list[dict]] = {}
        for node in nodes:
            if not isinstance(node, dict):
                continue
            if node.get("type") != NodeType.FINGERPRINT.value:
                continue
            data = node.get("data")
            transaction = data.get("transaction") if isinstance(data, dict) else None
            if not isinstance(transaction, dict):
                continue
            if transaction.get("status") != NodeTransactionStatus.SUCCESS.value:
                continue
            network = Network.parse(transaction.get("currency"))
            if network is None:
                logger.bind(
                    node_id=node.get("id"),
                    currency=str(transaction.get("currency")),
                ).warning("Fingerprint node with unsupported currency")
                continue
            groups.setdefault(network, []).append(transaction)
        return groups

    def _network_usd(
        self,
        network: Network,
        amount: Decimal,
        rates: dict[Network, Decimal],
    ) -> Decimal:
        if amount <= 0:
            return ZERO
        rate = rates.get(network)
        if rate is None:
            if self.fallback_rate is None:
                logger.warning(
                    f"No conversion rate for {network.value}, "
                    f"distributing zero"
                )
                return ZERO
            logger.warning(
                f"No conversion rate for {network.value}, "
                f"using fallback rate {self.fallback_rate}"
            )
            rate = self.fallback_rate
        return amount * Decimal(str(rate))

    def distribute_network_rewards(
        self,
        template: dict[str, Any],
        network_rewards: Any,
        rates: dict[Network, Decimal],
    ) -> dict[str, Any]:
        """
        Write per-node USD amounts into a copy of a level template.

        Only Success fingerprint nodes are written. A network with no
        reward (or no rate) sets its nodes to 0; rewards for networks
        without nodes are ignored. Each non-zero share is rounded to
        cents with a floor of 0.01.

        Args:
            template: Level graph template with ``nodes``
            network_rewards: Mapping of network symbol to native amount
            rates: Rate table

        Returns:
            Deep copy of the template with amounts applied
        """
        level_data = copy.deepcopy(template)
        nodes = level_data.get("nodes") if isinstance(level_data, dict) else None
        if not nodes or not isinstance(nodes, list):
            return level_data

        groups = self._success_nodes_by_network(nodes)
        if not groups:
            return level_data

        rewards = parse_reward_mapping(network_rewards)

        for network, transactions in groups.items():
            usd_total = self._network_usd(
                network, rewards.get(network, ZERO), rates
            )
            if usd_total <= 0:
                for transaction in transactions:
                    transaction["amount"] = 0
                continue

            weights = self.generate_random_weights(len(transactions))
            for transaction, weight in zip(transactions, weights):
                share = round_usd(usd_total * Decimal(str(weight)))
                if share <= 0:
                    share = MIN_NODE_SHARE_USD
                transaction["amount"] = float(share)

        return level_data

    def get_user_network_rewards_for_level(
        self, user: Any, level: int
    ) -> dict:
        """
        Get a user's raw network reward mapping for a level.

        Returns:
            Mapping, or {} for a missing user or invalid level
        """
        if user is None or not is_valid_level(level):
            return {}
        return user.get_level_network_rewards(level)

    def render_level_for_user(
        self,
        template: dict[str, Any],
        user: Any,
        rates: dict[Network, Decimal],
    ) -> dict[str, Any]:
        """Apply a user's rewards for the template's level."""
        rewards = self.get_user_network_rewards_for_level(
            user, template.get("level")
        )
        return self.distribute_network_rewards(template, rewards, rates)
