"""
Unit tests for the reward distribution engine.

Tests cover:
- Stick-breaking weight generation
- Sum preservation per network
- Zero and absent rewards
- Non-Success nodes
- Template immutability
- Missing rate fallback
"""

import copy
import random
from decimal import Decimal

import pytest

from app.models.enums import Network
from app.services.reward.distribution_engine import RewardDistributionEngine


@pytest.fixture
def engine():
    return RewardDistributionEngine(rng=random.Random(42))


def _transactions(level_data, currency=None, status="Success"):
    result = []
    for node in level_data["nodes"]:
        transaction = node.get("data", {}).get("transaction")
        if not transaction or transaction["status"] != status:
            continue
        if currency is None or transaction["currency"] == currency:
            result.append(transaction)
    return result


class TestGenerateRandomWeights:
    """Test weight generation."""

    def test_zero_count(self, engine):
        assert engine.generate_random_weights(0) == []

    def test_negative_count(self, engine):
        assert engine.generate_random_weights(-2) == []

    def test_single_weight(self, engine):
        assert engine.generate_random_weights(1) == [1.0]

    @pytest.mark.parametrize("count", [2, 3, 7, 50])
    def test_weights_sum_to_one(self, engine, count):
        """N non-negative weights summing to 1."""
        weights = engine.generate_random_weights(count)

        assert len(weights) == count
        assert all(w >= 0 for w in weights)
        assert abs(sum(weights) - 1) <= 1e-9

    def test_seeded_rng_is_reproducible(self):
        """Same seed, same weights."""
        first = RewardDistributionEngine(rng=random.Random(7))
        second = RewardDistributionEngine(rng=random.Random(7))
        assert first.generate_random_weights(5) == second.generate_random_weights(5)


class TestDistributeNetworkRewards:
    """Test distribution over level nodes."""

    def test_sum_preserved_per_network(self, engine, level_template, rates):
        """Shares add up to the network's USD value within rounding."""
        result = engine.distribute_network_rewards(
            level_template, {"BTC": "0.01", "ETH": "0.1"}, rates
        )

        btc = _transactions(result, "BTC")
        eth = _transactions(result, "ETH")
        btc_total = sum(Decimal(str(t["amount"])) for t in btc)
        eth_total = sum(Decimal(str(t["amount"])) for t in eth)

        assert abs(btc_total - Decimal("450")) <= Decimal("0.005") * len(btc)
        assert eth_total == Decimal("300.00")  # single node gets everything

    def test_every_share_is_at_least_one_cent(self, level_template, rates):
        """Tiny shares are bumped to the 0.01 floor."""
        engine = RewardDistributionEngine(rng=random.Random(3))
        result = engine.distribute_network_rewards(
            level_template, {"BTC": "0.0000001"}, rates
        )
        for transaction in _transactions(result, "BTC"):
            assert transaction["amount"] >= 0.01

    def test_zero_reward_sets_amounts_to_zero(self, engine, level_template, rates):
        """Networks with zero reward write 0 to their nodes."""
        template = copy.deepcopy(level_template)
        for transaction in _transactions(template):
            transaction["amount"] = 99

        result = engine.distribute_network_rewards(
            template, {"BTC": 0, "ETH": "0.1"}, rates
        )

        assert all(t["amount"] == 0 for t in _transactions(result, "BTC"))
        assert all(t["amount"] == 0 for t in _transactions(result, "SOL"))
        assert all(t["amount"] == 0 for t in _transactions(result, "TRX"))

    def test_non_success_nodes_never_written(self, engine, level_template, rates):
        """Pending nodes keep their original amount."""
        result = engine.distribute_network_rewards(
            level_template, {"ETH": "5"}, rates
        )
        pending = _transactions(result, "ETH", status="Pending")
        assert [t["amount"] for t in pending] == [7]

    def test_alias_currency_nodes_receive_tron_reward(self, engine, level_template, rates):
        """TRX nodes are grouped under TRON."""
        result = engine.distribute_network_rewards(
            level_template, {"TRON": 1000}, rates
        )
        assert _transactions(result, "TRX")[0]["amount"] == 100.0

    def test_rewards_without_nodes_are_ignored(self, engine, level_template, rates):
        """A reward for a network with no nodes changes nothing else."""
        result = engine.distribute_network_rewards(
            level_template, {"BNB": 10}, rates
        )
        assert all(t["amount"] == 0 for t in _transactions(result))

    def test_template_not_mutated(self, engine, level_template, rates):
        """Repeated calls leave the shared template untouched."""
        original = copy.deepcopy(level_template)

        first = engine.distribute_network_rewards(level_template, {"BTC": 1}, rates)
        second = engine.distribute_network_rewards(level_template, {"BTC": 2}, rates)

        assert level_template == original
        assert first is not level_template
        assert first["nodes"] is not second["nodes"]

    def test_template_without_nodes(self, engine, rates):
        """Empty graph is returned as an unmodified copy."""
        template = {"level": 2, "name": "Empty", "nodes": [], "edges": []}
        result = engine.distribute_network_rewards(template, {"BTC": 1}, rates)

        assert result == template
        assert result is not template

    def test_invalid_mapping_treated_as_empty(self, engine, level_template, rates):
        """Malformed reward mapping zeroes all nodes."""
        result = engine.distribute_network_rewards(level_template, "oops", rates)
        assert all(t["amount"] == 0 for t in _transactions(result))


class TestMissingRate:
    """Test distribution when a network has no rate."""

    def test_missing_rate_without_fallback_zeroes_network(self, level_template):
        """No fallback: nodes of the unpriced network get 0."""
        engine = RewardDistributionEngine(rng=random.Random(1))
        result = engine.distribute_network_rewards(
            level_template, {"SOL": 2, "ETH": 1}, {Network.ETH: Decimal("3000")}
        )

        assert _transactions(result, "SOL")[0]["amount"] == 0
        assert _transactions(result, "ETH")[0]["amount"] == 3000.0

    def test_missing_rate_uses_configured_fallback(self, level_template):
        """Configured fallback rate prices the network."""
        engine = RewardDistributionEngine(
            rng=random.Random(1), fallback_rate=Decimal("1")
        )
        result = engine.distribute_network_rewards(
            level_template, {"SOL": 2}, {}
        )
        assert _transactions(result, "SOL")[0]["amount"] == 2.0


class TestUserRewards:
    """Test per-user reward lookup and rendering."""

    def test_missing_user(self, engine):
        assert engine.get_user_network_rewards_for_level(None, 1) == {}

    @pytest.mark.parametrize("level", [0, 6, "1", None])
    def test_invalid_level(self, engine, make_user, level):
        user = make_user(lvl1_network_rewards={"BTC": 1})
        assert engine.get_user_network_rewards_for_level(user, level) == {}

    def test_returns_copy_of_mapping(self, engine, make_user):
        user = make_user(lvl2_network_rewards={"ETH": 0.5})
        rewards = engine.get_user_network_rewards_for_level(user, 2)
        rewards["ETH"] = 99
        assert user.lvl2_network_rewards == {"ETH": 0.5}

    def test_render_level_for_user(self, engine, make_user, level_template, rates):
        """Rendering uses the template's level mapping."""
        user = make_user(lvl1_network_rewards={"SOL": 3})
        result = engine.render_level_for_user(level_template, user, rates)
        assert _transactions(result, "SOL")[0]["amount"] == 300.0
