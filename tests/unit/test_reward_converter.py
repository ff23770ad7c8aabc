"""
Unit tests for reward conversion.

Tests cover:
- Single amount conversion
- Whole mapping conversion with breakdown
- Inverse conversion
- Malformed input handling
"""

from decimal import Decimal

import pytest

from app.models.enums import Network
from app.services.conversion.converter import (
    RewardConverter,
    parse_reward_mapping,
)


@pytest.fixture
def converter():
    return RewardConverter()


class TestToUsd:
    """Test single amount conversion."""

    def test_converts_amount_with_rate(self, converter):
        """2 BTC at 45000 is 90000 USD."""
        assert converter.to_usd(2, "BTC", {"BTC": Decimal("45000")}) == 90000

    def test_zero_amount(self, converter):
        """Zero amount converts to zero."""
        assert converter.to_usd(0, "BTC", {"BTC": Decimal("45000")}) == 0

    def test_negative_amount(self, converter):
        """Negative amount converts to zero."""
        assert converter.to_usd(-1, "BTC", {"BTC": Decimal("45000")}) == 0

    def test_unknown_network(self, converter):
        """Unknown network converts to zero."""
        assert converter.to_usd(5, "UNKNOWN", {"BTC": Decimal("45000")}) == 0

    def test_network_name_with_braces(self, converter):
        """Brace-bearing network names convert to zero without raising."""
        assert converter.to_usd(5, "{UNKNOWN}", {"BTC": Decimal("45000")}) == 0

    def test_network_missing_from_rates(self, converter):
        """Supported network without a rate converts to zero."""
        assert converter.to_usd(5, "ETH", {"BTC": Decimal("45000")}) == 0

    @pytest.mark.parametrize("amount", ["abc", None, True, [], float("nan")])
    def test_malformed_amount(self, converter, amount):
        """Malformed amounts convert to zero without raising."""
        assert converter.to_usd(amount, "BTC", {"BTC": Decimal("45000")}) == 0

    def test_defaults_used_without_rates(self, converter):
        """Omitted rates fall back to the default table."""
        assert converter.to_usd(Decimal("1"), Network.ETH) == Decimal("3000")

    def test_alias_network(self, converter, rates):
        """TRX resolves to the TRON rate."""
        assert converter.to_usd(100, "TRX", rates) == Decimal("10.0")

    def test_string_amount_keeps_precision(self, converter, rates):
        """String amounts are converted exactly."""
        assert converter.to_usd("0.001", "BTC", rates) == Decimal("45.000")

    def test_float_rate(self, converter):
        """Float rates are accepted."""
        assert converter.to_usd(2, "SOL", {"SOL": 100.5}) == Decimal("201.0")


class TestConvertMapping:
    """Test whole mapping conversion."""

    def test_total_and_breakdown(self, converter):
        """BTC:1 and ETH:2 convert to 51000 total."""
        result = converter.convert_mapping(
            {"BTC": 1, "ETH": 2},
            {"BTC": Decimal("45000"), "ETH": Decimal("3000")},
        )

        assert result.total_usd == 51000
        assert result.breakdown["BTC"].usd == 45000
        assert result.breakdown["ETH"].usd == 6000
        assert result.breakdown["ETH"].original == 2

    def test_unknown_keys_are_dropped(self, converter, rates):
        """Unsupported networks are left out of the breakdown."""
        result = converter.convert_mapping({"BTC": 1, "DOGE": 1000}, rates)

        assert set(result.breakdown) == {"BTC"}
        assert result.total_usd == Decimal("45000")

    def test_braced_keys_are_dropped(self, converter, rates):
        """Keys that look like format fields are dropped like any unknown key."""
        result = converter.convert_mapping({"{x}": 1, "BTC": 1}, rates)

        assert set(result.breakdown) == {"BTC"}
        assert result.total_usd == Decimal("45000")

    def test_empty_mapping(self, converter, rates):
        """Empty mapping converts to zero."""
        result = converter.convert_mapping({}, rates)
        assert result.total_usd == 0
        assert result.breakdown == {}

    def test_non_mapping_input(self, converter, rates):
        """Non-dict input converts to zero."""
        result = converter.convert_mapping(None, rates)
        assert result.total_usd == 0

    def test_to_dict(self, converter, rates):
        """Serialized result uses floats."""
        data = converter.convert_mapping({"USDT": 5}, rates).to_dict()
        assert data == {
            "totalUSD": 5.0,
            "breakdown": {"USDT": {"original": 5.0, "usd": 5.0}},
        }

    def test_convert_all_to_usd(self, converter, rates):
        """Per-network USD values."""
        values = converter.convert_all_to_usd({"BNB": 2, "SOL": 3}, rates)
        assert values == {"BNB": Decimal("600"), "SOL": Decimal("300")}


class TestUsdToCrypto:
    """Test inverse conversion."""

    def test_inverse(self, converter, rates):
        """90 USD is 0.03 ETH at 3000."""
        assert converter.usd_to_crypto(90, "ETH", rates) == Decimal("0.03")

    def test_zero_rate(self, converter):
        """Zero rate yields zero instead of dividing."""
        assert converter.usd_to_crypto(10, "BTC", {"BTC": Decimal("0")}) == 0

    def test_braced_network(self, converter, rates):
        assert converter.usd_to_crypto(10, "{BTC}", rates) == 0

    def test_missing_rate(self, converter):
        """Missing rate yields zero."""
        assert converter.usd_to_crypto(10, "BTC", {}) == 0


class TestParseRewardMapping:
    """Test reward mapping parsing."""

    def test_alias_keys_are_merged(self):
        """TRX and TRON amounts are summed."""
        parsed = parse_reward_mapping({"TRX": 10, "TRON": 5})
        assert parsed == {Network.TRON: Decimal("15")}

    def test_lowercase_keys(self):
        """Keys are case-insensitive."""
        assert parse_reward_mapping({"btc": 0.5}) == {Network.BTC: Decimal("0.5")}

    def test_negative_amount_counts_as_zero(self):
        """Negative amounts are treated as zero."""
        assert parse_reward_mapping({"ETH": -3}) == {Network.ETH: Decimal("0")}

    def test_braced_amount_counts_as_zero(self):
        """Malformed amounts with braces are treated as zero."""
        assert parse_reward_mapping({"SOL": "{amount}"}) == {Network.SOL: Decimal("0")}
