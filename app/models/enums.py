"""
Model enums.

Closed value sets shared by models, services and the API layer.
"""

from enum import Enum


class Network(str, Enum):
    """Supported reward networks (cryptocurrency symbols)."""

    BTC = "BTC"
    ETH = "ETH"
    TRON = "TRON"
    USDT = "USDT"
    BNB = "BNB"
    SOL = "SOL"

    @classmethod
    def parse(cls, value: object) -> "Network | None":
        """
        Resolve a raw symbol to a Network.

        Upstream systems use alternative symbols for some networks
        (e.g. TRX for TRON), so aliases are resolved first.

        Args:
            value: Raw symbol (any case) or Network

        Returns:
            Network or None if the symbol is not supported
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        symbol = value.strip().upper()
        symbol = NETWORK_ALIASES.get(symbol, symbol)
        try:
            return cls(symbol)
        except ValueError:
            return None


# Alternative symbols used by level templates and external feeds
NETWORK_ALIASES: dict[str, str] = {
    "TRX": "TRON",
}


class NodeType(str, Enum):
    """Level graph node types that carry reward semantics."""

    FINGERPRINT = "fingerprintNode"


class NodeTransactionStatus(str, Enum):
    """Status of a simulated transaction on a fingerprint node."""

    SUCCESS = "Success"
    PENDING = "Pending"
    FAILED = "Failed"
