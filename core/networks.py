"""Ledger network identifiers."""

from enum import Enum

from .errors import ValidationError


class Network(Enum):
    DEVNET = "devnet"
    MAINNET_BETA = "mainnet-beta"


_ALIASES = {
    "devnet": Network.DEVNET,
    "dev": Network.DEVNET,
    "mainnet-beta": Network.MAINNET_BETA,
    "mainnet": Network.MAINNET_BETA,
    "mainnetbeta": Network.MAINNET_BETA,
}


def parse_network(value: str) -> Network:
    if isinstance(value, Network):
        return value
    normalized = (value or "").strip().lower()
    if normalized not in _ALIASES:
        raise ValidationError(
            "Invalid network selected. Choose devnet or mainnet-beta."
        )
    return _ALIASES[normalized]


def explorer_suffix(network: Network) -> str:
    return "?cluster=devnet" if network == Network.DEVNET else ""
