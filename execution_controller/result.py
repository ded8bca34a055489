"""Success record of a completed creation run."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from core.networks import Network, explorer_suffix
from execution_engine.models import AuthorityKind, DirectiveKind

_EXPLORER = "https://solscan.io"


@dataclass(frozen=True)
class AuthorityOutcome:
    kind: AuthorityKind
    directive: DirectiveKind
    holder: Optional[str]

    def describe(self) -> str:
        if self.directive == DirectiveKind.REVOKE and self.kind == AuthorityKind.UPDATE:
            return "Update authority revoked: metadata is now immutable"
        if self.directive == DirectiveKind.REVOKE:
            return f"{self.kind.value.capitalize()} authority revoked"
        if self.directive == DirectiveKind.TRANSFER:
            return f"{self.kind.value.capitalize()} authority transferred to {self.holder}"
        return f"{self.kind.value.capitalize()} authority retained by creator"


@dataclass(frozen=True)
class CreationResult:
    network: Network
    endpoint: str
    mint_address: str
    holding_account: str
    metadata_account: str
    metadata_uri: str
    name: str
    symbol: str
    decimals: int
    supply: int
    transaction_ids: Tuple[str, ...]
    authorities: Tuple[AuthorityOutcome, ...]

    @property
    def metadata_mutable(self) -> bool:
        return not any(
            outcome.kind == AuthorityKind.UPDATE and outcome.directive == DirectiveKind.REVOKE
            for outcome in self.authorities
        )

    @property
    def explorer_url(self) -> str:
        return f"{_EXPLORER}/token/{self.mint_address}{explorer_suffix(self.network)}"

    def transaction_urls(self) -> Tuple[str, ...]:
        suffix = explorer_suffix(self.network)
        return tuple(f"{_EXPLORER}/tx/{tx_id}{suffix}" for tx_id in self.transaction_ids)

    def to_dict(self) -> Dict[str, object]:
        return {
            "network": self.network.value,
            "endpoint": self.endpoint,
            "mint_address": self.mint_address,
            "holding_account": self.holding_account,
            "metadata_account": self.metadata_account,
            "metadata_uri": self.metadata_uri,
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "supply": self.supply,
            "explorer_url": self.explorer_url,
            "metadata_mutable": self.metadata_mutable,
            "transaction_ids": list(self.transaction_ids),
            "authorities": {
                outcome.kind.value: {
                    "directive": outcome.directive.value,
                    "holder": outcome.holder,
                    "description": outcome.describe(),
                }
                for outcome in self.authorities
            },
        }
