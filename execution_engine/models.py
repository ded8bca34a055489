"""Domain models for token creation requests and transaction plans."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from core.errors import ValidationError
from core.networks import Network

MAX_DECIMALS = 9
MAX_NAME_BYTES = 32
MAX_SYMBOL_BYTES = 10
MAX_URI_BYTES = 200
MAX_ICON_BYTES = 200 * 1024
MAX_RAW_AMOUNT = 2**64 - 1


class AuthorityKind(Enum):
    MINT = "mint"
    FREEZE = "freeze"
    UPDATE = "update"


class DirectiveKind(Enum):
    KEEP = "keep"
    REVOKE = "revoke"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class AuthorityDirective:
    """Keep, revoke or transfer one authority of the new asset."""

    kind: DirectiveKind = DirectiveKind.KEEP
    target: Optional[Pubkey] = None

    def __post_init__(self) -> None:
        if self.kind == DirectiveKind.TRANSFER and self.target is None:
            raise ValidationError("Transfer directives require a target address.")
        if self.kind != DirectiveKind.TRANSFER and self.target is not None:
            raise ValidationError("Only transfer directives carry a target address.")

    @classmethod
    def keep(cls) -> "AuthorityDirective":
        return cls(DirectiveKind.KEEP)

    @classmethod
    def revoke(cls) -> "AuthorityDirective":
        return cls(DirectiveKind.REVOKE)

    @classmethod
    def transfer(cls, target: Pubkey) -> "AuthorityDirective":
        return cls(DirectiveKind.TRANSFER, target)

    @property
    def changes_authority(self) -> bool:
        return self.kind != DirectiveKind.KEEP

    def resulting_holder(self, current: Pubkey) -> Optional[Pubkey]:
        """Authority holder once the directive has been applied."""

        if self.kind == DirectiveKind.KEEP:
            return current
        if self.kind == DirectiveKind.REVOKE:
            return None
        return self.target


@dataclass(frozen=True)
class TokenMetadata:
    """Off-chain metadata document published before on-chain registration."""

    name: str
    symbol: str
    description: str
    image: str
    external_url: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "description": self.description,
            "image": self.image,
            "external_url": self.external_url,
        }


@dataclass(frozen=True)
class CreationRequest:
    network: Network
    payer: Keypair = field(repr=False)
    name: str
    symbol: str
    total_supply: int
    decimals: int
    icon: str = field(repr=False)
    description: str = ""
    external_url: str = ""
    custom_rpc_url: Optional[str] = None
    mint_authority: AuthorityDirective = AuthorityDirective()
    freeze_authority: AuthorityDirective = AuthorityDirective()
    update_authority: AuthorityDirective = AuthorityDirective()

    def __post_init__(self) -> None:
        if not isinstance(self.network, Network):
            raise ValidationError("Network must be devnet or mainnet-beta.")
        if not self.name or not self.symbol:
            raise ValidationError("Token name and symbol are required.")
        if len(self.name.encode("utf-8")) > MAX_NAME_BYTES:
            raise ValidationError(f"Token name must be at most {MAX_NAME_BYTES} bytes.")
        if len(self.symbol.encode("utf-8")) > MAX_SYMBOL_BYTES:
            raise ValidationError(f"Token symbol must be at most {MAX_SYMBOL_BYTES} bytes.")
        if self.decimals < 0 or self.decimals > MAX_DECIMALS:
            raise ValidationError(f"Decimals must be between 0 and {MAX_DECIMALS}.")
        if self.total_supply < 0:
            raise ValidationError("Total supply must be non-negative.")
        if self.raw_amount > MAX_RAW_AMOUNT:
            raise ValidationError("Total supply is too large for the chosen decimals.")
        if not self.icon:
            raise ValidationError("Please upload an icon image.")
        payer = self.payer.pubkey()
        for kind, directive in self.directives():
            if directive.target is not None and directive.target == payer:
                raise ValidationError(
                    f"New {kind.value} authority must differ from the payer."
                )

    @property
    def raw_amount(self) -> int:
        return self.total_supply * 10**self.decimals

    def directive(self, kind: AuthorityKind) -> AuthorityDirective:
        if kind == AuthorityKind.MINT:
            return self.mint_authority
        if kind == AuthorityKind.FREEZE:
            return self.freeze_authority
        return self.update_authority

    def directives(self) -> Tuple[Tuple[AuthorityKind, AuthorityDirective], ...]:
        return tuple((kind, self.directive(kind)) for kind in AuthorityKind)

    def metadata(self) -> TokenMetadata:
        return TokenMetadata(
            name=self.name,
            symbol=self.symbol,
            description=self.description or "",
            image=self.icon,
            external_url=self.external_url or "",
        )


class StepKind(Enum):
    CREATE_METADATA = "create-metadata"
    SET_MINT_AUTHORITY = "set-mint-authority"
    SET_FREEZE_AUTHORITY = "set-freeze-authority"
    SET_UPDATE_AUTHORITY = "set-update-authority"


AUTHORITY_STEP_KINDS = {
    AuthorityKind.MINT: StepKind.SET_MINT_AUTHORITY,
    AuthorityKind.FREEZE: StepKind.SET_FREEZE_AUTHORITY,
    AuthorityKind.UPDATE: StepKind.SET_UPDATE_AUTHORITY,
}


@dataclass(frozen=True)
class TransactionStep:
    """One submittable ledger transaction within a plan."""

    sequence: int
    kind: StepKind
    instructions: Tuple[Instruction, ...]
    description: str
    new_authority: Optional[Pubkey] = None
    is_mutable: Optional[bool] = None


@dataclass(frozen=True)
class TransactionPlan:
    mint: Pubkey
    metadata_account: Pubkey
    metadata_uri: str
    steps: Tuple[TransactionStep, ...]

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def kinds(self) -> Tuple[StepKind, ...]:
        return tuple(step.kind for step in self.steps)
