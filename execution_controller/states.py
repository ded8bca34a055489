"""Creation run states and the progress events emitted on each transition."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class CreationState(Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    RESOLVING_ENDPOINT = "ResolvingEndpoint"
    CHECKING_FUNDS = "CheckingFunds"
    CREATING_MINT = "CreatingMint"
    CREATING_HOLDING_ACCOUNT = "CreatingHoldingAccount"
    MINTING_SUPPLY = "MintingSupply"
    UPLOADING_METADATA = "UploadingMetadata"
    BUILDING_PLAN = "BuildingPlan"
    EXECUTING_PLAN = "ExecutingPlan"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"

    @property
    def terminal(self) -> bool:
        return self in (CreationState.SUCCEEDED, CreationState.FAILED)


_ORDER = tuple(CreationState)


def can_transition(current: CreationState, target: CreationState) -> bool:
    """Strictly forward; any non-terminal state may fail."""

    if current.terminal:
        return False
    if target == CreationState.FAILED:
        return True
    if target == CreationState.SUCCEEDED:
        return current == CreationState.EXECUTING_PLAN
    return _ORDER.index(target) == _ORDER.index(current) + 1


@dataclass(frozen=True)
class ProgressEvent:
    timestamp: datetime
    state: CreationState
    message: str

    def format(self) -> str:
        return f"[{self.timestamp.strftime('%H:%M:%S')}] {self.message}"
