"""Error taxonomy for token creation runs."""

from typing import Optional, Tuple


class CreationError(Exception):
    """Base class for every terminal failure of a creation run.

    The orchestrator fills in ``failed_state`` and ``log`` before re-raising,
    so callers always see where the run stopped and what it reported so far.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.failed_state: Optional[str] = None
        self.log: Tuple[str, ...] = ()


class ValidationError(CreationError, ValueError):
    """Malformed input, detected before any network access."""


class InvalidKeyFormat(ValidationError):
    """Private key text is not base58 or has the wrong length."""


class InvalidAddress(ValidationError):
    """Text is not a valid on-ledger address encoding."""

    def __init__(self, message: str, value: str = "") -> None:
        super().__init__(message)
        self.value = value


class ConnectivityError(CreationError):
    """No usable connection to the ledger network."""


class NoEndpointAvailable(ConnectivityError):
    def __init__(self, network: str, attempted: Tuple[str, ...]) -> None:
        super().__init__(
            f"All RPC endpoints failed for {network} "
            f"({len(attempted)} tried). Provide a custom RPC URL."
        )
        self.network = network
        self.attempted = attempted


class FundingError(CreationError):
    """Payer cannot cover the planned operations."""


class InsufficientFunds(FundingError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"Wallet balance too low: {available} lamports available, "
            f"{required} lamports required (short by {required - available})."
        )
        self.required = required
        self.available = available

    @property
    def shortfall(self) -> int:
        return self.required - self.available


class LedgerOperationError(CreationError):
    """A ledger call failed or did not confirm."""

    def __init__(
        self,
        operation: str,
        cause: str,
        address: Optional[str] = None,
    ) -> None:
        detail = f"{operation} failed"
        if address:
            detail += f" for {address}"
        super().__init__(f"{detail}: {cause}")
        self.operation = operation
        self.cause = cause
        self.address = address


class StepFailed(LedgerOperationError):
    """A planned transaction step did not confirm; later steps were not sent."""

    def __init__(self, index: int, total: int, step: str, cause: str) -> None:
        super().__init__(f"Transaction {index + 1}/{total} ({step})", cause)
        self.index = index
        self.total = total
        self.step = step


class MetadataUploadError(CreationError):
    """The off-chain metadata store rejected or failed the upload."""
