"""Thin Solana RPC client bound to one endpoint and commitment level."""

import logging
from typing import Callable, Optional, Protocol

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.core import RPCException, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from core.errors import LedgerOperationError

logger = logging.getLogger(__name__)

COMMITMENT: Commitment = Confirmed

_TRANSLATED_ERRORS = (
    RPCException,
    SolanaRpcException,
    UnconfirmedTxError,
    httpx.HTTPError,
    httpx.InvalidURL,
)


class LedgerClient(Protocol):
    @property
    def url(self) -> str:
        ...

    def get_block_height(self) -> int:
        ...

    def get_balance(self, address: Pubkey) -> int:
        ...

    def get_minimum_balance_for_rent_exemption(self, size: int) -> int:
        ...

    def get_latest_blockhash(self) -> Hash:
        ...

    def account_exists(self, address: Pubkey) -> bool:
        ...

    def send_and_confirm(self, transaction: Transaction) -> str:
        ...


class SolanaLedgerClient:
    """solana-py backed client; every call is a single network round trip."""

    def __init__(
        self,
        url: str,
        commitment: Commitment = COMMITMENT,
        timeout: Optional[float] = 10.0,
        client: Optional[Client] = None,
    ) -> None:
        self._url = url
        self._commitment = commitment
        if client is None:
            try:
                client = Client(url, commitment=commitment, timeout=timeout)
            except httpx.InvalidURL as exc:
                raise LedgerOperationError("connect", _describe(exc), url) from exc
        self._client = client

    @property
    def url(self) -> str:
        return self._url

    @property
    def commitment(self) -> Commitment:
        return self._commitment

    def get_block_height(self) -> int:
        return self._call("getBlockHeight", self._client.get_block_height)

    def get_balance(self, address: Pubkey) -> int:
        return self._call("getBalance", lambda: self._client.get_balance(address), address)

    def get_minimum_balance_for_rent_exemption(self, size: int) -> int:
        return self._call(
            "getMinimumBalanceForRentExemption",
            lambda: self._client.get_minimum_balance_for_rent_exemption(size),
        )

    def get_latest_blockhash(self) -> Hash:
        return self._call("getLatestBlockhash", self._client.get_latest_blockhash).blockhash

    def account_exists(self, address: Pubkey) -> bool:
        return self._call(
            "getAccountInfo",
            lambda: self._client.get_account_info(address),
            address,
        ) is not None

    def send_and_confirm(self, transaction: Transaction) -> str:
        """Submit a signed transaction and block until it reaches the pinned commitment."""

        signature = self._call(
            "sendTransaction",
            lambda: self._client.send_transaction(
                transaction,
                opts=TxOpts(skip_confirmation=True, preflight_commitment=self._commitment),
            ),
        )
        self._confirm(signature)
        return str(signature)

    def _confirm(self, signature: Signature) -> None:
        statuses = self._call(
            "confirmTransaction",
            lambda: self._client.confirm_transaction(signature, commitment=self._commitment),
            signature,
        )
        status = statuses[0] if statuses else None
        if status is None:
            raise LedgerOperationError("confirmTransaction", "no status reported", str(signature))
        if status.err is not None:
            raise LedgerOperationError("confirmTransaction", str(status.err), str(signature))

    def _call(self, operation: str, fn: Callable[[], object], subject: object = None):
        """Run one RPC request and unwrap its value, translating failures."""

        try:
            response = fn()
        except _TRANSLATED_ERRORS as exc:
            logger.debug("%s against %s failed: %s", operation, self._url, exc)
            raise LedgerOperationError(
                operation, _describe(exc), str(subject) if subject is not None else None
            ) from exc
        if not hasattr(response, "value"):
            raise LedgerOperationError(
                operation, str(response), str(subject) if subject is not None else None
            )
        return response.value


def _describe(exc: Exception) -> str:
    message = getattr(exc, "error_msg", None) or str(exc)
    return message or exc.__class__.__name__
