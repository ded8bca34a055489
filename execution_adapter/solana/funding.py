"""Funding gate evaluated before any mutating ledger call."""

import logging
from dataclasses import dataclass

from solders.pubkey import Pubkey
from spl.token.constants import MINT_LEN

from core.errors import InsufficientFunds

from .endpoints import ConnectionEndpoint, Note

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000
DEFAULT_FEE_PER_TRANSACTION = 50_000
DEFAULT_BUFFER = 10_000


@dataclass(frozen=True)
class FundingCheck:
    available: int
    rent_exemption: int
    estimated_fees: int
    buffer: int

    @property
    def required(self) -> int:
        return self.rent_exemption + self.estimated_fees + self.buffer


class FundingValidator:
    """required = rent exemption for the mint + fee per transaction * count + buffer."""

    def __init__(
        self,
        fee_per_transaction: int = DEFAULT_FEE_PER_TRANSACTION,
        buffer: int = DEFAULT_BUFFER,
    ) -> None:
        if fee_per_transaction < 0 or buffer < 0:
            raise ValueError("Fee and buffer must be non-negative.")
        self._fee_per_transaction = fee_per_transaction
        self._buffer = buffer

    def check_funding(
        self,
        endpoint: ConnectionEndpoint,
        payer: Pubkey,
        planned_step_count: int,
        note: Note = lambda _: None,
    ) -> FundingCheck:
        if planned_step_count < 0:
            raise ValueError("planned_step_count must be non-negative.")

        balance = endpoint.client.get_balance(payer)
        note(f"Wallet balance: {format_sol(balance)} SOL")
        rent = endpoint.client.get_minimum_balance_for_rent_exemption(MINT_LEN)
        note(f"Minimum balance for mint rent exemption: {format_sol(rent)} SOL")
        fees = self._fee_per_transaction * planned_step_count
        note(f"Estimated transaction fees: {format_sol(fees)} SOL")

        check = FundingCheck(
            available=balance,
            rent_exemption=rent,
            estimated_fees=fees,
            buffer=self._buffer,
        )
        if balance < check.required:
            logger.info("Funding check failed for %s: %d < %d", payer, balance, check.required)
            raise InsufficientFunds(required=check.required, available=balance)
        return check


def format_sol(lamports: int) -> str:
    return f"{lamports / LAMPORTS_PER_SOL:.6f}"
