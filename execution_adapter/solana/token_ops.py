"""Direct token-program calls that must precede the transaction plan."""

import logging
from dataclasses import dataclass
from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.constants import MINT_LEN

from core.errors import LedgerOperationError

from .endpoints import ConnectionEndpoint
from .executor import sign_and_submit
from .instructions import (
    create_holding_account_instruction,
    create_mint_instructions,
    holding_account_address,
    mint_to_instruction,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerReceipt:
    address: Pubkey
    signature: Optional[str]


def create_mint(
    endpoint: ConnectionEndpoint,
    payer: Keypair,
    decimals: int,
    freeze_authority: Optional[Pubkey],
    mint_keypair: Optional[Keypair] = None,
) -> LedgerReceipt:
    """Allocate and initialise a mint; the payer becomes its mint authority."""

    mint = mint_keypair or Keypair()
    client = endpoint.client
    try:
        lamports = client.get_minimum_balance_for_rent_exemption(MINT_LEN)
        instructions = create_mint_instructions(
            payer=payer.pubkey(),
            mint=mint.pubkey(),
            lamports=lamports,
            decimals=decimals,
            mint_authority=payer.pubkey(),
            freeze_authority=freeze_authority,
        )
        signature = sign_and_submit(client, instructions, payer, extra_signers=(mint,))
    except LedgerOperationError as exc:
        raise LedgerOperationError("Mint creation", exc.cause, str(mint.pubkey())) from exc
    logger.info("Created mint %s (%s)", mint.pubkey(), signature)
    return LedgerReceipt(address=mint.pubkey(), signature=signature)


def create_or_fetch_holding_account(
    endpoint: ConnectionEndpoint,
    payer: Keypair,
    mint: Pubkey,
    owner: Optional[Pubkey] = None,
) -> LedgerReceipt:
    """Associated token account of ``owner`` for ``mint``; created only if missing."""

    owner = owner or payer.pubkey()
    address = holding_account_address(owner, mint)
    client = endpoint.client
    try:
        if client.account_exists(address):
            return LedgerReceipt(address=address, signature=None)
        instruction = create_holding_account_instruction(payer.pubkey(), owner, mint)
        signature = sign_and_submit(client, (instruction,), payer)
    except LedgerOperationError as exc:
        raise LedgerOperationError("Token account creation", exc.cause, str(address)) from exc
    return LedgerReceipt(address=address, signature=signature)


def mint_supply(
    endpoint: ConnectionEndpoint,
    payer: Keypair,
    mint: Pubkey,
    destination: Pubkey,
    amount: int,
) -> LedgerReceipt:
    instruction = mint_to_instruction(mint, destination, payer.pubkey(), amount)
    try:
        signature = sign_and_submit(endpoint.client, (instruction,), payer)
    except LedgerOperationError as exc:
        raise LedgerOperationError("Minting", exc.cause, str(mint)) from exc
    return LedgerReceipt(address=destination, signature=signature)
