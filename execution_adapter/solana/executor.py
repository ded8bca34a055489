"""Sequential, halt-on-first-failure execution of a transaction plan."""

import logging
from typing import Sequence, Tuple

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.transaction import Transaction

from core.errors import LedgerOperationError, StepFailed
from execution_engine.models import TransactionPlan

from .endpoints import ConnectionEndpoint, Note
from .ledger import LedgerClient

logger = logging.getLogger(__name__)


def sign_and_submit(
    client: LedgerClient,
    instructions: Sequence[Instruction],
    payer: Keypair,
    extra_signers: Sequence[Keypair] = (),
) -> str:
    """Build one transaction with a freshly fetched blockhash, sign it, await confirmation."""

    blockhash = client.get_latest_blockhash()
    transaction = Transaction.new_signed_with_payer(
        list(instructions),
        payer.pubkey(),
        [payer, *extra_signers],
        blockhash,
    )
    return client.send_and_confirm(transaction)


class TransactionExecutor:
    """Runs plan steps one at a time; never retries and never compensates."""

    def execute(
        self,
        endpoint: ConnectionEndpoint,
        plan: TransactionPlan,
        signer: Keypair,
        note: Note = lambda _: None,
    ) -> Tuple[str, ...]:
        total = len(plan.steps)
        note(f"Sending {total} transaction{'' if total == 1 else 's'}...")

        confirmed = []
        for index, step in enumerate(plan.steps):
            note(f"{step.description}...")
            try:
                signature = sign_and_submit(endpoint.client, step.instructions, signer)
            except LedgerOperationError as exc:
                note(f"Error in transaction {index + 1}/{total}: {exc.cause}")
                logger.warning(
                    "Step %d/%d (%s) failed after %d confirmed: %s",
                    index + 1,
                    total,
                    step.kind.value,
                    len(confirmed),
                    exc.cause,
                )
                raise StepFailed(index, total, step.kind.value, exc.cause) from exc
            confirmed.append(signature)
            note(f"Transaction {index + 1}/{total} confirmed: {signature}")

        return tuple(confirmed)
