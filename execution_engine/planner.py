"""Deterministic builder for the post-mint transaction plan."""

from typing import List, Optional, Tuple

from solders.pubkey import Pubkey

from core.errors import ValidationError
from execution_adapter.solana.instructions import (
    create_metadata_instruction,
    set_freeze_authority_instruction,
    set_mint_authority_instruction,
    update_metadata_instruction,
)

from .models import (
    AUTHORITY_STEP_KINDS,
    MAX_URI_BYTES,
    AuthorityKind,
    CreationRequest,
    DirectiveKind,
    StepKind,
    TransactionPlan,
    TransactionStep,
)

# create-mint, create-holding-account, mint-to
SETUP_TRANSACTION_COUNT = 3


class PlanValidationError(ValidationError):
    """Raised when a transaction plan violates ordering or shape rules."""


class TransactionPlanBuilder:
    """Builds the ordered plan of metadata and authority transactions.

    Pure: the same request and addresses always give an equal plan.
    """

    def build(
        self,
        request: CreationRequest,
        mint: Pubkey,
        metadata_account: Pubkey,
        metadata_uri: str,
    ) -> TransactionPlan:
        if not metadata_uri:
            raise ValidationError("Metadata URI is required.")
        if len(metadata_uri.encode("utf-8")) > MAX_URI_BYTES:
            raise ValidationError(f"Metadata URI must be at most {MAX_URI_BYTES} bytes.")

        payer = request.payer.pubkey()
        steps: List[TransactionStep] = [
            _create_metadata_step(request, payer, mint, metadata_account, metadata_uri)
        ]
        for kind, directive in request.directives():
            if not directive.changes_authority:
                continue
            steps.append(
                _authority_step(
                    sequence=len(steps) + 1,
                    kind=kind,
                    new_authority=directive.resulting_holder(payer),
                    revoke=directive.kind == DirectiveKind.REVOKE,
                    payer=payer,
                    mint=mint,
                    metadata_account=metadata_account,
                )
            )

        plan = TransactionPlan(
            mint=mint,
            metadata_account=metadata_account,
            metadata_uri=metadata_uri,
            steps=tuple(steps),
        )
        validate_plan(plan)
        return plan


def planned_step_count(request: CreationRequest) -> int:
    """Number of plan steps the request will produce, without building it."""

    changes = sum(1 for _, directive in request.directives() if directive.changes_authority)
    return 1 + changes


def planned_transaction_count(request: CreationRequest) -> int:
    return SETUP_TRANSACTION_COUNT + planned_step_count(request)


def validate_plan(plan: TransactionPlan) -> None:
    if not plan.steps:
        raise PlanValidationError("Plan must include at least one step.")
    if plan.steps[0].kind != StepKind.CREATE_METADATA:
        raise PlanValidationError("Metadata must be created before any authority change.")

    sequences = [step.sequence for step in plan.steps]
    if sequences != list(range(1, len(plan.steps) + 1)):
        raise PlanValidationError("Steps must be numbered consecutively from 1.")

    kinds = [step.kind for step in plan.steps]
    if len(set(kinds)) != len(kinds):
        raise PlanValidationError("Each step kind may appear at most once.")
    order = list(StepKind)
    if kinds != sorted(kinds, key=order.index):
        raise PlanValidationError("Steps must follow declaration order.")

    for step in plan.steps:
        if not step.instructions:
            raise PlanValidationError("Step must carry at least one instruction.")
        if not step.description:
            raise PlanValidationError("Step description must be non-empty.")

    _validate_update_revocation(plan.steps)


def _validate_update_revocation(steps: Tuple[TransactionStep, ...]) -> None:
    update = [step for step in steps if step.kind == StepKind.SET_UPDATE_AUTHORITY]
    if update and update[0].new_authority is None:
        if steps[0].is_mutable or update[0].is_mutable:
            raise PlanValidationError("Revoking update authority requires immutable metadata.")


def _create_metadata_step(
    request: CreationRequest,
    payer: Pubkey,
    mint: Pubkey,
    metadata_account: Pubkey,
    metadata_uri: str,
) -> TransactionStep:
    # Immutability can only be declared at creation time.
    is_mutable = request.update_authority.kind != DirectiveKind.REVOKE
    instruction = create_metadata_instruction(
        metadata=metadata_account,
        mint=mint,
        mint_authority=payer,
        payer=payer,
        update_authority=payer,
        name=request.name,
        symbol=request.symbol,
        uri=metadata_uri,
        is_mutable=is_mutable,
    )
    return TransactionStep(
        sequence=1,
        kind=StepKind.CREATE_METADATA,
        instructions=(instruction,),
        description=f"Create token metadata ({'mutable' if is_mutable else 'immutable'})",
        new_authority=payer,
        is_mutable=is_mutable,
    )


def _authority_step(
    sequence: int,
    kind: AuthorityKind,
    new_authority: Optional[Pubkey],
    revoke: bool,
    payer: Pubkey,
    mint: Pubkey,
    metadata_account: Pubkey,
) -> TransactionStep:
    is_mutable = None
    if kind == AuthorityKind.MINT:
        instruction = set_mint_authority_instruction(mint, payer, new_authority)
    elif kind == AuthorityKind.FREEZE:
        instruction = set_freeze_authority_instruction(mint, payer, new_authority)
    else:
        is_mutable = not revoke
        instruction = update_metadata_instruction(
            metadata=metadata_account,
            update_authority=payer,
            new_update_authority=new_authority,
            is_mutable=is_mutable,
        )

    if revoke:
        description = f"Revoke {kind.value} authority"
    else:
        description = f"Transfer {kind.value} authority to {new_authority}"

    return TransactionStep(
        sequence=sequence,
        kind=AUTHORITY_STEP_KINDS[kind],
        instructions=(instruction,),
        description=description,
        new_authority=new_authority,
        is_mutable=is_mutable,
    )
