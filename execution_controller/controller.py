"""Token creation orchestrator: a forward-only state machine over one run."""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Union

from solders.pubkey import Pubkey

from core.config import Settings, get_settings
from core.errors import CreationError, MetadataUploadError
from execution_adapter.solana.endpoints import ConnectionEndpoint, EndpointResolver, OrderedFailover
from execution_adapter.solana.executor import TransactionExecutor
from execution_adapter.solana.funding import FundingValidator
from execution_adapter.solana.instructions import find_metadata_address
from execution_adapter.solana.token_ops import (
    create_mint,
    create_or_fetch_holding_account,
    mint_supply,
)
from execution_engine.models import MAX_URI_BYTES, CreationRequest, TransactionPlan
from execution_engine.planner import TransactionPlanBuilder, planned_transaction_count
from execution_engine.request import TokenForm, parse_request
from metadata_store.store import HttpMetadataStore, MetadataStore

from .progress import Listener, RunLog
from .result import AuthorityOutcome, CreationResult
from .states import CreationState, can_transition

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when a run attempts to move backwards or leave a terminal state."""


class CreationOrchestrator:
    """Drives one token creation end to end.

    Holds collaborators only; every call to ``create_token`` gets its own log,
    connection and plan, so concurrent runs share no mutable state.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        resolver: Optional[EndpointResolver] = None,
        funding: Optional[FundingValidator] = None,
        metadata_store: Optional[MetadataStore] = None,
        planner: Optional[TransactionPlanBuilder] = None,
        executor: Optional[TransactionExecutor] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        settings = settings or get_settings()
        self._resolver = resolver or EndpointResolver(
            OrderedFailover(settings.endpoints_for),
            timeout=settings.rpc_timeout_seconds,
        )
        self._funding = funding or FundingValidator(
            fee_per_transaction=settings.fee_per_transaction_lamports,
            buffer=settings.funding_buffer_lamports,
        )
        if metadata_store is None and settings.metadata_upload_url:
            metadata_store = HttpMetadataStore(
                settings.metadata_upload_url,
                timeout=settings.metadata_upload_timeout_seconds,
            )
        self._metadata_store = metadata_store
        self._planner = planner or TransactionPlanBuilder()
        self._executor = executor or TransactionExecutor()
        self._clock = clock

    def create_token(
        self,
        request: Union[TokenForm, CreationRequest],
        listener: Optional[Listener] = None,
    ) -> CreationResult:
        log = RunLog(self._clock)
        if listener is not None:
            log.subscribe(listener)
        try:
            return self._run(request, log)
        except CreationError as exc:
            exc.failed_state = log.state.value
            _advance(log, CreationState.FAILED)
            log.emit(f"Error: {exc.message}")
            exc.log = log.lines()
            raise

    def _run(self, request: Union[TokenForm, CreationRequest], log: RunLog) -> CreationResult:
        _advance(log, CreationState.VALIDATING)
        log.emit("Initializing...")
        if isinstance(request, TokenForm):
            request = parse_request(request)
        if self._metadata_store is None:
            raise MetadataUploadError("No metadata store configured.")
        payer = request.payer.pubkey()

        _advance(log, CreationState.RESOLVING_ENDPOINT)
        endpoint = self._resolver.resolve(request.custom_rpc_url, request.network, log.emit)
        log.emit(f"Using wallet: {payer}")

        _advance(log, CreationState.CHECKING_FUNDS)
        self._funding.check_funding(endpoint, payer, planned_transaction_count(request), log.emit)

        transaction_ids: List[str] = []

        _advance(log, CreationState.CREATING_MINT)
        log.emit("Creating mint account...")
        mint = create_mint(endpoint, request.payer, request.decimals, freeze_authority=payer)
        transaction_ids.append(mint.signature)
        log.emit(f"Mint created: {mint.address}")

        _advance(log, CreationState.CREATING_HOLDING_ACCOUNT)
        log.emit("Creating token account...")
        holding = create_or_fetch_holding_account(endpoint, request.payer, mint.address)
        if holding.signature is not None:
            transaction_ids.append(holding.signature)
            log.emit(f"Token account created: {holding.address}")
        else:
            log.emit(f"Token account already exists: {holding.address}")

        _advance(log, CreationState.MINTING_SUPPLY)
        log.emit(f"Minting {request.total_supply} tokens with {request.decimals} decimals...")
        minted = mint_supply(endpoint, request.payer, mint.address, holding.address, request.raw_amount)
        transaction_ids.append(minted.signature)
        log.emit("Tokens minted successfully!")

        _advance(log, CreationState.UPLOADING_METADATA)
        log.emit("Creating metadata...")
        metadata_uri = self._metadata_store.upload(request.metadata().to_dict()).url
        _check_metadata_uri(metadata_uri)
        log.emit(f"Metadata created with URI: {metadata_uri[:64]}")

        _advance(log, CreationState.BUILDING_PLAN)
        metadata_account = find_metadata_address(mint.address)
        log.emit(f"Metadata PDA: {metadata_account}")
        plan = self._planner.build(request, mint.address, metadata_account, metadata_uri)
        for step in plan.steps:
            log.emit(f"Planned step {step.sequence}: {step.description}")

        _advance(log, CreationState.EXECUTING_PLAN)
        transaction_ids.extend(self._executor.execute(endpoint, plan, request.payer, log.emit))

        result = _build_result(request, endpoint, plan, holding.address, tuple(transaction_ids))
        _advance(log, CreationState.SUCCEEDED)
        log.emit("Token created successfully!")
        return result


def _check_metadata_uri(uri: str) -> None:
    if not uri:
        raise MetadataUploadError("Metadata store returned an empty URI.")
    size = len(uri.encode("utf-8"))
    if size > MAX_URI_BYTES:
        raise MetadataUploadError(
            f"Metadata store returned a {size}-byte URI; at most {MAX_URI_BYTES} bytes fit on chain."
        )


def _advance(log: RunLog, target: CreationState) -> None:
    if not can_transition(log.state, target):
        raise InvalidTransitionError(f"Cannot move from {log.state.value} to {target.value}.")
    log.enter(target)


def _build_result(
    request: CreationRequest,
    endpoint: ConnectionEndpoint,
    plan: TransactionPlan,
    holding_account: Pubkey,
    transaction_ids,
) -> CreationResult:
    payer = request.payer.pubkey()
    authorities = tuple(
        AuthorityOutcome(
            kind=kind,
            directive=directive.kind,
            holder=_optional_str(directive.resulting_holder(payer)),
        )
        for kind, directive in request.directives()
    )
    return CreationResult(
        network=request.network,
        endpoint=endpoint.url,
        mint_address=str(plan.mint),
        holding_account=str(holding_account),
        metadata_account=str(plan.metadata_account),
        metadata_uri=plan.metadata_uri,
        name=request.name,
        symbol=request.symbol,
        decimals=request.decimals,
        supply=request.total_supply,
        transaction_ids=transaction_ids,
        authorities=authorities,
    )


def _optional_str(value: Optional[Pubkey]) -> Optional[str]:
    return None if value is None else str(value)
