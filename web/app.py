"""Local-only FastAPI shell for the token issuer."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core.config import Settings, get_settings
from core.errors import (
    ConnectivityError,
    CreationError,
    FundingError,
    LedgerOperationError,
    MetadataUploadError,
    ValidationError,
)
from core.networks import Network
from execution_controller.controller import CreationOrchestrator
from execution_controller.states import ProgressEvent
from execution_engine.request import TokenForm

logging.basicConfig(level=get_settings().log_level)

app = FastAPI(title="Token Issuer", description="Local-first token creation shell")

_STATUS_CODES = (
    (ValidationError, 400),
    (FundingError, 402),
    (ConnectivityError, 503),
    (LedgerOperationError, 502),
    (MetadataUploadError, 502),
)


class AuthorityInput(BaseModel):
    action: str = "keep"
    address: Optional[str] = None


class TokenRequest(BaseModel):
    network: str = "devnet"
    rpc_url: Optional[str] = None
    private_key: str
    name: str
    symbol: str
    total_supply: str
    decimals: str = "9"
    description: str = ""
    website: str = ""
    icon: str
    mint_authority: AuthorityInput = AuthorityInput()
    freeze_authority: AuthorityInput = AuthorityInput()
    update_authority: AuthorityInput = AuthorityInput()

    def to_form(self) -> TokenForm:
        return TokenForm(
            network=self.network,
            private_key=self.private_key,
            name=self.name,
            symbol=self.symbol,
            total_supply=self.total_supply,
            decimals=self.decimals,
            icon=self.icon,
            description=self.description,
            external_url=self.website,
            custom_rpc_url=self.rpc_url or "",
            mint_authority=self.mint_authority.action,
            mint_authority_address=self.mint_authority.address or "",
            freeze_authority=self.freeze_authority.action,
            freeze_authority_address=self.freeze_authority.address or "",
            update_authority=self.update_authority.action,
            update_authority_address=self.update_authority.address or "",
        )


def get_orchestrator() -> CreationOrchestrator:
    return CreationOrchestrator(settings=get_settings())


@app.middleware("http")
async def _local_only(request: Request, call_next):
    client = request.client
    if client is not None:
        host = client.host
        if host not in {"127.0.0.1", "::1", "testclient"}:
            return JSONResponse({"error": "Remote access disabled."}, status_code=403)
    return await call_next(request)


@app.exception_handler(CreationError)
async def _handle_creation_error(request: Request, exc: CreationError):
    return JSONResponse(
        {
            "error": exc.message,
            "error_type": type(exc).__name__,
            "failed_state": exc.failed_state,
            "log": list(exc.log),
        },
        status_code=_status_for(exc),
    )


@app.get("/api/networks")
def networks(settings: Settings = Depends(get_settings)) -> Dict[str, List[str]]:
    return {network.value: list(settings.endpoints_for(network)) for network in Network}


@app.post("/api/tokens")
def create_token(
    payload: TokenRequest,
    orchestrator: CreationOrchestrator = Depends(get_orchestrator),
) -> dict:
    lines: List[str] = []

    def _collect(event: ProgressEvent) -> None:
        lines.append(event.format())

    result = orchestrator.create_token(payload.to_form(), listener=_collect)
    output = result.to_dict()
    output["transaction_urls"] = list(result.transaction_urls())
    return {"result": output, "log": lines}


def _status_for(exc: CreationError) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500
