"""Atomic validation of raw form input into a CreationRequest."""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Optional

import httpx

from core.errors import ValidationError
from core.networks import parse_network
from wallet_core.codec import decode_key, parse_address

from .models import (
    MAX_ICON_BYTES,
    AuthorityDirective,
    AuthorityKind,
    CreationRequest,
    DirectiveKind,
)


@dataclass(frozen=True)
class TokenForm:
    """Raw, unvalidated values as submitted by a presentation layer."""

    network: str
    private_key: str = field(repr=False)
    name: str
    symbol: str
    total_supply: str
    decimals: str = "9"
    icon: str = field(default="", repr=False)
    description: str = ""
    external_url: str = ""
    custom_rpc_url: str = ""
    mint_authority: str = "keep"
    mint_authority_address: str = ""
    freeze_authority: str = "keep"
    freeze_authority_address: str = ""
    update_authority: str = "keep"
    update_authority_address: str = ""


def parse_request(form: TokenForm) -> CreationRequest:
    """Validate every field at once; raises ValidationError on the first problem."""

    network = parse_network(form.network)

    required = (form.private_key, form.name, form.symbol, form.total_supply, form.decimals)
    if any(not (value or "").strip() for value in required):
        raise ValidationError("Please fill all required fields.")

    total_supply = _parse_non_negative_int(form.total_supply, "Supply")
    decimals = _parse_non_negative_int(form.decimals, "Decimals")

    if not (form.icon or "").strip():
        raise ValidationError("Please upload an icon image.")
    _check_icon_size(form.icon)

    directives = {
        AuthorityKind.MINT: parse_directive(
            AuthorityKind.MINT, form.mint_authority, form.mint_authority_address
        ),
        AuthorityKind.FREEZE: parse_directive(
            AuthorityKind.FREEZE, form.freeze_authority, form.freeze_authority_address
        ),
        AuthorityKind.UPDATE: parse_directive(
            AuthorityKind.UPDATE, form.update_authority, form.update_authority_address
        ),
    }

    custom_rpc_url = _parse_rpc_url(form.custom_rpc_url)
    payer = decode_key(form.private_key)

    return CreationRequest(
        network=network,
        payer=payer,
        name=form.name.strip(),
        symbol=form.symbol.strip(),
        total_supply=total_supply,
        decimals=decimals,
        icon=form.icon.strip(),
        description=(form.description or "").strip(),
        external_url=(form.external_url or "").strip(),
        custom_rpc_url=custom_rpc_url,
        mint_authority=directives[AuthorityKind.MINT],
        freeze_authority=directives[AuthorityKind.FREEZE],
        update_authority=directives[AuthorityKind.UPDATE],
    )


def parse_directive(kind: AuthorityKind, choice: str, address: Optional[str] = None) -> AuthorityDirective:
    normalized = (choice or "keep").strip().lower()
    try:
        directive_kind = DirectiveKind(normalized)
    except ValueError:
        raise ValidationError(
            f"Unknown {kind.value} authority option: {choice} (use keep, revoke or transfer)."
        ) from None

    if directive_kind != DirectiveKind.TRANSFER:
        return AuthorityDirective(directive_kind)

    if not (address or "").strip():
        raise ValidationError(f"Please enter a new {kind.value} authority address.")
    try:
        target = parse_address(address)
    except ValidationError as exc:
        raise ValidationError(f"Invalid {kind.value} authority address format.") from exc
    return AuthorityDirective.transfer(target)


def _parse_non_negative_int(value: str, label: str) -> int:
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        raise ValidationError(f"{label} must be a valid non-negative integer.")
    return int(text)


def _check_icon_size(icon: str) -> None:
    if not icon.startswith("data:"):
        return
    _, _, encoded = icon.partition(",")
    try:
        size = len(base64.b64decode(encoded, validate=True))
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Icon data URL is not valid base64.") from exc
    if size > MAX_ICON_BYTES:
        raise ValidationError("Icon is too large. Maximum size is 200KB.")


def _parse_rpc_url(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    if not text:
        return None
    try:
        url = httpx.URL(text)
    except httpx.InvalidURL as exc:
        raise ValidationError(f"Invalid custom RPC URL: {text}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ValidationError(f"Invalid custom RPC URL: {text}")
    return text
