"""Operator CLI for issuing tokens."""

from __future__ import annotations

import argparse
import base64
import json
import logging
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

from solders.pubkey import Pubkey

from core.config import Settings, get_settings
from core.errors import CreationError, ValidationError
from core.networks import parse_network
from execution_adapter.solana.endpoints import EndpointResolver, OrderedFailover
from execution_adapter.solana.instructions import find_metadata_address
from execution_controller.controller import CreationOrchestrator
from execution_controller.states import ProgressEvent
from execution_engine.models import TransactionPlan
from execution_engine.planner import TransactionPlanBuilder, planned_transaction_count
from execution_engine.request import TokenForm, parse_request

_PLACEHOLDER_URI = "pending://metadata"
_DIRECTIVES = ("keep", "revoke", "transfer")


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    parser = argparse.ArgumentParser(prog="token-issuer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser("create")
    _add_token_args(create_parser)
    create_parser.set_defaults(func=_create)

    plan_parser = subparsers.add_parser("plan")
    _add_token_args(plan_parser)
    plan_parser.add_argument("--metadata-uri", default=_PLACEHOLDER_URI)
    plan_parser.set_defaults(func=_plan)

    probe_parser = subparsers.add_parser("probe")
    probe_parser.add_argument("--network", default="devnet")
    probe_parser.add_argument("--rpc-url", default="")
    probe_parser.set_defaults(func=_probe)

    args = parser.parse_args(argv)
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)

    try:
        return args.func(args, settings)
    except ValidationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2
    except CreationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


def _create(args: argparse.Namespace, settings: Settings) -> int:
    form = _build_form(args, settings)
    orchestrator = CreationOrchestrator(settings=settings)
    result = orchestrator.create_token(form, listener=_print_event)
    output = result.to_dict()
    output["transaction_urls"] = list(result.transaction_urls())
    print(json.dumps(output, indent=2))
    return 0


def _plan(args: argparse.Namespace, settings: Settings) -> int:
    request = parse_request(_build_form(args, settings))
    mint = Pubkey.default()
    plan = TransactionPlanBuilder().build(
        request, mint, find_metadata_address(mint), args.metadata_uri
    )
    transaction_count = planned_transaction_count(request)
    output = {
        "network": request.network.value,
        "payer": str(request.payer.pubkey()),
        "steps": _plan_steps(plan),
        "transaction_count": transaction_count,
        "estimated_fees_lamports": transaction_count * settings.fee_per_transaction_lamports,
    }
    print(json.dumps(output, indent=2))
    return 0


def _probe(args: argparse.Namespace, settings: Settings) -> int:
    network = parse_network(args.network)
    resolver = EndpointResolver(
        OrderedFailover(settings.endpoints_for),
        timeout=settings.rpc_timeout_seconds,
    )
    endpoint = resolver.resolve(args.rpc_url or None, network, _print_line)
    print(
        json.dumps(
            {
                "network": network.value,
                "url": endpoint.url,
                "commitment": endpoint.commitment,
                "block_height": endpoint.block_height,
            },
            indent=2,
        )
    )
    return 0


def _add_token_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--network", default="devnet")
    parser.add_argument("--rpc-url", default="")
    key = parser.add_mutually_exclusive_group()
    key.add_argument("--private-key")
    key.add_argument("--key-file")
    parser.add_argument("--name", required=True)
    parser.add_argument("--symbol", required=True)
    parser.add_argument("--supply", required=True)
    parser.add_argument("--decimals", default="9")
    parser.add_argument("--description", default="")
    parser.add_argument("--website", default="")
    icon = parser.add_mutually_exclusive_group(required=True)
    icon.add_argument("--icon", help="Path to an image file, embedded as a data URL.")
    icon.add_argument("--icon-url")
    for kind in ("mint", "freeze", "update"):
        parser.add_argument(f"--{kind}-authority", choices=_DIRECTIVES, default="keep")
        parser.add_argument(f"--{kind}-authority-address", default="")


def _build_form(args: argparse.Namespace, settings: Settings) -> TokenForm:
    return TokenForm(
        network=args.network,
        private_key=_read_private_key(args, settings),
        name=args.name,
        symbol=args.symbol,
        total_supply=args.supply,
        decimals=args.decimals,
        icon=_read_icon(args),
        description=args.description,
        external_url=args.website,
        custom_rpc_url=args.rpc_url,
        mint_authority=args.mint_authority,
        mint_authority_address=args.mint_authority_address,
        freeze_authority=args.freeze_authority,
        freeze_authority_address=args.freeze_authority_address,
        update_authority=args.update_authority,
        update_authority_address=args.update_authority_address,
    )


def _read_private_key(args: argparse.Namespace, settings: Settings) -> str:
    if args.private_key:
        return args.private_key
    if args.key_file:
        try:
            return Path(args.key_file).read_text().strip()
        except OSError as exc:
            raise ValidationError(f"Cannot read key file: {exc}") from exc
    if settings.payer_key is not None:
        return settings.payer_key.get_secret_value()
    return ""


def _read_icon(args: argparse.Namespace) -> str:
    if args.icon_url:
        return args.icon_url
    path = Path(args.icon)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ValidationError(f"Cannot read icon file: {exc}") from exc
    mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    if not mime_type.startswith("image/"):
        raise ValidationError("Icon must be an image file.")
    return f"data:{mime_type};base64,{base64.b64encode(raw).decode('ascii')}"


def _plan_steps(plan: TransactionPlan) -> list:
    return [
        {
            "sequence": step.sequence,
            "kind": step.kind.value,
            "description": step.description,
            "new_authority": None if step.new_authority is None else str(step.new_authority),
            "is_mutable": step.is_mutable,
        }
        for step in plan.steps
    ]


def _print_event(event: ProgressEvent) -> None:
    print(event.format(), file=sys.stderr)


def _print_line(message: str) -> None:
    print(message, file=sys.stderr)


if __name__ == "__main__":
    raise SystemExit(main())
