"""Address and key-material parsing for the Solana ledger.

Purely syntactic: nothing here touches the network.
"""

from typing import Optional

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from core.errors import InvalidAddress, InvalidKeyFormat

SECRET_KEY_LENGTH = 64
ADDRESS_LENGTH = 32


def decode_key(base58_text: str) -> Keypair:
    """Decode a base58 secret key (64 bytes: seed followed by public key)."""

    text = (base58_text or "").strip()
    if not text:
        raise InvalidKeyFormat("Private key is required.")
    try:
        raw = base58.b58decode(text)
    except ValueError as exc:
        raise InvalidKeyFormat(
            "Invalid private key format. Make sure it's a valid Base58 string."
        ) from exc
    if len(raw) != SECRET_KEY_LENGTH:
        raise InvalidKeyFormat(
            f"Private key must decode to {SECRET_KEY_LENGTH} bytes, got {len(raw)}."
        )
    try:
        return Keypair.from_bytes(raw)
    except ValueError as exc:
        raise InvalidKeyFormat("Private key bytes do not form a valid keypair.") from exc


def parse_address(text: str) -> Pubkey:
    value = (text or "").strip()
    if not value:
        raise InvalidAddress("Address is required.", value)
    try:
        raw = base58.b58decode(value)
    except ValueError as exc:
        raise InvalidAddress(f"Invalid address format: {value}", value) from exc
    if len(raw) != ADDRESS_LENGTH:
        raise InvalidAddress(f"Invalid address format: {value}", value)
    return Pubkey.from_bytes(raw)


def is_valid_address(text: Optional[str]) -> bool:
    try:
        parse_address(text or "")
    except InvalidAddress:
        return False
    return True


def encode_key(keypair: Keypair) -> str:
    return base58.b58encode(bytes(keypair)).decode("ascii")
