"""Instruction builders for the SPL token and token-metadata programs.

Pure functions: they only assemble instructions and never perform I/O.
"""

import struct
from typing import Optional, Tuple

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.system_program import CreateAccountParams, create_account
from spl.token.constants import MINT_LEN, TOKEN_PROGRAM_ID
from spl.token.instructions import (
    AuthorityType,
    InitializeMintParams,
    MintToParams,
    SetAuthorityParams,
    create_associated_token_account,
    get_associated_token_address,
    initialize_mint,
    mint_to,
    set_authority,
)

METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")

_CREATE_METADATA_V3 = 33
_UPDATE_METADATA_V2 = 15


def find_metadata_address(mint: Pubkey) -> Pubkey:
    address, _bump = Pubkey.find_program_address(
        [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(mint)],
        METADATA_PROGRAM_ID,
    )
    return address


def holding_account_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    return get_associated_token_address(owner, mint)


def create_mint_instructions(
    payer: Pubkey,
    mint: Pubkey,
    lamports: int,
    decimals: int,
    mint_authority: Pubkey,
    freeze_authority: Optional[Pubkey],
) -> Tuple[Instruction, ...]:
    allocate = create_account(
        CreateAccountParams(
            from_pubkey=payer,
            to_pubkey=mint,
            lamports=lamports,
            space=MINT_LEN,
            owner=TOKEN_PROGRAM_ID,
        )
    )
    init = initialize_mint(
        InitializeMintParams(
            decimals=decimals,
            program_id=TOKEN_PROGRAM_ID,
            mint=mint,
            mint_authority=mint_authority,
            freeze_authority=freeze_authority,
        )
    )
    return (allocate, init)


def create_holding_account_instruction(payer: Pubkey, owner: Pubkey, mint: Pubkey) -> Instruction:
    return create_associated_token_account(payer=payer, owner=owner, mint=mint)


def mint_to_instruction(mint: Pubkey, dest: Pubkey, authority: Pubkey, amount: int) -> Instruction:
    return mint_to(
        MintToParams(
            program_id=TOKEN_PROGRAM_ID,
            mint=mint,
            dest=dest,
            mint_authority=authority,
            amount=amount,
        )
    )


def set_mint_authority_instruction(
    mint: Pubkey, current: Pubkey, new_authority: Optional[Pubkey]
) -> Instruction:
    return _set_authority(mint, current, AuthorityType.MINT_TOKENS, new_authority)


def set_freeze_authority_instruction(
    mint: Pubkey, current: Pubkey, new_authority: Optional[Pubkey]
) -> Instruction:
    return _set_authority(mint, current, AuthorityType.FREEZE_ACCOUNT, new_authority)


def _set_authority(
    mint: Pubkey,
    current: Pubkey,
    authority_type: AuthorityType,
    new_authority: Optional[Pubkey],
) -> Instruction:
    return set_authority(
        SetAuthorityParams(
            program_id=TOKEN_PROGRAM_ID,
            account=mint,
            authority=authority_type,
            current_authority=current,
            new_authority=new_authority,
        )
    )


def create_metadata_instruction(
    metadata: Pubkey,
    mint: Pubkey,
    mint_authority: Pubkey,
    payer: Pubkey,
    update_authority: Pubkey,
    name: str,
    symbol: str,
    uri: str,
    is_mutable: bool,
) -> Instruction:
    data = (
        bytes([_CREATE_METADATA_V3])
        + _encode_data_v2(name, symbol, uri)
        + _encode_bool(is_mutable)
        + _NONE  # collection_details
    )
    accounts = [
        AccountMeta(metadata, is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(mint_authority, is_signer=True, is_writable=False),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(update_authority, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(METADATA_PROGRAM_ID, data, accounts)


def update_metadata_instruction(
    metadata: Pubkey,
    update_authority: Pubkey,
    new_update_authority: Optional[Pubkey],
    is_mutable: Optional[bool],
) -> Instruction:
    data = (
        bytes([_UPDATE_METADATA_V2])
        + _NONE  # data
        + _encode_option_pubkey(new_update_authority)
        + _NONE  # primary_sale_happened
        + (_NONE if is_mutable is None else _SOME + _encode_bool(is_mutable))
    )
    accounts = [
        AccountMeta(metadata, is_signer=False, is_writable=True),
        AccountMeta(update_authority, is_signer=True, is_writable=False),
    ]
    return Instruction(METADATA_PROGRAM_ID, data, accounts)


def create_metadata_is_mutable(instruction: Instruction) -> bool:
    """Read the mutability flag back out of a create-metadata instruction."""

    data = bytes(instruction.data)
    if not data or data[0] != _CREATE_METADATA_V3:
        raise ValueError("Not a create-metadata instruction.")
    offset = 1
    for _ in range(3):
        (length,) = struct.unpack_from("<I", data, offset)
        offset += 4 + length
    offset += 2 + 3  # seller fee basis points, three empty options
    return data[offset] == 1


_NONE = b"\x00"
_SOME = b"\x01"


def _encode_string(value: str) -> bytes:
    raw = value.encode("utf-8")
    return struct.pack("<I", len(raw)) + raw


def _encode_bool(value: bool) -> bytes:
    return _SOME if value else _NONE


def _encode_option_pubkey(value: Optional[Pubkey]) -> bytes:
    if value is None:
        return _NONE
    return _SOME + bytes(value)


def _encode_data_v2(name: str, symbol: str, uri: str) -> bytes:
    return (
        _encode_string(name)
        + _encode_string(symbol)
        + _encode_string(uri)
        + struct.pack("<H", 0)  # seller_fee_basis_points
        + _NONE  # creators
        + _NONE  # collection
        + _NONE  # uses
    )
