"""Parse built instructions back into their params (inverse of the builders)."""

from __future__ import annotations

from typing import Any, Callable, Dict, Sequence, Tuple

from .encoding import decode_instruction_data
from .errors import ErrorCode, SpecError
from .types import (
    SYSTEM_PROGRAM_ID,
    SYSVAR_RECENT_BLOCKHASHES_PUBKEY,
    SYSVAR_RENT_PUBKEY,
    AccountMeta,
    AdvanceNonceParams,
    AllocateParams,
    AllocateWithSeedParams,
    AssignParams,
    AssignWithSeedParams,
    AuthorizeNonceParams,
    CreateAccountParams,
    CreateAccountWithSeedParams,
    InitializeNonceParams,
    Instruction,
    InstructionParams,
    PublicKey,
    SystemInstruction,
    TransferParams,
    TransferWithSeedParams,
    WithdrawNonceParams,
)

# Accepted account counts per variant.
ACCOUNT_COUNTS: Dict[SystemInstruction, Tuple[int, ...]] = {
    SystemInstruction.CREATE_ACCOUNT: (2,),
    SystemInstruction.ASSIGN: (1,),
    SystemInstruction.TRANSFER: (2,),
    SystemInstruction.CREATE_ACCOUNT_WITH_SEED: (2, 3),
    SystemInstruction.ADVANCE_NONCE_ACCOUNT: (3,),
    SystemInstruction.WITHDRAW_NONCE_ACCOUNT: (5,),
    SystemInstruction.INITIALIZE_NONCE_ACCOUNT: (3,),
    SystemInstruction.AUTHORIZE_NONCE_ACCOUNT: (2,),
    SystemInstruction.ALLOCATE: (1,),
    SystemInstruction.ALLOCATE_WITH_SEED: (2,),
    SystemInstruction.ASSIGN_WITH_SEED: (2,),
    SystemInstruction.TRANSFER_WITH_SEED: (3,),
}


def _expect_sysvar(meta: AccountMeta, key: PublicKey, label: str) -> None:
    if meta.pubkey != key:
        raise SpecError(ErrorCode.INVALID_ACCOUNTS, f"expected {label} sysvar, got {meta.pubkey}")


def _create_account(keys: Sequence[PublicKey], f: Dict[str, Any]) -> CreateAccountParams:
    return CreateAccountParams(
        from_pubkey=keys[0],
        new_account_pubkey=keys[1],
        owner=f["owner"],
        lamports=f["lamports"],
        space=f["space"],
    )


def _assign(keys: Sequence[PublicKey], f: Dict[str, Any]) -> AssignParams:
    return AssignParams(account_pubkey=keys[0], owner=f["owner"])


def _transfer(keys: Sequence[PublicKey], f: Dict[str, Any]) -> TransferParams:
    return TransferParams(from_pubkey=keys[0], to_pubkey=keys[1], lamports=f["lamports"])


def _create_account_with_seed(
    keys: Sequence[PublicKey], f: Dict[str, Any]
) -> CreateAccountWithSeedParams:
    # Two accounts means base was folded into the funding account.
    if len(keys) == 2 and f["base"] != keys[0]:
        raise SpecError(ErrorCode.INVALID_ACCOUNTS, "base account missing")
    if len(keys) == 3 and f["base"] != keys[2]:
        raise SpecError(ErrorCode.INVALID_ACCOUNTS, "base account does not match payload")
    return CreateAccountWithSeedParams(
        from_pubkey=keys[0],
        new_account_pubkey=keys[1],
        base=f["base"],
        seed=f["seed"],
        lamports=f["lamports"],
        space=f["space"],
        owner=f["owner"],
    )


def _advance_nonce(keys: Sequence[PublicKey], f: Dict[str, Any]) -> AdvanceNonceParams:
    return AdvanceNonceParams(nonce_pubkey=keys[0], authorized_pubkey=keys[2])


def _withdraw_nonce(keys: Sequence[PublicKey], f: Dict[str, Any]) -> WithdrawNonceParams:
    return WithdrawNonceParams(
        nonce_pubkey=keys[0],
        authorized_pubkey=keys[4],
        to_pubkey=keys[1],
        lamports=f["lamports"],
    )


def _initialize_nonce(keys: Sequence[PublicKey], f: Dict[str, Any]) -> InitializeNonceParams:
    return InitializeNonceParams(nonce_pubkey=keys[0], authorized_pubkey=f["authorized"])


def _authorize_nonce(keys: Sequence[PublicKey], f: Dict[str, Any]) -> AuthorizeNonceParams:
    return AuthorizeNonceParams(
        nonce_pubkey=keys[0], authorized_pubkey=keys[1], new_authority=f["new_authority"]
    )


def _allocate(keys: Sequence[PublicKey], f: Dict[str, Any]) -> AllocateParams:
    return AllocateParams(account_pubkey=keys[0], space=f["space"])


def _allocate_with_seed(keys: Sequence[PublicKey], f: Dict[str, Any]) -> AllocateWithSeedParams:
    if f["base"] != keys[1]:
        raise SpecError(ErrorCode.INVALID_ACCOUNTS, "base account does not match payload")
    return AllocateWithSeedParams(
        account_pubkey=keys[0], base=f["base"], seed=f["seed"], space=f["space"], owner=f["owner"]
    )


def _assign_with_seed(keys: Sequence[PublicKey], f: Dict[str, Any]) -> AssignWithSeedParams:
    if f["base"] != keys[1]:
        raise SpecError(ErrorCode.INVALID_ACCOUNTS, "base account does not match payload")
    return AssignWithSeedParams(
        account_pubkey=keys[0], base=f["base"], seed=f["seed"], owner=f["owner"]
    )


def _transfer_with_seed(keys: Sequence[PublicKey], f: Dict[str, Any]) -> TransferWithSeedParams:
    return TransferWithSeedParams(
        from_pubkey=keys[0],
        base=keys[1],
        to_pubkey=keys[2],
        from_owner=f["from_owner"],
        seed=f["seed"],
        lamports=f["lamports"],
    )


_PARSERS: Dict[SystemInstruction, Callable[[Sequence[PublicKey], Dict[str, Any]], Any]] = {
    SystemInstruction.CREATE_ACCOUNT: _create_account,
    SystemInstruction.ASSIGN: _assign,
    SystemInstruction.TRANSFER: _transfer,
    SystemInstruction.CREATE_ACCOUNT_WITH_SEED: _create_account_with_seed,
    SystemInstruction.ADVANCE_NONCE_ACCOUNT: _advance_nonce,
    SystemInstruction.WITHDRAW_NONCE_ACCOUNT: _withdraw_nonce,
    SystemInstruction.INITIALIZE_NONCE_ACCOUNT: _initialize_nonce,
    SystemInstruction.AUTHORIZE_NONCE_ACCOUNT: _authorize_nonce,
    SystemInstruction.ALLOCATE: _allocate,
    SystemInstruction.ALLOCATE_WITH_SEED: _allocate_with_seed,
    SystemInstruction.ASSIGN_WITH_SEED: _assign_with_seed,
    SystemInstruction.TRANSFER_WITH_SEED: _transfer_with_seed,
}


def instruction_type(ix: Instruction) -> SystemInstruction:
    tag, _ = decode_instruction_data(ix.data)
    return tag


def parse_instruction(ix: Instruction) -> InstructionParams:
    """Recover the params a system program instruction was built from.

    Only positions and payload are checked, not signer/writable flags. Sysvar
    positions must hold the well-known sysvar keys.
    """
    if ix.program_id != SYSTEM_PROGRAM_ID:
        raise SpecError(ErrorCode.INVALID_PROGRAM_ID, f"not a system instruction: {ix.program_id}")

    tag, fields = decode_instruction_data(ix.data)
    counts = ACCOUNT_COUNTS[tag]
    if len(ix.accounts) not in counts:
        raise SpecError(
            ErrorCode.INVALID_ACCOUNTS,
            f"{tag.name} expects {' or '.join(map(str, counts))} accounts, got {len(ix.accounts)}",
        )

    if tag in (
        SystemInstruction.ADVANCE_NONCE_ACCOUNT,
        SystemInstruction.INITIALIZE_NONCE_ACCOUNT,
    ):
        _expect_sysvar(ix.accounts[1], SYSVAR_RECENT_BLOCKHASHES_PUBKEY, "recent blockhashes")
    if tag == SystemInstruction.INITIALIZE_NONCE_ACCOUNT:
        _expect_sysvar(ix.accounts[2], SYSVAR_RENT_PUBKEY, "rent")
    if tag == SystemInstruction.WITHDRAW_NONCE_ACCOUNT:
        _expect_sysvar(ix.accounts[2], SYSVAR_RECENT_BLOCKHASHES_PUBKEY, "recent blockhashes")
        _expect_sysvar(ix.accounts[3], SYSVAR_RENT_PUBKEY, "rent")

    keys = [meta.pubkey for meta in ix.accounts]
    return _PARSERS[tag](keys, fields)
