"""Core types for the system program instruction specs.

This repo tracks only the instruction surface of the system program:
account creation, transfers, ownership assignment, space allocation, the
seed-derived variants of those, and durable nonce account management.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union

import base58

from .config import (
    PUBLIC_KEY_SIZE,
    SYSTEM_PROGRAM_ID_BYTES,
    SYSVAR_RECENT_BLOCKHASHES_BYTES,
    SYSVAR_RENT_BYTES,
)
from .errors import ErrorCode, SpecError


class SystemInstruction(IntEnum):
    """u32 discriminants. Wire-stable: never reorder."""

    CREATE_ACCOUNT = 0
    ASSIGN = 1
    TRANSFER = 2
    CREATE_ACCOUNT_WITH_SEED = 3
    ADVANCE_NONCE_ACCOUNT = 4
    WITHDRAW_NONCE_ACCOUNT = 5
    INITIALIZE_NONCE_ACCOUNT = 6
    AUTHORIZE_NONCE_ACCOUNT = 7
    ALLOCATE = 8
    ALLOCATE_WITH_SEED = 9
    ASSIGN_WITH_SEED = 10
    TRANSFER_WITH_SEED = 11


@dataclass(frozen=True)
class PublicKey:
    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)):
            raise SpecError(ErrorCode.INVALID_PUBLIC_KEY, "public key must be bytes")
        if len(self.raw) != PUBLIC_KEY_SIZE:
            raise SpecError(
                ErrorCode.INVALID_PUBLIC_KEY,
                f"public key must be {PUBLIC_KEY_SIZE} bytes, got {len(self.raw)}",
            )
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_base58(cls, value: str) -> "PublicKey":
        try:
            raw = base58.b58decode(value)
        except ValueError as exc:
            raise SpecError(ErrorCode.INVALID_PUBLIC_KEY, f"invalid base58: {value!r}") from exc
        return cls(raw)

    def to_base58(self) -> str:
        return base58.b58encode(self.raw).decode()

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return self.to_base58()

    def __repr__(self) -> str:
        return f"PublicKey({self.to_base58()})"


@dataclass(frozen=True)
class AccountMeta:
    pubkey: PublicKey
    is_signer: bool
    is_writable: bool


@dataclass(frozen=True)
class Instruction:
    program_id: PublicKey
    accounts: Tuple[AccountMeta, ...]
    data: bytes


# --- Well-known keys ---

SYSTEM_PROGRAM_ID = PublicKey(SYSTEM_PROGRAM_ID_BYTES)
SYSVAR_RECENT_BLOCKHASHES_PUBKEY = PublicKey(SYSVAR_RECENT_BLOCKHASHES_BYTES)
SYSVAR_RENT_PUBKEY = PublicKey(SYSVAR_RENT_BYTES)


# --- Account creation / funding ---


@dataclass(frozen=True)
class CreateAccountParams:
    from_pubkey: PublicKey
    new_account_pubkey: PublicKey
    owner: PublicKey
    lamports: int
    space: int


@dataclass(frozen=True)
class AssignParams:
    account_pubkey: PublicKey
    owner: PublicKey


@dataclass(frozen=True)
class TransferParams:
    from_pubkey: PublicKey
    to_pubkey: PublicKey
    lamports: int


@dataclass(frozen=True)
class CreateAccountWithSeedParams:
    from_pubkey: PublicKey
    new_account_pubkey: PublicKey
    base: PublicKey
    seed: str
    lamports: int
    space: int
    owner: PublicKey


# --- Nonce accounts ---


@dataclass(frozen=True)
class AdvanceNonceParams:
    nonce_pubkey: PublicKey
    authorized_pubkey: PublicKey


@dataclass(frozen=True)
class WithdrawNonceParams:
    nonce_pubkey: PublicKey
    authorized_pubkey: PublicKey
    to_pubkey: PublicKey
    lamports: int


@dataclass(frozen=True)
class InitializeNonceParams:
    nonce_pubkey: PublicKey
    authorized_pubkey: PublicKey


@dataclass(frozen=True)
class AuthorizeNonceParams:
    nonce_pubkey: PublicKey
    authorized_pubkey: PublicKey
    new_authority: PublicKey


# --- Space allocation / seed variants ---


@dataclass(frozen=True)
class AllocateParams:
    account_pubkey: PublicKey
    space: int


@dataclass(frozen=True)
class AllocateWithSeedParams:
    account_pubkey: PublicKey
    base: PublicKey
    seed: str
    space: int
    owner: PublicKey


@dataclass(frozen=True)
class AssignWithSeedParams:
    account_pubkey: PublicKey
    base: PublicKey
    seed: str
    owner: PublicKey


@dataclass(frozen=True)
class TransferWithSeedParams:
    from_pubkey: PublicKey
    base: PublicKey
    to_pubkey: PublicKey
    from_owner: PublicKey
    seed: str
    lamports: int


InstructionParams = Union[
    CreateAccountParams,
    AssignParams,
    TransferParams,
    CreateAccountWithSeedParams,
    AdvanceNonceParams,
    WithdrawNonceParams,
    InitializeNonceParams,
    AuthorizeNonceParams,
    AllocateParams,
    AllocateWithSeedParams,
    AssignWithSeedParams,
    TransferWithSeedParams,
]
