"""System program instruction builders.

Each builder is a pure function of its params. Account order is part of the
wire contract: the runtime binds accounts by position, not by name.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from .config import NONCE_ACCOUNT_SIZE
from .encoding import encode_instruction_data
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

logger = logging.getLogger(__name__)


def _signer(key: PublicKey, writable: bool) -> AccountMeta:
    return AccountMeta(pubkey=key, is_signer=True, is_writable=writable)


def _readonly(key: PublicKey) -> AccountMeta:
    return AccountMeta(pubkey=key, is_signer=False, is_writable=False)


def _writable(key: PublicKey) -> AccountMeta:
    return AccountMeta(pubkey=key, is_signer=False, is_writable=True)


def _instruction(
    tag: SystemInstruction, accounts: List[AccountMeta], fields: Dict[str, Any]
) -> Instruction:
    data = encode_instruction_data(tag, fields)
    logger.debug("built %s: %d accounts, %d data bytes", tag.name, len(accounts), len(data))
    return Instruction(program_id=SYSTEM_PROGRAM_ID, accounts=tuple(accounts), data=data)


def create_account(params: CreateAccountParams) -> Instruction:
    return _instruction(
        SystemInstruction.CREATE_ACCOUNT,
        [
            _signer(params.from_pubkey, writable=True),
            _signer(params.new_account_pubkey, writable=True),
        ],
        {"lamports": params.lamports, "space": params.space, "owner": params.owner},
    )


def assign(params: AssignParams) -> Instruction:
    return _instruction(
        SystemInstruction.ASSIGN,
        [_signer(params.account_pubkey, writable=True)],
        {"owner": params.owner},
    )


def transfer(params: TransferParams) -> Instruction:
    return _instruction(
        SystemInstruction.TRANSFER,
        [_signer(params.from_pubkey, writable=True), _writable(params.to_pubkey)],
        {"lamports": params.lamports},
    )


def create_account_with_seed(params: CreateAccountWithSeedParams) -> Instruction:
    """Create a seed-derived account funded by ``from_pubkey``.

    The base account is listed only when it differs from the funding account;
    otherwise its signature is already carried by ``from_pubkey``.
    """
    accounts = [
        _signer(params.from_pubkey, writable=True),
        _writable(params.new_account_pubkey),
    ]
    if params.base != params.from_pubkey:
        accounts.append(_signer(params.base, writable=False))

    return _instruction(
        SystemInstruction.CREATE_ACCOUNT_WITH_SEED,
        accounts,
        {
            "base": params.base,
            "seed": params.seed,
            "lamports": params.lamports,
            "space": params.space,
            "owner": params.owner,
        },
    )


def advance_nonce_account(params: AdvanceNonceParams) -> Instruction:
    return _instruction(
        SystemInstruction.ADVANCE_NONCE_ACCOUNT,
        [
            _writable(params.nonce_pubkey),
            _readonly(SYSVAR_RECENT_BLOCKHASHES_PUBKEY),
            _signer(params.authorized_pubkey, writable=False),
        ],
        {},
    )


def withdraw_nonce_account(params: WithdrawNonceParams) -> Instruction:
    return _instruction(
        SystemInstruction.WITHDRAW_NONCE_ACCOUNT,
        [
            _writable(params.nonce_pubkey),
            _writable(params.to_pubkey),
            _readonly(SYSVAR_RECENT_BLOCKHASHES_PUBKEY),
            _readonly(SYSVAR_RENT_PUBKEY),
            _signer(params.authorized_pubkey, writable=False),
        ],
        {"lamports": params.lamports},
    )


def initialize_nonce_account(params: InitializeNonceParams) -> Instruction:
    return _instruction(
        SystemInstruction.INITIALIZE_NONCE_ACCOUNT,
        [
            _writable(params.nonce_pubkey),
            _readonly(SYSVAR_RECENT_BLOCKHASHES_PUBKEY),
            _readonly(SYSVAR_RENT_PUBKEY),
        ],
        {"authorized": params.authorized_pubkey},
    )


def authorize_nonce_account(params: AuthorizeNonceParams) -> Instruction:
    return _instruction(
        SystemInstruction.AUTHORIZE_NONCE_ACCOUNT,
        [
            _writable(params.nonce_pubkey),
            _signer(params.authorized_pubkey, writable=False),
        ],
        {"new_authority": params.new_authority},
    )


def allocate(params: AllocateParams) -> Instruction:
    return _instruction(
        SystemInstruction.ALLOCATE,
        [_signer(params.account_pubkey, writable=True)],
        {"space": params.space},
    )


def allocate_with_seed(params: AllocateWithSeedParams) -> Instruction:
    return _instruction(
        SystemInstruction.ALLOCATE_WITH_SEED,
        [_writable(params.account_pubkey), _signer(params.base, writable=False)],
        {
            "base": params.base,
            "seed": params.seed,
            "space": params.space,
            "owner": params.owner,
        },
    )


def assign_with_seed(params: AssignWithSeedParams) -> Instruction:
    return _instruction(
        SystemInstruction.ASSIGN_WITH_SEED,
        [_writable(params.account_pubkey), _signer(params.base, writable=False)],
        {"base": params.base, "seed": params.seed, "owner": params.owner},
    )


def transfer_with_seed(params: TransferWithSeedParams) -> Instruction:
    return _instruction(
        SystemInstruction.TRANSFER_WITH_SEED,
        [
            _writable(params.from_pubkey),
            _signer(params.base, writable=False),
            _writable(params.to_pubkey),
        ],
        {"lamports": params.lamports, "seed": params.seed, "from_owner": params.from_owner},
    )


BUILDERS: Dict[type, Callable[[Any], Instruction]] = {
    CreateAccountParams: create_account,
    AssignParams: assign,
    TransferParams: transfer,
    CreateAccountWithSeedParams: create_account_with_seed,
    AdvanceNonceParams: advance_nonce_account,
    WithdrawNonceParams: withdraw_nonce_account,
    InitializeNonceParams: initialize_nonce_account,
    AuthorizeNonceParams: authorize_nonce_account,
    AllocateParams: allocate,
    AllocateWithSeedParams: allocate_with_seed,
    AssignWithSeedParams: assign_with_seed,
    TransferWithSeedParams: transfer_with_seed,
}


def build_instruction(params: InstructionParams) -> Instruction:
    builder = BUILDERS.get(type(params))
    if builder is None:
        raise SpecError(
            ErrorCode.UNKNOWN_INSTRUCTION, f"no builder for {type(params).__name__}"
        )
    return builder(params)


# --- Nonce account convenience ---


def create_nonce_account(
    from_pubkey: PublicKey,
    nonce_pubkey: PublicKey,
    authority: PublicKey,
    lamports: int,
) -> List[Instruction]:
    """Create a system-owned nonce account and initialize it."""
    return [
        create_account(
            CreateAccountParams(
                from_pubkey=from_pubkey,
                new_account_pubkey=nonce_pubkey,
                owner=SYSTEM_PROGRAM_ID,
                lamports=lamports,
                space=NONCE_ACCOUNT_SIZE,
            )
        ),
        initialize_nonce_account(
            InitializeNonceParams(nonce_pubkey=nonce_pubkey, authorized_pubkey=authority)
        ),
    ]


def create_nonce_account_with_seed(
    from_pubkey: PublicKey,
    nonce_pubkey: PublicKey,
    base: PublicKey,
    seed: str,
    authority: PublicKey,
    lamports: int,
) -> List[Instruction]:
    return [
        create_account_with_seed(
            CreateAccountWithSeedParams(
                from_pubkey=from_pubkey,
                new_account_pubkey=nonce_pubkey,
                base=base,
                seed=seed,
                lamports=lamports,
                space=NONCE_ACCOUNT_SIZE,
                owner=SYSTEM_PROGRAM_ID,
            )
        ),
        initialize_nonce_account(
            InitializeNonceParams(nonce_pubkey=nonce_pubkey, authorized_pubkey=authority)
        ),
    ]
