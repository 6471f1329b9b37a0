"""Helpers to serialize/deserialize instruction fixtures for the system program specs."""

from __future__ import annotations

from dataclasses import fields
from typing import Any

from sysprog_spec.types import (
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

PARAMS_BY_TAG: dict[SystemInstruction, type] = {
    SystemInstruction.CREATE_ACCOUNT: CreateAccountParams,
    SystemInstruction.ASSIGN: AssignParams,
    SystemInstruction.TRANSFER: TransferParams,
    SystemInstruction.CREATE_ACCOUNT_WITH_SEED: CreateAccountWithSeedParams,
    SystemInstruction.ADVANCE_NONCE_ACCOUNT: AdvanceNonceParams,
    SystemInstruction.WITHDRAW_NONCE_ACCOUNT: WithdrawNonceParams,
    SystemInstruction.INITIALIZE_NONCE_ACCOUNT: InitializeNonceParams,
    SystemInstruction.AUTHORIZE_NONCE_ACCOUNT: AuthorizeNonceParams,
    SystemInstruction.ALLOCATE: AllocateParams,
    SystemInstruction.ALLOCATE_WITH_SEED: AllocateWithSeedParams,
    SystemInstruction.ASSIGN_WITH_SEED: AssignWithSeedParams,
    SystemInstruction.TRANSFER_WITH_SEED: TransferWithSeedParams,
}
TAG_BY_PARAMS: dict[type, SystemInstruction] = {cls: tag for tag, cls in PARAMS_BY_TAG.items()}


def _key_to_json(key: PublicKey) -> str:
    return key.to_base58()


def _key_from_json(v: str) -> PublicKey:
    return PublicKey.from_base58(v)


def params_to_json(params: InstructionParams) -> dict[str, Any]:
    result: dict[str, Any] = {"instruction": TAG_BY_PARAMS[type(params)].name.lower()}
    for f in fields(params):
        value = getattr(params, f.name)
        result[f.name] = _key_to_json(value) if isinstance(value, PublicKey) else value
    return result


def params_from_json(data: dict[str, Any]) -> InstructionParams:
    tag = SystemInstruction[data["instruction"].upper()]
    cls = PARAMS_BY_TAG[tag]
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        value = data[f.name]
        # Field annotations are strings under `from __future__ import annotations`.
        if f.type == "PublicKey":
            value = _key_from_json(value)
        elif f.type == "int":
            value = int(value)
        kwargs[f.name] = value
    return cls(**kwargs)


def instruction_to_json(ix: Instruction) -> dict[str, Any]:
    return {
        "program_id": _key_to_json(ix.program_id),
        "accounts": [
            {
                "pubkey": _key_to_json(meta.pubkey),
                "is_signer": meta.is_signer,
                "is_writable": meta.is_writable,
            }
            for meta in ix.accounts
        ],
        "data": ix.data.hex(),
    }


def instruction_from_json(data: dict[str, Any]) -> Instruction:
    return Instruction(
        program_id=_key_from_json(data["program_id"]),
        accounts=tuple(
            AccountMeta(
                pubkey=_key_from_json(a["pubkey"]),
                is_signer=bool(a["is_signer"]),
                is_writable=bool(a["is_writable"]),
            )
            for a in data["accounts"]
        ),
        data=bytes.fromhex(data["data"]),
    )
