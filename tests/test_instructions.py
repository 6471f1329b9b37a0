"""Account ordering, access flags and program id for every system instruction."""

from __future__ import annotations

import pytest

from sysprog_spec.config import NONCE_ACCOUNT_SIZE
from sysprog_spec.errors import ErrorCode, SpecError
from sysprog_spec.instructions import (
    allocate,
    build_instruction,
    create_account_with_seed,
    create_nonce_account,
    create_nonce_account_with_seed,
    transfer,
)
from sysprog_spec.parser import parse_instruction
from sysprog_spec.test_accounts import ALICE, BOB, CAROL, DAVE, NONCE, TOKEN_PROGRAM
from sysprog_spec.types import (
    SYSTEM_PROGRAM_ID,
    SYSVAR_RECENT_BLOCKHASHES_PUBKEY as RECENT,
    SYSVAR_RENT_PUBKEY as RENT,
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
    SystemInstruction,
    TransferParams,
    TransferWithSeedParams,
    WithdrawNonceParams,
)

S, W = True, True
_ = False


def _metas(ix: Instruction) -> list[tuple]:
    return [(m.pubkey, m.is_signer, m.is_writable) for m in ix.accounts]


ACCOUNT_TABLE = [
    (
        CreateAccountParams(
            from_pubkey=ALICE, new_account_pubkey=BOB, owner=TOKEN_PROGRAM, lamports=1, space=2
        ),
        [(ALICE, S, W), (BOB, S, W)],
    ),
    (
        AssignParams(account_pubkey=ALICE, owner=TOKEN_PROGRAM),
        [(ALICE, S, W)],
    ),
    (
        TransferParams(from_pubkey=ALICE, to_pubkey=BOB, lamports=1),
        [(ALICE, S, W), (BOB, _, W)],
    ),
    (
        CreateAccountWithSeedParams(
            from_pubkey=ALICE,
            new_account_pubkey=BOB,
            base=CAROL,
            seed="s",
            lamports=1,
            space=2,
            owner=TOKEN_PROGRAM,
        ),
        [(ALICE, S, W), (BOB, _, W), (CAROL, S, _)],
    ),
    (
        AdvanceNonceParams(nonce_pubkey=NONCE, authorized_pubkey=ALICE),
        [(NONCE, _, W), (RECENT, _, _), (ALICE, S, _)],
    ),
    (
        WithdrawNonceParams(nonce_pubkey=NONCE, authorized_pubkey=ALICE, to_pubkey=BOB, lamports=1),
        [(NONCE, _, W), (BOB, _, W), (RECENT, _, _), (RENT, _, _), (ALICE, S, _)],
    ),
    (
        InitializeNonceParams(nonce_pubkey=NONCE, authorized_pubkey=ALICE),
        [(NONCE, _, W), (RECENT, _, _), (RENT, _, _)],
    ),
    (
        AuthorizeNonceParams(nonce_pubkey=NONCE, authorized_pubkey=ALICE, new_authority=BOB),
        [(NONCE, _, W), (ALICE, S, _)],
    ),
    (
        AllocateParams(account_pubkey=ALICE, space=128),
        [(ALICE, S, W)],
    ),
    (
        AllocateWithSeedParams(
            account_pubkey=BOB, base=ALICE, seed="s", space=1, owner=TOKEN_PROGRAM
        ),
        [(BOB, _, W), (ALICE, S, _)],
    ),
    (
        AssignWithSeedParams(account_pubkey=BOB, base=ALICE, seed="s", owner=TOKEN_PROGRAM),
        [(BOB, _, W), (ALICE, S, _)],
    ),
    (
        TransferWithSeedParams(
            from_pubkey=BOB,
            base=ALICE,
            to_pubkey=CAROL,
            from_owner=TOKEN_PROGRAM,
            seed="s",
            lamports=1,
        ),
        [(BOB, _, W), (ALICE, S, _), (CAROL, _, W)],
    ),
]


@pytest.mark.parametrize(
    "params,expected",
    ACCOUNT_TABLE,
    ids=[type(p).__name__ for p, _e in ACCOUNT_TABLE],
)
def test_account_order_and_flags(params, expected) -> None:
    ix = build_instruction(params)
    assert _metas(ix) == expected


@pytest.mark.parametrize(
    "params", [p for p, _e in ACCOUNT_TABLE], ids=[type(p).__name__ for p, _e in ACCOUNT_TABLE]
)
def test_program_id_is_system_program(params) -> None:
    assert build_instruction(params).program_id == SYSTEM_PROGRAM_ID


def test_tags_cover_every_builder() -> None:
    tags = [int.from_bytes(build_instruction(p).data[:4], "little") for p, _e in ACCOUNT_TABLE]
    assert tags == list(range(12))
    assert tags == [int(t) for t in SystemInstruction]


def test_system_program_id_is_zero_key() -> None:
    assert SYSTEM_PROGRAM_ID.raw == bytes(32)
    assert str(SYSTEM_PROGRAM_ID) == "11111111111111111111111111111111"


def test_sysvar_ids() -> None:
    assert str(RECENT) == "SysvarRecentB1ockHashes11111111111111111111"
    assert str(RENT) == "SysvarRent111111111111111111111111111111111"
    assert RECENT != RENT


def test_create_account_with_seed_base_is_from_dedups() -> None:
    ix = create_account_with_seed(
        CreateAccountWithSeedParams(
            from_pubkey=ALICE,
            new_account_pubkey=BOB,
            base=ALICE,
            seed="s",
            lamports=1,
            space=2,
            owner=TOKEN_PROGRAM,
        )
    )
    assert _metas(ix) == [(ALICE, S, W), (BOB, _, W)]
    assert [m.pubkey for m in ix.accounts].count(ALICE) == 1


def test_create_account_with_seed_distinct_base_last() -> None:
    ix = create_account_with_seed(
        CreateAccountWithSeedParams(
            from_pubkey=ALICE,
            new_account_pubkey=BOB,
            base=DAVE,
            seed="s",
            lamports=1,
            space=2,
            owner=TOKEN_PROGRAM,
        )
    )
    assert len(ix.accounts) == 3
    last = ix.accounts[-1]
    assert (last.pubkey, last.is_signer, last.is_writable) == (DAVE, True, False)


def test_other_seed_variants_never_dedup_base() -> None:
    ix = build_instruction(
        AllocateWithSeedParams(
            account_pubkey=ALICE, base=ALICE, seed="s", space=1, owner=TOKEN_PROGRAM
        )
    )
    assert _metas(ix) == [(ALICE, _, W), (ALICE, S, _)]

    ix = build_instruction(
        TransferWithSeedParams(
            from_pubkey=ALICE,
            base=ALICE,
            to_pubkey=BOB,
            from_owner=TOKEN_PROGRAM,
            seed="s",
            lamports=1,
        )
    )
    assert len(ix.accounts) == 3


def test_swapped_accounts_change_the_instruction() -> None:
    a = transfer(TransferParams(from_pubkey=ALICE, to_pubkey=BOB, lamports=5))
    b = transfer(TransferParams(from_pubkey=BOB, to_pubkey=ALICE, lamports=5))
    assert a.data == b.data
    assert a != b


def test_instruction_is_immutable() -> None:
    ix = allocate(AllocateParams(account_pubkey=ALICE, space=1))
    assert isinstance(ix.accounts, tuple)
    with pytest.raises(AttributeError):
        ix.data = b""  # type: ignore[misc]


def test_build_instruction_unknown_params() -> None:
    with pytest.raises(SpecError) as exc:
        build_instruction(object())  # type: ignore[arg-type]
    assert exc.value.code == ErrorCode.UNKNOWN_INSTRUCTION


def test_builders_are_deterministic() -> None:
    params = TransferWithSeedParams(
        from_pubkey=BOB, base=ALICE, to_pubkey=CAROL, from_owner=TOKEN_PROGRAM, seed="x", lamports=9
    )
    assert build_instruction(params) == build_instruction(params)


def test_create_nonce_account() -> None:
    create, init = create_nonce_account(ALICE, NONCE, BOB, lamports=1_447_680)
    assert parse_instruction(create) == CreateAccountParams(
        from_pubkey=ALICE,
        new_account_pubkey=NONCE,
        owner=SYSTEM_PROGRAM_ID,
        lamports=1_447_680,
        space=NONCE_ACCOUNT_SIZE,
    )
    assert parse_instruction(init) == InitializeNonceParams(
        nonce_pubkey=NONCE, authorized_pubkey=BOB
    )


def test_create_nonce_account_with_seed() -> None:
    create, init = create_nonce_account_with_seed(ALICE, NONCE, ALICE, "nonce-0", BOB, 10)
    parsed = parse_instruction(create)
    assert isinstance(parsed, CreateAccountWithSeedParams)
    assert parsed.space == NONCE_ACCOUNT_SIZE
    assert parsed.owner == SYSTEM_PROGRAM_ID
    assert len(create.accounts) == 2
    assert _metas(init)[0] == (NONCE, _, W)
