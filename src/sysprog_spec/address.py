"""Seed-derived account addresses."""

from __future__ import annotations

import hashlib

from .config import MAX_SEED_LEN, PDA_MARKER
from .errors import ErrorCode, SpecError
from .types import PublicKey


def create_with_seed(base: PublicKey, seed: str, owner: PublicKey) -> PublicKey:
    """Address of the account owned by ``owner`` derived from ``base`` and ``seed``.

    sha256(base || seed || owner). This is the key the seed-based instructions
    expect as ``new_account_pubkey`` / ``account_pubkey`` / ``from_pubkey``.
    """
    seed_bytes = seed.encode("utf-8")
    if len(seed_bytes) > MAX_SEED_LEN:
        raise SpecError(
            ErrorCode.MAX_SEED_LENGTH_EXCEEDED,
            f"seed is {len(seed_bytes)} bytes, max {MAX_SEED_LEN}",
        )
    if owner.raw.endswith(PDA_MARKER):
        raise SpecError(ErrorCode.ILLEGAL_OWNER, "owner must not end with the PDA marker")

    hasher = hashlib.sha256()
    hasher.update(base.raw)
    hasher.update(seed_bytes)
    hasher.update(owner.raw)
    return PublicKey(hasher.digest())
