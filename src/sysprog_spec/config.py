"""System program configuration constants.

Keep this file aligned with the runtime's `sdk/program/src/system_instruction.rs`
and the well-known ids in `sdk/program/src/sysvar/*`.
"""

from __future__ import annotations

import base58

# Wire sizes
PUBLIC_KEY_SIZE = 32
TAG_SIZE = 4  # u32 discriminant
U64_SIZE = 8

U32_MAX = (1 << 32) - 1
U64_MAX = (1 << 64) - 1

# Well-known ids (base58)
SYSTEM_PROGRAM_ID_B58 = "11111111111111111111111111111111"
SYSVAR_RECENT_BLOCKHASHES_B58 = "SysvarRecentB1ockHashes11111111111111111111"
SYSVAR_RENT_B58 = "SysvarRent111111111111111111111111111111111"

SYSTEM_PROGRAM_ID_BYTES = base58.b58decode(SYSTEM_PROGRAM_ID_B58)
SYSVAR_RECENT_BLOCKHASHES_BYTES = base58.b58decode(SYSVAR_RECENT_BLOCKHASHES_B58)
SYSVAR_RENT_BYTES = base58.b58decode(SYSVAR_RENT_B58)

# Seed-derived addresses
MAX_SEED_LEN = 32
PDA_MARKER = b"ProgramDerivedAddress"

# Nonce accounts
NONCE_ACCOUNT_SIZE = 80
