"""Wire-format encoding of system program instruction data.

Layout: u32 LE tag, then each field of the variant in declaration order with
no padding. u64 is 8 bytes LE, a public key is its raw 32 bytes, a string is a
u64 LE byte length followed by the UTF-8 bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from .config import PUBLIC_KEY_SIZE, TAG_SIZE, U32_MAX, U64_MAX, U64_SIZE
from .errors import EncodingInvariantError, ErrorCode, SpecError
from .types import PublicKey, SystemInstruction


class FieldKind(Enum):
    U64 = "u64"
    PUBKEY = "pubkey"
    STRING = "string"


Layout = Tuple[Tuple[str, FieldKind], ...]

U64 = FieldKind.U64
PUBKEY = FieldKind.PUBKEY
STRING = FieldKind.STRING

INSTRUCTION_LAYOUTS: Dict[SystemInstruction, Layout] = {
    SystemInstruction.CREATE_ACCOUNT: (
        ("lamports", U64),
        ("space", U64),
        ("owner", PUBKEY),
    ),
    SystemInstruction.ASSIGN: (("owner", PUBKEY),),
    SystemInstruction.TRANSFER: (("lamports", U64),),
    SystemInstruction.CREATE_ACCOUNT_WITH_SEED: (
        ("base", PUBKEY),
        ("seed", STRING),
        ("lamports", U64),
        ("space", U64),
        ("owner", PUBKEY),
    ),
    SystemInstruction.ADVANCE_NONCE_ACCOUNT: (),
    SystemInstruction.WITHDRAW_NONCE_ACCOUNT: (("lamports", U64),),
    SystemInstruction.INITIALIZE_NONCE_ACCOUNT: (("authorized", PUBKEY),),
    SystemInstruction.AUTHORIZE_NONCE_ACCOUNT: (("new_authority", PUBKEY),),
    SystemInstruction.ALLOCATE: (("space", U64),),
    SystemInstruction.ALLOCATE_WITH_SEED: (
        ("base", PUBKEY),
        ("seed", STRING),
        ("space", U64),
        ("owner", PUBKEY),
    ),
    SystemInstruction.ASSIGN_WITH_SEED: (
        ("base", PUBKEY),
        ("seed", STRING),
        ("owner", PUBKEY),
    ),
    SystemInstruction.TRANSFER_WITH_SEED: (
        ("lamports", U64),
        ("seed", STRING),
        ("from_owner", PUBKEY),
    ),
}


@dataclass
class Writer:
    buf: bytearray

    def _write_uint(self, v: int, size: int, max_value: int) -> None:
        if not isinstance(v, int) or isinstance(v, bool) or not (0 <= v <= max_value):
            raise EncodingInvariantError(f"{v!r} does not fit in {size} bytes")
        self.buf.extend(v.to_bytes(size, "little", signed=False))

    def write_u32(self, v: int) -> None:
        self._write_uint(v, 4, U32_MAX)

    def write_u64(self, v: int) -> None:
        self._write_uint(v, U64_SIZE, U64_MAX)

    def write_bytes(self, b: bytes) -> None:
        self.buf.extend(b)

    def write_pubkey(self, key: PublicKey) -> None:
        if not isinstance(key, PublicKey):
            raise EncodingInvariantError(f"expected PublicKey, got {type(key).__name__}")
        self.buf.extend(key.raw)

    def write_string(self, value: str) -> None:
        if not isinstance(value, str):
            raise EncodingInvariantError(f"expected str, got {type(value).__name__}")
        data = value.encode("utf-8")
        self.write_u64(len(data))
        self.write_bytes(data)


@dataclass
class Reader:
    data: bytes
    pos: int = 0

    def remaining(self) -> int:
        return len(self.data) - self.pos

    def read_bytes(self, n: int) -> bytes:
        if n > self.remaining():
            raise SpecError(
                ErrorCode.INVALID_FORMAT,
                f"unexpected end of data: need {n} bytes at offset {self.pos}, have {self.remaining()}",
            )
        out = self.data[self.pos : self.pos + n]
        self.pos += n
        return out

    def read_u32(self) -> int:
        return int.from_bytes(self.read_bytes(4), "little", signed=False)

    def read_u64(self) -> int:
        return int.from_bytes(self.read_bytes(U64_SIZE), "little", signed=False)

    def read_pubkey(self) -> PublicKey:
        return PublicKey(self.read_bytes(PUBLIC_KEY_SIZE))

    def read_string(self) -> str:
        length = self.read_u64()
        raw = self.read_bytes(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SpecError(ErrorCode.INVALID_SEED, "seed is not valid UTF-8") from exc

    def finish(self) -> None:
        if self.remaining():
            raise SpecError(
                ErrorCode.TRAILING_BYTES, f"{self.remaining()} trailing bytes after payload"
            )


def _layout(tag: SystemInstruction) -> Layout:
    layout = INSTRUCTION_LAYOUTS.get(tag)
    if layout is None:
        raise EncodingInvariantError(f"no layout registered for {tag!r}")
    return layout


def _write_field(w: Writer, kind: FieldKind, value: Any) -> None:
    if kind is FieldKind.U64:
        w.write_u64(value)
    elif kind is FieldKind.PUBKEY:
        w.write_pubkey(value)
    elif kind is FieldKind.STRING:
        w.write_string(value)
    else:
        raise EncodingInvariantError(f"unhandled field kind {kind!r}")


def _read_field(r: Reader, kind: FieldKind) -> Any:
    if kind is FieldKind.U64:
        return r.read_u64()
    if kind is FieldKind.PUBKEY:
        return r.read_pubkey()
    return r.read_string()


def encode_instruction_data(tag: SystemInstruction, fields: Dict[str, Any]) -> bytes:
    """Serialize ``tag`` and ``fields`` according to the variant's layout.

    ``fields`` must name exactly the layout's fields. Anything else is a bug in
    the caller's builder and raises :class:`EncodingInvariantError`.
    """
    layout = _layout(tag)
    expected = [name for name, _ in layout]
    if sorted(fields) != sorted(expected):
        raise EncodingInvariantError(
            f"{tag.name} fields {sorted(fields)} do not match layout {expected}"
        )

    w = Writer(bytearray())
    w.write_u32(int(tag))
    for name, kind in layout:
        _write_field(w, kind, fields[name])
    return bytes(w.buf)


def decode_instruction_data(data: bytes) -> Tuple[SystemInstruction, Dict[str, Any]]:
    """Inverse of :func:`encode_instruction_data`. Rejects malformed input."""
    r = Reader(bytes(data))
    raw_tag = r.read_u32()
    try:
        tag = SystemInstruction(raw_tag)
    except ValueError as exc:
        raise SpecError(
            ErrorCode.UNKNOWN_INSTRUCTION, f"unknown instruction tag {raw_tag}"
        ) from exc

    fields: Dict[str, Any] = {}
    for name, kind in _layout(tag):
        fields[name] = _read_field(r, kind)
    r.finish()
    return tag, fields


def field_size(kind: FieldKind, value: Any) -> int:
    if kind is FieldKind.U64:
        return U64_SIZE
    if kind is FieldKind.PUBKEY:
        return PUBLIC_KEY_SIZE
    return U64_SIZE + len(value.encode("utf-8"))


def encoded_size(tag: SystemInstruction, fields: Dict[str, Any]) -> int:
    return TAG_SIZE + sum(field_size(kind, fields[name]) for name, kind in _layout(tag))
