"""System program spec error codes and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCategory(IntEnum):
    SUCCESS = 0x00
    VALIDATION = 0x01
    INSTRUCTION = 0x02
    ADDRESS = 0x03
    INTERNAL = 0xFF


class ErrorCode(IntEnum):
    # Success
    SUCCESS = 0x0000

    # Validation
    INVALID_FORMAT = 0x0100
    INVALID_PUBLIC_KEY = 0x0101
    INVALID_SEED = 0x0102
    TRAILING_BYTES = 0x0103

    # Instruction
    UNKNOWN_INSTRUCTION = 0x0200
    INVALID_PROGRAM_ID = 0x0201
    INVALID_ACCOUNTS = 0x0202

    # Address derivation
    MAX_SEED_LENGTH_EXCEEDED = 0x0300
    ILLEGAL_OWNER = 0x0301

    # Internal
    INTERNAL_ERROR = 0xFF00
    UNKNOWN = 0xFFFF

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory(int(self) >> 8)


@dataclass(frozen=True)
class SpecError(Exception):
    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.name}({self.code:#06x}): {self.message}"


# Allow Python's Exception machinery to set __traceback__/__context__/__cause__
# while keeping dataclass fields frozen (Python 3.13 contextlib compat).
_EXCEPTION_ATTRS = frozenset(("__traceback__", "__context__", "__cause__"))
_frozen_setattr = SpecError.__setattr__


def _spec_error_setattr(self: SpecError, name: str, value: object) -> None:
    if name in _EXCEPTION_ATTRS:
        object.__setattr__(self, name, value)
    else:
        _frozen_setattr(self, name, value)


SpecError.__setattr__ = _spec_error_setattr  # type: ignore[method-assign]


class EncodingInvariantError(AssertionError):
    """Raised when the encoder itself is wrong, never for caller input.

    Encoding a well-typed parameter struct cannot fail. Reaching this means the
    layout table and a builder disagree, or a value escaped its fixed width.
    Do not catch it.
    """


def err(code: ErrorCode, message: str) -> SpecError:
    return SpecError(code=code, message=message)
