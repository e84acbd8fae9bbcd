"""Fixed-width integer types with two's complement semantics."""

from __future__ import annotations

import struct
from enum import Enum

_POINTER_BITS = struct.calcsize("P") * 8


class IntType(Enum):
    """A fixed-width integer type: its name, width in bits and signedness."""

    U8 = ("u8", 8, False)
    U16 = ("u16", 16, False)
    U32 = ("u32", 32, False)
    U64 = ("u64", 64, False)
    U128 = ("u128", 128, False)
    I8 = ("i8", 8, True)
    I16 = ("i16", 16, True)
    I32 = ("i32", 32, True)
    I64 = ("i64", 64, True)
    I128 = ("i128", 128, True)
    USIZE = ("usize", _POINTER_BITS, False)
    ISIZE = ("isize", _POINTER_BITS, True)

    def __init__(self, label: str, bits: int, signed: bool) -> None:
        self.label = label
        self.bits = bits
        self.signed = signed

    def __str__(self) -> str:
        return self.label

    @property
    def bit_size(self) -> int:
        """Number of bits in the type."""
        return self.bits

    @property
    def one(self) -> int:
        return 1

    @property
    def zero(self) -> int:
        return 0

    @property
    def min(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    @property
    def mask(self) -> int:
        """All bits of the type set, as a non-negative number."""
        return (1 << self.bits) - 1

    def contains(self, value: int) -> bool:
        """Whether ``value`` is representable in this type."""
        return self.min <= value <= self.max

    def check(self, value: int) -> int:
        """Return ``value`` unchanged, raising OverflowError if it does not fit."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected an integer, got {type(value).__name__}")
        if not self.contains(value):
            raise OverflowError(f"{value} does not fit in {self.label}")
        return value

    def wrap(self, value: int) -> int:
        """Reduce ``value`` to this type, discarding high bits."""
        wrapped = value & self.mask
        if self.signed and wrapped > self.max:
            wrapped -= 1 << self.bits
        return wrapped

    @classmethod
    def from_name(cls, name: str) -> IntType:
        """Look a type up by its name, such as ``"u16"``."""
        for member in cls:
            if member.label == name:
                return member
        raise ValueError(f"unknown integer type {name!r}")