"""Bit manipulation on plain integers of a given fixed-width type.

Arithmetic that would overflow the type raises OverflowError, including
shifts by an amount outside ``0 .. bits - 1``.
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

from bitfi.inttypes import IntType

Bounds = Union[Tuple[Optional[int], Optional[int]], range, slice]


def _shl(value: int, amount: int, int_type: IntType) -> int:
    if not 0 <= amount < int_type.bits:
        raise OverflowError("attempt to shift left with overflow")
    return int_type.wrap(value << amount)


def _shr(value: int, amount: int, int_type: IntType) -> int:
    if not 0 <= amount < int_type.bits:
        raise OverflowError("attempt to shift right with overflow")
    return value >> amount


def _not(value: int, int_type: IntType) -> int:
    return int_type.wrap(~value)


def _sub(a: int, b: int, int_type: IntType) -> int:
    result = a - b
    if not int_type.contains(result):
        raise OverflowError("attempt to subtract with overflow")
    return result


def _add(a: int, b: int, int_type: IntType) -> int:
    result = a + b
    if not int_type.contains(result):
        raise OverflowError("attempt to add with overflow")
    return result


def resolve_range(bounds: Bounds, int_type: IntType = IntType.I32) -> Tuple[int, int]:
    """Turn ``bounds`` into an inclusive ``(start, end)`` pair.

    A tuple is inclusive at both ends; a ``range`` or ``slice`` excludes its
    stop. ``None`` means unbounded: a missing start is 0 and a missing end is
    the bit size of the type.
    """
    if isinstance(bounds, (range, slice)):
        if bounds.step not in (None, 1):
            raise ValueError("bit ranges must have a step of 1")
        start = 0 if bounds.start is None else int_type.check(bounds.start)
        if bounds.stop is None:
            end = int_type.bit_size
        else:
            end = _sub(int_type.check(bounds.stop), 1, int_type)
        return start, end
    if isinstance(bounds, tuple) and len(bounds) == 2:
        first, last = bounds
        start = 0 if first is None else int_type.check(first)
        end = int_type.bit_size if last is None else int_type.check(last)
        return start, end
    raise TypeError(f"unsupported bit range {bounds!r}")


def set_bit(value: int, i: int, int_type: IntType = IntType.I32) -> int:
    """Return ``value`` with bit ``i`` set to 1."""
    int_type.check(value)
    return value | _shl(1, int_type.check(i), int_type)


def clear_bit(value: int, i: int, int_type: IntType = IntType.I32) -> int:
    """Return ``value`` with bit ``i`` cleared to 0."""
    int_type.check(value)
    return value & _not(_shl(1, int_type.check(i), int_type), int_type)


def toggle_bit(value: int, i: int, int_type: IntType = IntType.I32) -> int:
    """Return ``value`` with bit ``i`` flipped."""
    int_type.check(value)
    return int_type.wrap(value ^ _shl(1, int_type.check(i), int_type))


def get_bit(value: int, i: int, int_type: IntType = IntType.I32) -> bool:
    """Whether bit ``i`` of ``value`` is 1."""
    int_type.check(value)
    i = int_type.check(i)
    return _shr(value & _shl(1, i, int_type), i, int_type) != 0


def _range_mask(start: int, end: int, int_type: IntType) -> int:
    width = _add(_sub(end, start, int_type), 1, int_type)
    return _not(_shl(_not(0, int_type), width, int_type), int_type)


def set_bit_range(value: int, bounds: Bounds, bits: int, int_type: IntType = IntType.I32) -> int:
    """Return ``value`` with the bits in ``bounds`` replaced by the low bits of ``bits``."""
    int_type.check(value)
    int_type.check(bits)
    start, end = resolve_range(bounds, int_type)
    mask = _range_mask(start, end, int_type)
    value &= _not(_shl(mask, start, int_type), int_type)
    value |= _shl(bits & mask, start, int_type)
    return value


def get_bit_range(value: int, bounds: Bounds, int_type: IntType = IntType.I32) -> int:
    """Return the bits of ``value`` in ``bounds``, shifted down to bit 0."""
    int_type.check(value)
    start, end = resolve_range(bounds, int_type)
    mask = _shl(_range_mask(start, end, int_type), start, int_type)
    return _shr(value & mask, start, int_type)