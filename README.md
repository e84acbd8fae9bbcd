# bitfi

Bit fields for Python: read and write single bits and bit ranges of
fixed-width integers, and declare named bit-field types from a short
text declaration.

## Installation

```
pip install bitfi
```

## Declaring bit fields

`bitfi.declare.bitfield(text)` parses a declaration and returns the
classes it describes, in a dict keyed by name. Each field is a single
bit index or a bit range:

- `on: 0;` declares a one-bit flag, read and written as a `bool`.
- `field1: 1 ..= 3;` declares a numeric field over bits 1 to 3
  inclusive. `a .. b` excludes `b`; either end may be left out.
- `[mut = false]` after the bits makes a field read-only.

Integer literals may be decimal, `0x`, `0o` or `0b`, with `_`
separators. `//` starts a comment.

```python
from bitfi.declare import bitfield

types = bitfield("""
    Flags = u16 {
        on: 0;
        field1: 1 ..= 3;
        status: 4 ..= 7 [mut = false];
    }
""")
Flags = types["Flags"]

flags = Flags()          # starts at 0
assert not flags.on
flags.on = True
assert flags.on

flags.field1 = 0b101
assert flags.field1 == 0b101
assert flags.inner == 0b1011

flags.status = 1         # AttributeError: field 'status' is read-only
```

Fields are attributes. Assigning a truthy value to a flag sets its bit
and a falsy one clears it; assigning to a range field stores the low
bits of the value in that range. `inner` is the wrapped integer and can
be read or assigned; `int(flags)` gives the same value.

Every bit-field instance also has `set_bit(i)`, `clear_bit(i)`,
`toggle_bit(i)`, `get_bit(i)`, `set_bit_range(bounds, bits)` and
`get_bit_range(bounds)`, which change the instance in place. Instances
compare equal when they are of the same type and hold the same value.

One declaration may hold several types:

```python
types = bitfield("""
    A = u8 { lo: 0 ..= 3; hi: 4 ..= 7; }
    B = u32 { ready: 31; }
""")
```

Malformed declarations, unknown integer types, repeated or reserved
names and literals that do not fit the type raise
`bitfi.declare.BitfieldSyntaxError` (a `ValueError`).

`parse_bitfields(text)` returns the parsed declarations as
`(name, int_type, fields)` triples without building classes.
`make_bitfield(name, int_type, fields)` builds one class from code,
taking an `IntType` or its name and a sequence of `FieldSpec(name,
bits, mutable=True)`, where `bits` is an `int` index or range bounds as
described below.

## Working on plain integers

`bitfi.bits` has the same operations as functions over plain integers:
`set_bit`, `clear_bit`, `toggle_bit`, `get_bit`, `set_bit_range`,
`get_bit_range` and `resolve_range`. Each takes an `IntType` from
`bitfi.inttypes` as its last argument (`i32` when left out) and returns
a new value.

Range bounds may be a two-item tuple, inclusive at both ends, or a
`range` or `slice`, which excludes its stop. `None` as an end means
unbounded: a missing start is 0, a missing end is the type's bit size.

```python
from bitfi.bits import get_bit_range, set_bit_range
from bitfi.inttypes import IntType

u32 = IntType.from_name("u32")
n = set_bit_range(0, (0, 1), 0b11, u32)
n = set_bit_range(n, (2, 3), 0b10, u32)
assert n == 0b1011
assert get_bit_range(n, range(2, 4), u32) == 0b10
```

Values and indices that do not fit the type, and shifts by an amount
outside `0` to `bits - 1`, raise `OverflowError`; non-integers raise
`TypeError`.

`IntType` covers `u8` to `u128`, `i8` to `i128`, `usize` and `isize`
(pointer width of the running interpreter). Each member has `bits`,
`signed`, `min`, `max`, `mask`, `contains(value)`, `check(value)` and
`wrap(value)`, which reduces a value to the type with two's complement
wrap-around.

## Running the tests

```
pip install -e ".[test]"
pytest
```