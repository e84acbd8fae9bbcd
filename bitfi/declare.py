"""Declaring named bit-field types, in code or from a small text syntax.

The syntax declares one or more types::

    Flags = u16 {
        on: 0;
        field1: 1 ..= 3;
        locked: 4 ..= 5 [mut = false];
    }

A single index declares a boolean flag; a range (``a..b``, ``a..=b``, with
either end optional) declares a numeric field.
"""

from __future__ import annotations

import keyword
import re
from dataclasses import dataclass
from typing import ClassVar, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from bitfi.bits import Bounds
from bitfi.bits import clear_bit as _clear_bit
from bitfi.bits import get_bit as _get_bit
from bitfi.bits import get_bit_range as _get_bit_range
from bitfi.bits import set_bit as _set_bit
from bitfi.bits import set_bit_range as _set_bit_range
from bitfi.bits import toggle_bit as _toggle_bit
from bitfi.inttypes import IntType


class BitfieldSyntaxError(ValueError):
    """A bit-field declaration is malformed."""


@dataclass(frozen=True)
class FieldSpec:
    """One named field: a single bit index or a range of bits."""

    name: str
    bits: Union[int, Bounds]
    mutable: bool = True

    @property
    def is_range(self) -> bool:
        return not isinstance(self.bits, int)


class BitField:
    """Base of declared bit-field types; wraps one integer of ``int_type``."""

    __slots__ = ("_value",)

    int_type: ClassVar[Optional[IntType]] = None
    fields: ClassVar[Tuple[FieldSpec, ...]] = ()

    def __init__(self, value: int = 0) -> None:
        if self.int_type is None:
            raise TypeError("BitField must be subclassed with an int_type")
        self.inner = value

    @property
    def inner(self) -> int:
        """The wrapped integer."""
        return self._value

    @inner.setter
    def inner(self, value: int) -> None:
        self._value = self.int_type.check(value)

    def __int__(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value:#b})"

    def set_bit(self, i: int) -> None:
        self._value = _set_bit(self._value, i, self.int_type)

    def clear_bit(self, i: int) -> None:
        self._value = _clear_bit(self._value, i, self.int_type)

    def toggle_bit(self, i: int) -> None:
        self._value = _toggle_bit(self._value, i, self.int_type)

    def get_bit(self, i: int) -> bool:
        return _get_bit(self._value, i, self.int_type)

    def set_bit_range(self, bounds: Bounds, bits: int) -> None:
        self._value = _set_bit_range(self._value, bounds, bits, self.int_type)

    def get_bit_range(self, bounds: Bounds) -> int:
        return _get_bit_range(self._value, bounds, self.int_type)


class _Field:
    """Attribute access to one declared field of a BitField."""

    def __init__(self, spec: FieldSpec) -> None:
        self.spec = spec

    def __get__(self, obj, owner=None):
        if obj is None:
            return self
        if self.spec.is_range:
            return obj.get_bit_range(self.spec.bits)
        return obj.get_bit(self.spec.bits)

    def __set__(self, obj, value) -> None:
        if not self.spec.mutable:
            raise AttributeError(f"field {self.spec.name!r} is read-only")
        if self.spec.is_range:
            obj.set_bit_range(self.spec.bits, value)
        elif value:
            obj.set_bit(self.spec.bits)
        else:
            obj.clear_bit(self.spec.bits)


def _check_identifier(name: str, what: str) -> None:
    if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
        raise BitfieldSyntaxError(f"invalid {what} name {name!r}")


def _bound_numbers(bits: Union[int, Bounds]) -> Iterable[Optional[int]]:
    if isinstance(bits, int):
        return (bits,)
    if isinstance(bits, (range, slice)):
        return (bits.start, bits.stop)
    if isinstance(bits, tuple) and len(bits) == 2:
        return bits
    raise BitfieldSyntaxError(f"unsupported bit range {bits!r}")


def make_bitfield(name: str, int_type: Union[IntType, str], fields: Iterable[FieldSpec]) -> type:
    """Create a BitField subclass called ``name`` with the given fields."""
    _check_identifier(name, "type")
    if isinstance(int_type, str):
        try:
            int_type = IntType.from_name(int_type)
        except ValueError as exc:
            raise BitfieldSyntaxError(str(exc)) from None
    fields = tuple(fields)
    namespace: Dict[str, object] = {"__slots__": (), "int_type": int_type, "fields": fields}
    for spec in fields:
        _check_identifier(spec.name, "field")
        if spec.name in namespace or hasattr(BitField, spec.name):
            raise BitfieldSyntaxError(f"duplicate or reserved field name {spec.name!r}")
        for number in _bound_numbers(spec.bits):
            if number is not None and not int_type.contains(number):
                raise BitfieldSyntaxError(
                    f"literal {number} of field {spec.name!r} does not fit in {int_type}"
                )
        namespace[spec.name] = _Field(spec)
    return type(name, (BitField,), namespace)


class _Token(NamedTuple):
    kind: str
    text: str
    pos: int


_LITERAL = r"0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+|[0-9][0-9_]*"
_TOKEN_RE = re.compile(
    rf"(?P<ws>\s+|//[^\n]*)"
    rf"|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)"
    rf"|(?P<lit>{_LITERAL})"
    rf"|(?P<punct>[=:;.\[\]{{}}])"
)
_RANGE_RE = re.compile(rf"(?P<start>{_LITERAL})?\.\.(?P<incl>=)?(?P<end>{_LITERAL})?")


def _tokenize(text: str) -> List[_Token]:
    tokens = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise BitfieldSyntaxError(f"unexpected character {text[pos]!r} at {pos}")
        if match.lastgroup != "ws":
            tokens.append(_Token(match.lastgroup, match.group(), pos))
        pos = match.end()
    return tokens


def _parse_int(text: str) -> int:
    digits = text.replace("_", "")
    bases = {"0x": 16, "0o": 8, "0b": 2}
    base = bases.get(digits[:2].lower(), 10)
    if base != 10:
        digits = digits[2:]
    try:
        return int(digits, base)
    except ValueError:
        raise BitfieldSyntaxError(f"invalid integer literal {text!r}") from None


class _Parser:
    def __init__(self, tokens: List[_Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def peek(self) -> Optional[_Token]:
        return None if self.at_end() else self._tokens[self._pos]

    def advance(self) -> _Token:
        token = self.peek()
        if token is None:
            raise BitfieldSyntaxError("unexpected end of input")
        self._pos += 1
        return token

    def expect(self, kind: str) -> str:
        token = self.peek()
        if token is None:
            raise BitfieldSyntaxError(f"unexpected end of input, wanted {kind}")
        if token.kind != kind:
            raise BitfieldSyntaxError(f"expected {kind}, found {token.text!r} at {token.pos}")
        self._pos += 1
        return token.text

    def check_punct(self, char: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == "punct" and token.text == char

    def expect_punct(self, char: str) -> None:
        text = self.expect("punct") if not self.at_end() else self.advance().text
        if text != char:
            raise BitfieldSyntaxError(f"expected {char!r}, found {text!r}")

    def field(self) -> FieldSpec:
        name = self.expect("ident")
        self.expect_punct(":")
        parts = []
        while True:
            token = self.peek()
            if token is None or not (
                token.kind == "lit" or (token.kind == "punct" and token.text in ".=")
            ):
                break
            parts.append(self.advance())
        bits = _field_bits(name, parts)
        mutable = True
        if self.check_punct("["):
            self.advance()
            word = self.expect("ident")
            if word != "mut":
                raise BitfieldSyntaxError(f"expected 'mut', found {word!r}")
            self.expect_punct("=")
            flag = self.expect("ident")
            if flag not in ("true", "false"):
                raise BitfieldSyntaxError(f"expected 'true' or 'false', found {flag!r}")
            mutable = flag == "true"
            self.expect_punct("]")
        self.expect_punct(";")
        return FieldSpec(name, bits, mutable)


def _field_bits(name: str, parts: List[_Token]) -> Union[int, Bounds]:
    if not parts:
        raise BitfieldSyntaxError(f"field {name!r} needs a bit index or range")
    if len(parts) == 1:
        if parts[0].kind != "lit":
            raise BitfieldSyntaxError(f"invalid bit index {parts[0].text!r} for {name!r}")
        return _parse_int(parts[0].text)
    text = "".join(token.text for token in parts)
    match = _RANGE_RE.fullmatch(text)
    if match is None:
        raise BitfieldSyntaxError(f"invalid bit range {text!r} for {name!r}")
    start = None if match["start"] is None else _parse_int(match["start"])
    end = None if match["end"] is None else _parse_int(match["end"])
    if match["incl"]:
        if end is None:
            raise BitfieldSyntaxError(f"inclusive range for {name!r} needs an end")
        return (start, end)
    return slice(start, end)


def parse_bitfields(text: str) -> List[Tuple[str, IntType, Tuple[FieldSpec, ...]]]:
    """Parse declarations into ``(name, int_type, fields)`` triples."""
    parser = _Parser(_tokenize(text))
    declarations = []
    while not parser.at_end():
        name = parser.expect("ident")
        parser.expect_punct("=")
        type_name = parser.expect("ident")
        try:
            int_type = IntType.from_name(type_name)
        except ValueError as exc:
            raise BitfieldSyntaxError(str(exc)) from None
        parser.expect_punct("{")
        fields = []
        while not parser.check_punct("}"):
            fields.append(parser.field())
        parser.expect_punct("}")
        declarations.append((name, int_type, tuple(fields)))
    return declarations


def bitfield(text: str) -> Dict[str, type]:
    """Declare bit-field types from text; returns them by name, in order."""
    classes: Dict[str, type] = {}
    for name, int_type, fields in parse_bitfields(text):
        if name in classes:
            raise BitfieldSyntaxError(f"bit field {name!r} declared twice")
        classes[name] = make_bitfield(name, int_type, fields)
    return classes