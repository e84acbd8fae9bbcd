import pytest

from bitfi.declare import (
    BitField,
    BitfieldSyntaxError,
    FieldSpec,
    bitfield,
    make_bitfield,
    parse_bitfields,
)
from bitfi.inttypes import IntType

SOURCE = """
TestBf = u16 {
    on: 2;
    love : 0 ..= 1;
}

TestB2 = u32 {
    love : 0 ..= 1;
    love2 : 2 ..= 4;
    war: 5 ..= 8 [mut = false];
}
"""


@pytest.fixture
def types():
    return bitfield(SOURCE)


def test_simple(types):
    bf = types["TestBf"]()
    for i in range(16):
        assert not bf.get_bit(i)
        bf.set_bit(i)
        assert bf.get_bit(i)


def test_ranges(types):
    bf = types["TestB2"](0)
    assert bf.love == 0
    bf.love = 0b11
    assert bf.love == 0b11
    bf.love = 0b10
    assert bf.love == 0b10
    bf.love = 0b01
    assert bf.love == 0b01
    bf.love2 = 0b101
    assert bf.inner == 0b10101


def test_read_only_field(types):
    bf = types["TestB2"](0)
    assert bf.war == 0
    with pytest.raises(AttributeError):
        bf.war = 1


def test_documented_example():
    flags = bitfield("Flags = u16 { on: 0; field1: 1 ..= 3; }")["Flags"]()
    assert not flags.on
    flags.on = True
    assert flags.on
    assert flags.field1 == 0
    flags.field1 = 0b101
    assert flags.field1 == 0b101
    assert flags.inner == 0b1011
    flags.on = False
    assert not flags.on


def test_parse_structure():
    (decl,) = parse_bitfields("S = u8 { a: 0; b: 1..3; c: ..=7 [mut = false]; }")
    name, int_type, fields = decl
    assert name == "S"
    assert int_type is IntType.U8
    assert fields == (
        FieldSpec("a", 0, True),
        FieldSpec("b", slice(1, 3), True),
        FieldSpec("c", (None, 7), False),
    )


def test_exclusive_range_field():
    bf = bitfield("S = u8 { b: 1..3; }")["S"]()
    bf.b = 0b11
    assert bf.inner == 0b110


def test_toggle_and_clear(types):
    bf = types["TestBf"]()
    bf.toggle_bit(2)
    assert bf.on
    bf.clear_bit(2)
    assert not bf.on


def test_inner_must_fit():
    cls = bitfield("S = u8 { a: 0; }")["S"]
    with pytest.raises(OverflowError):
        cls(256)


def test_base_class_needs_type():
    with pytest.raises(TypeError):
        BitField(0)


def test_equality(types):
    cls = types["TestBf"]
    assert cls(3) == cls(3)
    assert not cls(3) == cls(4)


def test_make_bitfield_direct():
    cls = make_bitfield("Pair", "u16", [FieldSpec("low", (0, 7)), FieldSpec("flag", 15)])
    value = cls()
    value.low = 0xAB
    value.flag = True
    assert value.low == 0xAB
    assert value.get_bit(15)
    assert cls.int_type is IntType.U16


@pytest.mark.parametrize(
    "text",
    [
        "S u8 { a: 0; }",
        "S = f32 { a: 0; }",
        "S = u8 { a: 0 }",
        "S = u8 { a 0; }",
        "S = u8 { a: ; }",
        "S = u8 { a: 0 [mut = maybe]; }",
        "S = u8 { a: 0 [const = true]; }",
        "S = u8 { a: 0..=; }",
        "S = u8 { a: 0; a: 1; }",
        "S = u8 { a: 300; }",
        "S = u8 { inner: 0; }",
        "S = u8 { a: 0; } S = u8 { b: 1; }",
        "S = u8 { a: 0;",
        "S = u8 { a: 0 # }",
    ],
)
def test_syntax_errors(text):
    with pytest.raises(BitfieldSyntaxError):
        bitfield(text)


def test_invalid_type_name():
    with pytest.raises(BitfieldSyntaxError):
        make_bitfield("not valid", IntType.U8, [])