import pytest
from hypothesis import given, strategies as st

from bitfi.inttypes import IntType

ALL_NAMES = [
    "u8",
    "u16",
    "u32",
    "u64",
    "u128",
    "i8",
    "i16",
    "i32",
    "i64",
    "i128",
    "usize",
    "isize",
]


@pytest.mark.parametrize(
    "name, size",
    [
        ("u8", 8),
        ("u16", 16),
        ("u32", 32),
        ("u64", 64),
        ("u128", 128),
        ("i8", 8),
        ("i16", 16),
        ("i32", 32),
        ("i64", 64),
        ("i128", 128),
    ],
)
def test_bit_sizes(name, size):
    assert IntType.from_name(name).bit_size == size


def test_one_and_zero():
    u16 = IntType.from_name("u16")
    assert u16 is IntType.U16
    assert u16.one == 1
    assert u16.zero == 0


def test_pointer_sized_types_agree():
    usize = IntType.from_name("usize")
    isize = IntType.from_name("isize")
    assert usize.bits == isize.bits
    assert usize.bits % 8 == 0
    assert isize.signed and not usize.signed


@pytest.mark.parametrize("int_type", list(IntType))
def test_from_name_round_trip(int_type):
    assert IntType.from_name(str(int_type)) is int_type


def test_from_name_unknown():
    with pytest.raises(ValueError):
        IntType.from_name("f32")


@pytest.mark.parametrize("name", ALL_NAMES)
def test_range_span(name):
    int_type = IntType.from_name(name)
    assert int_type.max - int_type.min + 1 == 2 ** int_type.bits
    assert (int_type.min < 0) == int_type.signed


@pytest.mark.parametrize("name", ALL_NAMES)
def test_wrap_at_limits(name):
    int_type = IntType.from_name(name)
    assert int_type.wrap(int_type.max + 1) == int_type.min
    assert int_type.wrap(int_type.min - 1) == int_type.max


@pytest.mark.parametrize("name", ALL_NAMES)
def test_check_rejects_out_of_range(name):
    int_type = IntType.from_name(name)
    assert int_type.check(int_type.max) == int_type.max
    with pytest.raises(OverflowError):
        int_type.check(int_type.max + 1)
    with pytest.raises(OverflowError):
        int_type.check(int_type.min - 1)


def test_check_rejects_non_integers():
    with pytest.raises(TypeError):
        IntType.U8.check(1.5)


@given(st.sampled_from(ALL_NAMES), st.integers(-(2**200), 2**200))
def test_wrap_properties(name, value):
    int_type = IntType.from_name(name)
    wrapped = int_type.wrap(value)
    assert int_type.contains(wrapped)
    assert (wrapped - value) % (2 ** int_type.bits) == 0
    assert int_type.wrap(wrapped) == wrapped