from __future__ import annotations

from dataclasses import dataclass

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ink_wrapper_types import (AccountId, Compact, DecodeError, EncodeError,
                               Err, InkLangError, LangError, Ok, scale)

# ---------- integers ----------


@pytest.mark.parametrize(
    "codec, value, raw",
    [
        (scale.U8, 255, b"\xff"),
        (scale.U16, 0x0102, b"\x02\x01"),
        (scale.U32, 7, b"\x07\x00\x00\x00"),
        (scale.I8, -1, b"\xff"),
        (scale.I32, -2, b"\xfe\xff\xff\xff"),
        (scale.U128, 1, b"\x01" + b"\x00" * 15),
    ],
)
def test_fixed_width_ints(codec, value, raw):
    assert codec.encode(value) == raw
    assert codec.decode(raw) == value


@pytest.mark.parametrize("codec, value", [(scale.U8, 256), (scale.U8, -1), (scale.I8, 128), (scale.U32, True), (scale.U32, "1")])
def test_int_rejects(codec, value):
    with pytest.raises(EncodeError):
        codec.encode(value)


@given(st.integers(min_value=-(1 << 127), max_value=(1 << 127) - 1))
def test_i128_roundtrip(n):
    assert scale.I128.decode(scale.I128.encode(n)) == n


# ---------- compact ----------


@pytest.mark.parametrize(
    "n, raw",
    [
        (0, b"\x00"),
        (1, b"\x04"),
        (63, b"\xfc"),
        (64, b"\x01\x01"),
        (16383, b"\xfd\xff"),
        (16384, b"\x02\x00\x01\x00"),
        ((1 << 30) - 1, b"\xfe\xff\xff\xff"),
        (1 << 30, b"\x03\x00\x00\x00\x40"),
        ((1 << 32) - 1, b"\x03\xff\xff\xff\xff"),
        (1 << 32, b"\x07\x00\x00\x00\x00\x01"),
    ],
)
def test_compact_vectors(n, raw):
    buf = bytearray()
    scale.encode_compact(n, buf)
    assert bytes(buf) == raw
    assert scale.decode_compact(raw) == (n, len(raw))


@pytest.mark.parametrize("raw", [b"\x01\x00", b"\x02\x00\x00\x00", b"\x03\xff\xff\xff\x00", b"\x07\x00\x00\x00\x01\x00"])
def test_compact_rejects_non_canonical(raw):
    with pytest.raises(DecodeError, match="non-canonical"):
        scale.decode_compact(raw)


@given(st.integers(min_value=0, max_value=(1 << 200)))
def test_compact_roundtrip(n):
    buf = bytearray()
    scale.encode_compact(n, buf)
    assert scale.decode_compact(bytes(buf)) == (n, len(buf))


def test_compact_codec():
    codec = scale.CompactCodec(scale.U8)
    assert codec.encode(Compact(3)) == b"\x0c"
    assert codec.encode(3) == b"\x0c"
    assert codec.decode(b"\x0c") == Compact(3)
    with pytest.raises(EncodeError):
        codec.encode(256)
    with pytest.raises(DecodeError, match="out of range"):
        codec.decode(b"\x01\x04")


# ---------- simple shapes ----------


def test_bool_and_unit():
    assert scale.BOOL.encode(True) == b"\x01"
    with pytest.raises(DecodeError):
        scale.BOOL.decode(b"\x02")
    with pytest.raises(EncodeError):
        scale.BOOL.encode(1)
    assert scale.UNIT.encode(None) == b""
    assert scale.UNIT.decode(b"") is None


def test_str_and_char():
    assert scale.STR.encode("hi") == b"\x08hi"
    assert scale.STR.decode(b"\x08hi") == "hi"
    assert scale.CHAR.encode("a") == b"a\x00\x00\x00"
    with pytest.raises(DecodeError, match="utf-8"):
        scale.STR.decode(b"\x04\xff")
    with pytest.raises(DecodeError, match="code point"):
        scale.CHAR.decode(b"\x00\xd8\x00\x00")


def test_bytes():
    assert scale.BYTES.encode(b"abc") == b"\x0cabc"
    assert scale.BYTES.decode(b"\x0cabc") == b"abc"
    assert scale.FixedBytesCodec(2).encode(b"ab") == b"ab"
    with pytest.raises(EncodeError):
        scale.FixedBytesCodec(2).encode(b"abc")


def test_trailing_bytes_and_truncation():
    with pytest.raises(DecodeError, match="trailing"):
        scale.U8.decode(b"\x01\x02")
    with pytest.raises(DecodeError, match="truncated"):
        scale.U32.decode(b"\x01\x02")
    with pytest.raises(DecodeError, match="exceeds remaining input"):
        scale.SequenceCodec(scale.U8).decode(b"\x10\x00")


# ---------- containers ----------


def test_tuple_array_sequence():
    pair = scale.TupleCodec(scale.U8, scale.BOOL)
    assert pair.encode((1, True)) == b"\x01\x01"
    assert pair.decode(b"\x01\x01") == (1, True)
    assert scale.ArrayCodec(scale.U16, 2).encode([1, 2]) == b"\x01\x00\x02\x00"
    with pytest.raises(EncodeError):
        scale.ArrayCodec(scale.U16, 2).encode([1])
    assert scale.SequenceCodec(scale.U16).decode(b"\x08\x01\x00\x02\x00") == [1, 2]


def test_option():
    opt = scale.OptionCodec(scale.U32)
    assert opt.encode(None) == b"\x00"
    assert opt.encode(5) == b"\x01\x05\x00\x00\x00"
    assert opt.decode(b"\x01\x05\x00\x00\x00") == 5
    with pytest.raises(DecodeError):
        opt.decode(b"\x02")


def test_option_bool_uses_generic_layout():
    opt = scale.OptionCodec(scale.BOOL)
    assert [opt.encode(v) for v in (None, True, False)] == [b"\x00", b"\x01\x01", b"\x01\x00"]
    assert [opt.decode(raw) for raw in (b"\x00", b"\x01\x01", b"\x01\x00")] == [None, True, False]
    with pytest.raises(DecodeError):
        opt.decode(b"\x02")


def test_result():
    res = scale.ResultCodec(scale.U8, scale.STR)
    assert res.encode(Ok(1)) == b"\x00\x01"
    assert res.encode(Err("no")) == b"\x01\x08no"
    assert res.decode(b"\x01\x08no") == Err("no")
    with pytest.raises(EncodeError):
        res.encode(1)


def test_map_is_key_ordered():
    m = scale.MapCodec(scale.U8, scale.BOOL)
    assert m.encode({2: True, 1: False}) == b"\x08\x01\x00\x02\x01"
    assert m.decode(b"\x08\x01\x00\x02\x01") == {1: False, 2: True}


# ---------- declared types ----------


@dataclass(frozen=True)
class Point(scale.Struct):
    x: int
    y: int


Point.layout([("x", scale.I16), ("y", scale.I16)])


class Shape(scale.Enum):
    pass


@Shape.alternative("Empty", 0)
@dataclass(frozen=True)
class _Shape_Empty(Shape):
    pass


@Shape.alternative("Dot", 3)
@dataclass(frozen=True)
class _Shape_Dot(Shape):
    at: Point


Shape.layout([(_Shape_Empty, []), (_Shape_Dot, [("at", Point)])])


def test_struct():
    p = Point(x=1, y=-1)
    assert p.encode() == b"\x01\x00\xff\xff"
    assert Point.decode(b"\x01\x00\xff\xff") == p
    assert scale.SequenceCodec(Point).encode([p]) == b"\x04\x01\x00\xff\xff"
    with pytest.raises(EncodeError, match="expects Point"):
        Point.encode_to("nope", bytearray())


def test_enum():
    assert Shape.Dot is _Shape_Dot
    assert Shape.Dot.__qualname__ == "Shape.Dot"
    dot = Shape.Dot(at=Point(x=2, y=3))
    assert dot.encode() == b"\x03\x02\x00\x03\x00"
    assert Shape.decode(b"\x03\x02\x00\x03\x00") == dot
    assert Shape.decode(b"\x00") == Shape.Empty()
    with pytest.raises(DecodeError, match="unknown variant index 1"):
        Shape.decode(b"\x01")


def test_generic_struct_codecs():
    @dataclass(frozen=True)
    class Box(scale.Struct):
        inner: object

    small = scale.StructCodec(Box).bind([("inner", scale.U8)])
    large = scale.StructCodec(Box).bind([("inner", scale.U32)])
    assert small.encode(Box(inner=1)) == b"\x01"
    assert large.encode(Box(inner=1)) == b"\x01\x00\x00\x00"
    with pytest.raises(TypeError, match="generic"):
        Box(inner=1).encode()


def test_unbound_layout():
    codec = scale.EnumCodec(Shape)
    with pytest.raises(TypeError, match="not bound"):
        codec.decode(b"\x00")


def test_duplicate_variant_index():
    with pytest.raises(TypeError, match="duplicate variant index"):
        scale.EnumCodec(Shape).bind([(_Shape_Empty, []), (_Shape_Empty, [])])


@dataclass(frozen=True)
class Tagged(scale.Struct):
    tags: list


Tagged.layout([("tags", scale.SequenceCodec(scale.U8))])


def test_map_with_sequence_keys():
    m = scale.MapCodec(scale.SequenceCodec(scale.U32), scale.U8)
    raw = bytes([4, 4, 1, 0, 0, 0, 5])
    assert m.decode(raw) == {(1,): 5}
    assert m.encode({(1,): 5}) == raw


def test_map_with_declared_keys():
    points = scale.MapCodec(Point, scale.BOOL)
    raw = b"\x08" + b"\x01\x00\x00\x00\x00" + b"\x02\x00\x00\x00\x01"
    assert points.encode({Point(x=2, y=0): True, Point(x=1, y=0): False}) == raw
    assert points.decode(raw) == {Point(x=1, y=0): False, Point(x=2, y=0): True}
    assert scale.MapCodec(Shape, scale.U8).encode({Shape.Dot(at=Point(x=0, y=0)): 2, Shape.Empty(): 1}) == (
        b"\x08\x00\x01\x03\x00\x00\x00\x00\x02"
    )


def test_map_with_unhashable_keys_decodes_to_pairs():
    m = scale.MapCodec(Tagged, scale.U8)
    raw = b"\x04\x04\x01\x02"
    assert m.decode(raw) == [(Tagged(tags=[1]), 2)]
    assert m.encode([(Tagged(tags=[1]), 2)]) == raw


# ---------- framework types ----------


def test_account_id():
    acc = AccountId("0x" + "01" * 32)
    assert acc == b"\x01" * 32
    assert repr(acc) == "AccountId(0x" + "01" * 32 + ")"
    assert AccountId.SCALE.decode(b"\x01" * 32) == acc
    assert isinstance(AccountId.SCALE.decode(b"\x01" * 32), AccountId)
    with pytest.raises(ValueError):
        AccountId(b"\x01")


def test_ink_lang_error():
    err = InkLangError.decode(b"\x01")
    assert err == InkLangError(LangError.CouldNotReadInput())
    assert str(err) == "InkLangError(CouldNotReadInput)"
    assert InkLangError.encode(err) == b"\x01"
    with pytest.raises(DecodeError):
        InkLangError.decode(b"\x00")
