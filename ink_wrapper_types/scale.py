"""
ink_wrapper_types.scale
=======================

SCALE codec used by generated contract bindings.

Conventions (parity-scale-codec compatible):

- uN / iN:            fixed width, little-endian (two's complement for iN)
- bool:               1 byte (0x00 / 0x01)
- char:               u32 Unicode scalar value
- compact:            2-bit mode tag in the low bits of the first byte
                        0b00  single byte,  value < 2**6
                        0b01  two bytes,    value < 2**14
                        0b10  four bytes,   value < 2**30
                        0b11  big integer,  (len - 4) in the upper 6 bits
- str / Vec<T>:       compact(len) || items
- [T; N]:             items, no length prefix
- Option<T>:          0x00 | 0x01 || T   (Option<bool> included: 0x01 0x01 is Some(true))
- Result<T, E>:       0x00 || T | 0x01 || E
- enum:               u8 variant index || fields
- BTreeMap<K, V>:     compact(len) || (K || V)* in key order

Every codec exposes ``encode_to(value, buf)`` and ``decode_from(data, offset)
-> (value, new_offset)``; ``encode``/``decode`` are the whole-buffer wrappers.
Declared contract types subclass `Struct` or `Enum`, which makes the class
itself usable wherever a codec is expected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (Any, Callable, ClassVar, Dict, Generic, List, Mapping,
                    Optional, Sequence, Tuple, TypeVar)

from .errors import DecodeError, EncodeError
from .result import Err, Ok

__all__ = [
    "Codec",
    "IntCodec",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "U256",
    "I8",
    "I16",
    "I32",
    "I64",
    "I128",
    "I256",
    "BOOL",
    "CHAR",
    "STR",
    "UNIT",
    "BYTES",
    "Compact",
    "encode_compact",
    "decode_compact",
    "CompactCodec",
    "TupleCodec",
    "ArrayCodec",
    "FixedBytesCodec",
    "SequenceCodec",
    "OptionCodec",
    "ResultCodec",
    "MapCodec",
    "StructCodec",
    "EnumCodec",
    "Struct",
    "Enum",
]

T = TypeVar("T")

Fields = Sequence[Tuple[str, Any]]


def _take(data: bytes, offset: int, n: int) -> Tuple[bytes, int]:
    end = offset + n
    if end > len(data):
        raise DecodeError(
            f"truncated input: need {n} byte(s) at offset {offset}, have {len(data) - offset}"
        )
    return data[offset:end], end


# ──────────────────────────────────────────────────────────────────────────────
# Base
# ──────────────────────────────────────────────────────────────────────────────


class Codec:
    """Encoder/decoder for one SCALE shape."""

    def encode_to(self, value: Any, buf: bytearray) -> None:
        raise NotImplementedError

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[Any, int]:
        raise NotImplementedError

    def encode(self, value: Any) -> bytes:
        buf = bytearray()
        self.encode_to(value, buf)
        return bytes(buf)

    def decode(self, data: bytes) -> Any:
        data = bytes(data)
        value, offset = self.decode_from(data, 0)
        if offset != len(data):
            raise DecodeError(f"{len(data) - offset} trailing byte(s) after {self!r}")
        return value


# ──────────────────────────────────────────────────────────────────────────────
# Primitives
# ──────────────────────────────────────────────────────────────────────────────


class IntCodec(Codec):
    def __init__(self, bits: int, signed: bool) -> None:
        self.bits = bits
        self.signed = signed
        self.size = bits // 8
        if signed:
            self.min = -(1 << (bits - 1))
            self.max = (1 << (bits - 1)) - 1
        else:
            self.min = 0
            self.max = (1 << bits) - 1

    def __repr__(self) -> str:
        return f"{'i' if self.signed else 'u'}{self.bits}"

    def check(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodeError(f"{self!r} expects int, got {type(value).__name__}")
        if not self.min <= value <= self.max:
            raise EncodeError(f"{value} out of range for {self!r}")
        return value

    def encode_to(self, value: Any, buf: bytearray) -> None:
        buf += self.check(value).to_bytes(self.size, "little", signed=self.signed)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[int, int]:
        raw, offset = _take(data, offset, self.size)
        return int.from_bytes(raw, "little", signed=self.signed), offset


U8 = IntCodec(8, False)
U16 = IntCodec(16, False)
U32 = IntCodec(32, False)
U64 = IntCodec(64, False)
U128 = IntCodec(128, False)
U256 = IntCodec(256, False)
I8 = IntCodec(8, True)
I16 = IntCodec(16, True)
I32 = IntCodec(32, True)
I64 = IntCodec(64, True)
I128 = IntCodec(128, True)
I256 = IntCodec(256, True)


class _BoolCodec(Codec):
    def __repr__(self) -> str:
        return "bool"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if not isinstance(value, bool):
            raise EncodeError(f"bool expects bool, got {type(value).__name__}")
        buf.append(1 if value else 0)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[bool, int]:
        raw, offset = _take(data, offset, 1)
        if raw[0] > 1:
            raise DecodeError(f"invalid bool byte 0x{raw[0]:02x}")
        return raw[0] == 1, offset


class _CharCodec(Codec):
    def __repr__(self) -> str:
        return "char"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if not isinstance(value, str) or len(value) != 1:
            raise EncodeError(f"char expects a 1-character str, got {value!r}")
        U32.encode_to(ord(value), buf)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[str, int]:
        point, offset = U32.decode_from(data, offset)
        if point > 0x10FFFF or 0xD800 <= point <= 0xDFFF:
            raise DecodeError(f"invalid char code point {point:#x}")
        return chr(point), offset


class _StrCodec(Codec):
    def __repr__(self) -> str:
        return "str"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if not isinstance(value, str):
            raise EncodeError(f"str expects str, got {type(value).__name__}")
        raw = value.encode("utf-8")
        encode_compact(len(raw), buf)
        buf += raw

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[str, int]:
        n, offset = decode_compact(data, offset)
        raw, offset = _take(data, offset, n)
        try:
            return raw.decode("utf-8"), offset
        except UnicodeDecodeError as e:
            raise DecodeError(f"invalid utf-8 in str: {e}") from e


class _UnitCodec(Codec):
    """``()`` on the wire, ``None`` in Python."""

    def __repr__(self) -> str:
        return "()"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if value not in (None, ()):
            raise EncodeError(f"() expects None, got {value!r}")

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[None, int]:
        return None, offset


class _BytesCodec(Codec):
    """``Vec<u8>`` as ``bytes``."""

    def __repr__(self) -> str:
        return "Vec<u8>"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodeError(f"Vec<u8> expects bytes, got {type(value).__name__}")
        raw = bytes(value)
        encode_compact(len(raw), buf)
        buf += raw

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[bytes, int]:
        n, offset = decode_compact(data, offset)
        return _take(data, offset, n)


BOOL = _BoolCodec()
CHAR = _CharCodec()
STR = _StrCodec()
UNIT = _UnitCodec()
BYTES = _BytesCodec()


# ──────────────────────────────────────────────────────────────────────────────
# Compact integers
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Compact(Generic[T]):
    """A value carried in SCALE compact form."""

    value: T

    def __int__(self) -> int:
        return int(self.value)  # type: ignore[call-overload]

    def __index__(self) -> int:
        return int(self.value)  # type: ignore[call-overload]


_COMPACT_MAX = (1 << (8 * 67)) - 1


def encode_compact(n: int, buf: bytearray) -> None:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise EncodeError(f"compact expects a non-negative int, got {n!r}")
    if n < 1 << 6:
        buf.append(n << 2)
    elif n < 1 << 14:
        buf += ((n << 2) | 0b01).to_bytes(2, "little")
    elif n < 1 << 30:
        buf += ((n << 2) | 0b10).to_bytes(4, "little")
    else:
        if n > _COMPACT_MAX:
            raise EncodeError(f"{n} too large for compact encoding")
        size = max(4, (n.bit_length() + 7) // 8)
        buf.append(((size - 4) << 2) | 0b11)
        buf += n.to_bytes(size, "little")


def decode_compact(data: bytes, offset: int = 0) -> Tuple[int, int]:
    head, _ = _take(data, offset, 1)
    mode = head[0] & 0b11
    if mode == 0b00:
        return head[0] >> 2, offset + 1
    if mode == 0b01:
        raw, offset = _take(data, offset, 2)
        n = int.from_bytes(raw, "little") >> 2
        if n < 1 << 6:
            raise DecodeError("non-canonical compact (two-byte mode)")
        return n, offset
    if mode == 0b10:
        raw, offset = _take(data, offset, 4)
        n = int.from_bytes(raw, "little") >> 2
        if n < 1 << 14:
            raise DecodeError("non-canonical compact (four-byte mode)")
        return n, offset
    size = (head[0] >> 2) + 4
    raw, offset = _take(data, offset + 1, size)
    if raw[-1] == 0:
        raise DecodeError("non-canonical compact (big-integer mode, trailing zero)")
    n = int.from_bytes(raw, "little")
    if n < 1 << 30:
        raise DecodeError("non-canonical compact (big-integer mode)")
    return n, offset


class CompactCodec(Codec):
    """``Compact<T>``; encodes `Compact` or plain ints, decodes to `Compact`."""

    def __init__(self, inner: Codec) -> None:
        self.inner = inner

    def __repr__(self) -> str:
        return f"Compact<{self.inner!r}>"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        n = value.value if isinstance(value, Compact) else value
        if isinstance(self.inner, IntCodec):
            self.inner.check(n)
        encode_compact(n, buf)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[Compact, int]:
        n, offset = decode_compact(data, offset)
        if isinstance(self.inner, IntCodec) and n > self.inner.max:
            raise DecodeError(f"compact value {n} out of range for {self.inner!r}")
        return Compact(n), offset


# ──────────────────────────────────────────────────────────────────────────────
# Containers
# ──────────────────────────────────────────────────────────────────────────────


class TupleCodec(Codec):
    def __init__(self, *items: Codec) -> None:
        self.items = items

    def __repr__(self) -> str:
        return "(" + ", ".join(repr(c) for c in self.items) + ")"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if not isinstance(value, (tuple, list)) or len(value) != len(self.items):
            raise EncodeError(f"{self!r} expects a {len(self.items)}-tuple, got {value!r}")
        for codec, item in zip(self.items, value):
            codec.encode_to(item, buf)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[tuple, int]:
        out = []
        for codec in self.items:
            item, offset = codec.decode_from(data, offset)
            out.append(item)
        return tuple(out), offset


class ArrayCodec(Codec):
    """``[T; N]``: exactly N items, no length prefix."""

    def __init__(self, item: Codec, length: int) -> None:
        self.item = item
        self.length = length

    def __repr__(self) -> str:
        return f"[{self.item!r}; {self.length}]"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if len(value) != self.length:
            raise EncodeError(f"{self!r} expects {self.length} items, got {len(value)}")
        for item in value:
            self.item.encode_to(item, buf)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[List[Any], int]:
        out = []
        for _ in range(self.length):
            item, offset = self.item.decode_from(data, offset)
            out.append(item)
        return out, offset


class FixedBytesCodec(Codec):
    """``[u8; N]`` as ``bytes`` (or ``factory(bytes)`` on decode)."""

    def __init__(self, length: int, factory: Optional[Callable[[bytes], Any]] = None) -> None:
        self.length = length
        self.factory = factory

    def __repr__(self) -> str:
        return f"[u8; {self.length}]"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodeError(f"{self!r} expects bytes, got {type(value).__name__}")
        raw = bytes(value)
        if len(raw) != self.length:
            raise EncodeError(f"{self!r} expects {self.length} bytes, got {len(raw)}")
        buf += raw

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[Any, int]:
        raw, offset = _take(data, offset, self.length)
        return (self.factory(raw) if self.factory else raw), offset


class SequenceCodec(Codec):
    """``Vec<T>``: compact length prefix followed by the items."""

    def __init__(self, item: Codec) -> None:
        self.item = item

    def __repr__(self) -> str:
        return f"Vec<{self.item!r}>"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        items = list(value)
        encode_compact(len(items), buf)
        for item in items:
            self.item.encode_to(item, buf)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[List[Any], int]:
        n, offset = decode_compact(data, offset)
        # every item takes at least one byte unless it is zero-sized
        if n > len(data) - offset and self.item is not UNIT:
            raise DecodeError(f"sequence length {n} exceeds remaining input")
        out = []
        for _ in range(n):
            item, offset = self.item.decode_from(data, offset)
            out.append(item)
        return out, offset


class OptionCodec(Codec):
    """``Option<T>`` as ``None`` / value."""

    def __init__(self, inner: Codec) -> None:
        self.inner = inner

    def __repr__(self) -> str:
        return f"Option<{self.inner!r}>"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if value is None:
            buf.append(0)
        else:
            buf.append(1)
            self.inner.encode_to(value, buf)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[Any, int]:
        raw, offset = _take(data, offset, 1)
        tag = raw[0]
        if tag == 0:
            return None, offset
        if tag == 1:
            return self.inner.decode_from(data, offset)
        raise DecodeError(f"invalid Option tag 0x{tag:02x}")


class ResultCodec(Codec):
    """``Result<T, E>`` as `Ok` / `Err`."""

    def __init__(self, ok: Codec, err: Codec) -> None:
        self.ok = ok
        self.err = err

    def __repr__(self) -> str:
        return f"Result<{self.ok!r}, {self.err!r}>"

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if isinstance(value, Ok):
            buf.append(0)
            self.ok.encode_to(value.value, buf)
        elif isinstance(value, Err):
            buf.append(1)
            self.err.encode_to(value.error, buf)
        else:
            raise EncodeError(f"{self!r} expects Ok or Err, got {type(value).__name__}")

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[Any, int]:
        raw, offset = _take(data, offset, 1)
        if raw[0] == 0:
            value, offset = self.ok.decode_from(data, offset)
            return Ok(value), offset
        if raw[0] == 1:
            error, offset = self.err.decode_from(data, offset)
            return Err(error), offset
        raise DecodeError(f"invalid Result tag 0x{raw[0]:02x}")


def _hashable_key(key: Any) -> Any:
    """Decoded ``Vec`` keys come back as lists; use tuples so they can key a dict."""
    if isinstance(key, list):
        return tuple(_hashable_key(k) for k in key)
    return key


class MapCodec(Codec):
    """
    ``BTreeMap<K, V>`` as ``dict``.

    Entries are written in key order, or in encoded-key order when the keys
    do not compare (declared structs and enums). A decoded map whose keys
    cannot be hashed even as tuples is returned as a list of ``(key, value)``
    pairs, which `encode_to` also accepts.
    """

    def __init__(self, key: Codec, value: Codec) -> None:
        self.key = key
        self.value = value

    def __repr__(self) -> str:
        return f"BTreeMap<{self.key!r}, {self.value!r}>"

    def _sort_key(self, pair: Tuple[Any, Any]) -> bytes:
        buf = bytearray()
        self.key.encode_to(pair[0], buf)
        return bytes(buf)

    def encode_to(self, value: Any, buf: bytearray) -> None:
        pairs = list(value.items()) if isinstance(value, Mapping) else [tuple(kv) for kv in value]
        try:
            pairs.sort(key=lambda kv: kv[0])
        except TypeError:
            pairs.sort(key=self._sort_key)
        encode_compact(len(pairs), buf)
        for k, v in pairs:
            self.key.encode_to(k, buf)
            self.value.encode_to(v, buf)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[Any, int]:
        n, offset = decode_compact(data, offset)
        if n > len(data) - offset:
            raise DecodeError(f"map length {n} exceeds remaining input")
        pairs: List[Tuple[Any, Any]] = []
        for _ in range(n):
            k, offset = self.key.decode_from(data, offset)
            v, offset = self.value.decode_from(data, offset)
            pairs.append((_hashable_key(k), v))
        try:
            return dict(pairs), offset
        except TypeError:
            return pairs, offset


# ──────────────────────────────────────────────────────────────────────────────
# Declared types
# ──────────────────────────────────────────────────────────────────────────────


def _encode_fields(fields: Fields, value: Any, buf: bytearray) -> None:
    for name, codec in fields:
        try:
            item = getattr(value, name)
        except AttributeError as e:
            raise EncodeError(f"{type(value).__name__} has no field {name!r}") from e
        codec.encode_to(item, buf)


def _decode_fields(fields: Fields, data: bytes, offset: int) -> Tuple[Dict[str, Any], int]:
    values: Dict[str, Any] = {}
    for name, codec in fields:
        values[name], offset = codec.decode_from(data, offset)
    return values, offset


class StructCodec(Codec):
    """
    Record layout for a declared class. The layout may be bound after
    construction so mutually recursive types can refer to each other.
    """

    def __init__(self, cls: type, fields: Optional[Fields] = None) -> None:
        self.cls = cls
        self.fields: Optional[Tuple[Tuple[str, Any], ...]] = None
        if fields is not None:
            self.bind(fields)

    def __repr__(self) -> str:
        return self.cls.__qualname__

    def bind(self, fields: Fields) -> "StructCodec":
        self.fields = tuple(fields)
        return self

    def _layout(self) -> Tuple[Tuple[str, Any], ...]:
        if self.fields is None:
            raise TypeError(f"layout of {self!r} is not bound")
        return self.fields

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if not isinstance(value, self.cls):
            raise EncodeError(f"{self!r} expects {self.cls.__qualname__}, got {type(value).__name__}")
        _encode_fields(self._layout(), value, buf)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[Any, int]:
        values, offset = _decode_fields(self._layout(), data, offset)
        return self.cls(**values), offset


class EnumCodec(Codec):
    """Sum-type layout: one ``(alternative class, fields)`` entry per variant."""

    def __init__(self, cls: type, alternatives: Optional[Sequence[Tuple[type, Fields]]] = None) -> None:
        self.cls = cls
        self.by_index: Dict[int, Tuple[type, Tuple[Tuple[str, Any], ...]]] = {}
        self.by_class: Dict[type, int] = {}
        self.bound = False
        if alternatives is not None:
            self.bind(alternatives)

    def __repr__(self) -> str:
        return self.cls.__qualname__

    def bind(self, alternatives: Sequence[Tuple[type, Fields]]) -> "EnumCodec":
        for alt, fields in alternatives:
            index = getattr(alt, "__scale_index__", None)
            if index is None or not 0 <= index <= 255:
                raise TypeError(f"{alt!r} has no valid variant index")
            if index in self.by_index:
                raise TypeError(f"duplicate variant index {index} in {self!r}")
            self.by_index[index] = (alt, tuple(fields))
            self.by_class[alt] = index
        self.bound = True
        return self

    def encode_to(self, value: Any, buf: bytearray) -> None:
        if not self.bound:
            raise TypeError(f"layout of {self!r} is not bound")
        index = self.by_class.get(type(value))
        if index is None:
            raise EncodeError(f"{type(value).__qualname__} is not a variant of {self!r}")
        buf.append(index)
        _encode_fields(self.by_index[index][1], value, buf)

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[Any, int]:
        if not self.bound:
            raise TypeError(f"layout of {self!r} is not bound")
        raw, offset = _take(data, offset, 1)
        entry = self.by_index.get(raw[0])
        if entry is None:
            raise DecodeError(f"unknown variant index {raw[0]} for {self!r}")
        alt, fields = entry
        values, offset = _decode_fields(fields, data, offset)
        return alt(**values), offset


class _Declared:
    __scale_codec__: ClassVar[Optional[Codec]] = None

    def __class_getitem__(cls, params: Any) -> type:
        # generic annotations like ``Pair[int, bool]`` name the declared class
        return cls

    @classmethod
    def _codec(cls) -> Codec:
        codec = cls.__scale_codec__
        if codec is None:
            raise TypeError(
                f"{cls.__qualname__} is generic; use the codec of a concrete instantiation"
            )
        return codec

    @classmethod
    def encode_to(cls, value: Any, buf: bytearray) -> None:
        cls._codec().encode_to(value, buf)

    @classmethod
    def decode_from(cls, data: bytes, offset: int = 0) -> Tuple[Any, int]:
        return cls._codec().decode_from(data, offset)

    @classmethod
    def decode(cls, data: bytes) -> Any:
        return cls._codec().decode(data)

    def encode(self) -> bytes:
        return type(self)._codec().encode(self)


class Struct(_Declared):
    """Base for declared record types (usually dataclasses)."""

    @classmethod
    def layout(cls, fields: Fields) -> None:
        cls.__scale_codec__ = StructCodec(cls, fields)


class Enum(_Declared):
    """
    Base for declared sum types. Each alternative is a subclass registered
    with `alternative`; `layout` binds the wire layout once all of them exist.
    """

    __scale_index__: ClassVar[Optional[int]] = None

    @classmethod
    def alternative(cls, name: str, index: int) -> Callable[[type], type]:
        def register(alt: type) -> type:
            alt.__name__ = name
            alt.__qualname__ = f"{cls.__qualname__}.{name}"
            alt.__scale_index__ = index  # type: ignore[attr-defined]
            setattr(cls, name, alt)
            return alt

        return register

    @classmethod
    def layout(cls, alternatives: Sequence[Tuple[type, Fields]]) -> None:
        cls.__scale_codec__ = EnumCodec(cls, alternatives)
