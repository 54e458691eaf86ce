"""
Framework-owned types that generated bindings reference instead of
declaring: account identifiers, hashes and the ink! language error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Tuple, Union

from . import scale
from .errors import DecodeError

__all__ = ["AccountId", "Hash", "LangError", "InkLangError"]


class _Bytes32(bytes):
    SCALE: ClassVar[scale.Codec]

    def __new__(cls, value: Union[bytes, bytearray, memoryview, str]):
        if isinstance(value, str):
            s = value[2:] if value.startswith(("0x", "0X")) else value
            try:
                value = bytes.fromhex(s)
            except ValueError as e:
                raise ValueError(f"invalid hex for {cls.__name__}: {e}") from e
        raw = bytes(value)
        if len(raw) != 32:
            raise ValueError(f"{cls.__name__} must be 32 bytes, got {len(raw)}")
        return super().__new__(cls, raw)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(0x{self.hex()})"

    def __str__(self) -> str:
        return f"0x{self.hex()}"


class AccountId(_Bytes32):
    """32-byte account identifier (``ink_primitives::AccountId``)."""


class Hash(_Bytes32):
    """32-byte hash (``ink_primitives::Hash``)."""


AccountId.SCALE = scale.FixedBytesCodec(32, AccountId)
Hash.SCALE = scale.FixedBytesCodec(32, Hash)


class LangError(scale.Enum):
    """Errors the ink! dispatcher reports before a message body runs."""


@LangError.alternative("CouldNotReadInput", 1)
@dataclass(frozen=True)
class _CouldNotReadInput(LangError):
    pass


LangError.layout([(_CouldNotReadInput, ())])


class InkLangError(Exception):
    """
    Exception wrapper around `LangError`. References to the ink! language
    error in generated bindings resolve to this class, so an ``Err`` result can
    be raised directly. The class doubles as the codec for the wrapped value.
    """

    def __init__(self, error: LangError) -> None:
        super().__init__(error)
        self.error = error

    def __str__(self) -> str:
        return f"InkLangError({type(self.error).__name__})"

    __repr__ = __str__

    def __eq__(self, other: object) -> bool:
        return isinstance(other, InkLangError) and other.error == self.error

    def __hash__(self) -> int:
        return hash(self.error)

    @classmethod
    def encode_to(cls, value: Any, buf: bytearray) -> None:
        inner = value.error if isinstance(value, InkLangError) else value
        LangError.encode_to(inner, buf)

    @classmethod
    def decode_from(cls, data: bytes, offset: int = 0) -> Tuple["InkLangError", int]:
        error, offset = LangError.decode_from(data, offset)
        return cls(error), offset

    @classmethod
    def encode(cls, value: Any) -> bytes:
        buf = bytearray()
        cls.encode_to(value, buf)
        return bytes(buf)

    @classmethod
    def decode(cls, data: bytes) -> "InkLangError":
        data = bytes(data)
        value, offset = cls.decode_from(data)
        if offset != len(data):
            raise DecodeError(f"{len(data) - offset} trailing byte(s) after InkLangError")
        return value
