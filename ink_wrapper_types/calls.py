"""
Call-request values produced by generated bindings.

Bindings never talk to a node themselves: each constructor or message
returns one of these immutable requests, and a connection (see
`ink_wrapper_types.connection`) submits it. Requests for payable entry points
come in a ``...NeedsValue`` flavour that must be completed with
``with_value(...)`` before any connection accepts it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Generic, TypeVar

from .primitives import AccountId

__all__ = [
    "TxStatus",
    "InstantiateCall",
    "InstantiateCallNeedsValue",
    "ExecCall",
    "ExecCallNeedsValue",
    "ReadCall",
    "UploadCall",
]

T = TypeVar("T")

_U128_MAX = (1 << 128) - 1


class TxStatus(str, enum.Enum):
    """How far a submitted transaction must progress before `exec` returns."""

    FINALIZED = "finalized"
    IN_BLOCK = "in_block"
    SUBMITTED = "submitted"


def _check_value(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U128_MAX:
        raise ValueError(f"transferred value must be a u128, got {value!r}")
    return value


def _check_code_hash(code_hash: bytes) -> bytes:
    code_hash = bytes(code_hash)
    if len(code_hash) != 32:
        raise ValueError(f"code hash must be 32 bytes, got {len(code_hash)}")
    return code_hash


# --- Constructors -------------------------------------------------------------


@dataclass(frozen=True)
class InstantiateCall(Generic[T]):
    """
    A constructor call. ``contract_type`` turns the new account id into the
    typed handle returned by `SignedConnection.instantiate`.
    """

    code_hash: bytes
    data: bytes
    contract_type: Callable[[AccountId], T] = field(repr=False)
    salt: bytes = b""
    value: int = 0
    tx_status: TxStatus = TxStatus.FINALIZED

    def __post_init__(self) -> None:
        object.__setattr__(self, "code_hash", _check_code_hash(self.code_hash))
        object.__setattr__(self, "salt", bytes(self.salt))
        _check_value(self.value)

    def with_salt(self, salt: bytes) -> "InstantiateCall[T]":
        return replace(self, salt=bytes(salt))

    def with_tx_status(self, tx_status: TxStatus) -> "InstantiateCall[T]":
        return replace(self, tx_status=TxStatus(tx_status))


@dataclass(frozen=True)
class InstantiateCallNeedsValue(Generic[T]):
    """A payable constructor call still missing the transferred value."""

    code_hash: bytes
    data: bytes
    contract_type: Callable[[AccountId], T] = field(repr=False)
    salt: bytes = b""

    def with_salt(self, salt: bytes) -> "InstantiateCallNeedsValue[T]":
        return replace(self, salt=bytes(salt))

    def with_value(self, value: int) -> InstantiateCall[T]:
        return InstantiateCall(
            self.code_hash, self.data, self.contract_type, salt=self.salt, value=_check_value(value)
        )


# --- Messages -----------------------------------------------------------------


@dataclass(frozen=True)
class ExecCall(Generic[T]):
    """
    A mutating message call. ``codec`` decodes the message's declared return
    value, so the call can be dry-run with `as_read` before it is submitted.
    """

    account_id: AccountId
    data: bytes
    codec: Any = field(default=None, repr=False, compare=False)
    value: int = 0
    tx_status: TxStatus = TxStatus.FINALIZED

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_id", AccountId(self.account_id))
        _check_value(self.value)

    def with_tx_status(self, tx_status: TxStatus) -> "ExecCall[T]":
        return replace(self, tx_status=TxStatus(tx_status))

    def as_read(self) -> "ReadCall[T]":
        """The same call as a dry run; reading it never mutates state."""
        if self.codec is None:
            raise TypeError("ExecCall has no return codec to decode a dry run with")
        return ReadCall(self.account_id, self.data, self.codec, value=self.value)


@dataclass(frozen=True)
class ExecCallNeedsValue(Generic[T]):
    """A payable mutating message call still missing the transferred value."""

    account_id: AccountId
    data: bytes
    codec: Any = field(default=None, repr=False, compare=False)

    def with_value(self, value: int) -> ExecCall[T]:
        return ExecCall(self.account_id, self.data, self.codec, value=_check_value(value))


@dataclass(frozen=True)
class ReadCall(Generic[T]):
    """
    A read-only (dry-run) message call. ``codec`` decodes the raw return data
    into the declared return type.
    """

    account_id: AccountId
    data: bytes
    codec: Any = field(repr=False)
    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_id", AccountId(self.account_id))
        _check_value(self.value)

    def with_value(self, value: int) -> "ReadCall[T]":
        return replace(self, value=_check_value(value))

    def decode(self, data: bytes) -> T:
        return self.codec.decode(data)


# --- Code upload ----------------------------------------------------------------


@dataclass(frozen=True)
class UploadCall:
    """Upload of contract code that must hash to ``expected_code_hash``."""

    wasm: bytes = field(repr=False)
    expected_code_hash: bytes
    tx_status: TxStatus = TxStatus.FINALIZED

    def __post_init__(self) -> None:
        object.__setattr__(self, "expected_code_hash", _check_code_hash(self.expected_code_hash))

    def with_tx_status(self, tx_status: TxStatus) -> "UploadCall":
        return replace(self, tx_status=TxStatus(tx_status))
