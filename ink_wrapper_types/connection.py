"""
Capability interfaces that generated bindings are written against.

- `Connection`: read-only queries and event retrieval.
- `SignedConnection`: instantiation and mutating calls on behalf of a signer.
- `UploadConnection`: optional code upload; unsupported unless overridden.

Backends (a live node client, a local sandbox, ...) implement these; the
bindings only build request values (see `ink_wrapper_types.calls`). All
failures surface as `ink_wrapper_types.errors.InkWrapperError` subclasses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Tuple, TypeVar, Union

from .calls import (ExecCall, ExecCallNeedsValue, InstantiateCall,
                    InstantiateCallNeedsValue, ReadCall, UploadCall)
from .errors import UnsupportedCapability
from .events import ContractEvents

__all__ = ["TxInfo", "require_value", "Connection", "SignedConnection", "UploadConnection"]

T = TypeVar("T")


@dataclass(frozen=True)
class TxInfo:
    """Where a transaction landed: its block hash and transaction hash."""

    block_hash: bytes
    tx_hash: bytes

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"tx 0x{self.tx_hash.hex()} in block 0x{self.block_hash.hex()}"


def require_value(call: Any) -> None:
    """Reject payable requests that were never given a value."""
    if isinstance(call, (InstantiateCallNeedsValue, ExecCallNeedsValue)):
        raise TypeError(
            f"{type(call).__name__} targets a payable entry point; call .with_value(...) first"
        )


class Connection(ABC):
    @abstractmethod
    def read(self, call: ReadCall[T]) -> T:
        """Dry-run ``call`` and decode its return data with ``call.codec``."""

    @abstractmethod
    def get_contract_events(self, tx_info: TxInfo) -> ContractEvents:
        """All contract events emitted by the transaction ``tx_info``."""


class SignedConnection(Connection):
    @abstractmethod
    def instantiate_tx(self, call: InstantiateCall[T]) -> Tuple[T, TxInfo]:
        """Deploy a new instance; return its typed handle and the transaction."""

    def instantiate(self, call: InstantiateCall[T]) -> T:
        instance, _ = self.instantiate_tx(call)
        return instance

    @abstractmethod
    def exec(self, call: Union[ExecCall, ExecCallNeedsValue]) -> TxInfo:
        """Submit ``call`` and wait until it reaches ``call.tx_status``."""


class UploadConnection(SignedConnection):
    def upload(self, call: UploadCall) -> TxInfo:
        """
        Upload contract code, failing with `CodeHashMismatch` if it does not
        hash to ``call.expected_code_hash``.
        """
        raise UnsupportedCapability("upload")
