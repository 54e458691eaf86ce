"""
ink_wrapper_types.sandbox
=========================

In-process backend for the capability interfaces.

`SandboxConnection` drives a local, single-ledger `ExecutionContext` (a
contract emulator, a test double, ...). The context is not assumed to be
thread-safe, so every call takes the connection's lock: at most one call is
in flight per context.

Failure mapping:

- the context raises `DispatchError` for calls it refuses to run; these
  propagate unchanged and leave the context usable;
- a reverted constructor or message raises `DeploymentReverted` /
  `CallReverted`;
- any other exception escaping the context means its state can no longer be
  trusted: the connection is poisoned, the failure is reported as
  `ContextPoisoned`, and every later call raises `ContextPoisoned` too.

Each successful transaction is recorded in its own sandbox "block" so
`get_contract_events` can return the events it emitted. The context runs
calls synchronously, so every `TxStatus` is satisfied on return.
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Sequence, Tuple, TypeVar, Union

from .calls import (ExecCall, ExecCallNeedsValue, InstantiateCall, ReadCall,
                    UploadCall)
from .connection import TxInfo, UploadConnection, require_value
from .errors import (CallReverted, CodeHashMismatch, ContextPoisoned,
                     DeploymentReverted, DispatchError, InkWrapperError)
from .events import ContractEvent, ContractEvents
from .primitives import AccountId, Hash

__all__ = ["ExecOutcome", "ExecutionContext", "SandboxConnection"]

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ExecOutcome:
    """Result of running one constructor or message in an execution context."""

    data: bytes = b""
    reverted: bool = False
    events: Sequence[ContractEvent] = ()
    account_id: Optional[AccountId] = None


class ExecutionContext(ABC):
    """A local ledger able to store code, instantiate contracts and call them."""

    @abstractmethod
    def upload_code(self, caller: AccountId, wasm: bytes) -> Hash:
        """Store ``wasm`` and return its code hash."""

    @abstractmethod
    def instantiate(
        self, caller: AccountId, code_hash: bytes, data: bytes, salt: bytes, value: int
    ) -> ExecOutcome:
        """Run a constructor; ``account_id`` of the outcome is the new instance."""

    @abstractmethod
    def call(
        self, caller: AccountId, account_id: AccountId, data: bytes, value: int, *, dry_run: bool
    ) -> ExecOutcome:
        """Run a message; with ``dry_run`` no state change may persist."""


class SandboxConnection(UploadConnection):
    def __init__(self, context: ExecutionContext, caller: Union[AccountId, bytes, str]) -> None:
        self.context = context
        self.caller = AccountId(caller)
        self._lock = threading.Lock()
        self._poisoned: Optional[str] = None
        self._height = 0
        self._txs: Dict[bytes, Tuple[ContractEvent, ...]] = {}

    @property
    def poisoned(self) -> bool:
        return self._poisoned is not None

    # --- internals ------------------------------------------------------------

    @contextlib.contextmanager
    def _session(self) -> Iterator[ExecutionContext]:
        with self._lock:
            if self._poisoned is not None:
                raise ContextPoisoned(self._poisoned)
            try:
                yield self.context
            except InkWrapperError:
                raise
            except Exception as e:
                self._poisoned = f"{type(e).__name__}: {e}"
                log.error("sandbox context poisoned: %s", self._poisoned)
                raise ContextPoisoned(self._poisoned) from e

    def _record(self, events: Sequence[ContractEvent]) -> TxInfo:
        # caller holds the lock
        self._height += 1
        height = self._height.to_bytes(8, "little")
        block_hash = hashlib.blake2b(b"block" + height, digest_size=32).digest()
        tx_hash = hashlib.blake2b(b"tx" + height, digest_size=32).digest()
        self._txs[tx_hash] = tuple(events)
        log.debug("sandbox block %d: %d event(s)", self._height, len(events))
        return TxInfo(block_hash=block_hash, tx_hash=tx_hash)

    # --- Connection -------------------------------------------------------------

    def read(self, call: ReadCall[T]) -> T:
        with self._session() as ctx:
            outcome = ctx.call(self.caller, call.account_id, call.data, call.value, dry_run=True)
        # reverted reads still carry an encoded error value
        return call.decode(outcome.data)

    def get_contract_events(self, tx_info: TxInfo) -> ContractEvents:
        with self._lock:
            events = self._txs.get(bytes(tx_info.tx_hash))
        if events is None:
            raise DispatchError("unknown transaction", tx_info.tx_hash.hex())
        return ContractEvents(list(events))

    # --- SignedConnection -------------------------------------------------------

    def instantiate_tx(self, call: InstantiateCall[T]) -> Tuple[T, TxInfo]:
        require_value(call)
        with self._session() as ctx:
            outcome = ctx.instantiate(self.caller, call.code_hash, call.data, call.salt, call.value)
            if outcome.reverted:
                raise DeploymentReverted(call.code_hash, outcome.data)
            if outcome.account_id is None:
                raise DispatchError("instantiation produced no account id")
            tx = self._record(outcome.events)
        log.info("instantiated contract %s", AccountId(outcome.account_id))
        return call.contract_type(AccountId(outcome.account_id)), tx

    def exec(self, call: Union[ExecCall, ExecCallNeedsValue]) -> TxInfo:
        require_value(call)
        with self._session() as ctx:
            outcome = ctx.call(self.caller, call.account_id, call.data, call.value, dry_run=False)
            if outcome.reverted:
                raise CallReverted(bytes(call.account_id), outcome.data)
            return self._record(outcome.events)

    # --- UploadConnection -------------------------------------------------------

    def upload(self, call: UploadCall) -> TxInfo:
        with self._session() as ctx:
            code_hash = bytes(ctx.upload_code(self.caller, call.wasm))
            if code_hash != call.expected_code_hash:
                raise CodeHashMismatch(call.expected_code_hash, code_hash)
            return self._record(())
