"""
Contract event extraction.

A transaction's event log may interleave events from several contracts. The
helpers here filter the log down to one contract instance and decode each
payload with that instance's generated ``Event`` enum. A payload that fails
to decode becomes an ``Err(DecodeError)`` entry instead of failing the whole
batch, since it usually means the bindings are stale relative to the
deployed contract.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Union

from .errors import DecodeError
from .instance import ContractInstance
from .primitives import AccountId
from .result import Err, Ok

__all__ = ["ContractEvent", "ContractEvents"]


@dataclass(frozen=True)
class ContractEvent:
    """One raw ``ContractEmitted`` record: origin account and SCALE payload."""

    account_id: AccountId
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_id", AccountId(self.account_id))
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class ContractEvents:
    """All contract events emitted by one transaction, in emission order."""

    events: List[ContractEvent] = field(default_factory=list)

    def __iter__(self) -> Iterator[ContractEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    @classmethod
    def from_iterable(cls, events: Iterable[ContractEvent]) -> "ContractEvents":
        return cls(list(events))

    def for_contract(self, instance: Union[ContractInstance, Any]) -> List[Union[Ok[Any], Err[DecodeError]]]:
        """
        Decode the events emitted by ``instance``.

        Returns one ``Ok(event)`` or ``Err(DecodeError)`` per matching event,
        preserving emission order.
        """
        codec = getattr(instance, "Event", None)
        if codec is None:
            raise TypeError(f"{type(instance).__name__} has no Event type to decode with")
        account_id = AccountId(bytes(instance))

        out: List[Union[Ok[Any], Err[DecodeError]]] = []
        for ev in self.events:
            if ev.account_id != account_id:
                continue
            try:
                out.append(Ok(codec.decode(ev.data)))
            except DecodeError as e:
                out.append(Err(e))
        return out
