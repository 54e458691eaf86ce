from __future__ import annotations

from typing import Any, ClassVar, Optional, Union

from .primitives import AccountId

__all__ = ["ContractInstance"]


class ContractInstance:
    """
    Base for generated ``Instance`` handles: one deployed contract, identified
    by its account id. ``Event`` is the contract's event enum (a codec), used
    by `ContractEvents.for_contract`.
    """

    __slots__ = ("account_id",)

    Event: ClassVar[Optional[Any]] = None

    def __init__(self, account_id: Union[AccountId, bytes, str]) -> None:
        self.account_id = AccountId(account_id)

    def __bytes__(self) -> bytes:
        return bytes(self.account_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContractInstance):
            return NotImplemented
        return type(self) is type(other) and self.account_id == other.account_id

    def __hash__(self) -> int:
        return hash((type(self), bytes(self.account_id)))

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}({self.account_id})"
