"""
ink_wrapper_types
=================

Runtime support for bindings generated by ``ink-wrapper``: the SCALE codec,
call-request values, the connection capability interfaces, event extraction
and an in-process sandbox backend.

Typical use with a generated module ``my_contract``::

    from ink_wrapper_types import SandboxConnection
    import my_contract

    conn = SandboxConnection(context, caller=alice)
    instance = conn.instantiate(my_contract.Instance.new(7, True))
    tx = conn.exec(instance.set_u32(8))
    assert conn.read(instance.get_u32()).unwrap() == 8
    events = conn.get_contract_events(tx).for_contract(instance)
"""

from __future__ import annotations

from . import scale
from .calls import (ExecCall, ExecCallNeedsValue, InstantiateCall,
                    InstantiateCallNeedsValue, ReadCall, TxStatus, UploadCall)
from .connection import (Connection, SignedConnection, TxInfo,
                         UploadConnection)
from .errors import (CallReverted, CodeHashMismatch, ContextPoisoned,
                     DecodeError, DeploymentReverted, DispatchError,
                     EncodeError, InkWrapperError, UnsupportedCapability)
from .events import ContractEvent, ContractEvents
from .instance import ContractInstance
from .primitives import AccountId, Hash, InkLangError, LangError
from .result import Err, Ok, Result
from .sandbox import ExecOutcome, ExecutionContext, SandboxConnection
from .scale import Compact

__version__ = "0.1.0"

__all__ = [
    "scale",
    "Compact",
    "Ok",
    "Err",
    "Result",
    "AccountId",
    "Hash",
    "LangError",
    "InkLangError",
    "TxStatus",
    "InstantiateCall",
    "InstantiateCallNeedsValue",
    "ExecCall",
    "ExecCallNeedsValue",
    "ReadCall",
    "UploadCall",
    "TxInfo",
    "Connection",
    "SignedConnection",
    "UploadConnection",
    "ContractEvent",
    "ContractEvents",
    "ContractInstance",
    "ExecOutcome",
    "ExecutionContext",
    "SandboxConnection",
    "InkWrapperError",
    "EncodeError",
    "DecodeError",
    "DispatchError",
    "CallReverted",
    "DeploymentReverted",
    "CodeHashMismatch",
    "ContextPoisoned",
    "UnsupportedCapability",
    "__version__",
]
