"""
Typed error classes for the ink-wrapper runtime.

Raised by the SCALE codec, the call builders and connection backends so
callers can catch specific failure modes while still being able to catch the
base `InkWrapperError`. Generated bindings never interpret these; they only
propagate them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

__all__ = [
    "InkWrapperError",
    "EncodeError",
    "DecodeError",
    "DispatchError",
    "CallReverted",
    "DeploymentReverted",
    "CodeHashMismatch",
    "ContextPoisoned",
    "UnsupportedCapability",
]


class InkWrapperError(Exception):
    """Base class for all runtime errors."""


class EncodeError(InkWrapperError, ValueError):
    """A value cannot be represented in the requested SCALE shape."""


class DecodeError(InkWrapperError, ValueError):
    """Bytes are not a valid SCALE encoding of the requested shape."""


@dataclass(slots=True)
class DispatchError(InkWrapperError):
    """
    The backend refused to dispatch a call (bad origin, insufficient balance,
    out of gas, unknown contract, ...).
    """

    message: str
    details: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.details is None:
            return f"dispatch failed: {self.message}"
        return f"dispatch failed: {self.message} ({self.details!r})"


@dataclass(slots=True)
class CallReverted(InkWrapperError):
    """A mutating message ran but the contract reverted its state changes."""

    account_id: bytes
    data: bytes

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"call to 0x{bytes(self.account_id).hex()} reverted (data=0x{self.data.hex()})"


@dataclass(slots=True)
class DeploymentReverted(InkWrapperError):
    """A constructor ran but reverted, so no instance was created."""

    code_hash: bytes
    data: bytes

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"instantiation of code 0x{self.code_hash.hex()} reverted (data=0x{self.data.hex()})"


@dataclass(slots=True)
class CodeHashMismatch(InkWrapperError):
    """Uploaded code hashed to something other than the expected code hash."""

    expected: bytes
    actual: bytes

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"code hash mismatch: expected 0x{self.expected.hex()}, got 0x{self.actual.hex()}"


@dataclass(slots=True)
class ContextPoisoned(InkWrapperError):
    """
    A shared execution context failed mid-call and can no longer be trusted.
    Every later call on the same connection raises this error again.
    """

    reason: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"execution context is no longer usable: {self.reason}"


@dataclass(slots=True)
class UnsupportedCapability(InkWrapperError):
    """The connection does not implement an optional capability (e.g. upload)."""

    capability: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"connection does not support {self.capability}"
