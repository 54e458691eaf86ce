"""
Typed errors raised while turning contract metadata into bindings.

Every one of these is fatal: the metadata is expected to be produced by the
contract toolchain and to be self-consistent, so the generator stops at the
first inconsistency instead of emitting partial or silently-wrong code. The
CLI maps any `MetadataError` to exit status 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

__all__ = [
    "MetadataError",
    "MalformedMetadataError",
    "UnresolvedTypeError",
    "MixedFieldsError",
    "NestedNamespaceError",
    "InvalidHexError",
    "UnsupportedTypeError",
]


class MetadataError(Exception):
    """Base class for all generator input errors."""


@dataclass(slots=True)
class MalformedMetadataError(MetadataError):
    """The document does not have the shape of ink! contract metadata."""

    message: str
    location: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.location:
            return f"malformed metadata at {self.location}: {self.message}"
        return f"malformed metadata: {self.message}"


@dataclass(slots=True)
class UnresolvedTypeError(MetadataError):
    """A type id is referenced but not present in the registry."""

    type_id: int

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Type {self.type_id} not found"


@dataclass(slots=True)
class MixedFieldsError(MetadataError):
    """A composite or variant mixes named and unnamed fields."""

    type_id: int
    context: str = ""

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" ({self.context})" if self.context else ""
        return f"Type {self.type_id}{where} mixes named and unnamed fields"


@dataclass(slots=True)
class NestedNamespaceError(MetadataError):
    """A message label contains more than one ``::`` separator."""

    label: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Nested modules in method names are unsupported: {self.label!r}"


@dataclass(slots=True)
class InvalidHexError(MetadataError):
    field: str
    value: str
    expected_len: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.expected_len is not None:
            return f"{self.field}: expected {self.expected_len} hex-encoded bytes, got {self.value!r}"
        return f"{self.field}: invalid hex string {self.value!r}"


@dataclass(slots=True)
class UnsupportedTypeError(MetadataError):
    """The type uses an encoding the generator cannot express."""

    type_id: int
    reason: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Type {self.type_id} is unsupported: {self.reason}"
