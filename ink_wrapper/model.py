"""
ink_wrapper.model
=================

Data model for parsed contract metadata. Instances are produced by
`ink_wrapper.metadata.parse_metadata` and consumed by the resolver
(`ink_wrapper.registry`), the classifier and the code generator.

Everything here is immutable and derived once per generator run:

- `TypeEntry` pairs a registry id with its path, generic params and one
  definition (`Primitive`, `TupleDef`, `ArrayDef`, `SequenceDef`,
  `CompactDef`, `CompositeDef`, `VariantDef` or `BitSequenceDef`).
- `Fields` is either all-named or all-unnamed; the parser rejects a mix.
- `EntryPoint` covers both constructors and messages.
- `ContractMetadata` is the whole document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

__all__ = [
    "PRIMITIVE_KINDS",
    "Primitive",
    "TupleDef",
    "ArrayDef",
    "SequenceDef",
    "CompactDef",
    "Field",
    "Fields",
    "CompositeDef",
    "Alternative",
    "VariantDef",
    "BitSequenceDef",
    "TypeDef",
    "TypeParam",
    "TypeEntry",
    "Arg",
    "EntryPoint",
    "EventField",
    "EventSpec",
    "ContractMetadata",
]

PRIMITIVE_KINDS = (
    "u8",
    "i8",
    "u16",
    "i16",
    "u32",
    "i32",
    "u64",
    "i64",
    "u128",
    "i128",
    "u256",
    "i256",
    "bool",
    "char",
    "str",
)


# -----------------
# Type definitions
# -----------------


@dataclass(frozen=True)
class Primitive:
    kind: str


@dataclass(frozen=True)
class TupleDef:
    items: Tuple[int, ...]


@dataclass(frozen=True)
class ArrayDef:
    item: int
    length: int


@dataclass(frozen=True)
class SequenceDef:
    item: int


@dataclass(frozen=True)
class CompactDef:
    item: int


@dataclass(frozen=True)
class Field:
    type_id: int
    name: Optional[str] = None
    type_name: Optional[str] = None
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Fields:
    """Ordered fields of a record or variant alternative; ``named`` is uniform."""

    items: Tuple[Field, ...] = ()
    named: bool = False

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class CompositeDef:
    fields: Fields


@dataclass(frozen=True)
class Alternative:
    name: str
    index: int
    fields: Fields
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class VariantDef:
    alternatives: Tuple[Alternative, ...]


@dataclass(frozen=True)
class BitSequenceDef:
    store: int
    order: int


TypeDef = Union[
    Primitive, TupleDef, ArrayDef, SequenceDef, CompactDef, CompositeDef, VariantDef, BitSequenceDef
]


@dataclass(frozen=True)
class TypeParam:
    name: str
    type_id: Optional[int] = None


@dataclass(frozen=True)
class TypeEntry:
    id: int
    definition: TypeDef
    path: Tuple[str, ...] = ()
    params: Tuple[TypeParam, ...] = ()
    docs: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.path[-1] if self.path else ""


# ---------------
# Entry points
# ---------------


@dataclass(frozen=True)
class Arg:
    label: str
    type_id: int


@dataclass(frozen=True)
class EntryPoint:
    """A constructor or message."""

    label: str
    selector: bytes
    args: Tuple[Arg, ...] = ()
    return_type: Optional[int] = None
    mutates: bool = False
    payable: bool = False
    docs: Tuple[str, ...] = ()

    @property
    def namespace(self) -> Optional[str]:
        parts = self.label.split("::")
        return parts[0] if len(parts) == 2 else None

    @property
    def method_name(self) -> str:
        return self.label.split("::")[-1]


@dataclass(frozen=True)
class EventField:
    label: str
    type_id: int
    docs: Tuple[str, ...] = ()
    indexed: bool = False


@dataclass(frozen=True)
class EventSpec:
    label: str
    fields: Tuple[EventField, ...] = ()
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ContractMetadata:
    code_hash: bytes
    types: Dict[int, TypeEntry] = field(default_factory=dict)
    constructors: Tuple[EntryPoint, ...] = ()
    messages: Tuple[EntryPoint, ...] = ()
    events: Tuple[EventSpec, ...] = ()
    name: Optional[str] = None
