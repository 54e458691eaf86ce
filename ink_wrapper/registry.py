"""
ink_wrapper.registry
====================

Type registry resolver.

`TypeRegistry.resolve` maps a type id to its `TypeEntry`; an unknown id is a
fatal `UnresolvedTypeError` (the metadata is expected to be self-consistent).

Classification, in priority order:

1. **reserved**: first path segment is ``ink_primitives`` (framework-owned
   identity and error types such as ``AccountId`` or ``LangError``);
2. **builtin**: exactly one path segment (``Option``, ``Result``, ...), or no
   path at all (primitives, tuples, arrays, sequences, compacts);
3. **custom**: everything else, declared in the generated module under the
   last path segment.

`declarations` groups custom type ids by path: the registry holds one entry
per generic instantiation (``Foo<u32>`` and ``Foo<bool>`` are two ids with the
same path), but the generated module declares the class once.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Collection, Dict, Iterator, List, Mapping, Tuple

from .errors import UnresolvedTypeError
from .model import CompositeDef, ContractMetadata, TypeEntry, VariantDef
from .naming import py_ident

__all__ = ["RESERVED_NAMESPACE", "TypeKind", "Declaration", "TypeRegistry"]

RESERVED_NAMESPACE = "ink_primitives"
LANG_ERROR = "LangError"


class TypeKind(str, enum.Enum):
    BUILTIN = "builtin"
    RESERVED = "reserved"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Declaration:
    """One custom type to declare, with every registry id that instantiates it."""

    name: str
    path: Tuple[str, ...]
    entries: Tuple[TypeEntry, ...]

    @property
    def first(self) -> TypeEntry:
        return self.entries[0]

    @property
    def generic(self) -> bool:
        return len(self.entries) > 1 or any(p.type_id is not None for p in self.first.params)

    @property
    def is_variant(self) -> bool:
        return isinstance(self.first.definition, VariantDef)


class TypeRegistry:
    def __init__(self, types: Mapping[int, TypeEntry]) -> None:
        self._types: Dict[int, TypeEntry] = dict(types)

    @classmethod
    def from_metadata(cls, metadata: ContractMetadata) -> "TypeRegistry":
        return cls(metadata.types)

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[TypeEntry]:
        return iter(self._types.values())

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._types

    def resolve(self, type_id: int) -> TypeEntry:
        try:
            return self._types[type_id]
        except KeyError:
            raise UnresolvedTypeError(type_id) from None

    # --- classification -------------------------------------------------------

    def kind(self, type_id: int) -> TypeKind:
        entry = self.resolve(type_id)
        if entry.path and entry.path[0] == RESERVED_NAMESPACE:
            return TypeKind.RESERVED
        if len(entry.path) <= 1 or not isinstance(entry.definition, (CompositeDef, VariantDef)):
            return TypeKind.BUILTIN
        return TypeKind.CUSTOM

    def is_custom(self, type_id: int) -> bool:
        return self.kind(type_id) is TypeKind.CUSTOM

    def is_lang_error(self, type_id: int) -> bool:
        entry = self.resolve(type_id)
        return self.kind(type_id) is TypeKind.RESERVED and entry.name == LANG_ERROR

    # --- declarations ---------------------------------------------------------

    def declarations(self, reserved: Collection[str] = ()) -> List[Declaration]:
        """
        Custom types in registry order, one `Declaration` per path. Names are
        the last path segment, suffixed with ``_`` when they clash with
        ``reserved`` or with an earlier declaration of another path.
        """
        groups: Dict[Tuple[str, ...], List[TypeEntry]] = {}
        for entry in self._types.values():
            if self.kind(entry.id) is TypeKind.CUSTOM:
                groups.setdefault(entry.path, []).append(entry)

        taken = set(reserved)
        out: List[Declaration] = []
        for path, entries in groups.items():
            name = py_ident(path[-1], taken)
            taken.add(name)
            out.append(Declaration(name=name, path=path, entries=tuple(entries)))
        return out

