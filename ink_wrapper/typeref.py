"""
ink_wrapper.typeref
===================

Render type references for generated code.

Every type id has two renderings:

- an **annotation**, the Python type written in signatures and field
  declarations (``int``, ``List[Struct1]``, ``Result[None, InkLangError]``);
- a **codec** expression that encodes/decodes values of that type
  (``scale.U32``, ``scale.SequenceCodec(Struct1)``, ...).

Both recurse through tuples, arrays, sequences, compacts and generic
parameters. ``prefix`` qualifies references to custom (contract-declared)
types only; it is used where those names can be shadowed, such as inside the
generated ``event`` namespace.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from .errors import UnsupportedTypeError
from .model import (ArrayDef, BitSequenceDef, CompactDef, Primitive,
                    SequenceDef, TupleDef, TypeEntry)
from .registry import Declaration, TypeKind, TypeRegistry

__all__ = ["TypeRenderer"]

_INT_KINDS = {
    "u8": "U8",
    "u16": "U16",
    "u32": "U32",
    "u64": "U64",
    "u128": "U128",
    "u256": "U256",
    "i8": "I8",
    "i16": "I16",
    "i32": "I32",
    "i64": "I64",
    "i128": "I128",
    "i256": "I256",
}

_PRIMITIVE_ANNOTATIONS = {k: "int" for k in _INT_KINDS}
_PRIMITIVE_ANNOTATIONS.update({"bool": "bool", "char": "str", "str": "str"})

_PRIMITIVE_CODECS = {k: f"scale.{v}" for k, v in _INT_KINDS.items()}
_PRIMITIVE_CODECS.update({"bool": "scale.BOOL", "char": "scale.CHAR", "str": "scale.STR"})

# builtin name -> (annotation template, codec template, type param count)
_BUILTINS = {
    "Option": ("Optional[{0}]", "scale.OptionCodec({0})", 1),
    "Result": ("Result[{0}, {1}]", "scale.ResultCodec({0}, {1})", 2),
    "BTreeMap": ("Dict[{0}, {1}]", "scale.MapCodec({0}, {1})", 2),
}

# reserved (ink_primitives) name -> (annotation, codec)
_RESERVED = {
    "AccountId": ("AccountId", "AccountId.SCALE"),
    "Hash": ("Hash", "Hash.SCALE"),
    "LangError": ("InkLangError", "InkLangError"),
}


class TypeRenderer:
    def __init__(self, registry: TypeRegistry, declarations: Sequence[Declaration] = ()) -> None:
        self.registry = registry
        self._declared: Dict[tuple, Declaration] = {d.path: d for d in declarations}

    def declaration(self, type_id: int) -> Optional[Declaration]:
        return self._declared.get(self.registry.resolve(type_id).path)

    @staticmethod
    def instance_codec_name(decl: Declaration, type_id: int) -> str:
        """Module-level name of the codec for one instantiation of a generic type."""
        return f"_{decl.name}_{type_id}"

    def is_u8(self, type_id: int) -> bool:
        definition = self.registry.resolve(type_id).definition
        return isinstance(definition, Primitive) and definition.kind == "u8"

    # --- annotations ----------------------------------------------------------

    def annotation(self, type_id: int, prefix: str = "") -> str:
        entry = self.registry.resolve(type_id)
        d = entry.definition
        sub = lambda t: self.annotation(t, prefix)  # noqa: E731

        if isinstance(d, Primitive):
            return _PRIMITIVE_ANNOTATIONS[d.kind]
        if isinstance(d, TupleDef):
            if not d.items:
                return "None"
            return "Tuple[" + ", ".join(sub(t) for t in d.items) + "]"
        if isinstance(d, ArrayDef):
            return "bytes" if self.is_u8(d.item) else f"List[{sub(d.item)}]"
        if isinstance(d, SequenceDef):
            return "bytes" if self.is_u8(d.item) else f"List[{sub(d.item)}]"
        if isinstance(d, CompactDef):
            return f"Compact[{sub(d.item)}]"
        if isinstance(d, BitSequenceDef):
            raise UnsupportedTypeError(type_id, "bit sequences are not supported")
        return self._named(entry, prefix, sub, codec=False)

    # --- codecs ---------------------------------------------------------------

    def codec(self, type_id: int, prefix: str = "") -> str:
        entry = self.registry.resolve(type_id)
        d = entry.definition
        sub = lambda t: self.codec(t, prefix)  # noqa: E731

        if isinstance(d, Primitive):
            return _PRIMITIVE_CODECS[d.kind]
        if isinstance(d, TupleDef):
            if not d.items:
                return "scale.UNIT"
            return "scale.TupleCodec(" + ", ".join(sub(t) for t in d.items) + ")"
        if isinstance(d, ArrayDef):
            if self.is_u8(d.item):
                return f"scale.FixedBytesCodec({d.length})"
            return f"scale.ArrayCodec({sub(d.item)}, {d.length})"
        if isinstance(d, SequenceDef):
            return "scale.BYTES" if self.is_u8(d.item) else f"scale.SequenceCodec({sub(d.item)})"
        if isinstance(d, CompactDef):
            return f"scale.CompactCodec({sub(d.item)})"
        if isinstance(d, BitSequenceDef):
            raise UnsupportedTypeError(type_id, "bit sequences are not supported")
        return self._named(entry, prefix, sub, codec=True)

    # --- composites / variants --------------------------------------------------

    def _params(self, entry: TypeEntry, count: Optional[int] = None) -> List[int]:
        ids = [p.type_id for p in entry.params if p.type_id is not None]
        if count is not None and len(ids) != count:
            raise UnsupportedTypeError(
                entry.id, f"{entry.name} expects {count} type parameter(s), got {len(ids)}"
            )
        return ids

    def _named(self, entry: TypeEntry, prefix: str, sub: Callable[[int], str], *, codec: bool) -> str:
        kind = self.registry.kind(entry.id)

        if kind is TypeKind.RESERVED:
            if entry.name not in _RESERVED:
                raise UnsupportedTypeError(entry.id, f"unknown ink! type {'::'.join(entry.path)}")
            return _RESERVED[entry.name][1 if codec else 0]

        if kind is TypeKind.BUILTIN:
            if entry.name not in _BUILTINS:
                raise UnsupportedTypeError(entry.id, f"unknown builtin type {entry.name or '<anonymous>'}")
            annotation_tmpl, codec_tmpl, count = _BUILTINS[entry.name]
            args = [sub(t) for t in self._params(entry, count)]
            return (codec_tmpl if codec else annotation_tmpl).format(*args)

        decl = self.declaration(entry.id)
        if decl is None:
            raise UnsupportedTypeError(entry.id, f"custom type {entry.name} was not declared")
        if codec:
            if decl.generic:
                return prefix + self.instance_codec_name(decl, entry.id)
            return prefix + decl.name
        params = self._params(entry)
        if not params:
            return prefix + decl.name
        return prefix + decl.name + "[" + ", ".join(sub(t) for t in params) + "]"
