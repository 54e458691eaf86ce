"""
ink_wrapper.metadata
====================

Parse ink! contract metadata (the ``<contract>.json`` written by the contract
toolchain) into the immutable data model of `ink_wrapper.model`.

Parsing happens in two steps: pydantic models validate the raw JSON shape,
then `_to_model` converts it, enforcing the rules the shape alone cannot
express (hex lengths, field-kind exclusivity, known definitions).

Supported layout (ink! 4)::

    {
      "source":   {"hash": "0x<32 bytes>", ...},
      "contract": {"name": "...", ...},
      "types":    [{"id": 0, "type": {"path": [...], "params": [...], "def": {...}}}],
      "spec":     {"constructors": [...], "messages": [...], "events": [...]}
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import (InvalidHexError, MalformedMetadataError, MixedFieldsError,
                     UnsupportedTypeError)
from .model import (PRIMITIVE_KINDS, Alternative, Arg, ArrayDef,
                    BitSequenceDef, CompactDef, CompositeDef, ContractMetadata,
                    EntryPoint, EventField, EventSpec)
from .model import Field as FieldModel
from .model import (Fields, Primitive, SequenceDef, TupleDef, TypeDef,
                    TypeEntry, TypeParam, VariantDef)

__all__ = ["parse_metadata", "load_metadata", "hex_to_bytes"]

_SUPPORTED_VERSIONS = ("4",)


# ----------------------------- Raw JSON shape ------------------------------ #


class _Raw(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class RawField(_Raw):
    name: Optional[str] = None
    type: int
    type_name: Optional[str] = Field(default=None, alias="typeName")
    docs: List[str] = Field(default_factory=list)


class RawVariant(_Raw):
    name: str
    index: int
    fields: List[RawField] = Field(default_factory=list)
    docs: List[str] = Field(default_factory=list)


class RawParam(_Raw):
    name: str
    type: Optional[int] = None


class RawType(_Raw):
    path: List[str] = Field(default_factory=list)
    params: List[RawParam] = Field(default_factory=list)
    definition: Dict[str, Any] = Field(alias="def")
    docs: List[str] = Field(default_factory=list)


class RawTypeEntry(_Raw):
    id: int
    type: RawType


class RawTypeSpec(_Raw):
    type: int
    display_name: List[str] = Field(default_factory=list, alias="displayName")


class RawArg(_Raw):
    label: str
    type: RawTypeSpec


class RawConstructor(_Raw):
    label: str
    selector: str
    args: List[RawArg] = Field(default_factory=list)
    payable: bool = False
    return_type: Optional[RawTypeSpec] = Field(default=None, alias="returnType")
    docs: List[str] = Field(default_factory=list)


class RawMessage(RawConstructor):
    mutates: bool = False


class RawEventArg(_Raw):
    label: str
    type: RawTypeSpec
    docs: List[str] = Field(default_factory=list)
    indexed: bool = False


class RawEvent(_Raw):
    label: str
    args: List[RawEventArg] = Field(default_factory=list)
    docs: List[str] = Field(default_factory=list)


class RawSpec(_Raw):
    constructors: List[RawConstructor] = Field(default_factory=list)
    messages: List[RawMessage] = Field(default_factory=list)
    events: List[RawEvent] = Field(default_factory=list)


class RawSource(_Raw):
    hash: str


class RawContract(_Raw):
    name: Optional[str] = None


class RawMetadata(_Raw):
    version: Optional[Union[str, int]] = None
    source: RawSource
    contract: Optional[RawContract] = None
    types: List[RawTypeEntry]
    spec: RawSpec


# ----------------------------- Helpers ------------------------------------- #


def hex_to_bytes(value: str, *, field: str, length: Optional[int] = None) -> bytes:
    """Decode a ``0x``-prefixed (or bare) hex string, optionally checking its length."""
    s = value[2:] if value.startswith(("0x", "0X")) else value
    if len(s) % 2 != 0:
        raise InvalidHexError(field, value, length)
    try:
        raw = bytes.fromhex(s)
    except ValueError as e:
        raise InvalidHexError(field, value, length) from e
    if length is not None and len(raw) != length:
        raise InvalidHexError(field, value, length)
    return raw


def _fields(type_id: int, raw: List[RawField], context: str) -> Fields:
    named = [f.name is not None for f in raw]
    if any(named) and not all(named):
        raise MixedFieldsError(type_id, context)
    items = tuple(
        FieldModel(type_id=f.type, name=f.name, type_name=f.type_name, docs=tuple(f.docs))
        for f in raw
    )
    return Fields(items=items, named=bool(raw) and all(named))


def _definition(type_id: int, definition: Dict[str, Any]) -> TypeDef:
    if len(definition) != 1:
        raise MalformedMetadataError(
            f"expected exactly one definition kind, got {sorted(definition)}", f"types[{type_id}]"
        )
    kind, body = next(iter(definition.items()))
    try:
        if kind == "primitive":
            if body not in PRIMITIVE_KINDS:
                raise UnsupportedTypeError(type_id, f"unknown primitive {body!r}")
            return Primitive(body)
        if kind == "tuple":
            return TupleDef(tuple(int(t) for t in body))
        if kind == "array":
            return ArrayDef(item=int(body["type"]), length=int(body["len"]))
        if kind == "sequence":
            return SequenceDef(item=int(body["type"]))
        if kind == "compact":
            return CompactDef(item=int(body["type"]))
        if kind == "composite":
            raw = [RawField.model_validate(f) for f in (body or {}).get("fields", [])]
            return CompositeDef(_fields(type_id, raw, "composite"))
        if kind == "variant":
            variants = [RawVariant.model_validate(v) for v in (body or {}).get("variants", [])]
            return VariantDef(
                tuple(
                    Alternative(
                        name=v.name,
                        index=v.index,
                        fields=_fields(type_id, v.fields, f"variant {v.name}"),
                        docs=tuple(v.docs),
                    )
                    for v in variants
                )
            )
        if kind == "bitsequence":
            return BitSequenceDef(store=int(body["bit_store_type"]), order=int(body["bit_order_type"]))
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedMetadataError(f"invalid {kind} definition: {e}", f"types[{type_id}]") from e
    raise UnsupportedTypeError(type_id, f"unknown type definition {kind!r}")


def _entry_point(raw: RawConstructor, *, mutates: bool, where: str) -> EntryPoint:
    return EntryPoint(
        label=raw.label,
        selector=hex_to_bytes(raw.selector, field=f"{where}.selector", length=4),
        args=tuple(Arg(label=a.label, type_id=a.type.type) for a in raw.args),
        return_type=raw.return_type.type if raw.return_type is not None else None,
        mutates=mutates,
        payable=raw.payable,
        docs=tuple(raw.docs),
    )


def _to_model(raw: RawMetadata) -> ContractMetadata:
    if raw.version is not None and str(raw.version) not in _SUPPORTED_VERSIONS:
        raise MalformedMetadataError(
            f"unsupported metadata version {raw.version!r} (supported: {', '.join(_SUPPORTED_VERSIONS)})"
        )

    types: Dict[int, TypeEntry] = {}
    for entry in raw.types:
        if entry.id in types:
            raise MalformedMetadataError(f"duplicate type id {entry.id}", "types")
        types[entry.id] = TypeEntry(
            id=entry.id,
            definition=_definition(entry.id, entry.type.definition),
            path=tuple(entry.type.path),
            params=tuple(TypeParam(name=p.name, type_id=p.type) for p in entry.type.params),
            docs=tuple(entry.type.docs),
        )

    constructors = tuple(
        _entry_point(c, mutates=True, where=f"spec.constructors[{i}]")
        for i, c in enumerate(raw.spec.constructors)
    )
    messages = tuple(
        _entry_point(m, mutates=m.mutates, where=f"spec.messages[{i}]")
        for i, m in enumerate(raw.spec.messages)
    )
    events = tuple(
        EventSpec(
            label=e.label,
            fields=tuple(
                EventField(label=a.label, type_id=a.type.type, docs=tuple(a.docs), indexed=a.indexed)
                for a in e.args
            ),
            docs=tuple(e.docs),
        )
        for e in raw.spec.events
    )

    return ContractMetadata(
        code_hash=hex_to_bytes(raw.source.hash, field="source.hash", length=32),
        types=types,
        constructors=constructors,
        messages=messages,
        events=events,
        name=raw.contract.name if raw.contract else None,
    )


# ----------------------------- Public API ---------------------------------- #


def parse_metadata(doc: Union[Mapping[str, Any], str, bytes]) -> ContractMetadata:
    """
    Parse a metadata document given as a mapping or as JSON text.

    Raises a `MetadataError` subclass on any structural problem.
    """
    if isinstance(doc, (str, bytes)):
        try:
            doc = json.loads(doc)
        except json.JSONDecodeError as e:
            raise MalformedMetadataError(f"invalid JSON: {e}") from e
    if not isinstance(doc, Mapping):
        raise MalformedMetadataError(f"expected a JSON object, got {type(doc).__name__}")
    if "V3" in doc or "V1" in doc:
        raise MalformedMetadataError("legacy (ink! 3) metadata is not supported")

    try:
        raw = RawMetadata.model_validate(doc)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(p) for p in first.get("loc", ()))
        raise MalformedMetadataError(first.get("msg", str(e)), location or None) from e
    return _to_model(raw)


def load_metadata(path: Union[str, Path]) -> ContractMetadata:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise MalformedMetadataError(f"cannot read {p}: {e.strerror or e}") from e
    return parse_metadata(text)
