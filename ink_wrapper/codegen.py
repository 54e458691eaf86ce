"""
ink_wrapper.codegen
===================

Generate a typed Python module from parsed ink! contract metadata.

The generated module contains, in order:

- ``CODE_HASH``: the contract's 32-byte code hash;
- one declaration per custom type (dataclasses built on
  `ink_wrapper_types.scale.Struct` / `ink_wrapper_types.scale.Enum`) and the
  SCALE layout bindings for them;
- an ``event`` namespace holding the ``Event`` enum (one alternative per
  event, indexed by declaration order);
- one abstract interface class per message namespace (``PSP22::...``) and
  its implementation bound to an instance;
- the ``Instance`` handle with a static method per constructor and a method
  per inherent message;
- ``upload()`` when a wasm path is given.

Constructors and messages only build call requests: the selector followed by
each argument's SCALE encoding, in declared order, wrapped in an
``InstantiateCall`` / ``ExecCall`` / ``ReadCall`` (or the ``...NeedsValue``
flavour for payable entry points). Submitting them is up to a connection.
Mutating calls carry their return codec as well, so ``call.as_read()``
dry-runs one and decodes what the message would return.

Quickstart
----------
    from ink_wrapper.codegen import generate
    from ink_wrapper.metadata import load_metadata

    src = generate(load_metadata("my_contract.json"))
    with open("my_contract.py", "w") as f:
        f.write(src)
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Set, Tuple

from .classify import group_messages, split_readers
from .logging import get_logger
from .model import (CompositeDef, ContractMetadata, EntryPoint, EventSpec,
                    Fields, VariantDef)
from .naming import new_name, py_ident, unique_names
from .registry import Declaration, TypeRegistry
from .typeref import TypeRenderer
from .version import __version__

__all__ = ["generate", "MODULE_NAMES"]

log = get_logger(__name__)

# ---------- Names the generated module defines or imports ---------------------

_IMPORTED = (
    "annotations",
    "abc",
    "os",
    "sys",
    "dataclass",
    "Any",
    "Dict",
    "List",
    "Optional",
    "Tuple",
    "scale",
    "AccountId",
    "Compact",
    "ContractInstance",
    "ExecCall",
    "ExecCallNeedsValue",
    "Hash",
    "InkLangError",
    "InstantiateCall",
    "InstantiateCallNeedsValue",
    "ReadCall",
    "Result",
    "UploadCall",
)

_DEFINED = ("CODE_HASH", "Instance", "event", "upload", "_contract", "_WASM_PATH")

_BUILTINS_USED = (
    "bytes",
    "bytearray",
    "int",
    "bool",
    "str",
    "None",
    "open",
    "__file__",
    "property",
    "staticmethod",
    "self",
)

MODULE_NAMES = frozenset(_IMPORTED + _DEFINED + _BUILTINS_USED)

# attributes of the runtime base classes a declared field must not shadow
_FIELD_RESERVED = frozenset(
    ("encode", "decode", "encode_to", "decode_from", "layout", "alternative")
)
# attributes of ContractInstance a generated method must not shadow
_INSTANCE_RESERVED = frozenset(("account_id", "Event"))

_CONTRACT_PREFIX = "_contract."


# ---------- Templates -----------------------------------------------------------

_BANNER = "# This file was auto-generated with ink-wrapper {version}. Do not edit by hand."

_HEADER = '''"""Typed bindings for the {title}ink! contract."""

from __future__ import annotations

import abc
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ink_wrapper_types import (AccountId, Compact, ContractInstance, ExecCall,
                               ExecCallNeedsValue, Hash, InkLangError,
                               InstantiateCall, InstantiateCallNeedsValue,
                               ReadCall, Result, UploadCall, scale)

_contract = sys.modules[__name__]

CODE_HASH = bytes.fromhex("{code_hash}")'''

_STRUCT_TMPL = '''@dataclass(frozen=True)
class {name}(scale.Struct):
{body}'''

_ENUM_TMPL = '''class {name}(scale.Enum):
{body}'''

_ALTERNATIVE_TMPL = '''@{enum}.alternative("{label}", {index})
@dataclass(frozen=True)
class {cls}({enum}):
{body}'''

_EVENT_NS_TMPL = '''class event:
    """Events emitted by the contract."""

    class Event(scale.Enum):
        """One alternative per contract event, in declaration order."""
{alternatives}
    Event.layout({layout})'''

_INTERFACE_TMPL = '''class {name}(abc.ABC):
    """Messages of the ``{namespace}`` namespace."""
{methods}'''

_IMPL_TMPL = '''class {impl}({name}):
    """``{namespace}`` messages bound to one contract instance."""

    __slots__ = ("account_id",)

    def __init__(self, account_id: AccountId) -> None:
        self.account_id = account_id
{methods}'''

_INSTANCE_TMPL = '''class Instance(ContractInstance):
    """Handle to one deployed {title} contract."""

    Event = event.Event
{members}'''

_NAMESPACE_PROPERTY_TMPL = '''@property
def {attr}(self) -> {name}:
    return {impl}(self.account_id)'''

_UPLOAD_TMPL = '''_WASM_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), {path!r})


def upload() -> UploadCall:
    """Upload the contract code; the upload fails unless it hashes to CODE_HASH."""
    with open(_WASM_PATH, "rb") as f:
        wasm = f.read()
    return UploadCall(wasm, CODE_HASH)'''


# ---------- Helpers -------------------------------------------------------------


def _indent(text: str, levels: int = 1) -> str:
    pad = "    " * levels
    return "\n".join(pad + line if line.strip() else "" for line in text.split("\n"))


def _docstring(lines: Sequence[str]) -> str:
    """Render doc lines as a docstring, or "" when there are none."""
    cleaned = [ln.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"') for ln in lines]
    while cleaned and not cleaned[-1]:
        cleaned.pop()
    while cleaned and not cleaned[0]:
        cleaned.pop(0)
    if not cleaned:
        return ""
    if len(cleaned) == 1:
        line = cleaned[0]
        if line.endswith('"'):
            line = line[:-1] + '\\"'
        return f'"""{line}"""'
    return '"""\n' + "\n".join(cleaned) + '\n"""'


def _members(members: Sequence[str]) -> str:
    """Class members (unindented source each) as an indented, blank-line separated block."""
    return "\n".join("\n" + _indent(m) for m in members)


def _function(signature: str, body: Sequence[str], decorators: Sequence[str] = ()) -> str:
    return "\n".join(list(decorators) + [signature] + [_indent(b) for b in body])


def _byte_list(raw: bytes) -> str:
    return "[" + ", ".join(str(b) for b in raw) + "]"


Row = Tuple[str, str, str, Tuple[str, ...]]  # (field, annotation, codec, docs)


def _record_body(rows: Sequence[Row], docs: Sequence[str]) -> str:
    """Indented body of a dataclass: docstring, then fields with their docs."""
    parts: List[str] = []
    doc = _docstring(docs)
    if doc:
        parts.append(doc)
    fields: List[str] = []
    for name, annotation, _, field_docs in rows:
        fields.append(f"{name}: {annotation}")
        field_doc = _docstring(field_docs)
        if field_doc:
            fields.append(field_doc)
    if fields:
        if parts:
            parts.append("")
        parts.extend(fields)
    if not parts:
        parts.append("pass")
    return _indent("\n".join(parts))


def _codec_list(rows: Sequence[Row]) -> str:
    return "[" + ", ".join(f'("{name}", {codec})' for name, _, codec, _ in rows) + "]"


def _alt_fields(definition: VariantDef, name: str) -> Fields:
    for alt in definition.alternatives:
        if alt.name == name:
            return alt.fields
    return Fields()


# ---------- Generator -----------------------------------------------------------


class _Generator:
    def __init__(
        self,
        metadata: ContractMetadata,
        *,
        wasm_path: Optional[str] = None,
        header_comment: bool = True,
    ) -> None:
        self.metadata = metadata
        self.wasm_path = wasm_path
        self.header_comment = header_comment
        self.registry = TypeRegistry.from_metadata(metadata)
        self.declarations = self.registry.declarations(reserved=MODULE_NAMES)
        self.renderer = TypeRenderer(self.registry, self.declarations)
        _, mutators = split_readers(metadata.messages)
        self.mutators = frozenset(m.selector for m in mutators)
        # every module-level name in use; later names are chosen against it
        self.module_names: Set[str] = set(MODULE_NAMES) | {d.name for d in self.declarations}

    def _module_name(self, wanted: str) -> str:
        name = py_ident(wanted, self.module_names)
        self.module_names.add(name)
        return name

    # --- custom types -----------------------------------------------------------

    def _rows(self, fields_of: Sequence[Fields], prefix: str = "") -> List[Row]:
        """
        Field rows for a record. ``fields_of`` holds the same fields once per
        instantiation of a generic declaration; a field whose type differs
        between instantiations is annotated ``Any``. Codecs come from the
        first entry.
        """
        first = fields_of[0]
        if first.named:
            names = unique_names([f.name or "" for f in first], _FIELD_RESERVED)
        else:
            names = [f"_{i}" for i in range(len(first))]
        rows: List[Row] = []
        for i, (name, f) in enumerate(zip(names, first)):
            same = all(len(other) > i and other.items[i].type_id == f.type_id for other in fields_of)
            annotation = self.renderer.annotation(f.type_id, prefix) if same else "Any"
            rows.append((name, annotation, self.renderer.codec(f.type_id, prefix), f.docs))
        return rows

    def _emit_struct(self, decl: Declaration, blocks: List[str], codecs: List[str], bindings: List[str]) -> None:
        all_fields = [e.definition.fields for e in decl.entries]  # type: ignore[union-attr]
        rows = self._rows(all_fields)
        blocks.append(_STRUCT_TMPL.format(name=decl.name, body=_record_body(rows, decl.first.docs)))
        if not decl.generic:
            bindings.append(f"{decl.name}.layout({_codec_list(rows)})")
            return
        for e in decl.entries:
            codec_name = self.renderer.instance_codec_name(decl, e.id)
            codecs.append(f"{codec_name} = scale.StructCodec({decl.name})")
            bindings.append(f"{codec_name}.bind({_codec_list(self._rows([e.definition.fields]))})")  # type: ignore[union-attr]

    def _emit_enum(self, decl: Declaration, blocks: List[str], codecs: List[str], bindings: List[str]) -> None:
        definition = decl.first.definition
        assert isinstance(definition, VariantDef)
        blocks.append(
            _ENUM_TMPL.format(name=decl.name, body=_indent(_docstring(decl.first.docs) or "pass"))
        )
        classes: Dict[str, str] = {}
        for alt in definition.alternatives:
            cls = self._module_name(f"_{decl.name}_{alt.name}")
            classes[alt.name] = cls
            same_alt = [_alt_fields(e.definition, alt.name) for e in decl.entries]  # type: ignore[arg-type]
            blocks.append(
                _ALTERNATIVE_TMPL.format(
                    enum=decl.name,
                    label=alt.name,
                    index=alt.index,
                    cls=cls,
                    body=_record_body(self._rows(same_alt), alt.docs),
                )
            )

        def layout(variant: VariantDef) -> str:
            items = [f"({classes[a.name]}, {_codec_list(self._rows([a.fields]))})" for a in variant.alternatives]
            return "[" + ", ".join(items) + "]"

        if not decl.generic:
            bindings.append(f"{decl.name}.layout({layout(definition)})")
            return
        for e in decl.entries:
            codec_name = self.renderer.instance_codec_name(decl, e.id)
            codecs.append(f"{codec_name} = scale.EnumCodec({decl.name})")
            bindings.append(f"{codec_name}.bind({layout(e.definition)})")  # type: ignore[arg-type]

    def emit_types(self) -> List[str]:
        """Declarations for every custom type, followed by their layout bindings."""
        blocks: List[str] = []
        codecs: List[str] = []
        bindings: List[str] = []
        for decl in self.declarations:
            if isinstance(decl.first.definition, CompositeDef):
                self._emit_struct(decl, blocks, codecs, bindings)
            else:
                self._emit_enum(decl, blocks, codecs, bindings)
        if codecs:
            blocks.append("\n".join(codecs))
        if bindings:
            blocks.append("\n".join(bindings))
        return blocks

    # --- events -------------------------------------------------------------------

    def emit_events(self, events: Sequence[EventSpec]) -> str:
        taken = {"Event"}
        alternatives: List[str] = []
        layout: List[str] = []
        for index, ev in enumerate(events):
            cls = py_ident(ev.label, taken)
            taken.add(cls)
            names = unique_names([f.label for f in ev.fields], _FIELD_RESERVED)
            rows: List[Row] = [
                (
                    name,
                    self.renderer.annotation(f.type_id, _CONTRACT_PREFIX),
                    self.renderer.codec(f.type_id, _CONTRACT_PREFIX),
                    f.docs,
                )
                for name, f in zip(names, ev.fields)
            ]
            alternatives.append(
                _ALTERNATIVE_TMPL.format(
                    enum="Event", label=ev.label, index=index, cls=cls, body=_record_body(rows, ev.docs)
                )
            )
            layout.append(f"({cls}, {_codec_list(rows)})")
        return _EVENT_NS_TMPL.format(
            alternatives=_members(alternatives),
            layout="[" + ", ".join(layout) + "]",
        )

    # --- call sites -----------------------------------------------------------------

    def _args(self, entry: EntryPoint) -> List[Tuple[str, str, str]]:
        """(identifier, annotation, codec) per declared argument."""
        idents = unique_names([a.label for a in entry.args], self.module_names)
        return [
            (ident, self.renderer.annotation(a.type_id), self.renderer.codec(a.type_id))
            for ident, a in zip(idents, entry.args)
        ]

    def _gather_args(self, entry: EntryPoint, args: List[Tuple[str, str, str]]) -> Tuple[List[str], str]:
        """
        Statements packing the selector and the arguments into a buffer, and
        the expression holding the packed bytes.
        """
        selector = _byte_list(entry.selector)
        if not args:
            return [], f"bytes({selector})"
        data = new_name("data", [ident for ident, _, _ in args])
        lines = [f"{data} = bytearray({selector})"]
        for ident, _, codec in args:
            lines.append(f"{codec}.encode_to({ident}, {data})")
        return lines, f"bytes({data})"

    def emit_constructor(self, entry: EntryPoint, name: str) -> str:
        args = self._args(entry)
        salt = new_name("salt", [ident for ident, _, _ in args])
        params = [f"{ident}: {annotation}" for ident, annotation, _ in args]
        params += ["*", f'{salt}: bytes = b""']
        call_type = "InstantiateCallNeedsValue" if entry.payable else "InstantiateCall"
        lines, data = self._gather_args(entry, args)

        body = [d for d in [_docstring(entry.docs)] if d] + lines
        body.append(f"return {call_type}(CODE_HASH, {data}, Instance, salt={salt})")
        signature = f"def {name}({', '.join(params)}) -> {call_type}[Instance]:"
        return _function(signature, body, ["@staticmethod"])

    def _call_type(self, entry: EntryPoint) -> str:
        if entry.selector in self.mutators:
            return "ExecCallNeedsValue" if entry.payable else "ExecCall"
        return "ReadCall"

    def _return_codec(self, entry: EntryPoint) -> str:
        return self.renderer.codec(entry.return_type) if entry.return_type is not None else "scale.UNIT"

    def _message_signature(self, entry: EntryPoint, name: str, args: List[Tuple[str, str, str]]) -> str:
        params = ["self"] + [f"{ident}: {annotation}" for ident, annotation, _ in args]
        returns = self.renderer.annotation(entry.return_type) if entry.return_type is not None else "None"
        return f"def {name}({', '.join(params)}) -> {self._call_type(entry)}[{returns}]:"

    def emit_message(self, entry: EntryPoint, name: str) -> str:
        args = self._args(entry)
        lines, data = self._gather_args(entry, args)
        body = [d for d in [_docstring(entry.docs)] if d] + lines
        body.append(f"return {self._call_type(entry)}(self.account_id, {data}, {self._return_codec(entry)})")
        return _function(self._message_signature(entry, name, args), body)

    def emit_message_head(self, entry: EntryPoint, name: str) -> str:
        body = [d for d in [_docstring(entry.docs)] if d] or ["..."]
        signature = self._message_signature(entry, name, self._args(entry))
        return _function(signature, body, ["@abc.abstractmethod"])

    # --- namespaces and instance ----------------------------------------------------

    def emit_namespaces(self, grouped: Dict[str, List[EntryPoint]]) -> Tuple[List[str], List[str], Set[str]]:
        """Return (interface and implementation blocks, Instance properties, property names)."""
        blocks: List[str] = []
        properties: List[str] = []
        attrs: Set[str] = set()
        for namespace, messages in grouped.items():
            name = self._module_name(namespace)
            impl = self._module_name(f"_Instance{name}")
            methods = unique_names([m.method_name for m in messages], _INSTANCE_RESERVED)
            blocks.append(
                _INTERFACE_TMPL.format(
                    name=name,
                    namespace=namespace,
                    methods=_members([self.emit_message_head(m, n) for m, n in zip(messages, methods)]),
                )
            )
            blocks.append(
                _IMPL_TMPL.format(
                    name=name,
                    impl=impl,
                    namespace=namespace,
                    methods=_members([self.emit_message(m, n) for m, n in zip(messages, methods)]),
                )
            )
            attr = py_ident(namespace, attrs | _INSTANCE_RESERVED)
            attrs.add(attr)
            properties.append(_NAMESPACE_PROPERTY_TMPL.format(attr=attr, name=name, impl=impl))
        return blocks, properties, attrs

    def emit_instance(self, inherent: List[EntryPoint], properties: List[str], taken: Set[str]) -> str:
        constructors = self.metadata.constructors
        names = unique_names(
            [c.label for c in constructors] + [m.label for m in inherent],
            _INSTANCE_RESERVED | taken,
        )
        members: List[str] = list(properties)
        for entry, name in zip(constructors, names[: len(constructors)]):
            members.append(self.emit_constructor(entry, name))
        for entry, name in zip(inherent, names[len(constructors):]):
            members.append(self.emit_message(entry, name))
        title = f"``{self.metadata.name}``" if self.metadata.name else "ink!"
        return _INSTANCE_TMPL.format(title=title, members=_members(members))

    # --- module ---------------------------------------------------------------------

    def run(self) -> str:
        inherent, grouped = group_messages(self.metadata.messages)
        log.debug(
            "messages classified",
            inherent=len(inherent),
            namespaces=sorted(grouped),
            mutators=len(self.mutators),
        )

        header = _HEADER.format(
            title=f"``{self.metadata.name}`` " if self.metadata.name else "",
            code_hash=self.metadata.code_hash.hex(),
        )
        if self.header_comment:
            header = _BANNER.format(version=__version__) + "\n" + header

        blocks: List[str] = [header]
        blocks.extend(self.emit_types())
        log.debug("types declared", count=len(self.declarations))
        blocks.append(self.emit_events(self.metadata.events))
        namespace_blocks, properties, taken = self.emit_namespaces(grouped)
        blocks.extend(namespace_blocks)
        blocks.append(self.emit_instance(inherent, properties, taken))
        if self.wasm_path is not None:
            blocks.append(_UPLOAD_TMPL.format(path=str(self.wasm_path)))
        return "\n\n\n".join(blocks) + "\n"


def generate(
    metadata: ContractMetadata,
    *,
    wasm_path: Optional[str] = None,
    header_comment: bool = True,
) -> str:
    """
    Generate the bindings module source for ``metadata``.

    Raises a `ink_wrapper.errors.MetadataError` subclass (and emits nothing)
    when the metadata is inconsistent or uses unsupported types.
    """
    src = _Generator(metadata, wasm_path=wasm_path, header_comment=header_comment).run()
    log.info(
        "bindings generated",
        contract=metadata.name,
        constructors=len(metadata.constructors),
        messages=len(metadata.messages),
        events=len(metadata.events),
    )
    return src
