from __future__ import annotations

import ast

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ink_wrapper.classify import group_messages, split_readers
from ink_wrapper.errors import (NestedNamespaceError, UnresolvedTypeError,
                                UnsupportedTypeError)
from ink_wrapper.model import (BitSequenceDef, CompositeDef, EntryPoint,
                               Primitive, TypeEntry, TypeParam)
from ink_wrapper.naming import new_name, py_ident, unique_names
from ink_wrapper.registry import TypeKind, TypeRegistry
from ink_wrapper.typeref import TypeRenderer


@pytest.fixture
def registry(metadata):
    return TypeRegistry.from_metadata(metadata)


@pytest.fixture
def renderer(registry):
    return TypeRenderer(registry, registry.declarations())


# ---------- resolver ----------


def test_resolve_unknown_id(registry):
    with pytest.raises(UnresolvedTypeError, match="Type 999 not found"):
        registry.resolve(999)


@pytest.mark.parametrize(
    "type_id, kind",
    [
        (0, TypeKind.BUILTIN),
        (2, TypeKind.CUSTOM),
        (3, TypeKind.CUSTOM),
        (4, TypeKind.BUILTIN),
        (6, TypeKind.RESERVED),
        (9, TypeKind.RESERVED),
        (12, TypeKind.BUILTIN),
        (13, TypeKind.BUILTIN),
        (14, TypeKind.CUSTOM),
    ],
)
def test_classification(registry, type_id, kind):
    assert registry.kind(type_id) is kind


def test_lang_error(registry):
    assert registry.is_lang_error(6)
    assert not registry.is_lang_error(3)


def test_declarations_group_generic_instances(registry):
    decls = registry.declarations()
    assert [d.name for d in decls] == ["Struct1", "Enum1", "Pair", "Forbidden"]
    pair = decls[2]
    assert [e.id for e in pair.entries] == [14, 15]
    assert pair.generic
    assert not decls[0].generic
    assert decls[1].is_variant


def test_declaration_names_avoid_reserved(registry):
    decls = registry.declarations(reserved={"Struct1"})
    assert decls[0].name == "Struct1_"


def test_same_name_different_paths():
    types = {
        0: TypeEntry(0, Primitive("u32")),
        1: TypeEntry(1, CompositeDef(fields=_no_fields()), path=("a", "Thing")),
        2: TypeEntry(2, CompositeDef(fields=_no_fields()), path=("b", "Thing")),
    }
    decls = TypeRegistry(types).declarations()
    assert [d.name for d in decls] == ["Thing", "Thing_"]


def _no_fields():
    from ink_wrapper.model import Fields

    return Fields()


# ---------- type references ----------


@pytest.mark.parametrize(
    "type_id, annotation, codec",
    [
        (0, "int", "scale.U32"),
        (1, "bool", "scale.BOOL"),
        (2, "Struct1", "Struct1"),
        (4, "Result[None, InkLangError]", "scale.ResultCodec(scale.UNIT, InkLangError)"),
        (5, "None", "scale.UNIT"),
        (8, "Result[Struct1, InkLangError]", "scale.ResultCodec(Struct1, InkLangError)"),
        (9, "AccountId", "AccountId.SCALE"),
        (10, "bytes", "scale.FixedBytesCodec(32)"),
        (12, "List[int]", "scale.SequenceCodec(scale.U32)"),
        (13, "Optional[int]", "scale.OptionCodec(scale.U32)"),
        (14, "Pair[int]", "_Pair_14"),
        (15, "Pair[bool]", "_Pair_15"),
        (19, "bytes", "scale.BYTES"),
    ],
)
def test_type_references(renderer, type_id, annotation, codec):
    assert renderer.annotation(type_id) == annotation
    assert renderer.codec(type_id) == codec


def test_prefix_only_qualifies_custom_types(renderer):
    assert renderer.annotation(8, "_contract.") == "Result[_contract.Struct1, InkLangError]"
    assert renderer.codec(12, "_contract.") == "scale.SequenceCodec(scale.U32)"


@pytest.mark.parametrize("type_id", [0, 2, 4, 8, 9, 12, 13, 14, 19])
def test_references_are_valid_expressions(renderer, type_id):
    ast.parse(renderer.annotation(type_id), mode="eval")
    ast.parse(renderer.codec(type_id), mode="eval")


def test_bit_sequence_is_unsupported():
    types = {
        0: TypeEntry(0, Primitive("u8")),
        1: TypeEntry(1, BitSequenceDef(store=0, order=0)),
    }
    renderer = TypeRenderer(TypeRegistry(types))
    with pytest.raises(UnsupportedTypeError, match="bit sequences"):
        renderer.annotation(1)


def test_unknown_builtin_is_unsupported():
    types = {
        0: TypeEntry(0, Primitive("u32")),
        1: TypeEntry(1, CompositeDef(fields=_no_fields()), path=("Duration",), params=(TypeParam("T", 0),)),
    }
    renderer = TypeRenderer(TypeRegistry(types))
    with pytest.raises(UnsupportedTypeError, match="unknown builtin type Duration"):
        renderer.codec(1)


def test_unknown_reserved_is_unsupported():
    types = {0: TypeEntry(0, CompositeDef(fields=_no_fields()), path=("ink_primitives", "Weird"))}
    renderer = TypeRenderer(TypeRegistry(types))
    with pytest.raises(UnsupportedTypeError, match="ink_primitives::Weird"):
        renderer.annotation(0)


# ---------- classification of entry points ----------


def _ep(label: str, mutates: bool = False) -> EntryPoint:
    return EntryPoint(label=label, selector=b"\x00\x00\x00\x00", mutates=mutates)


def test_group_messages(metadata):
    inherent, grouped = group_messages(metadata.messages)
    assert [m.label for m in inherent][:2] == ["get_u32", "set_u32"]
    assert list(grouped) == ["PSP22", "PSP22Metadata"]
    assert [m.method_name for m in grouped["PSP22"]] == ["total_supply", "transfer"]


def test_nested_namespace_is_rejected():
    with pytest.raises(NestedNamespaceError, match="a::b::c"):
        group_messages([_ep("a::b::c")])


def test_split_readers(metadata):
    readers, mutators = split_readers(metadata.messages)
    assert all(not m.mutates for m in readers)
    assert all(m.mutates for m in mutators)
    assert len(readers) + len(mutators) == len(metadata.messages)


_segment = st.from_regex(r"[a-z][a-z0-9_]{0,8}", fullmatch=True)


@given(st.lists(st.tuples(st.one_of(st.none(), st.sampled_from(["A", "B", "C"])), _segment, st.booleans()), max_size=20))
def test_grouping_keeps_every_message_in_order(specs):
    messages = [_ep(f"{ns}::{name}" if ns else name, mutates) for ns, name, mutates in specs]
    inherent, grouped = group_messages(messages)
    assert inherent == [m for m in messages if m.namespace is None]
    for ns, members in grouped.items():
        assert members == [m for m in messages if m.namespace == ns]
    assert len(inherent) + sum(len(v) for v in grouped.values()) == len(messages)


# ---------- naming ----------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("value", "value"),
        ("class", "class_"),
        ("from", "from_"),
        ("9lives", "_9lives"),
        ("a-b", "a_b"),
        ("", "_"),
    ],
)
def test_py_ident(raw, expected):
    assert py_ident(raw) == expected


def test_py_ident_reserved():
    assert py_ident("data", {"data", "data_"}) == "data__"


def test_new_name():
    assert new_name("data", ["value"]) == "data"
    assert new_name("data", ["data", "data_"]) == "data__"


def test_unique_names():
    assert unique_names(["a", "a", "self"], {"self"}) == ["a", "a_", "self_"]


@given(st.lists(st.text(max_size=6), max_size=12))
def test_unique_names_are_distinct_identifiers(names):
    out = unique_names(names, {"scale"})
    assert len(set(out)) == len(out)
    assert "scale" not in out
    for ident in out:
        assert ident.isidentifier()
