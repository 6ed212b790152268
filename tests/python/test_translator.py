"""Tests for translating annotation syntax into type expressions."""

from __future__ import annotations

import pytest

import estree_builders as b
from typedjs.checker import translator
from typedjs.checker.render import format_type
from typedjs.checker.types import (
    ANY,
    UNKNOWN,
    ArrayType,
    IndexSignature,
    IntersectionType,
    LiteralType,
    MapType,
    NamedReference,
    ObjectShape,
    OptionalType,
    PrimitiveType,
    RecordType,
    SetType,
    TupleType,
    UnionType,
)
from typedjs.syntax import tree


def _translate(data: dict) -> object:
    return translator.translate(b.node(data))


def test_missing_annotation_is_any() -> None:
    assert translator.translate(None) == ANY


@pytest.mark.parametrize("name", sorted(tree.KEYWORD_TYPES.values()))
def test_keywords_translate_to_primitives(name: str) -> None:
    assert _translate(b.kw(name)) == PrimitiveType(name)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("active", LiteralType("active", "string")),
        (5, LiteralType(5, "number")),
        (-1, LiteralType(-1, "number")),
        (True, LiteralType(True, "boolean")),
    ],
)
def test_literal_types(value: object, expected: LiteralType) -> None:
    assert _translate(b.lit_type(value)) == expected


def test_bigint_and_null_literal_types() -> None:
    big = {"type": "TSLiteralType", "literal": b.bigint("0x10")}
    null = {"type": "TSLiteralType", "literal": b.lit(None)}

    assert _translate(big) == LiteralType(16, "bigint")
    assert _translate(null) == LiteralType(None, "null")


def test_template_literal_type_degrades_to_unknown() -> None:
    template = {"type": "TSLiteralType", "literal": {"type": "TemplateLiteral", "quasis": []}}
    assert _translate(template) == UNKNOWN


def test_union_and_intersection_preserve_member_order() -> None:
    union = _translate(b.union(b.lit_type("b"), b.kw("number"), b.lit_type("a")))
    both = _translate(b.intersection(b.ref("A"), b.ref("B")))

    assert union == UnionType(
        (LiteralType("b", "string"), PrimitiveType("number"), LiteralType("a", "string"))
    )
    assert both == IntersectionType((NamedReference("A"), NamedReference("B")))


def test_arrays_and_tuples() -> None:
    tuple_node = b.tuple_type(b.kw("number"), b.named_member("label", b.kw("string")))

    assert _translate(b.array_type(b.kw("string"))) == ArrayType(PrimitiveType("string"))
    assert _translate(tuple_node) == TupleType((PrimitiveType("number"), PrimitiveType("string")))


@pytest.mark.parametrize(
    "data, expected",
    [
        (b.ref("Array", b.kw("number")), ArrayType(PrimitiveType("number"))),
        (b.ref("Set", b.kw("string")), SetType(PrimitiveType("string"))),
        (
            b.ref("Map", b.kw("string"), b.kw("number")),
            MapType(PrimitiveType("string"), PrimitiveType("number")),
        ),
        (
            b.ref("Record", b.kw("string"), b.kw("boolean")),
            RecordType(PrimitiveType("string"), PrimitiveType("boolean")),
        ),
        (b.ref("Map", b.kw("string")), NamedReference("Map")),
        (b.ref("Array"), NamedReference("Array")),
        (b.ref("User"), NamedReference("User")),
    ],
)
def test_references_and_builtin_containers(data: dict, expected: object) -> None:
    assert _translate(data) == expected


def test_qualified_names_stay_named_references() -> None:
    data = {
        "type": "TSTypeReference",
        "typeName": {"type": "TSQualifiedName", "left": b.ident("NS"), "right": b.ident("User")},
    }
    assert _translate(data) == NamedReference("NS.User")


def test_type_literal_members() -> None:
    data = b.type_lit(
        b.prop_sig("name", b.kw("string")),
        b.prop_sig("age", b.kw("number"), optional=True),
        b.prop_sig(b.lit("quoted"), b.kw("boolean")),
        b.prop_sig(b.ident("computed"), b.kw("string"), computed=True),
        b.prop_sig("untyped", None),
        b.method_sig("greet"),
        b.index_sig(b.kw("string"), b.kw("number")),
    )

    shape = _translate(data)

    assert shape == ObjectShape(
        {
            "name": PrimitiveType("string"),
            "age": OptionalType(PrimitiveType("number")),
            "quoted": PrimitiveType("boolean"),
            "untyped": ANY,
            "greet": UNKNOWN,
        },
        IndexSignature(PrimitiveType("string"), PrimitiveType("number")),
    )


@pytest.mark.parametrize(
    "data",
    [
        {"type": "TSFunctionType", "params": []},
        {"type": "TSTypeOperator", "operator": "keyof", "typeAnnotation": b.ref("User")},
        {"type": "TSConditionalType"},
    ],
)
def test_unrecognised_annotations_are_unknown(data: dict) -> None:
    assert _translate(data) == UNKNOWN


def test_parenthesized_types_are_unwrapped() -> None:
    data = {"type": "TSParenthesizedType", "typeAnnotation": b.kw("string")}
    assert _translate(data) == PrimitiveType("string")


@pytest.mark.parametrize(
    "data, rendered",
    [
        (b.union(b.lit_type("active"), b.lit_type("inactive")), '"active" | "inactive"'),
        (b.intersection(b.ref("A"), b.ref("B")), "A & B"),
        (b.array_type(b.union(b.kw("string"), b.kw("number"))), "Array<string | number>"),
        (b.tuple_type(b.kw("number"), b.kw("string")), "[number, string]"),
        (b.ref("Map", b.kw("string"), b.kw("number")), "Map<string, number>"),
        (b.ref("Set", b.lit_type(1)), "Set<1>"),
        (b.ref("Record", b.kw("string"), b.kw("boolean")), "Record<string, boolean>"),
        ({"type": "TSLiteralType", "literal": b.bigint("10")}, "10n"),
        (b.lit_type(-2.5), "-2.5"),
        (
            b.type_lit(
                b.prop_sig("name", b.kw("string")),
                b.prop_sig("age", b.kw("number"), optional=True),
            ),
            "{ name: string, age?: number }",
        ),
        (b.type_lit(b.index_sig(b.kw("string"), b.kw("number"))), "{ [key: string]: number }"),
        (b.type_lit(), "{}"),
    ],
)
def test_format_type(data: dict, rendered: str) -> None:
    assert format_type(_translate(data)) == rendered


def test_format_optional_member() -> None:
    assert format_type(OptionalType(PrimitiveType("string"))) == "string?"
