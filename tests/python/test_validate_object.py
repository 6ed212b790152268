"""Tests for per-property validation of object literals."""

from __future__ import annotations

import estree_builders as b
from typedjs.checker.diagnostics import DiagnosticKind
from typedjs.checker.matcher import validate_object
from typedjs.checker.registry import TypeRegistry
from typedjs.checker.types import (
    ArrayType,
    IndexSignature,
    NamedReference,
    ObjectShape,
    OptionalType,
    PrimitiveType,
)
from typedjs.syntax import tree

STRING = PrimitiveType("string")
NUMBER = PrimitiveType("number")
PERSON = ObjectShape({"name": STRING, "age": NUMBER})


def _validate(data: dict, shape: ObjectShape = PERSON, registry: TypeRegistry | None = None):
    node = b.node(data)
    assert isinstance(node, tree.ObjectExpression)
    return validate_object(node, shape, "Person", registry)


def test_complete_object_has_no_findings() -> None:
    assert _validate(b.obj(b.prop("name", b.lit("Alice")), b.prop("age", b.lit(30)))) == []


def test_single_missing_property() -> None:
    findings = _validate(b.at(b.obj(b.prop("name", b.lit("Alice"))), 2, 10, 2, 27))

    assert len(findings) == 1
    finding = findings[0]
    assert finding.kind is DiagnosticKind.MISSING_PROPERTY
    assert finding.data == {"propName": "age", "interfaceName": "Person"}
    assert finding.message == "Property 'age' is missing in 'Person'"
    assert finding.span == tree.Span(2, 10, 2, 27)


def test_single_extra_property() -> None:
    extra = b.at(b.prop("extra", b.lit(True)), 1, 30, 1, 41)
    findings = _validate(b.obj(b.prop("name", b.lit("Alice")), b.prop("age", b.lit(30)), extra))

    assert [finding.kind for finding in findings] == [DiagnosticKind.EXTRA_PROPERTY]
    assert findings[0].message == "Unexpected property 'extra' in 'Person'"
    assert findings[0].span == tree.Span(1, 30, 1, 41)


def test_mistyped_property_is_located_at_its_value() -> None:
    value = b.at(b.lit("thirty"), 1, 20, 1, 28)
    findings = _validate(b.obj(b.prop("name", b.lit("Alice")), b.prop("age", value)))

    assert len(findings) == 1
    assert findings[0].kind is DiagnosticKind.TYPE_MISMATCH
    assert findings[0].message == "Type mismatch: Expected 'number' but got 'string'"
    assert findings[0].span == tree.Span(1, 20, 1, 28)


def test_findings_follow_declaration_then_source_order() -> None:
    findings = _validate(b.obj(b.prop("b", b.lit(1)), b.prop("a", b.lit(2))))

    assert [(f.kind, f.data["propName"]) for f in findings] == [
        (DiagnosticKind.MISSING_PROPERTY, "name"),
        (DiagnosticKind.MISSING_PROPERTY, "age"),
        (DiagnosticKind.EXTRA_PROPERTY, "b"),
        (DiagnosticKind.EXTRA_PROPERTY, "a"),
    ]


def test_optional_properties() -> None:
    shape = ObjectShape({"name": STRING, "nick": OptionalType(STRING)})

    assert _validate(b.obj(b.prop("name", b.lit("A"))), shape) == []
    assert _validate(
        b.obj(b.prop("name", b.lit("A")), b.prop("nick", b.unary("void", b.lit(0)))), shape
    ) == []
    findings = _validate(b.obj(b.prop("name", b.lit("A")), b.prop("nick", b.lit(1))), shape)
    assert [finding.data["expected"] for finding in findings] == ["string"]


def test_string_and_numeric_keys() -> None:
    shape = ObjectShape({"first name": STRING, "0": NUMBER})
    data = b.obj(b.prop(b.lit("first name"), b.lit("A")), b.prop(b.lit(0), b.lit(1)))
    assert _validate(data, shape) == []


def test_computed_keys_are_ignored() -> None:
    data = b.obj(
        b.prop("name", b.lit("Alice")),
        b.prop("age", b.lit(30)),
        b.prop(b.ident("dynamic"), b.lit(1), computed=True),
    )
    assert _validate(data) == []


def test_spread_suppresses_missing_but_not_extra_or_mismatch() -> None:
    data = b.obj(
        b.spread(b.ident("defaults")),
        b.prop("age", b.lit("x")),
        b.prop("other", b.lit(1)),
    )

    findings = _validate(data)

    assert [finding.kind for finding in findings] == [
        DiagnosticKind.TYPE_MISMATCH,
        DiagnosticKind.EXTRA_PROPERTY,
    ]


def test_index_signature_accepts_unknown_properties_unchecked() -> None:
    shape = ObjectShape({"name": STRING}, IndexSignature(STRING, NUMBER))
    data = b.obj(b.prop("name", b.lit("A")), b.prop("anything", b.lit("not a number")))
    assert _validate(data, shape) == []


def test_nested_object_literals_are_validated() -> None:
    registry = TypeRegistry()
    registry.declare_interface("Address", ObjectShape({"city": STRING}))
    shape = ObjectShape(
        {
            "home": NamedReference("Address"),
            "meta": ObjectShape({"tags": ArrayType(STRING)}),
        }
    )
    data = b.obj(
        b.prop("home", b.obj(b.prop("town", b.lit("X")))),
        b.prop("meta", b.obj()),
    )

    findings = _validate(data, shape, registry)

    assert [(f.kind, f.data["propName"], f.data["interfaceName"]) for f in findings] == [
        (DiagnosticKind.MISSING_PROPERTY, "city", "Address"),
        (DiagnosticKind.EXTRA_PROPERTY, "town", "Address"),
        (DiagnosticKind.MISSING_PROPERTY, "tags", "meta"),
    ]


def test_unsupported_property_values_are_accepted_leniently() -> None:
    data = b.obj(b.prop("name", b.call("getName")), b.prop("age", b.ident("age")))
    assert _validate(data) == []
