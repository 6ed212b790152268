"""Tests for loading ESTree JSON into typed syntax nodes."""

from __future__ import annotations

import json

import pytest

import estree_builders as b
from typedjs.syntax import estree, tree


def test_loads_annotated_declaration_with_spans() -> None:
    declaration = b.const("user", b.ref("User"), b.at(b.obj(), 3, 18, 3, 20))
    payload = json.dumps(b.program(b.at(declaration, 3, 0, 3, 21)))

    program = estree.from_json(payload)

    statement = program.body[0]
    assert isinstance(statement, tree.VariableDeclaration)
    assert statement.kind == "const"
    assert statement.span == tree.Span(3, 0, 3, 21)
    declarator = statement.declarations[0]
    assert isinstance(declarator.id, tree.Identifier)
    annotation = declarator.id.type_annotation
    assert isinstance(annotation, tree.TSTypeAnnotation)
    assert isinstance(annotation.type_annotation, tree.TSTypeReference)
    assert isinstance(declarator.init, tree.ObjectExpression)
    assert declarator.init.span is not None
    assert declarator.init.span.to_tuple() == (3, 18, 3, 20)


@pytest.mark.parametrize("name", sorted(tree.KEYWORD_TYPES.values()))
def test_keyword_nodes_collapse_into_one_class(name: str) -> None:
    loaded = b.node(b.kw(name))
    assert isinstance(loaded, tree.TSKeywordType)
    assert loaded.keyword == name
    assert loaded.node_type == b.kw(name)["type"]


def test_interface_members_are_read_from_nested_body() -> None:
    program = b.load(b.interface("User", b.prop_sig("name", b.kw("string")), extends=("Base",)))

    declaration = program.body[0]
    assert isinstance(declaration, tree.TSInterfaceDeclaration)
    assert declaration.id.name == "User"
    assert [type(member) for member in declaration.body] == [tree.TSPropertySignature]
    assert len(declaration.extends) == 1
    assert declaration.extends[0].node_type == "TSExpressionWithTypeArguments"


def test_enum_members_accept_both_layouts() -> None:
    flat = b.enum("Color", "Red", "Green")
    nested = {
        "type": "TSEnumDeclaration",
        "id": b.ident("Color"),
        "body": {"type": "TSEnumBody", "members": [b.enum_member("Red"), b.enum_member("Green")]},
    }

    for data in (flat, nested):
        declaration = b.load(data).body[0]
        assert isinstance(declaration, tree.TSEnumDeclaration)
        assert [tree.key_name(member.id) for member in declaration.members] == ["Red", "Green"]


@pytest.mark.parametrize("key", ["typeArguments", "typeParameters"])
def test_type_reference_arguments_accept_both_spellings(key: str) -> None:
    data = {
        "type": "TSTypeReference",
        "typeName": b.ident("Array"),
        key: {"type": "TSTypeParameterInstantiation", "params": [b.kw("number")]},
    }

    loaded = b.node(data)

    assert isinstance(loaded, tree.TSTypeReference)
    assert [arg.node_type for arg in loaded.type_arguments] == ["TSNumberKeyword"]


def test_literal_variants_keep_their_raw_data() -> None:
    big = b.node(b.bigint("10"))
    pattern = b.node(b.regex("a+", "g"))
    null = b.node(b.lit(None))

    assert isinstance(big, tree.Literal) and big.bigint == "10" and big.value is None
    assert isinstance(pattern, tree.Literal) and pattern.regex == {"pattern": "a+", "flags": "g"}
    assert isinstance(null, tree.Literal) and null.raw == "null"


def test_unknown_kinds_become_generic_nodes_that_are_still_walked() -> None:
    inner = b.const("n", b.kw("number"), b.lit(1))
    program = b.load(b.function("setup", inner))

    function = program.body[0]
    assert isinstance(function, tree.GenericNode)
    assert function.node_type == "FunctionDeclaration"
    kinds = [node.node_type for node in program.walk()]
    assert "VariableDeclarator" in kinds
    assert kinds.index("FunctionDeclaration") < kinds.index("VariableDeclarator")


def test_array_holes_are_kept() -> None:
    loaded = b.node(b.arr(b.lit(1), None, b.lit(3)))
    assert isinstance(loaded, tree.ArrayExpression)
    assert loaded.elements[1] is None
    assert len(list(loaded.children())) == 2


def test_invalid_json_reports_position() -> None:
    with pytest.raises(estree.SyntaxTreeError) as excinfo:
        estree.from_json('{"type": "Program", "body": [}')
    assert excinfo.value.line == 1
    assert "invalid JSON" in excinfo.value.message


@pytest.mark.parametrize(
    "payload, fragment",
    [
        ("[]", "must be a JSON object"),
        ('{"body": []}', "without a 'type'"),
        ('{"type": "Identifier", "name": "x"}', "root node must be a Program"),
        ('{"type": "Program"}', "missing 'body'"),
        ('{"type": "Program", "body": {"type": "Identifier", "name": "x"}}', "must be a list"),
    ],
)
def test_malformed_trees_raise_syntax_tree_error(payload: str, fragment: str) -> None:
    with pytest.raises(estree.SyntaxTreeError, match=fragment):
        estree.from_json(payload)


def test_missing_required_field_reports_node_location() -> None:
    data = b.program(b.at({"type": "TSTypeAliasDeclaration", "id": b.ident("T")}, 4, 2))

    with pytest.raises(estree.SyntaxTreeError) as excinfo:
        estree.from_mapping(data)

    assert excinfo.value.line == 4
    assert excinfo.value.column == 2
    assert "typeAnnotation" in str(excinfo.value)


@pytest.mark.parametrize(
    "key, expected",
    [
        (b.ident("name"), "name"),
        (b.lit("quoted key"), "quoted key"),
        (b.lit(1), "1"),
        (b.lit(1.5), "1.5"),
        (b.lit(True), None),
        (b.call("f"), None),
    ],
)
def test_key_name(key: dict, expected: str | None) -> None:
    assert tree.key_name(b.node(key)) == expected
