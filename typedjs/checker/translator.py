"""Annotation translator: type-annotation syntax to :mod:`~typedjs.checker.types`.

:func:`translate` never raises.  Node kinds it does not understand (function
types, ``keyof``, template literal types, conditional types, ...) become
``unknown`` so the checker stays usable on code using them.  Named references
are left unresolved; the matcher looks them up in the pass registry at the
point of use.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..syntax import tree
from .classifier import literal_value
from .types import (
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
    TypeExpression,
    UnionType,
)

__all__ = ["CONTAINER_ARITY", "build_enum_members", "translate", "translate_members"]

# Built-in generic containers and the number of type arguments they take.
CONTAINER_ARITY: Mapping[str, int] = {"Array": 1, "Set": 1, "Map": 2, "Record": 2}


def translate(node: Optional[tree.Node]) -> TypeExpression:
    """Translate an annotation node; a missing annotation means ``any``."""

    if node is None:
        return ANY
    if isinstance(node, tree.TSTypeAnnotation):
        return translate(node.type_annotation)
    if isinstance(node, tree.TSKeywordType):
        return PrimitiveType(node.keyword)
    if isinstance(node, tree.TSLiteralType):
        literal = literal_value(node.literal)
        return literal if literal is not None else UNKNOWN
    if isinstance(node, tree.TSUnionType):
        return UnionType(tuple(translate(member) for member in node.types))
    if isinstance(node, tree.TSIntersectionType):
        return IntersectionType(tuple(translate(member) for member in node.types))
    if isinstance(node, tree.TSArrayType):
        return ArrayType(translate(node.element_type))
    if isinstance(node, tree.TSTupleType):
        return TupleType(tuple(_tuple_element(element) for element in node.element_types))
    if isinstance(node, tree.TSTypeReference):
        return _translate_reference(node)
    if isinstance(node, tree.TSTypeLiteral):
        return translate_members(node.members)
    if isinstance(node, tree.GenericNode) and node.kind == "TSParenthesizedType":
        return translate(node.attributes.get("typeAnnotation"))
    return UNKNOWN


def translate_members(members: Sequence[tree.Node]) -> ObjectShape:
    """Build an object shape from type-literal or interface members.

    Members with computed keys are skipped.  Method signatures are kept as
    ``unknown`` properties so object literals providing them are not flagged
    as having extra properties.  When several index signatures are declared
    the last one wins.
    """

    properties: dict[str, TypeExpression] = {}
    index_signature: Optional[IndexSignature] = None
    for member in members:
        if isinstance(member, tree.TSPropertySignature):
            if member.computed:
                continue
            name = tree.key_name(member.key)
            if name is None:
                continue
            member_type = translate(member.type_annotation)
            properties[name] = OptionalType(member_type) if member.optional else member_type
        elif isinstance(member, tree.TSIndexSignature):
            index_signature = _index_signature(member)
        elif isinstance(member, tree.GenericNode) and member.kind == "TSMethodSignature":
            if member.attributes.get("computed"):
                continue
            key = member.attributes.get("key")
            name = tree.key_name(key) if isinstance(key, tree.Node) else None
            if name is None:
                continue
            optional = bool(member.attributes.get("optional"))
            properties[name] = OptionalType(UNKNOWN) if optional else UNKNOWN
    return ObjectShape(properties, index_signature)


def build_enum_members(node: tree.TSEnumDeclaration) -> dict[str, Optional[LiteralType]]:
    """Compute member values for an enum declaration.

    Members without an initializer take the auto-increment counter, which
    starts at 0 and restarts after every numeric literal initializer.  String
    initializers leave the counter untouched.  Initializers that are not
    literals have no static value (``None``) and leave the counter untouched.
    """

    members: dict[str, Optional[LiteralType]] = {}
    counter: float = 0
    for member in node.members:
        name = tree.key_name(member.id)
        if name is None:
            continue
        if member.initializer is None:
            members[name] = LiteralType(counter, "number")
            counter += 1
            continue
        value = literal_value(member.initializer)
        members[name] = value
        if value is not None and value.kind == "number":
            counter = value.value + 1  # type: ignore[operator]
    return members


# ---------------------------------------------------------------------------
# Helpers


def _translate_reference(node: tree.TSTypeReference) -> TypeExpression:
    name = _type_name(node.type_name)
    if name is None:
        return UNKNOWN
    arguments = [translate(argument) for argument in node.type_arguments]
    if CONTAINER_ARITY.get(name) == len(arguments):
        if name == "Array":
            return ArrayType(arguments[0])
        if name == "Set":
            return SetType(arguments[0])
        if name == "Map":
            return MapType(arguments[0], arguments[1])
        return RecordType(arguments[0], arguments[1])
    return NamedReference(name)


def _type_name(node: tree.Node) -> Optional[str]:
    if isinstance(node, tree.Identifier):
        return node.name
    if isinstance(node, tree.GenericNode) and node.kind == "TSQualifiedName":
        left = node.attributes.get("left")
        right = node.attributes.get("right")
        if isinstance(left, tree.Node) and isinstance(right, tree.Node):
            head = _type_name(left)
            tail = _type_name(right)
            if head is not None and tail is not None:
                return f"{head}.{tail}"
    return None


def _tuple_element(node: tree.Node) -> TypeExpression:
    if isinstance(node, tree.TSNamedTupleMember):
        return translate(node.element_type)
    return translate(node)


def _index_signature(member: tree.TSIndexSignature) -> IndexSignature:
    key_type: TypeExpression = UNKNOWN
    if member.parameters:
        parameter = member.parameters[0]
        if isinstance(parameter, tree.Identifier) and parameter.type_annotation is not None:
            key_type = translate(parameter.type_annotation)
    return IndexSignature(key_type, translate(member.type_annotation))
