"""Human-readable rendering of type expressions for diagnostic messages."""

from __future__ import annotations

import json
from typing import Optional, assert_never

from ..syntax import tree
from .classifier import literal_value
from .types import (
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

__all__ = ["format_literal", "format_type", "format_value"]


def format_type(typ: TypeExpression) -> str:
    """Return the source-like spelling of ``typ`` used in messages and tests."""

    if isinstance(typ, PrimitiveType):
        return typ.name
    if isinstance(typ, LiteralType):
        return format_literal(typ)
    if isinstance(typ, UnionType):
        return " | ".join(format_type(member) for member in typ.members)
    if isinstance(typ, IntersectionType):
        return " & ".join(format_type(member) for member in typ.members)
    if isinstance(typ, ArrayType):
        return f"Array<{format_type(typ.element)}>"
    if isinstance(typ, TupleType):
        return "[" + ", ".join(format_type(element) for element in typ.elements) + "]"
    if isinstance(typ, MapType):
        return f"Map<{format_type(typ.key)}, {format_type(typ.value)}>"
    if isinstance(typ, SetType):
        return f"Set<{format_type(typ.element)}>"
    if isinstance(typ, RecordType):
        return f"Record<{format_type(typ.key)}, {format_type(typ.value)}>"
    if isinstance(typ, OptionalType):
        return f"{format_type(typ.inner)}?"
    if isinstance(typ, ObjectShape):
        return _format_shape(typ)
    if isinstance(typ, NamedReference):
        return typ.name
    assert_never(typ)


def format_literal(literal: LiteralType) -> str:
    if literal.kind == "bigint":
        return f"{literal.value}n"
    value = literal.value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return json.dumps(value)


def format_value(node: Optional[tree.Node], fallback: str) -> str:
    """Render a value node for messages: literals as written, else ``fallback``."""

    literal = literal_value(node)
    if literal is None:
        return fallback
    return format_literal(literal)


def _format_shape(shape: ObjectShape) -> str:
    parts = [_format_member(name, member) for name, member in shape.properties.items()]
    if shape.index_signature is not None:
        parts.append(_format_index(shape.index_signature))
    if not parts:
        return "{}"
    return "{ " + ", ".join(parts) + " }"


def _format_member(name: str, member: TypeExpression) -> str:
    if isinstance(member, OptionalType):
        return f"{name}?: {format_type(member.inner)}"
    return f"{name}: {format_type(member)}"


def _format_index(signature: IndexSignature) -> str:
    return f"[key: {format_type(signature.key)}]: {format_type(signature.value)}"
