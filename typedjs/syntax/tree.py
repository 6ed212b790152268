"""Syntax tree definitions consumed by the typedjs checker.

The parser itself lives outside this project (acorn with the acorn-typescript
plugin).  This module mirrors the slice of its ESTree output that the checker
reasons about as small, data-only dataclasses so passes can rely on
``isinstance`` dispatch instead of probing dictionaries.  Node kinds outside
that slice are kept as :class:`GenericNode` instances: the checker ignores
them, but their children are still traversed so declarations nested in
functions, blocks, classes, or exports are reached.

The tree is read-only from the checker's point of view.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Iterator, Mapping, Optional, Sequence

__all__ = [
    "ArrayExpression",
    "DOCUMENT_START",
    "GenericNode",
    "Identifier",
    "KEYWORD_TYPES",
    "Literal",
    "MemberExpression",
    "NewExpression",
    "Node",
    "ObjectExpression",
    "Program",
    "Property",
    "Span",
    "SpreadElement",
    "TSArrayType",
    "TSEnumDeclaration",
    "TSEnumMember",
    "TSIndexSignature",
    "TSInterfaceDeclaration",
    "TSIntersectionType",
    "TSKeywordType",
    "TSLiteralType",
    "TSNamedTupleMember",
    "TSPropertySignature",
    "TSTupleType",
    "TSTypeAliasDeclaration",
    "TSTypeAnnotation",
    "TSTypeLiteral",
    "TSTypeReference",
    "TSUnionType",
    "UnaryExpression",
    "VariableDeclaration",
    "VariableDeclarator",
    "key_name",
]

# ---------------------------------------------------------------------------
# Shared utilities


@dataclass(slots=True, frozen=True)
class Span:
    """Source range of a node.

    Lines are 1-based and columns 0-based, matching the parser's ``loc``.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Return a tuple form used by reporters."""

        return (self.start_line, self.start_column, self.end_line, self.end_column)


DOCUMENT_START = Span(1, 0, 1, 0)


@dataclass(slots=True, kw_only=True)
class Node:
    """Base class for all syntax nodes.

    ``span`` is optional because tests occasionally synthesise nodes without
    location information.
    """

    span: Optional[Span] = None

    @property
    def node_type(self) -> str:
        """ESTree node kind, e.g. ``"VariableDeclarator"``."""

        return self.__class__.__name__

    def children(self) -> Iterator[Node]:
        """Yield child nodes in declaration order, skipping ``None`` entries."""

        for field_info in fields(self):
            if field_info.name == "span":
                continue
            yield from _iter_possible_children(getattr(self, field_info.name))

    def walk(self) -> Iterator[Node]:
        """Depth-first traversal starting at this node, in source order."""

        yield self
        for child in self.children():
            yield from child.walk()


# ---------------------------------------------------------------------------
# Statements and expressions


@dataclass(slots=True)
class Program(Node):
    """Root of a parsed document."""

    body: list[Node]


@dataclass(slots=True)
class VariableDeclaration(Node):
    """``const``/``let``/``var`` statement holding one or more declarators."""

    kind: str
    declarations: list["VariableDeclarator"]


@dataclass(slots=True)
class VariableDeclarator(Node):
    """Single binding; the annotation hangs off the ``id`` identifier."""

    id: Node
    init: Optional[Node] = None


@dataclass(slots=True)
class Identifier(Node):
    name: str
    type_annotation: Optional["TSTypeAnnotation"] = None


@dataclass(slots=True)
class Literal(Node):
    """Literal expression.

    ``bigint`` holds the digit string for big-integer literals (``10n``) and
    ``regex`` the pattern/flags mapping for regular expressions; ``value`` may
    be ``None`` for both once the tree went through JSON.
    """

    value: object = None
    raw: Optional[str] = None
    bigint: Optional[str] = None
    regex: Optional[Mapping[str, Any]] = None


@dataclass(slots=True)
class ObjectExpression(Node):
    properties: list[Node]


@dataclass(slots=True)
class Property(Node):
    key: Node
    value: Node
    computed: bool = False
    shorthand: bool = False


@dataclass(slots=True)
class SpreadElement(Node):
    argument: Node


@dataclass(slots=True)
class ArrayExpression(Node):
    """Array literal; ``None`` entries are holes (``[1, , 3]``)."""

    elements: list[Optional[Node]]


@dataclass(slots=True)
class UnaryExpression(Node):
    operator: str
    argument: Node


@dataclass(slots=True)
class MemberExpression(Node):
    object: Node
    property: Node
    computed: bool = False


@dataclass(slots=True)
class NewExpression(Node):
    callee: Node
    arguments: list[Node] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Type-level declarations


@dataclass(slots=True)
class TSInterfaceDeclaration(Node):
    """``interface`` declaration.

    ``body`` is the flattened member list; ``extends`` holds the heritage
    clauses, whose ``expression`` names the parent interface.
    """

    id: Identifier
    body: list[Node]
    extends: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class TSTypeAliasDeclaration(Node):
    id: Identifier
    type_annotation: Node


@dataclass(slots=True)
class TSEnumDeclaration(Node):
    id: Identifier
    members: list["TSEnumMember"]


@dataclass(slots=True)
class TSEnumMember(Node):
    id: Node
    initializer: Optional[Node] = None


# ---------------------------------------------------------------------------
# Type annotations


KEYWORD_TYPES: Mapping[str, str] = {
    "TSStringKeyword": "string",
    "TSNumberKeyword": "number",
    "TSBooleanKeyword": "boolean",
    "TSNullKeyword": "null",
    "TSUndefinedKeyword": "undefined",
    "TSBigIntKeyword": "bigint",
    "TSSymbolKeyword": "symbol",
    "TSVoidKeyword": "void",
    "TSNeverKeyword": "never",
    "TSAnyKeyword": "any",
    "TSUnknownKeyword": "unknown",
    "TSObjectKeyword": "object",
}

_KEYWORD_KINDS = {keyword: kind for kind, keyword in KEYWORD_TYPES.items()}


@dataclass(slots=True)
class TSTypeAnnotation(Node):
    """Wrapper the parser puts between ``: `` and the actual type node."""

    type_annotation: Node


@dataclass(slots=True)
class TSKeywordType(Node):
    """Any ``TS*Keyword`` node; ``keyword`` is the lower-case type name."""

    keyword: str

    @property
    def node_type(self) -> str:
        return _KEYWORD_KINDS.get(self.keyword, "TSKeyword")


@dataclass(slots=True)
class TSLiteralType(Node):
    literal: Node


@dataclass(slots=True)
class TSUnionType(Node):
    types: list[Node]


@dataclass(slots=True)
class TSIntersectionType(Node):
    types: list[Node]


@dataclass(slots=True)
class TSArrayType(Node):
    element_type: Node


@dataclass(slots=True)
class TSTupleType(Node):
    element_types: list[Node]


@dataclass(slots=True)
class TSNamedTupleMember(Node):
    label: Node
    element_type: Node
    optional: bool = False


@dataclass(slots=True)
class TSTypeReference(Node):
    """Reference to a named type, with optional type arguments."""

    type_name: Node
    type_arguments: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class TSTypeLiteral(Node):
    members: list[Node]


@dataclass(slots=True)
class TSPropertySignature(Node):
    key: Node
    type_annotation: Optional[TSTypeAnnotation] = None
    optional: bool = False
    computed: bool = False


@dataclass(slots=True)
class TSIndexSignature(Node):
    parameters: list[Node]
    type_annotation: Optional[TSTypeAnnotation] = None


# ---------------------------------------------------------------------------
# Catch-all


@dataclass(slots=True)
class GenericNode(Node):
    """Node kind the checker has no dedicated class for.

    ``attributes`` keeps the converted ESTree fields; nested nodes are real
    :class:`Node` instances so traversal still reaches them.
    """

    kind: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def node_type(self) -> str:
        return self.kind

    def children(self) -> Iterator[Node]:
        for value in self.attributes.values():
            yield from _iter_possible_children(value)


# ---------------------------------------------------------------------------
# Helper functions


def key_name(key: Node) -> Optional[str]:
    """Return the static name of a property key, or ``None`` when unknown.

    Identifiers contribute their name, string and number literals their value
    (numbers rendered the way JavaScript stringifies them).
    """

    if isinstance(key, Identifier):
        return key.name
    if isinstance(key, Literal):
        value = key.value
        if isinstance(value, str):
            return value
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, (int, float)):
            return str(value)
    return None


def _iter_possible_children(value: object) -> Iterator[Node]:
    if isinstance(value, Node):
        yield value
        return
    if isinstance(value, Mapping):
        for item in value.values():
            yield from _iter_possible_children(item)
        return
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for item in value:
            yield from _iter_possible_children(item)
