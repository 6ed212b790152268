"""Loader turning ESTree JSON into :mod:`typedjs.syntax.tree` nodes.

The external parser (acorn extended with acorn-typescript, ``locations``
enabled) emits ESTree-shaped JSON.  This module maps the node kinds the checker
understands onto their dataclasses, keeps every other kind as a
:class:`~typedjs.syntax.tree.GenericNode`, and converts ``loc`` blocks into
:class:`~typedjs.syntax.tree.Span` values.

Field names follow the dataclasses (``snake_case``); the ESTree spelling is the
camelCase equivalent except for the handful of layout differences handled in
:func:`_lookup_field` (interface bodies, enum bodies, type arguments).

Anything that prevents building a tree raises :class:`SyntaxTreeError`.
"""

from __future__ import annotations

import json
from dataclasses import MISSING, fields
from typing import Any, Mapping, Optional

from . import tree

__all__ = ["NODE_TYPES", "SyntaxTreeError", "TOO_DEEP", "from_json", "from_mapping"]

# Reason reported when a document nests deeper than the interpreter can recurse.
TOO_DEEP = "syntax tree nests too deeply"


class SyntaxTreeError(RuntimeError):
    """Raised when the parser output cannot be turned into a syntax tree."""

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        if line is not None:
            super().__init__(f"{line}:{column or 0}: {message}")
        else:
            super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


def from_json(payload: str | bytes) -> tree.Program:
    """Parse ESTree JSON text and return the :class:`~typedjs.syntax.tree.Program` root."""

    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise SyntaxTreeError(
            f"invalid JSON: {exc.msg}", line=exc.lineno, column=exc.colno
        ) from exc
    except (TypeError, UnicodeDecodeError) as exc:
        raise SyntaxTreeError(f"unreadable parser output: {exc}") from exc
    except RecursionError as exc:
        raise SyntaxTreeError(TOO_DEEP) from exc
    return from_mapping(raw)


def from_mapping(data: Any) -> tree.Program:
    """Build a tree from already-decoded ESTree data."""

    if not isinstance(data, Mapping):
        raise SyntaxTreeError("parser output must be a JSON object")
    try:
        root = _deserialize_node(data)
    except RecursionError as exc:
        raise SyntaxTreeError(TOO_DEEP) from exc
    if not isinstance(root, tree.Program):
        raise SyntaxTreeError(
            f"root node must be a Program, got {root.node_type}",
            line=root.span.start_line if root.span else None,
            column=root.span.start_column if root.span else None,
        )
    return root


# ---------------------------------------------------------------------------
# Deserialization helpers


NODE_TYPES: dict[str, type[tree.Node]] = {
    cls.__name__: cls
    for cls in (
        tree.Program,
        tree.VariableDeclaration,
        tree.VariableDeclarator,
        tree.Identifier,
        tree.Literal,
        tree.ObjectExpression,
        tree.Property,
        tree.SpreadElement,
        tree.ArrayExpression,
        tree.UnaryExpression,
        tree.MemberExpression,
        tree.NewExpression,
        tree.TSInterfaceDeclaration,
        tree.TSTypeAliasDeclaration,
        tree.TSEnumDeclaration,
        tree.TSEnumMember,
        tree.TSTypeAnnotation,
        tree.TSLiteralType,
        tree.TSUnionType,
        tree.TSIntersectionType,
        tree.TSArrayType,
        tree.TSTupleType,
        tree.TSNamedTupleMember,
        tree.TSTypeReference,
        tree.TSTypeLiteral,
        tree.TSPropertySignature,
        tree.TSIndexSignature,
    )
}

# Positional bookkeeping and attachments that never carry tree structure.
_SKIPPED_KEYS = frozenset({"type", "loc", "range", "start", "end", "tokens", "comments"})

# Fields holding plain values rather than nodes.
_SCALAR_FIELDS = frozenset(
    {"kind", "name", "operator", "keyword", "raw", "bigint", "regex"}
    | {"computed", "shorthand", "optional"}
)


def _deserialize_node(data: Mapping[str, Any]) -> tree.Node:
    kind = data.get("type")
    span = _deserialize_span(data.get("loc"))
    if not isinstance(kind, str) or not kind:
        raise SyntaxTreeError(
            "node without a 'type' string",
            line=span.start_line if span else None,
            column=span.start_column if span else None,
        )
    if kind in tree.KEYWORD_TYPES:
        return tree.TSKeywordType(tree.KEYWORD_TYPES[kind], span=span)
    cls = NODE_TYPES.get(kind)
    if cls is None:
        attributes = {
            key: _deserialize_generic(value)
            for key, value in data.items()
            if key not in _SKIPPED_KEYS
        }
        return tree.GenericNode(kind, attributes, span=span)

    kwargs: dict[str, Any] = {"span": span}
    for field_info in fields(cls):
        if field_info.name == "span":
            continue
        present, raw_value = _lookup_field(kind, field_info.name, data)
        required = field_info.default is MISSING and field_info.default_factory is MISSING
        if not present or (raw_value is None and not _is_scalar(kind, field_info.name)):
            if required:
                raise _missing_field(kind, field_info.name, span)
            continue
        value = _deserialize_generic(raw_value)
        _check_field(kind, field_info.name, str(field_info.type), value, span)
        kwargs[field_info.name] = value
    return cls(**kwargs)


def _lookup_field(kind: str, field_name: str, data: Mapping[str, Any]) -> tuple[bool, Any]:
    if kind == "TSInterfaceDeclaration" and field_name == "body":
        body = data.get("body")
        if isinstance(body, Mapping):
            return "body" in body, body.get("body")
        return "body" in data, body
    if kind == "TSEnumDeclaration" and field_name == "members":
        if "members" in data:
            return True, data["members"]
        body = data.get("body")
        if isinstance(body, Mapping) and "members" in body:
            return True, body["members"]
        return False, None
    if kind == "TSTypeReference" and field_name == "type_arguments":
        for key in ("typeArguments", "typeParameters"):
            instantiation = data.get(key)
            if isinstance(instantiation, Mapping):
                return True, instantiation.get("params") or []
        return False, None
    key = _camel_case(field_name)
    return key in data, data.get(key)


def _deserialize_generic(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Mapping):
        if "type" in value:
            return _deserialize_node(value)
        return {key: _deserialize_generic(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_deserialize_generic(item) for item in value]
    return value


def _check_field(
    kind: str, field_name: str, annotation: str, value: Any, span: Optional[tree.Span]
) -> None:
    if _is_scalar(kind, field_name):
        return
    if annotation.startswith("list"):
        if not isinstance(value, list):
            raise _invalid_field(kind, field_name, "a list", span)
        for item in value:
            if item is not None and not isinstance(item, tree.Node):
                raise _invalid_field(kind, field_name, "a list of nodes", span)
        return
    if not isinstance(value, tree.Node):
        raise _invalid_field(kind, field_name, "a node", span)


def _is_scalar(kind: str, field_name: str) -> bool:
    return field_name in _SCALAR_FIELDS or (kind == "Literal" and field_name == "value")


def _deserialize_span(loc: Any) -> Optional[tree.Span]:
    if not isinstance(loc, Mapping):
        return None
    start = loc.get("start")
    end = loc.get("end")
    if not isinstance(start, Mapping) or not isinstance(end, Mapping):
        return None
    try:
        return tree.Span(
            int(start["line"]),
            int(start["column"]),
            int(end["line"]),
            int(end["column"]),
        )
    except (KeyError, TypeError, ValueError):
        return None


def _missing_field(kind: str, field_name: str, span: Optional[tree.Span]) -> SyntaxTreeError:
    return SyntaxTreeError(
        f"{kind} node is missing '{_camel_case(field_name)}'",
        line=span.start_line if span else None,
        column=span.start_column if span else None,
    )


def _invalid_field(
    kind: str, field_name: str, expected: str, span: Optional[tree.Span]
) -> SyntaxTreeError:
    return SyntaxTreeError(
        f"{kind}.{_camel_case(field_name)} must be {expected}",
        line=span.start_line if span else None,
        column=span.start_column if span else None,
    )


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)
