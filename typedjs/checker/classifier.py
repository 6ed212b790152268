"""Static classification of value expressions.

:func:`classify` looks at the syntactic shape of an initializer and reports
its runtime type tag when that is certain without evaluating anything:

* literals classify by their runtime kind (big integers and regular
  expressions included);
* ``-`` applied to a numeric or big-integer literal keeps that kind, and
  ``void expr`` is ``undefined``;
* object and array literals classify as ``object``/``array`` without looking
  at their contents.

Everything else (calls, identifiers, member access, ...) is ``Unsupported``:
the checker does no dataflow inference and leaves it to the caller's policy
whether such values are accepted.  Array holes and literals whose value cannot
be decoded are ``Error`` and never satisfy a concrete type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..syntax import tree
from .types import LiteralType, literal_kind

__all__ = [
    "Classification",
    "ClassificationState",
    "VALUE_TAGS",
    "classify",
    "literal_value",
]

VALUE_TAGS = frozenset(
    {"string", "number", "boolean", "bigint", "null", "undefined", "object", "array", "unknown"}
)


class ClassificationState(str, Enum):
    KNOWN = "known"
    UNSUPPORTED = "unsupported"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class Classification:
    """Result of :func:`classify`.

    ``tag`` is the concrete type tag for ``KNOWN`` results and ``"unknown"``
    otherwise, which is also what diagnostics print as the actual type.
    """

    state: ClassificationState
    tag: str = "unknown"

    @property
    def known(self) -> bool:
        return self.state is ClassificationState.KNOWN

    @classmethod
    def of(cls, tag: str) -> Classification:
        if tag not in VALUE_TAGS or tag == "unknown":
            raise ValueError(f"invalid value tag {tag!r}")
        return cls(ClassificationState.KNOWN, tag)


_UNSUPPORTED = Classification(ClassificationState.UNSUPPORTED)
_ERROR = Classification(ClassificationState.ERROR)


def classify(node: Optional[tree.Node]) -> Classification:
    """Return the static classification of a value expression."""

    if node is None:
        return _ERROR
    if isinstance(node, tree.Literal):
        if node.regex is not None:
            return Classification.of("object")
        literal = literal_value(node)
        if literal is None:
            return _ERROR
        return Classification.of(literal.kind)
    if isinstance(node, tree.ObjectExpression):
        return Classification.of("object")
    if isinstance(node, tree.ArrayExpression):
        return Classification.of("array")
    if isinstance(node, tree.UnaryExpression):
        if node.operator == "void":
            return Classification.of("undefined")
        if node.operator == "-":
            literal = literal_value(node)
            if literal is not None:
                return Classification.of(literal.kind)
        return _UNSUPPORTED
    return _UNSUPPORTED


def literal_value(node: Optional[tree.Node]) -> Optional[LiteralType]:
    """Return the exact value of a literal expression, or ``None``.

    Negative numbers (``-1``) and negative big integers (``-1n``) arrive as a
    unary minus over a literal and are folded here, both for value nodes and
    for the literal inside a ``TSLiteralType``.
    """

    if isinstance(node, tree.UnaryExpression):
        if node.operator != "-" or not isinstance(node.argument, tree.Literal):
            return None
        inner = literal_value(node.argument)
        if inner is None or inner.kind not in {"number", "bigint"}:
            return None
        return LiteralType(-inner.value, inner.kind)  # type: ignore[operator]
    if not isinstance(node, tree.Literal) or node.regex is not None:
        return None
    if node.bigint is not None:
        digits = _parse_bigint(node.bigint)
        return LiteralType(digits, "bigint") if digits is not None else None
    if node.value is None and node.raw not in (None, "null"):
        # Value lost on the way through JSON.
        return None
    kind = literal_kind(node.value)
    if kind is None:
        return None
    return LiteralType(node.value, kind)


def _parse_bigint(text: str) -> Optional[int]:
    cleaned = text.replace("_", "").rstrip("n")
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        # ``int(..., 0)`` rejects decimal digits with leading zeros.
        return int(cleaned, 10)
    except ValueError:
        return None
