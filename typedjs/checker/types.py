"""Type-expression model used by the typedjs checker.

Every declared type is translated into one of the frozen dataclasses below.
They carry data only; translation lives in :mod:`typedjs.checker.translator`,
matching in :mod:`typedjs.checker.matcher` and rendering in
:mod:`typedjs.checker.render`.  :data:`TypeExpression` is the closed union of
the variants so consumers can dispatch exhaustively and finish with
:func:`typing.assert_never`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping, Optional

__all__ = [
    "ANY",
    "ArrayType",
    "IndexSignature",
    "IntersectionType",
    "LITERAL_KINDS",
    "LiteralType",
    "MapType",
    "NamedReference",
    "ObjectShape",
    "OptionalType",
    "PRIMITIVE_NAMES",
    "PrimitiveType",
    "RecordType",
    "SetType",
    "TupleType",
    "TypeExpression",
    "UNKNOWN",
    "UnionType",
    "literal_kind",
]


PRIMITIVE_NAMES = frozenset(
    {
        "string",
        "number",
        "boolean",
        "null",
        "undefined",
        "bigint",
        "symbol",
        "void",
        "never",
        "any",
        "unknown",
        "object",
    }
)

LITERAL_KINDS = frozenset({"string", "number", "boolean", "bigint", "null"})


# ---------------------------------------------------------------------------
# Variants


@dataclass(slots=True, frozen=True)
class PrimitiveType:
    """Keyword type such as ``string`` or ``unknown``."""

    name: str

    def __post_init__(self) -> None:
        if self.name not in PRIMITIVE_NAMES:
            raise ValueError(f"unknown primitive type {self.name!r}")


@dataclass(slots=True, frozen=True)
class LiteralType:
    """Exact literal value.

    ``kind`` is the runtime kind of ``value`` (one of :data:`LITERAL_KINDS`).
    It takes part in equality, so ``0`` and ``"0"`` or ``true`` and ``1`` stay
    distinct even though Python compares some of them equal.  Big integers
    store their value as ``int`` with kind ``"bigint"``.
    """

    value: object
    kind: str

    def __post_init__(self) -> None:
        if self.kind not in LITERAL_KINDS:
            raise ValueError(f"unknown literal kind {self.kind!r}")


@dataclass(slots=True, frozen=True)
class UnionType:
    members: tuple[TypeExpression, ...]


@dataclass(slots=True, frozen=True)
class IntersectionType:
    members: tuple[TypeExpression, ...]


@dataclass(slots=True, frozen=True)
class ArrayType:
    element: TypeExpression


@dataclass(slots=True, frozen=True)
class TupleType:
    elements: tuple[TypeExpression, ...]


@dataclass(slots=True, frozen=True)
class MapType:
    key: TypeExpression
    value: TypeExpression


@dataclass(slots=True, frozen=True)
class SetType:
    element: TypeExpression


@dataclass(slots=True, frozen=True)
class RecordType:
    key: TypeExpression
    value: TypeExpression


@dataclass(slots=True, frozen=True)
class IndexSignature:
    """``[key: K]: V`` member of an object shape."""

    key: TypeExpression
    value: TypeExpression


@dataclass(slots=True, frozen=True)
class OptionalType:
    """Marks an optional property; only ever appears as a shape member."""

    inner: TypeExpression


@dataclass(slots=True, frozen=True)
class ObjectShape:
    """Property name to type mapping plus an optional index signature.

    Property order follows the declaration order, which keeps rendered types
    and missing-property diagnostics stable.
    """

    properties: Mapping[str, TypeExpression] = field(default_factory=dict)
    index_signature: Optional[IndexSignature] = None


@dataclass(slots=True, frozen=True)
class NamedReference:
    """Unresolved type name, looked up in the registry at the point of use."""

    name: str


TypeExpression = (
    PrimitiveType
    | LiteralType
    | UnionType
    | IntersectionType
    | ArrayType
    | TupleType
    | MapType
    | SetType
    | RecordType
    | ObjectShape
    | OptionalType
    | NamedReference
)

ANY = PrimitiveType("any")
UNKNOWN = PrimitiveType("unknown")


# ---------------------------------------------------------------------------
# Helpers


def literal_kind(value: object) -> Optional[str]:
    """Return the JavaScript ``typeof``-style kind for a decoded literal value.

    ``bool`` is checked before ``int`` because it is a subclass.  Non-finite
    floats do not occur in parser output and are rejected.
    """

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, int):
        return "number"
    if isinstance(value, float):
        return "number" if math.isfinite(value) else None
    return None
