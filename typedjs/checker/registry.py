"""Per-pass registry of declared interfaces, type aliases and enums.

A registry is created empty by each validation pass, filled in
declaration-encounter order and dropped when the pass ends; nothing is kept at
module level, so concurrent passes never observe each other's declarations.
Redeclaring a name replaces the earlier entry.

Named references are resolved with :func:`resolve_reference`, which performs at
most :data:`MAX_RESOLUTION_HOPS` lookups and reports the outcome as a tagged
:class:`ResolvedType` instead of handing back whatever the lookup produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping, Optional

from .types import LiteralType, NamedReference, ObjectShape, TypeExpression

__all__ = [
    "AliasDecl",
    "EnumDecl",
    "InterfaceDecl",
    "MAX_RESOLUTION_HOPS",
    "RegistryEntry",
    "ResolutionKind",
    "ResolvedType",
    "TypeRegistry",
    "resolve_reference",
]

# A reference resolves through one registry lookup. An alias whose target is
# itself a bare named reference is not followed.
MAX_RESOLUTION_HOPS = 1


# ---------------------------------------------------------------------------
# Registry entries


@dataclass(slots=True, frozen=True)
class InterfaceDecl:
    name: str
    shape: ObjectShape


@dataclass(slots=True, frozen=True)
class AliasDecl:
    name: str
    type: TypeExpression


@dataclass(slots=True, frozen=True)
class EnumDecl:
    """Enum with its member values in declaration order.

    A member whose initializer is not a literal has no statically known value
    and maps to ``None``; it can still be referenced as ``Enum.Member``.
    """

    name: str
    members: Mapping[str, Optional[LiteralType]] = field(default_factory=dict)

    def has_member(self, member: str) -> bool:
        return member in self.members

    def known_values(self) -> Iterator[LiteralType]:
        """Yield the statically known member values."""

        for value in self.members.values():
            if value is not None:
                yield value

    def values_by_name(self) -> dict[str, object]:
        """Return ``{member: python value}``, ``None`` for computed members."""

        return {
            name: (value.value if value is not None else None)
            for name, value in self.members.items()
        }


RegistryEntry = InterfaceDecl | AliasDecl | EnumDecl


# ---------------------------------------------------------------------------
# Registry


class TypeRegistry:
    """Name to declaration mapping owned by a single validation pass."""

    def __init__(self) -> None:
        self._entries: dict[str, RegistryEntry] = {}

    def declare_interface(self, name: str, shape: ObjectShape) -> InterfaceDecl:
        entry = InterfaceDecl(name, shape)
        self._entries[name] = entry
        return entry

    def declare_alias(self, name: str, type_expression: TypeExpression) -> AliasDecl:
        entry = AliasDecl(name, type_expression)
        self._entries[name] = entry
        return entry

    def declare_enum(self, name: str, members: Mapping[str, Optional[LiteralType]]) -> EnumDecl:
        entry = EnumDecl(name, dict(members))
        self._entries[name] = entry
        return entry

    def resolve(self, name: str) -> Optional[RegistryEntry]:
        """Return the entry registered under ``name``, if any."""

        return self._entries.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> list[str]:
        return list(self._entries)


# ---------------------------------------------------------------------------
# Resolution


class ResolutionKind(str, Enum):
    """Outcome of resolving a named reference."""

    SHAPE = "shape"
    TYPE = "type"
    ENUM = "enum"
    OPAQUE = "opaque"


@dataclass(slots=True, frozen=True)
class ResolvedType:
    """Result of :func:`resolve_reference`.

    ``type`` is set for ``SHAPE`` (the interface shape) and ``TYPE`` (the
    alias target); ``enum`` is set for ``ENUM``.  ``OPAQUE`` references match
    nothing but ``any``/``unknown``.
    """

    kind: ResolutionKind
    name: str
    type: Optional[TypeExpression] = None
    enum: Optional[EnumDecl] = None

    @property
    def is_opaque(self) -> bool:
        return self.kind is ResolutionKind.OPAQUE


def resolve_reference(registry: TypeRegistry, reference: NamedReference) -> ResolvedType:
    """Resolve ``reference`` with a single registry lookup."""

    entry = registry.resolve(reference.name)
    if isinstance(entry, InterfaceDecl):
        return ResolvedType(ResolutionKind.SHAPE, reference.name, type=entry.shape)
    if isinstance(entry, AliasDecl):
        if isinstance(entry.type, NamedReference):
            # Following the target would be a second hop.
            return ResolvedType(ResolutionKind.OPAQUE, reference.name)
        return ResolvedType(ResolutionKind.TYPE, reference.name, type=entry.type)
    if isinstance(entry, EnumDecl):
        return ResolvedType(ResolutionKind.ENUM, reference.name, enum=entry)
    return ResolvedType(ResolutionKind.OPAQUE, reference.name)
