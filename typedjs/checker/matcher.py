"""Structural compatibility between value expressions and type expressions.

:class:`Matcher` answers two questions for one validation pass:

* :meth:`Matcher.matches` decides whether a value expression satisfies a type
  expression.  Object shapes only require an object literal at this level;
  their members are checked by :meth:`Matcher.validate_object`.
* :meth:`Matcher.diagnose` explains a failing binding with the most precise
  diagnostics available: enum, union, literal and tuple specific kinds,
  per-element findings inside array literals, per-property findings inside
  object literals, and a plain type mismatch otherwise.

Named references are resolved through the pass registry one hop at a time.
While an alias is being expanded for a value node, a further reference to the
same alias from that node is opaque, which bounds recursion for
self-referential aliases such as ``type T = T | string``.

Values the classifier cannot type statically are accepted or rejected
according to :attr:`CheckOptions.unknown_values`; opaque references reject
them under both policies.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, assert_never

from ..syntax import tree
from .classifier import Classification, ClassificationState, classify, literal_value
from .diagnostics import Diagnostic, DiagnosticEmitter, DiagnosticKind
from .options import CheckOptions
from .registry import EnumDecl, ResolutionKind, ResolvedType, TypeRegistry, resolve_reference
from .render import format_literal, format_type, format_value
from .types import (
    ArrayType,
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

__all__ = ["Matcher", "matches", "merge_shapes", "validate_object"]

# Value tags a primitive type accepts besides its own name.
_PRIMITIVE_ACCEPTS: dict[str, frozenset[str]] = {
    "object": frozenset({"object", "array"}),
    "void": frozenset({"undefined"}),
}

_ShapeTarget = tuple[ObjectShape, Optional[str]]


# ---------------------------------------------------------------------------
# Public entry points


def matches(
    node: Optional[tree.Node],
    typ: TypeExpression,
    registry: Optional[TypeRegistry] = None,
    options: Optional[CheckOptions] = None,
) -> bool:
    """Return ``True`` when ``node`` satisfies ``typ``."""

    return Matcher(registry if registry is not None else TypeRegistry(), options).matches(node, typ)


def validate_object(
    node: tree.ObjectExpression,
    shape: ObjectShape,
    context_name: str,
    registry: Optional[TypeRegistry] = None,
    options: Optional[CheckOptions] = None,
) -> list[Diagnostic]:
    """Check the members of an object literal against ``shape``."""

    matcher = Matcher(registry if registry is not None else TypeRegistry(), options)
    return matcher.validate_object(node, shape, context_name)


def merge_shapes(shapes: Sequence[ObjectShape]) -> ObjectShape:
    """Merge the shapes of an intersection into one shape.

    A property declared by several shapes must satisfy all declarations and
    stays optional only when every declaration is optional.  The last index
    signature wins.
    """

    properties: dict[str, TypeExpression] = {}
    index_signature = None
    for shape in shapes:
        for name, member in shape.properties.items():
            existing = properties.get(name)
            properties[name] = member if existing is None else _merge_member(existing, member)
        if shape.index_signature is not None:
            index_signature = shape.index_signature
    return ObjectShape(properties, index_signature)


# ---------------------------------------------------------------------------
# Matcher


class Matcher:
    """Matching and diagnosis bound to one pass registry and option set."""

    def __init__(
        self,
        registry: TypeRegistry,
        options: Optional[CheckOptions] = None,
        emitter: Optional[DiagnosticEmitter] = None,
    ) -> None:
        self.registry = registry
        self.options = options if options is not None else CheckOptions()
        self.emitter = emitter if emitter is not None else self.options.emitter()
        self._expanding: set[tuple[str, int]] = set()

    # ------------------------------------------------------------------
    # Matching

    def matches(self, node: Optional[tree.Node], typ: TypeExpression) -> bool:
        if isinstance(typ, PrimitiveType):
            return self._matches_primitive(node, typ.name)
        if isinstance(typ, LiteralType):
            literal = literal_value(node)
            if literal is not None:
                return literal == typ
            return self._accept(classify(node))
        if isinstance(typ, UnionType):
            return any(self.matches(node, member) for member in typ.members)
        if isinstance(typ, IntersectionType):
            return all(self.matches(node, member) for member in typ.members)
        if isinstance(typ, ArrayType):
            if isinstance(node, tree.ArrayExpression):
                return all(self.matches(element, typ.element) for element in node.elements)
            return self._accept(classify(node))
        if isinstance(typ, TupleType):
            if isinstance(node, tree.ArrayExpression):
                spread = _first_spread(node)
                if spread is not None:
                    # The literal's length is unknown until the spread is evaluated.
                    return self._accept(classify(spread))
                return len(node.elements) == len(typ.elements) and all(
                    self.matches(element, expected)
                    for element, expected in zip(node.elements, typ.elements)
                )
            return self._accept(classify(node))
        if isinstance(typ, (MapType, SetType, RecordType)):
            return self._matches_container(node, typ)
        if isinstance(typ, ObjectShape):
            if isinstance(node, tree.ObjectExpression):
                return True
            return self._accept(classify(node))
        if isinstance(typ, OptionalType):
            return classify(node).tag == "undefined" or self.matches(node, typ.inner)
        if isinstance(typ, NamedReference):
            return self._matches_reference(node, typ)
        assert_never(typ)

    def _matches_primitive(self, node: Optional[tree.Node], name: str) -> bool:
        if name in ("any", "unknown"):
            return True
        classification = classify(node)
        if classification.known:
            return classification.tag in _PRIMITIVE_ACCEPTS.get(name, frozenset({name}))
        return self._accept(classification)

    def _accept(self, classification: Classification) -> bool:
        """Policy for values that did not classify to a concrete tag."""

        if classification.state is ClassificationState.UNSUPPORTED:
            return not self.options.strict
        return False

    def _matches_container(
        self, node: Optional[tree.Node], typ: MapType | SetType | RecordType
    ) -> bool:
        if isinstance(node, tree.ObjectExpression):
            if isinstance(typ, RecordType) and self.options.container_contents:
                return self._record_entries_match(node, typ)
            return True
        if isinstance(node, tree.NewExpression) and not isinstance(typ, RecordType):
            constructor = "Map" if isinstance(typ, MapType) else "Set"
            if isinstance(node.callee, tree.Identifier) and node.callee.name == constructor:
                if self.options.container_contents:
                    return self._constructor_entries_match(node, typ)
                return True
        return self._accept(classify(node))

    def _record_entries_match(self, node: tree.ObjectExpression, typ: RecordType) -> bool:
        for prop in node.properties:
            if not isinstance(prop, tree.Property) or prop.computed:
                continue
            name = tree.key_name(prop.key)
            if name is None:
                continue
            key_ok = self.matches(_string_literal(name, prop.key), typ.key)
            if not key_ok and isinstance(prop.key, tree.Literal):
                key_ok = self.matches(prop.key, typ.key)
            if not key_ok or not self.matches(prop.value, typ.value):
                return False
        return True

    def _constructor_entries_match(
        self, node: tree.NewExpression, typ: MapType | SetType
    ) -> bool:
        if not node.arguments or not isinstance(node.arguments[0], tree.ArrayExpression):
            return True
        for entry in node.arguments[0].elements:
            if isinstance(typ, SetType):
                if not self.matches(entry, typ.element):
                    return False
            elif isinstance(entry, tree.ArrayExpression):
                if len(entry.elements) != 2:
                    return False
                key, value = entry.elements
                if not (self.matches(key, typ.key) and self.matches(value, typ.value)):
                    return False
            elif not self._accept(classify(entry)):
                return False
        return True

    def _matches_reference(self, node: Optional[tree.Node], ref: NamedReference) -> bool:
        resolved = self._resolve(ref, node)
        expandable = resolved.kind in (ResolutionKind.SHAPE, ResolutionKind.TYPE)
        if expandable and resolved.type is not None:
            with self._expanding_alias(ref.name, node):
                return self.matches(node, resolved.type)
        if resolved.kind is ResolutionKind.ENUM and resolved.enum is not None:
            return self.options.enum_membership and self._matches_enum(node, resolved.enum)
        return False

    def _matches_enum(self, node: Optional[tree.Node], enum: EnumDecl) -> bool:
        access = self._enum_member_access(node)
        if access is not None:
            enum_name, member = access
            return enum_name == enum.name and enum.has_member(member)
        literal = literal_value(node)
        if literal is not None:
            return any(literal == value for value in enum.known_values())
        return self._accept(classify(node))

    def _enum_member_access(self, node: Optional[tree.Node]) -> Optional[tuple[str, str]]:
        """Return ``(enum, member)`` for ``Enum.Member`` and ``Enum["Member"]``."""

        if not isinstance(node, tree.MemberExpression):
            return None
        if not isinstance(node.object, tree.Identifier):
            return None
        if not isinstance(self.registry.resolve(node.object.name), EnumDecl):
            return None
        member: Optional[str] = None
        if node.computed:
            if isinstance(node.property, tree.Literal):
                member = tree.key_name(node.property)
        elif isinstance(node.property, tree.Identifier):
            member = node.property.name
        if member is None:
            return None
        return node.object.name, member

    # ------------------------------------------------------------------
    # Resolution helpers

    def _resolve(self, ref: NamedReference, node: Optional[tree.Node]) -> ResolvedType:
        if (ref.name, id(node)) in self._expanding:
            return ResolvedType(ResolutionKind.OPAQUE, ref.name)
        return resolve_reference(self.registry, ref)

    @contextmanager
    def _expanding_alias(self, name: str, node: Optional[tree.Node]) -> Iterator[None]:
        key = (name, id(node))
        self._expanding.add(key)
        try:
            yield
        finally:
            self._expanding.discard(key)

    def _shape_target(
        self, typ: TypeExpression, node: Optional[tree.Node]
    ) -> Optional[_ShapeTarget]:
        """Return the object shape ``typ`` denotes and its interface name, if any."""

        if isinstance(typ, ObjectShape):
            return typ, None
        if isinstance(typ, NamedReference):
            resolved = self._resolve(typ, node)
            if resolved.kind is ResolutionKind.SHAPE and isinstance(resolved.type, ObjectShape):
                return resolved.type, typ.name
            if resolved.kind is ResolutionKind.TYPE and resolved.type is not None:
                with self._expanding_alias(typ.name, node):
                    target = self._shape_target(resolved.type, node)
                return (target[0], None) if target is not None else None
            return None
        if isinstance(typ, IntersectionType):
            shapes = []
            for member in typ.members:
                target = self._shape_target(member, node)
                if target is None:
                    return None
                shapes.append(target[0])
            return merge_shapes(shapes), None
        return None

    def _sequence_target(
        self, typ: TypeExpression, node: Optional[tree.Node]
    ) -> Optional[TupleType | ArrayType]:
        if isinstance(typ, (TupleType, ArrayType)):
            return typ
        if isinstance(typ, NamedReference):
            resolved = self._resolve(typ, node)
            if resolved.kind is ResolutionKind.TYPE and resolved.type is not None:
                with self._expanding_alias(typ.name, node):
                    return self._sequence_target(resolved.type, node)
        return None

    # ------------------------------------------------------------------
    # Diagnosis

    def diagnose(
        self, node: tree.Node, typ: TypeExpression, binding_name: str
    ) -> list[Diagnostic]:
        """Return the diagnostics for ``node`` checked against ``typ``.

        ``binding_name`` names the annotated binding and is used as the
        context of object-shape findings when the shape is not a named
        interface.
        """

        if isinstance(node, tree.ObjectExpression):
            target = self._shape_target(typ, node)
            if target is not None:
                shape, interface_name = target
                return self.validate_object(node, shape, interface_name or binding_name)
        if isinstance(node, tree.ArrayExpression):
            sequence = self._sequence_target(typ, node)
            if sequence is not None:
                return self._diagnose_sequence(node, sequence, binding_name)
        if self.matches(node, typ):
            return []
        return self._select(node, typ, binding_name)

    def _select(self, node: tree.Node, typ: TypeExpression, binding_name: str) -> list[Diagnostic]:
        if isinstance(typ, NamedReference):
            resolved = self._resolve(typ, node)
            if resolved.kind is ResolutionKind.ENUM and self.options.enum_membership:
                diagnostic = self._emit(
                    DiagnosticKind.INVALID_ENUM,
                    node,
                    actual=self._describe_value(node),
                    enumName=typ.name,
                )
                return [diagnostic]
            if resolved.kind is ResolutionKind.TYPE and resolved.type is not None:
                with self._expanding_alias(typ.name, node):
                    return self.diagnose(node, resolved.type, binding_name)
            return [self._mismatch(node, typ)]
        if isinstance(typ, UnionType):
            diagnostic = self._emit(
                DiagnosticKind.INVALID_UNION,
                node,
                expected=format_type(typ),
                actual=classify(node).tag,
            )
            return [diagnostic]
        if isinstance(typ, LiteralType):
            diagnostic = self._emit(
                DiagnosticKind.INVALID_LITERAL,
                node,
                expected=format_literal(typ),
                actual=self._describe_value(node),
            )
            return [diagnostic]
        return [self._mismatch(node, typ)]

    def _diagnose_sequence(
        self, node: tree.ArrayExpression, typ: TupleType | ArrayType, binding_name: str
    ) -> list[Diagnostic]:
        if isinstance(typ, TupleType):
            if _first_spread(node) is not None:
                if self.matches(node, typ):
                    return []
                return [self._mismatch(node, typ, actual="unknown")]
            if len(node.elements) != len(typ.elements):
                diagnostic = self._emit(
                    DiagnosticKind.INVALID_TUPLE,
                    node,
                    expected=len(typ.elements),
                    actual=len(node.elements),
                )
                return [diagnostic]
            expected_types: Sequence[TypeExpression] = typ.elements
        else:
            expected_types = [typ.element] * len(node.elements)

        diagnostics: list[Diagnostic] = []
        for element, expected in zip(node.elements, expected_types):
            if element is None:
                # Holes have no location of their own.
                if not self.matches(None, expected):
                    diagnostics.append(self._mismatch(node, expected, actual="undefined"))
                continue
            diagnostics.extend(self.diagnose(element, expected, binding_name))
        return diagnostics

    def validate_object(
        self, node: tree.ObjectExpression, shape: ObjectShape, context_name: str
    ) -> list[Diagnostic]:
        """Report missing, unexpected and mistyped properties of an object literal.

        Computed keys are ignored.  A spread element may supply any declared
        property, so it suppresses missing-property findings; explicit
        properties are still checked.  With an index signature, undeclared
        properties are accepted without checking their values.
        """

        present: dict[str, tree.Property] = {}
        has_spread = False
        for prop in node.properties:
            if isinstance(prop, tree.SpreadElement):
                has_spread = True
                continue
            if not isinstance(prop, tree.Property) or prop.computed:
                continue
            name = tree.key_name(prop.key)
            if name is not None:
                present[name] = prop

        diagnostics: list[Diagnostic] = []
        for name, declared in shape.properties.items():
            prop = present.get(name)
            if prop is None:
                if not isinstance(declared, OptionalType) and not has_spread:
                    diagnostics.append(
                        self._emit(
                            DiagnosticKind.MISSING_PROPERTY,
                            node,
                            propName=name,
                            interfaceName=context_name,
                        )
                    )
                continue
            diagnostics.extend(self._check_property(prop, declared, name))

        if shape.index_signature is None:
            for name, prop in present.items():
                if name not in shape.properties:
                    diagnostics.append(
                        self._emit(
                            DiagnosticKind.EXTRA_PROPERTY,
                            prop,
                            propName=name,
                            interfaceName=context_name,
                        )
                    )
        return diagnostics

    def _check_property(
        self, prop: tree.Property, declared: TypeExpression, name: str
    ) -> list[Diagnostic]:
        value = prop.value
        expected = declared.inner if isinstance(declared, OptionalType) else declared
        if isinstance(value, tree.ObjectExpression):
            target = self._shape_target(expected, value)
            if target is not None:
                shape, interface_name = target
                return self.validate_object(value, shape, interface_name or name)
        if self.matches(value, declared):
            return []
        return [self._mismatch(value, expected)]

    # ------------------------------------------------------------------
    # Emission helpers

    def _emit(self, kind: DiagnosticKind, node: Optional[tree.Node], **data: object) -> Diagnostic:
        return self.emitter.create(kind, node, **data)

    def _mismatch(
        self, node: tree.Node, expected: TypeExpression, *, actual: Optional[str] = None
    ) -> Diagnostic:
        return self._emit(
            DiagnosticKind.TYPE_MISMATCH,
            node,
            expected=format_type(expected),
            actual=actual if actual is not None else classify(node).tag,
        )

    def _describe_value(self, node: tree.Node) -> str:
        access = self._enum_member_access(node)
        if access is not None:
            return ".".join(access)
        return format_value(node, classify(node).tag)


# ---------------------------------------------------------------------------
# Helpers


def _unwrap(member: TypeExpression) -> TypeExpression:
    return member.inner if isinstance(member, OptionalType) else member


def _merge_member(left: TypeExpression, right: TypeExpression) -> TypeExpression:
    optional = isinstance(left, OptionalType) and isinstance(right, OptionalType)
    left_inner, right_inner = _unwrap(left), _unwrap(right)
    inner = left_inner if left_inner == right_inner else IntersectionType((left_inner, right_inner))
    return OptionalType(inner) if optional else inner


def _string_literal(name: str, anchor: tree.Node) -> tree.Literal:
    return tree.Literal(value=name, raw=json.dumps(name), span=anchor.span)


def _first_spread(node: tree.ArrayExpression) -> Optional[tree.SpreadElement]:
    for element in node.elements:
        if isinstance(element, tree.SpreadElement):
            return element
    return None
