"""Validation pass over one syntax tree.

A pass walks the tree once, depth-first in source order.  Interface, alias and
enum declarations are registered as they are met; every annotated variable
declarator with an initializer is checked against its declared type at the
point it is met, so only declarations that precede a binding are visible to
it.  Later references are opaque.

Each pass owns its registry and matcher.  Nothing survives the call, and two
passes never share mutable state.
"""

from __future__ import annotations

import time
from typing import Optional

from ..syntax import estree, tree
from ..telemetry import metrics
from ..telemetry.logger import get_logger
from .diagnostics import Diagnostic
from .matcher import Matcher, merge_shapes
from .options import CheckOptions
from .registry import InterfaceDecl, TypeRegistry
from .translator import build_enum_members, translate, translate_members
from .types import UNKNOWN, IndexSignature, ObjectShape, PrimitiveType

__all__ = ["check", "check_json"]

_LOGGER = get_logger("typedjs.checker")


def check(program: tree.Program, options: Optional[CheckOptions] = None) -> list[Diagnostic]:
    """Run one validation pass over ``program`` and return its diagnostics.

    A tree nesting deeper than the interpreter can recurse yields a single
    ``parseFailure`` diagnostic.
    """

    options = options if options is not None else CheckOptions()
    try:
        return _CheckPass(program, options).run()
    except RecursionError:
        return [_parse_failure(options, estree.TOO_DEEP)]


def check_json(text: str | bytes, options: Optional[CheckOptions] = None) -> list[Diagnostic]:
    """Load ESTree JSON and check it.

    A document that cannot be loaded yields a single ``parseFailure``
    diagnostic at the start of the document instead of an exception.
    """

    options = options if options is not None else CheckOptions()
    try:
        program = estree.from_json(text)
    except estree.SyntaxTreeError as exc:
        return [_parse_failure(options, str(exc))]
    return check(program, options)


def _parse_failure(options: CheckOptions, reason: str) -> Diagnostic:
    _LOGGER.warning("unable to check syntax tree: %s", reason)
    metrics.emit("typedjs.check.parse_failures", 1)
    return options.emitter().parse_failure(reason)


# ---------------------------------------------------------------------------
# Internal implementation


class _CheckPass:
    def __init__(self, program: tree.Program, options: CheckOptions) -> None:
        self.program = program
        self.options = options
        self.registry = TypeRegistry()
        self.matcher = Matcher(self.registry, options)
        self.diagnostics: list[Diagnostic] = []
        self.bindings_checked = 0

    def run(self) -> list[Diagnostic]:
        started = time.perf_counter()
        for node in self.program.walk():
            if isinstance(node, tree.TSInterfaceDeclaration):
                self._declare_interface(node)
            elif isinstance(node, tree.TSTypeAliasDeclaration):
                self._declare_alias(node)
            elif isinstance(node, tree.TSEnumDeclaration):
                self._declare_enum(node)
            elif isinstance(node, tree.VariableDeclarator):
                self._check_binding(node)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        outcome = "diagnostics" if self.diagnostics else "clean"
        metrics.emit("typedjs.check.diagnostics", len(self.diagnostics), tags={"outcome": outcome})
        metrics.emit("typedjs.check.duration_ms", elapsed_ms)
        _LOGGER.debug(
            "pass finished: %d declaration(s), %d binding(s), %d diagnostic(s) in %.2fms",
            len(self.registry),
            self.bindings_checked,
            len(self.diagnostics),
            elapsed_ms,
        )
        return list(self.diagnostics)

    # ------------------------------------------------------------------
    # Declarations

    def _declare_interface(self, node: tree.TSInterfaceDeclaration) -> None:
        name = node.id.name
        self.registry.declare_interface(name, self._interface_shape(node))
        _LOGGER.debug("registered interface %s", name)

    def _interface_shape(self, node: tree.TSInterfaceDeclaration) -> ObjectShape:
        own = translate_members(node.body)
        if not node.extends:
            return own
        inherited: list[ObjectShape] = []
        open_ended = False
        for clause in node.extends:
            parent = _heritage_name(clause)
            entry = self.registry.resolve(parent) if parent is not None else None
            if isinstance(entry, InterfaceDecl):
                inherited.append(entry.shape)
            else:
                # Unknown parent members: accept whatever the object provides.
                open_ended = True
                _LOGGER.debug("interface %s extends unresolved %s", node.id.name, parent)
        shape = merge_shapes([*inherited, own])
        if open_ended and shape.index_signature is None:
            shape = ObjectShape(shape.properties, IndexSignature(PrimitiveType("string"), UNKNOWN))
        return shape

    def _declare_alias(self, node: tree.TSTypeAliasDeclaration) -> None:
        self.registry.declare_alias(node.id.name, translate(node.type_annotation))
        _LOGGER.debug("registered type alias %s", node.id.name)

    def _declare_enum(self, node: tree.TSEnumDeclaration) -> None:
        entry = self.registry.declare_enum(node.id.name, build_enum_members(node))
        _LOGGER.debug("registered enum %s with members %s", entry.name, entry.values_by_name())

    # ------------------------------------------------------------------
    # Bindings

    def _check_binding(self, node: tree.VariableDeclarator) -> None:
        target = node.id
        if not isinstance(target, tree.Identifier) or target.type_annotation is None:
            return
        if node.init is None:
            return
        self.bindings_checked += 1
        expected = translate(target.type_annotation)
        self.diagnostics.extend(self.matcher.diagnose(node.init, expected, target.name))


def _heritage_name(clause: tree.Node) -> Optional[str]:
    if isinstance(clause, tree.GenericNode):
        expression = clause.attributes.get("expression")
        if isinstance(expression, tree.Identifier):
            return expression.name
    return None
