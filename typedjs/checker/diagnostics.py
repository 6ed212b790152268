"""Diagnostic records produced by the checker.

Diagnostics are plain output values: a kind, the substitution data for its
message template, the source span and a severity.  Rendering for terminals or
editors is left to :mod:`typedjs.checker.reporters` and the host.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from ..syntax.tree import DOCUMENT_START, Node, Span

__all__ = [
    "DEFAULT_SEVERITY",
    "Diagnostic",
    "DiagnosticEmitter",
    "DiagnosticKind",
    "SEVERITIES",
]

SEVERITIES = ("error", "warning")
DEFAULT_SEVERITY = "warning"


class DiagnosticKind(str, Enum):
    """Diagnostic kinds; the value is the message id."""

    TYPE_MISMATCH = "typeMismatch"
    MISSING_PROPERTY = "missingProperty"
    EXTRA_PROPERTY = "extraProperty"
    INVALID_LITERAL = "invalidLiteral"
    INVALID_ENUM = "invalidEnum"
    INVALID_UNION = "invalidUnion"
    INVALID_TUPLE = "invalidTuple"
    PARSE_FAILURE = "parseFailure"

    @property
    def template(self) -> str:
        return _TEMPLATES[self]

    @classmethod
    def from_message_id(cls, message_id: str) -> DiagnosticKind:
        try:
            return cls(message_id)
        except ValueError:
            known = ", ".join(kind.value for kind in cls)
            raise ValueError(
                f"unknown diagnostic kind {message_id!r} (expected one of {known})"
            ) from None


_TEMPLATES: Mapping[DiagnosticKind, str] = {
    DiagnosticKind.TYPE_MISMATCH: "Type mismatch: Expected '{expected}' but got '{actual}'",
    DiagnosticKind.MISSING_PROPERTY: "Property '{propName}' is missing in '{interfaceName}'",
    DiagnosticKind.EXTRA_PROPERTY: "Unexpected property '{propName}' in '{interfaceName}'",
    DiagnosticKind.INVALID_LITERAL: "Expected literal value {expected}, got {actual}",
    DiagnosticKind.INVALID_ENUM: "Value {actual} is not valid for enum {enumName}",
    DiagnosticKind.INVALID_UNION: "Value does not match any type in union: {expected}",
    DiagnosticKind.INVALID_TUPLE: "Tuple has incorrect length or types",
    DiagnosticKind.PARSE_FAILURE: "Unable to check document: {reason}",
}


@dataclass(slots=True, frozen=True)
class Diagnostic:
    """Single validation finding."""

    kind: DiagnosticKind
    data: Mapping[str, Any]
    span: Span
    severity: str = DEFAULT_SEVERITY

    @property
    def message_id(self) -> str:
        return self.kind.value

    @property
    def message(self) -> str:
        return self.kind.template.format_map(self.data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "severity": self.severity,
            "span": {
                "start_line": self.span.start_line,
                "start_column": self.span.start_column,
                "end_line": self.span.end_line,
                "end_column": self.span.end_column,
            },
            "data": dict(self.data),
        }


@dataclass(slots=True)
class DiagnosticEmitter:
    """Builds diagnostics with the configured severities.

    ``overrides`` maps diagnostic kinds to the severity used for them instead
    of ``severity``.
    """

    severity: str = DEFAULT_SEVERITY
    overrides: Mapping[DiagnosticKind, str] = field(default_factory=dict)

    def severity_for(self, kind: DiagnosticKind) -> str:
        return self.overrides.get(kind, self.severity)

    def create(self, kind: DiagnosticKind, node: Optional[Node], **data: Any) -> Diagnostic:
        span = node.span if node is not None and node.span is not None else DOCUMENT_START
        return Diagnostic(kind, data, span, self.severity_for(kind))

    def parse_failure(self, reason: str) -> Diagnostic:
        """Synthetic diagnostic for a document that could not be loaded."""

        return self.create(DiagnosticKind.PARSE_FAILURE, None, reason=reason)
