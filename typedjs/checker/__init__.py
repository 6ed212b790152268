"""Structural type checking for annotated JavaScript syntax trees."""

from .diagnostics import Diagnostic, DiagnosticKind
from .matcher import matches, validate_object
from .options import CheckOptions
from .registry import TypeRegistry
from .reporters import build_report, format_text
from .rule import check, check_json
from .translator import translate

__all__ = [
    "CheckOptions",
    "Diagnostic",
    "DiagnosticKind",
    "TypeRegistry",
    "build_report",
    "check",
    "check_json",
    "format_text",
    "matches",
    "translate",
    "validate_object",
]
