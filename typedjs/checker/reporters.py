"""Report helpers turning diagnostics into payloads and text."""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Optional, Sequence

from .diagnostics import Diagnostic

__all__ = ["build_report", "format_text", "has_errors"]


def build_report(diagnostics: Sequence[Diagnostic]) -> Dict[str, Any]:
    """Convert ``diagnostics`` into a telemetry-friendly dictionary."""

    payload: Dict[str, Any] = {
        "status": "ok" if not diagnostics else "failed",
        "diagnostic_count": len(diagnostics),
    }
    if diagnostics:
        payload["by_kind"] = dict(Counter(item.message_id for item in diagnostics))
        payload["by_severity"] = dict(Counter(item.severity for item in diagnostics))
        payload["diagnostics"] = [item.to_dict() for item in diagnostics]
    return payload


def has_errors(diagnostics: Sequence[Diagnostic]) -> bool:
    return any(item.severity == "error" for item in diagnostics)


def format_text(diagnostic: Diagnostic, source: Optional[str] = None) -> str:
    """Render one diagnostic as ``L<line>:<column> <severity> <message> [<id>]``.

    Columns are shown 1-based.  With ``source`` the offending line follows,
    underlined with carets.
    """

    start_line, start_column, end_line, end_column = diagnostic.span.to_tuple()
    header = (
        f"L{start_line}:{start_column + 1} {diagnostic.severity} "
        f"{diagnostic.message} [{diagnostic.message_id}]"
    )
    if source is None:
        return header
    lines = source.splitlines()
    if not 1 <= start_line <= len(lines):
        return header
    text = lines[start_line - 1]
    end = end_column if end_line == start_line else len(text)
    width = max(1, min(end, len(text)) - start_column)
    underline = " " * start_column + "^" * width
    return f"{header}\n    {text}\n    {underline}"
