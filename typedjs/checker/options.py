"""Options controlling a validation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .diagnostics import DEFAULT_SEVERITY, SEVERITIES, DiagnosticEmitter, DiagnosticKind

__all__ = ["CheckOptions", "UNKNOWN_VALUE_POLICIES"]

UNKNOWN_VALUE_POLICIES = ("lenient", "strict")


@dataclass(slots=True, frozen=True)
class CheckOptions:
    """Checker knobs, usually read from the ``checker`` section of the config.

    ``unknown_values`` decides whether values the classifier cannot type
    statically (calls, identifiers, ...) are accepted (``lenient``) or
    reported (``strict``).  ``enum_membership`` enables validation of values
    assigned to enum-typed positions; ``container_contents`` enables checking
    of ``Record``/``Map``/``Set`` entries.
    """

    unknown_values: str = "lenient"
    enum_membership: bool = True
    container_contents: bool = False
    severity: str = DEFAULT_SEVERITY
    severity_overrides: Mapping[DiagnosticKind, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.unknown_values not in UNKNOWN_VALUE_POLICIES:
            raise ValueError(
                f"unknown_values must be one of {', '.join(UNKNOWN_VALUE_POLICIES)}, "
                f"got {self.unknown_values!r}"
            )
        for severity in (self.severity, *self.severity_overrides.values()):
            if severity not in SEVERITIES:
                raise ValueError(f"severity must be 'error' or 'warning', got {severity!r}")

    @property
    def strict(self) -> bool:
        return self.unknown_values == "strict"

    def emitter(self) -> DiagnosticEmitter:
        return DiagnosticEmitter(self.severity, dict(self.severity_overrides))

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> CheckOptions:
        """Build options from a mapping, rejecting unknown keys and values."""

        if not config:
            return cls()
        if not isinstance(config, Mapping):
            raise ValueError("checker options must be a mapping")
        unknown = sorted(set(config) - _OPTION_KEYS)
        if unknown:
            raise ValueError(f"unknown checker option(s): {', '.join(map(str, unknown))}")

        kwargs: dict[str, Any] = {}
        if "unknown_values" in config:
            kwargs["unknown_values"] = str(config["unknown_values"])
        for flag in ("enum_membership", "container_contents"):
            if flag in config:
                value = config[flag]
                if not isinstance(value, bool):
                    raise ValueError(f"{flag} must be a boolean, got {value!r}")
                kwargs[flag] = value
        if "severity" in config:
            kwargs["severity"] = str(config["severity"])
        overrides = config.get("severity_overrides") or {}
        if not isinstance(overrides, Mapping):
            raise ValueError("severity_overrides must be a mapping")
        kwargs["severity_overrides"] = {
            DiagnosticKind.from_message_id(str(kind)): str(severity)
            for kind, severity in overrides.items()
        }
        return cls(**kwargs)


_OPTION_KEYS = frozenset(
    {"unknown_values", "enum_membership", "container_contents", "severity", "severity_overrides"}
)
