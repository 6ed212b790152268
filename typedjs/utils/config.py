"""YAML configuration loading for the checker and its command line."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from ..checker.options import CheckOptions

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "deep_update",
    "load_config",
    "load_options",
    "parse_overrides",
]

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "typedjs.yaml"


def load_config(path: str | Path) -> dict[str, Any]:
    """Return the YAML mapping stored at ``path``.

    Missing files raise :class:`FileNotFoundError`; documents that do not parse
    or whose root is not a mapping raise :class:`ValueError`.  An empty
    document is an empty mapping.
    """

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"configuration file not found: {config_path}")
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse configuration {config_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("configuration root must be a mapping")
    return data


def parse_overrides(raw: Sequence[str] | None) -> dict[str, Any]:
    """Turn ``KEY=VALUE`` strings with dotted keys into a nested mapping.

    Values are parsed as YAML scalars, so ``true`` is a boolean and ``3`` an
    integer.
    """

    overrides: dict[str, Any] = {}
    for item in raw or ():
        key, sep, value_text = item.partition("=")
        if not sep:
            raise ValueError(f"override '{item}' is missing '='")
        key_parts = [part for part in key.strip().split(".") if part]
        if not key_parts:
            raise ValueError("override key must not be empty")
        cursor = overrides
        for part in key_parts[:-1]:
            cursor = cursor.setdefault(part, {})
            if not isinstance(cursor, dict):
                raise ValueError(f"override '{key}' conflicts with an existing value")
        cursor[key_parts[-1]] = _parse_scalar(value_text)
    return overrides


def deep_update(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``updates`` merged in recursively."""

    result: dict[str, Any] = dict(base)
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = deep_update(result[key], value)
        else:
            result[key] = value
    return result


def load_options(
    path: str | Path | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> CheckOptions:
    """Build :class:`CheckOptions` from the ``checker`` section of a config file.

    Without ``path`` the bundled ``configs/typedjs.yaml`` is used when it is
    present, otherwise the built-in defaults.
    """

    data: Mapping[str, Any] = {}
    if path is not None:
        data = load_config(path)
    elif DEFAULT_CONFIG_PATH.exists():
        data = load_config(DEFAULT_CONFIG_PATH)
    if overrides:
        data = deep_update(data, overrides)
    section = data.get("checker", {})
    if section is None:
        section = {}
    if not isinstance(section, Mapping):
        raise ValueError("'checker' configuration must be a mapping")
    return CheckOptions.from_mapping(section)


def _parse_scalar(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text
