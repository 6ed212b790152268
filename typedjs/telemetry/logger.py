"""Logging setup for typedjs.

Loggers live under the ``typedjs`` hierarchy.  Configuration is applied once
per process through :func:`logging.config.dictConfig`, read from
``configs/logging.yaml`` next to the project root when that file exists and
from a built-in stderr configuration otherwise.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from threading import RLock
from typing import Any, Mapping

import yaml

__all__ = ["DEFAULT_LOGGING_PATH", "configure", "get_logger", "reset"]

DEFAULT_LOGGING_PATH = Path(__file__).resolve().parents[2] / "configs" / "logging.yaml"

_CONFIG_LOCK = RLock()
_CONFIGURED = False

_DICT_CONFIG_KEYS = (
    "version",
    "disable_existing_loggers",
    "formatters",
    "filters",
    "handlers",
    "root",
    "loggers",
)

_DEFAULT_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        }
    },
    "handlers": {
        "stderr": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "standard",
        }
    },
    "loggers": {
        "typedjs": {
            "level": "WARNING",
            "handlers": ["stderr"],
            "propagate": False,
        }
    },
}


def _load_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return dict(_DEFAULT_CONFIG)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        logging.getLogger("typedjs.telemetry").warning("ignoring unreadable %s: %s", path, exc)
        return dict(_DEFAULT_CONFIG)
    if not isinstance(data, Mapping):
        return dict(_DEFAULT_CONFIG)
    merged = dict(_DEFAULT_CONFIG)
    merged.update({key: value for key, value in data.items() if key in _DICT_CONFIG_KEYS})
    return merged


def configure(path: str | Path | None = None, *, force: bool = False) -> None:
    """Configure logging once; ``force`` re-applies the configuration."""

    global _CONFIGURED
    with _CONFIG_LOCK:
        if _CONFIGURED and not force:
            return
        config_path = Path(path) if path is not None else DEFAULT_LOGGING_PATH
        logging.config.dictConfig(_load_config(config_path))
        _CONFIGURED = True


def reset() -> None:
    """Forget the applied configuration so the next call configures again."""

    global _CONFIGURED
    with _CONFIG_LOCK:
        _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger, prefixing ``typedjs.`` when missing."""

    if not isinstance(name, str) or not name:
        raise ValueError("logger name must be a non-empty string")
    configure()
    if name != "typedjs" and not name.startswith("typedjs."):
        name = f"typedjs.{name}"
    return logging.getLogger(name)
