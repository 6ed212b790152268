"""Logging and metrics helpers for typedjs."""

from . import logger, metrics

__all__ = ["logger", "metrics"]
