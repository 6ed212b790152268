"""Tests for logging setup and the metrics registry."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import pytest

from typedjs.telemetry import logger, metrics


@pytest.fixture
def restore_logging():
    yield
    logger.configure(force=True)


def test_get_logger_prefixes_names() -> None:
    assert logger.get_logger("checker").name == "typedjs.checker"
    assert logger.get_logger("typedjs.cli").name == "typedjs.cli"
    assert logger.get_logger("typedjs").name == "typedjs"


def test_get_logger_rejects_empty_names() -> None:
    with pytest.raises(ValueError):
        logger.get_logger("")


def test_configure_applies_yaml_file(tmp_path: Path, restore_logging) -> None:
    log_file = tmp_path / "typedjs.log"
    config_path = tmp_path / "logging.yaml"
    config_path.write_text(
        "version: 1\n"
        "handlers:\n"
        "  file:\n"
        "    class: logging.FileHandler\n"
        f"    filename: {log_file.as_posix()}\n"
        "loggers:\n"
        "  typedjs:\n"
        "    level: DEBUG\n"
        "    handlers: [file]\n"
        "    propagate: false\n",
        encoding="utf-8",
    )

    logger.configure(config_path, force=True)
    log = logger.get_logger("tests")
    log.debug("recorded %s", "message")
    for handler in logging.getLogger("typedjs").handlers:
        handler.flush()

    assert "recorded message" in log_file.read_text(encoding="utf-8")


def test_configure_is_applied_once_without_force(tmp_path: Path, restore_logging) -> None:
    logger.configure(force=True)
    level = logging.getLogger("typedjs").level
    config_path = tmp_path / "logging.yaml"
    config_path.write_text("loggers:\n  typedjs:\n    level: DEBUG\n", encoding="utf-8")

    logger.configure(config_path)
    assert logging.getLogger("typedjs").level == level

    logger.reset()
    logger.configure(config_path)
    assert logging.getLogger("typedjs").level == logging.DEBUG


def test_unreadable_logging_file_falls_back(tmp_path: Path, restore_logging) -> None:
    config_path = tmp_path / "logging.yaml"
    config_path.write_text("loggers: [unclosed\n", encoding="utf-8")

    logger.configure(config_path, force=True)

    assert logging.getLogger("typedjs").level == logging.WARNING


def test_registry_summaries() -> None:
    registry = metrics.MetricsRegistry()
    registry.emit("typedjs.check.diagnostics", 2, tags={"outcome": "diagnostics"})
    registry.emit("typedjs.check.diagnostics", 0, tags={"outcome": "clean"})
    registry.emit("custom", "1.5")

    summary = registry.summaries()

    assert summary["typedjs.check.diagnostics"] == {
        "name": "typedjs.check.diagnostics",
        "kind": "counter",
        "count": 2,
        "unit": "count",
        "total": 2.0,
        "avg": 1.0,
        "min": 0.0,
        "max": 2.0,
    }
    assert summary["custom"]["kind"] == "gauge"
    assert registry.snapshot()["typedjs.check.diagnostics"][0]["tags"] == {
        "outcome": "diagnostics"
    }


def test_registry_rejects_bad_input() -> None:
    registry = metrics.MetricsRegistry()
    with pytest.raises(ValueError):
        registry.emit("", 1)
    with pytest.raises(TypeError):
        registry.emit("custom", "many")
    with pytest.raises(TypeError):
        registry.emit("custom", None)


def test_series_are_copies() -> None:
    registry = metrics.MetricsRegistry()
    registry.emit("custom", 1)
    series = registry.get_series("custom")
    assert series is not None
    series.samples.clear()

    assert registry.get_series("custom").total() == 1.0
    assert registry.get_series("absent") is None
    registry.reset()
    assert registry.summaries() == {}


def test_registry_is_thread_safe() -> None:
    registry = metrics.MetricsRegistry()

    def worker() -> None:
        for _ in range(200):
            registry.emit("typedjs.check.diagnostics", 1)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert registry.summaries()["typedjs.check.diagnostics"]["count"] == 1600
