"""In-process metrics registry for checker passes.

Passes record how many diagnostics they produced and how long they took.  The
registry is thread-safe so concurrent passes can emit into the shared
process-wide instance; nothing read back from it influences checking.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

__all__ = [
    "MetricSample",
    "MetricSeries",
    "MetricsRegistry",
    "emit",
    "get_registry",
    "reset",
    "snapshot",
    "summaries",
]


@dataclass(frozen=True)
class MetricSample:
    """One observation of a metric."""

    name: str
    value: float
    timestamp: float
    kind: str
    tags: Mapping[str, str]

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "value": self.value,
            "timestamp": self.timestamp,
            "kind": self.kind,
        }
        if self.tags:
            payload["tags"] = dict(self.tags)
        return payload


@dataclass
class MetricSeries:
    name: str
    kind: str
    unit: str | None = None
    samples: list[MetricSample] = field(default_factory=list)

    def total(self) -> float:
        return sum(sample.value for sample in self.samples)

    def summary(self) -> Dict[str, Any]:
        summary: Dict[str, Any] = {"name": self.name, "kind": self.kind, "count": len(self.samples)}
        if self.unit:
            summary["unit"] = self.unit
        if not self.samples:
            return summary
        values = [sample.value for sample in self.samples]
        summary.update(
            {
                "total": sum(values),
                "avg": sum(values) / len(values),
                "min": min(values),
                "max": max(values),
            }
        )
        return summary


class MetricsRegistry:
    """Thread-safe in-memory store of metric series."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._series: Dict[str, MetricSeries] = {}

    def emit(
        self,
        name: str,
        value: Any,
        *,
        kind: str | None = None,
        tags: Mapping[str, str] | None = None,
    ) -> MetricSample:
        if not isinstance(name, str) or not name:
            raise ValueError("metric name must be a non-empty string")
        catalog = _METRIC_CATALOG.get(name, {})
        metric_kind = kind or catalog.get("kind", "gauge")
        sample = MetricSample(
            name=name,
            value=_coerce_value(value),
            timestamp=time.time(),
            kind=metric_kind,
            tags={str(key): str(val) for key, val in (tags or {}).items()},
        )
        with self._lock:
            series = self._series.get(name)
            if series is None:
                series = MetricSeries(name=name, kind=metric_kind, unit=catalog.get("unit"))
                self._series[name] = series
            series.samples.append(sample)
        return sample

    def get_series(self, name: str) -> MetricSeries | None:
        with self._lock:
            series = self._series.get(name)
            if series is None:
                return None
            return MetricSeries(series.name, series.kind, series.unit, list(series.samples))

    def snapshot(self) -> Dict[str, list[Dict[str, Any]]]:
        with self._lock:
            return {
                name: [sample.to_dict() for sample in series.samples]
                for name, series in self._series.items()
            }

    def summaries(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return {name: series.summary() for name, series in self._series.items()}

    def reset(self) -> None:
        with self._lock:
            self._series.clear()


_METRIC_CATALOG: Dict[str, Dict[str, Any]] = {
    "typedjs.check.diagnostics": {"kind": "counter", "unit": "count"},
    "typedjs.check.duration_ms": {"kind": "gauge", "unit": "milliseconds"},
    "typedjs.check.parse_failures": {"kind": "counter", "unit": "count"},
}

_REGISTRY = MetricsRegistry()


def emit(
    metric: str,
    value: Any,
    *,
    kind: str | None = None,
    tags: Mapping[str, str] | None = None,
) -> MetricSample:
    """Record ``value`` for ``metric`` in the process-wide registry."""

    return _REGISTRY.emit(metric, value, kind=kind, tags=tags)


def get_registry() -> MetricsRegistry:
    return _REGISTRY


def snapshot() -> Dict[str, list[Dict[str, Any]]]:
    return _REGISTRY.snapshot()


def summaries() -> Dict[str, Dict[str, Any]]:
    return _REGISTRY.summaries()


def reset() -> None:
    _REGISTRY.reset()


def _coerce_value(value: Any) -> float:
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as exc:
            raise TypeError(f"metric value {value!r} must be numeric") from exc
    raise TypeError(f"metric value {value!r} must be numeric")
