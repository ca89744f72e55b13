"""
Metrics — Gauges, collectors and Prometheus text exposition.

Each Gauge is one time series: a full metric name plus a fixed set of
labels. Collectors hand out point-in-time snapshots (MetricPoint) so a
rendered page never mixes values from two scrapes.

## Usage

    from traefik_exporter.observability.metrics import CollectorRegistry

    registry = CollectorRegistry()
    registry.register(exporter)

    # Export for Prometheus
    output = registry.export_prometheus()
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"


@dataclass(frozen=True)
class MetricDescriptor:
    """Name, help and label schema of a time series."""

    name: str
    help_text: str
    const_labels: Tuple[Tuple[str, str], ...] = ()
    kind: str = "gauge"

    @property
    def label_names(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self.const_labels)


@dataclass(frozen=True)
class MetricPoint:
    """A single metric sample, frozen at collection time."""

    name: str
    value: float
    labels: Dict[str, str] = field(default_factory=dict)
    help_text: str = ""
    kind: str = "gauge"


class Gauge:
    """A gauge that can be set to any value."""

    def __init__(
        self,
        name: str,
        help_text: str = "",
        const_labels: Optional[Dict[str, str]] = None,
        namespace: str = "",
    ):
        self.name = f"{namespace}_{name}" if namespace else name
        self.help_text = help_text
        self.labels: Dict[str, str] = dict(sorted((const_labels or {}).items()))
        self._value = 0.0
        self._lock = Lock()

    def set(self, value: float) -> None:
        """Set the gauge value."""
        with self._lock:
            self._value = float(value)

    def get(self) -> float:
        """Get current value."""
        return self._value

    def desc(self) -> MetricDescriptor:
        return MetricDescriptor(self.name, self.help_text, tuple(self.labels.items()))

    def export(self) -> MetricPoint:
        """Snapshot the current value."""
        return MetricPoint(self.name, self.get(), dict(self.labels), self.help_text)

    def __repr__(self) -> str:
        return f"Gauge({self.name}{format_labels(self.labels)}={self._value})"


class Collector(ABC):
    """Anything that can describe and collect metric points."""

    @abstractmethod
    def describe(self) -> List[MetricDescriptor]:
        pass

    @abstractmethod
    def collect(self) -> List[MetricPoint]:
        pass


class CollectorRegistry:
    """
    Ordered set of collectors rendered together.

    Collection happens on every export; nothing is cached.
    """

    def __init__(self) -> None:
        self._collectors: List[Collector] = []
        self._lock = Lock()

    def register(self, collector: Collector) -> None:
        with self._lock:
            if collector in self._collectors:
                raise ValueError(f"Collector already registered: {collector!r}")
            self._collectors.append(collector)

    def unregister(self, collector: Collector) -> None:
        with self._lock:
            self._collectors.remove(collector)

    def describe(self) -> List[MetricDescriptor]:
        descriptors: List[MetricDescriptor] = []
        for collector in list(self._collectors):
            descriptors.extend(collector.describe())
        return descriptors

    def collect(self) -> List[MetricPoint]:
        points: List[MetricPoint] = []
        for collector in list(self._collectors):
            points.extend(collector.collect())
        return points

    def export_prometheus(self) -> str:
        """Export metrics in Prometheus text format."""
        return format_exposition(self.collect())

    def export_json(self) -> Dict[str, Any]:
        """Export metrics as JSON."""
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "metrics": [
                {"name": p.name, "labels": p.labels, "value": p.value}
                for p in self.collect()
            ],
        }


def format_exposition(points: List[MetricPoint]) -> str:
    """
    Render points in text format 0.0.4.

    Points sharing a name are grouped under one HELP/TYPE header, in
    first-seen order.
    """
    families: Dict[str, List[MetricPoint]] = {}
    for point in points:
        families.setdefault(point.name, []).append(point)

    lines = []
    for name, samples in families.items():
        first = samples[0]
        lines.append(f"# HELP {name} {_escape_help(first.help_text)}")
        lines.append(f"# TYPE {name} {first.kind}")
        for point in samples:
            lines.append(f"{name}{format_labels(point.labels)} {format_value(point.value)}")

    return "\n".join(lines) + "\n" if lines else ""


def format_labels(labels: Dict[str, str]) -> str:
    """Format labels for Prometheus."""
    if not labels:
        return ""
    pairs = [f'{k}="{_escape_label_value(v)}"' for k, v in sorted(labels.items())]
    return "{" + ",".join(pairs) + "}"


def format_value(value: float) -> str:
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _escape_label_value(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
