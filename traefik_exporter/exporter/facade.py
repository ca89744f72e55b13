"""
Exporter — What the serving layer sees.

Wires a HealthClient, a MetricRegistry and a CollectionEngine together
and exposes them as a Collector.
"""

from __future__ import annotations

from typing import List, Optional

from ..observability.metrics import Collector, MetricDescriptor, MetricPoint
from ..scrape.client import HealthClient
from ..scrape.errors import ScrapeError
from .engine import CollectionEngine
from .registry import MetricRegistry


class Exporter(Collector):
    """Collects Traefik health stats as Prometheus gauges."""

    def __init__(self, client: HealthClient, registry: Optional[MetricRegistry] = None):
        self.registry = registry or MetricRegistry()
        self.engine = CollectionEngine(client, self.registry)

    def describe(self) -> List[MetricDescriptor]:
        """Descriptors of every gauge known so far."""
        with self.engine.lock:
            return self.registry.descriptors()

    def collect(self) -> List[MetricPoint]:
        return self.engine.collect()

    @property
    def last_error(self) -> Optional[ScrapeError]:
        return self.engine.last_error

    def close(self) -> None:
        self.engine.client.close()
