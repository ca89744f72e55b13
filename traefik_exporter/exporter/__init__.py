"""
Exporter Module — Translate Traefik health scrapes into gauges.
"""

from .engine import CollectionEngine
from .facade import Exporter
from .registry import NAMESPACE, MetricRegistry

__all__ = [
    "CollectionEngine",
    "Exporter",
    "MetricRegistry",
    "NAMESPACE",
]
