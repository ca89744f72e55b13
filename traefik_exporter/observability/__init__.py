"""
Observability Module — Gauges, collectors, exposition and build info.
"""

from .build_info import BuildInfoCollector, VERSION
from .metrics import (
    CONTENT_TYPE_LATEST,
    Collector,
    CollectorRegistry,
    Gauge,
    MetricDescriptor,
    MetricPoint,
    format_exposition,
)

__all__ = [
    "VERSION",
    "BuildInfoCollector",
    "CONTENT_TYPE_LATEST",
    "Collector",
    "CollectorRegistry",
    "Gauge",
    "MetricDescriptor",
    "MetricPoint",
    "format_exposition",
]
