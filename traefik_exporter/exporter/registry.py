"""
Metric Registry — The exporter's instruments.

Four fixed gauges are declared up front. Per-status-code gauges are
created the first time a code shows up and kept for the life of the
process, so a code that disappears upstream keeps being exported.

Not locked: the collection engine is the only writer and holds its
lock around every mutation and read.
"""

from __future__ import annotations

from typing import Dict, List

from ..observability.metrics import Gauge, MetricDescriptor

NAMESPACE = "traefik"
STATUS_CODE_LABEL = "statusCode"


class MetricRegistry:
    """Fixed gauges plus two status-code keyed gauge maps."""

    def __init__(self, namespace: str = NAMESPACE):
        self.namespace = namespace

        self.up = self._gauge("up", "Is traefik up ?")
        self.uptime = self._gauge("uptime", "Current Traefik uptime")
        self.response_time_total = self._gauge(
            "request_response_time_total", "Total response time of Traefik requests"
        )
        self.response_time_avg = self._gauge(
            "request_response_time_avg", "Average response time of Traefik requests"
        )

        # Labeled gauges, keyed by status code, created at runtime
        self._current: Dict[str, Gauge] = {}
        self._total: Dict[str, Gauge] = {}

    def _gauge(self, name: str, help_text: str, **labels: str) -> Gauge:
        return Gauge(name, help_text, const_labels=labels, namespace=self.namespace)

    def ensure_current_instrument(self, status_code: str) -> Gauge:
        """Get or create the current-count gauge for a status code."""
        gauge = self._current.get(status_code)
        if gauge is None:
            gauge = self._gauge(
                "request_count_current",
                "Number of request handled by Traefik",
                **{STATUS_CODE_LABEL: status_code},
            )
            self._current[status_code] = gauge
        return gauge

    def ensure_total_instrument(self, status_code: str) -> Gauge:
        """Get or create the total-count gauge for a status code."""
        gauge = self._total.get(status_code)
        if gauge is None:
            gauge = self._gauge(
                "request_count_total",
                "Number of request handled by Traefik",
                **{STATUS_CODE_LABEL: status_code},
            )
            self._total[status_code] = gauge
        return gauge

    def reset_current_to_zero(self) -> None:
        for gauge in self._current.values():
            gauge.set(0)

    def fixed_instruments(self) -> List[Gauge]:
        return [self.up, self.uptime, self.response_time_total, self.response_time_avg]

    def all_instruments(self) -> List[Gauge]:
        """Fixed gauges, then current counts, then totals."""
        return (
            self.fixed_instruments()
            + list(self._current.values())
            + list(self._total.values())
        )

    def descriptors(self) -> List[MetricDescriptor]:
        return [gauge.desc() for gauge in self.all_instruments()]

    @property
    def current_status_codes(self) -> List[str]:
        return list(self._current)

    @property
    def total_status_codes(self) -> List[str]:
        return list(self._total)
