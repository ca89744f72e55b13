"""
Collection Engine — One scrape → translate → publish cycle.

## Cycle

1. Take the lock (concurrent collects wait their turn)
2. Fetch the health record
3. On failure: up=0, emit only `up`
4. On success: up=1, set fixed gauges, zero and refill current
   counts, update totals, emit everything

Points are snapshotted before the lock is released, so each returned
list reflects exactly one scrape.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import List, Optional

from ..models.health import HealthRecord
from ..observability.metrics import MetricPoint
from ..scrape.client import HealthClient
from ..scrape.errors import ScrapeError, UpstreamStatusFailure
from .registry import MetricRegistry

logger = logging.getLogger(__name__)


class CollectionEngine:
    """Runs collection cycles against a single HealthClient."""

    def __init__(self, client: HealthClient, registry: MetricRegistry):
        self.client = client
        self.registry = registry
        self.lock = Lock()
        self.last_error: Optional[ScrapeError] = None

    def collect(self) -> List[MetricPoint]:
        """Scrape once and return the points to publish."""
        with self.lock:
            try:
                record = self.client.fetch()
            except ScrapeError as e:
                self._record_failure(e)
                self.registry.up.set(0)
                return [self.registry.up.export()]

            self.last_error = None
            self.apply(record)
            return [gauge.export() for gauge in self.registry.all_instruments()]

    def apply(self, record: HealthRecord) -> None:
        """Translate a health record onto the registry. Caller holds the lock."""
        registry = self.registry

        registry.up.set(1)
        registry.uptime.set(record.uptime_seconds)
        registry.response_time_total.set(record.total_response_time_seconds)
        registry.response_time_avg.set(record.average_response_time_seconds)

        # Codes missing from this scrape must read 0, not their old value
        registry.reset_current_to_zero()
        for status_code, count in record.status_code_current_counts.items():
            registry.ensure_current_instrument(status_code).set(count)

        # Totals are never zeroed
        for status_code, count in record.status_code_total_counts.items():
            registry.ensure_total_instrument(status_code).set(count)

    def _record_failure(self, error: ScrapeError) -> None:
        self.last_error = error
        extra = {"failure_kind": error.kind.value}
        if isinstance(error, UpstreamStatusFailure):
            extra["status_code"] = error.status_code
        logger.error(str(error), extra=extra)
