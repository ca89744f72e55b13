"""
Shared fixtures for exporter tests.

Provides sample Traefik health payloads, HealthClients backed by
httpx.MockTransport, and a scripted fake client for engine tests.
"""

from __future__ import annotations

import json
from typing import Callable, Iterable, List, Union

import httpx
import pytest

from traefik_exporter.models.health import HealthRecord
from traefik_exporter.scrape.client import HealthClient
from traefik_exporter.scrape.errors import ScrapeError

HEALTH_URI = "http://traefik.test:8080/health"


@pytest.fixture
def health_payload():
    """A realistic Traefik /health body, including fields we ignore."""
    return {
        "pid": 1,
        "uptime": "1h2m3s",
        "uptime_sec": 3723.5,
        "time": "2026-10-19 12:00:00.000000000 +0000 UTC",
        "unixtime": 1792411200,
        "status_code_count": {"200": 5},
        "total_status_code_count": {"200": 100, "404": 3},
        "count": 5,
        "total_count": 103,
        "total_response_time": "2.5s",
        "total_response_time_sec": 2.5,
        "average_response_time": "24.271ms",
        "average_response_time_sec": 0.024271,
    }


@pytest.fixture
def make_client():
    """Build a HealthClient whose requests are answered by `handler`."""
    clients = []

    def _make(handler: Callable[[httpx.Request], httpx.Response], timeout: float = 5.0):
        client = HealthClient(HEALTH_URI, timeout=timeout, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


def json_response(payload, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(payload).encode())
    return handler


Outcome = Union[HealthRecord, ScrapeError]


class ScriptedClient:
    """Stands in for HealthClient, returning or raising queued outcomes."""

    def __init__(self, outcomes: Iterable[Outcome] = ()):
        self.outcomes: List[Outcome] = list(outcomes)
        self.calls = 0
        self.closed = False

    def push(self, outcome: Outcome) -> None:
        self.outcomes.append(outcome)

    def fetch(self) -> HealthRecord:
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, ScrapeError):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


def record(current=None, total=None, uptime=10.0, total_time=1.0, avg_time=0.1) -> HealthRecord:
    """Build a HealthRecord by Python field name."""
    return HealthRecord(
        uptime_seconds=float(uptime),
        status_code_current_counts={k: float(v) for k, v in (current or {}).items()},
        status_code_total_counts={k: float(v) for k, v in (total or {}).items()},
        total_response_time_seconds=total_time,
        average_response_time_seconds=avg_time,
    )
