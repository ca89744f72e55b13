"""
Health Client — Fetch and decode the Traefik health endpoint.

One GET per call, bounded by a single deadline that covers connecting
and reading the whole body. No retries: a failed fetch is reported once
and the next scrape starts fresh.

## Usage

    from traefik_exporter.scrape.client import HealthClient

    with HealthClient("http://localhost:8080/health", timeout=5) as client:
        record = client.fetch()
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx
from pydantic import ValidationError

from ..models.health import HealthRecord
from ..observability.build_info import VERSION
from .errors import DecodeFailure, NetworkFailure, UpstreamStatusFailure

logger = logging.getLogger(__name__)


def decode_health(body: bytes) -> HealthRecord:
    """Decode a response body, raising DecodeFailure on bad input."""
    try:
        return HealthRecord.model_validate_json(body)
    except ValidationError as e:
        raise DecodeFailure(f"json decode: {e}") from e


class HealthClient:
    """
    HTTP client for a single Traefik health URI.

    Keeps one connection pool for its lifetime. The transport can be
    swapped (httpx.MockTransport in tests).
    """

    def __init__(
        self,
        uri: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.uri = uri
        self.timeout = float(timeout)
        self._client = httpx.Client(
            timeout=httpx.Timeout(self.timeout),
            transport=transport,
            follow_redirects=True,
            headers={
                "Accept": "application/json",
                "User-Agent": f"traefik-exporter/{VERSION}",
            },
        )

    def fetch(self) -> HealthRecord:
        """
        Scrape the health endpoint once.

        httpx applies the timeout to each blocking operation, so the overall
        deadline is checked once the headers arrive and again after every
        body chunk. A fetch can overrun the deadline by at most one
        operation timeout.

        Raises:
            NetworkFailure: bad URI, connect error, timeout or expired deadline
            UpstreamStatusFailure: non-2xx response
            DecodeFailure: body is not a valid health payload
        """
        start = time.monotonic()
        deadline = start + self.timeout

        try:
            with self._client.stream("GET", self.uri) as response:
                self._check_deadline(deadline, "waiting for response headers")
                if not response.is_success:
                    raise UpstreamStatusFailure(response.status_code)
                body = self._read_body(response, deadline)
        except httpx.InvalidURL as e:
            raise NetworkFailure(f"invalid URI {self.uri!r}: {e}") from e
        except httpx.TimeoutException as e:
            raise NetworkFailure(f"timed out after {self.timeout}s: {e}") from e
        except httpx.RequestError as e:
            raise NetworkFailure(f"{type(e).__name__}: {e}") from e

        logger.debug(
            f"GET {self.uri} → {response.status_code} "
            f"({len(body)} bytes, {(time.monotonic() - start) * 1000:.0f}ms)"
        )
        return decode_health(body)

    def _read_body(self, response: httpx.Response, deadline: float) -> bytes:
        chunks = []
        for chunk in response.iter_bytes():
            self._check_deadline(deadline, "reading body")
            chunks.append(chunk)
        return b"".join(chunks)

    def _check_deadline(self, deadline: float, stage: str) -> None:
        if time.monotonic() > deadline:
            raise NetworkFailure(f"deadline of {self.timeout}s exceeded while {stage}")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HealthClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
