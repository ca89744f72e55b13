"""
Scrape Errors — Classified failures of a single health scrape.

Every failure carries a FailureKind so callers can branch on it
without parsing messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Why a scrape failed."""
    NETWORK = "network"                  # connect, timeout, deadline
    UPSTREAM_STATUS = "upstream_status"  # non-2xx response
    DECODE = "decode"                    # malformed or mistyped body


class ScrapeError(Exception):
    """Base class for scrape failures."""

    kind: FailureKind

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Can't scrape Traefik: {detail}")


class NetworkFailure(ScrapeError):
    """The upstream could not be reached or did not answer in time."""

    kind = FailureKind.NETWORK


class UpstreamStatusFailure(ScrapeError):
    """The upstream answered with a non-2xx status."""

    kind = FailureKind.UPSTREAM_STATUS

    def __init__(self, status_code: int, detail: Optional[str] = None):
        self.status_code = status_code
        super().__init__(detail or f"status {status_code}")


class DecodeFailure(ScrapeError):
    """The response body is not a valid health payload."""

    kind = FailureKind.DECODE
