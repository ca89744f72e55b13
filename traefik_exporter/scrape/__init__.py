"""
Scrape Module — Fetch the Traefik health endpoint.
"""

from .client import HealthClient, decode_health
from .errors import (
    DecodeFailure,
    FailureKind,
    NetworkFailure,
    ScrapeError,
    UpstreamStatusFailure,
)

__all__ = [
    "HealthClient",
    "decode_health",
    "ScrapeError",
    "FailureKind",
    "NetworkFailure",
    "UpstreamStatusFailure",
    "DecodeFailure",
]
