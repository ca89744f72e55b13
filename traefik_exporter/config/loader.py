"""
Config Loader — Resolve exporter settings from environment variables.

Values are read once at startup. CLI options override them.

## Environment Variables

- TRAEFIK_EXPORTER_TRAEFIK_ADDRESS: health URI (default: http://localhost:8080/health)
- TRAEFIK_EXPORTER_TIMEOUT: scrape timeout in seconds (default: 5)
- TRAEFIK_EXPORTER_LISTEN_ADDRESS: host:port to serve on (default: :9000)
- TRAEFIK_EXPORTER_TELEMETRY_PATH: metrics path (default: /metrics)

## Usage

    from traefik_exporter.config.loader import load_config

    config = load_config()
    for problem in config.validate():
        print(problem)
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

ENV_PREFIX = "TRAEFIK_EXPORTER_"

DEFAULT_TRAEFIK_ADDRESS = "http://localhost:8080/health"
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_LISTEN_ADDRESS = ":9000"
DEFAULT_TELEMETRY_PATH = "/metrics"


class ConfigError(ValueError):
    """A configuration value could not be parsed."""


@dataclass(frozen=True)
class ExporterConfig:
    """All exporter settings in one place."""

    traefik_address: str = DEFAULT_TRAEFIK_ADDRESS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    telemetry_path: str = DEFAULT_TELEMETRY_PATH

    def with_overrides(self, **overrides: Any) -> "ExporterConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def validate(self) -> List[str]:
        """Return a list of problems; empty when the config is usable."""
        problems = []

        if not self.traefik_address.startswith(("http://", "https://")):
            problems.append(f"Invalid Traefik address: {self.traefik_address}")
        else:
            try:
                httpx.URL(self.traefik_address)
            except httpx.InvalidURL as e:
                problems.append(f"Invalid Traefik address {self.traefik_address!r}: {e}")

        if self.timeout_seconds <= 0:
            problems.append(f"Timeout must be positive, got {self.timeout_seconds}")

        if not self.telemetry_path.startswith("/") or self.telemetry_path == "/":
            problems.append(f"Invalid telemetry path: {self.telemetry_path!r}")

        try:
            parse_listen_address(self.listen_address)
        except ConfigError as e:
            problems.append(str(e))

        return problems

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(environ: Optional[Mapping[str, str]] = None) -> ExporterConfig:
    """
    Load configuration from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Raises:
        ConfigError: if a numeric value cannot be parsed
    """
    env = os.environ if environ is None else environ

    timeout_raw = env.get(f"{ENV_PREFIX}TIMEOUT")
    timeout = DEFAULT_TIMEOUT_SECONDS
    if timeout_raw:
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ConfigError(
                f"{ENV_PREFIX}TIMEOUT must be a number of seconds, got {timeout_raw!r}"
            ) from None

    config = ExporterConfig(
        traefik_address=env.get(f"{ENV_PREFIX}TRAEFIK_ADDRESS") or DEFAULT_TRAEFIK_ADDRESS,
        timeout_seconds=timeout,
        listen_address=env.get(f"{ENV_PREFIX}LISTEN_ADDRESS") or DEFAULT_LISTEN_ADDRESS,
        telemetry_path=env.get(f"{ENV_PREFIX}TELEMETRY_PATH") or DEFAULT_TELEMETRY_PATH,
    )
    logger.debug(f"Loaded config: {config}")
    return config


def parse_listen_address(address: str) -> Tuple[str, int]:
    """
    Split a listen address into (host, port).

    An empty host (":9000") means all interfaces. IPv6 hosts are
    bracketed: "[::1]:9000".
    """
    host, sep, port_str = address.rpartition(":")
    if not sep:
        raise ConfigError(f"Listen address must be host:port, got {address!r}")

    try:
        port = int(port_str)
    except ValueError:
        raise ConfigError(f"Invalid port in listen address {address!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"Port out of range in listen address {address!r}")

    host = host.strip("[]") or "0.0.0.0"
    return host, port
