"""
Traefik Exporter — CLI Entry Point

Usage:
    python -m traefik_exporter.main serve [--web.listen-address :9000]
    python -m traefik_exporter.main scrape [--format prometheus|json]
    python -m traefik_exporter.main check-config
    python -m traefik_exporter.main --version
"""

from __future__ import annotations

# Load .env file FIRST, before any other imports that might read env vars
from pathlib import Path
from dotenv import load_dotenv

_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

import json
import logging
from typing import Tuple

import click

from .config.loader import ConfigError, ExporterConfig, load_config
from .exporter import Exporter
from .logging_config import setup_logging
from .observability.build_info import (
    BuildInfoCollector,
    PROGRAM,
    build_context,
    version_banner,
    version_info,
)
from .observability.metrics import CollectorRegistry
from .scrape.client import HealthClient
from .web.server import create_app, run_server

# Initialize logging
setup_logging()

logger = logging.getLogger(__name__)


def build_registry(config: ExporterConfig) -> Tuple[Exporter, CollectorRegistry]:
    """Create the exporter and the collector registry that serves it."""
    exporter = Exporter(HealthClient(config.traefik_address, config.timeout_seconds))
    registry = CollectorRegistry()
    registry.register(exporter)
    registry.register(BuildInfoCollector())
    return exporter, registry


def _print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(version_banner())
    ctx.exit(0)


def _resolve_config(ctx: click.Context, **overrides) -> ExporterConfig:
    config: ExporterConfig = ctx.obj["config"].with_overrides(**overrides)
    problems = config.validate()
    if problems:
        raise click.UsageError("; ".join(problems))
    return config


traefik_address_option = click.option(
    "--traefik.address", "traefik_address", default=None,
    help="HTTP API address of a Traefik or agent. [default: http://localhost:8080/health]",
)
timeout_option = click.option(
    "--timeout", "timeout_seconds", type=float, default=None,
    help="Timeout in seconds for trying to get stats from Traefik. [default: 5]",
)


@click.group()
@click.option(
    "--version", is_flag=True, expose_value=False, is_eager=True,
    callback=_print_version, help="Print version information.",
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Traefik Exporter — Prometheus metrics from the Traefik health endpoint."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config()
    except ConfigError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.option(
    "--web.listen-address", "listen_address", default=None,
    help="Address to listen on for web interface and telemetry. [default: :9000]",
)
@click.option(
    "--web.telemetry-path", "telemetry_path", default=None,
    help="Path under which to expose metrics. [default: /metrics]",
)
@traefik_address_option
@timeout_option
@click.pass_context
def serve(ctx: click.Context, **overrides) -> None:
    """Serve metrics over HTTP, scraping Traefik on every request."""
    config = _resolve_config(ctx, **overrides)

    logger.info(f"Starting {PROGRAM} {version_info()}")
    logger.info(f"Build context {build_context()}")

    exporter, registry = build_registry(config)
    app = create_app(registry, config.telemetry_path)

    logger.info(f"Scraping {config.traefik_address} (timeout {config.timeout_seconds}s)")
    logger.info(f"Listening on {config.listen_address}")
    try:
        run_server(app, config.listen_address)
    finally:
        exporter.close()


@cli.command()
@traefik_address_option
@timeout_option
@click.option(
    "--format", "output_format",
    type=click.Choice(["prometheus", "json"]), default="prometheus",
)
@click.pass_context
def scrape(ctx: click.Context, output_format: str, **overrides) -> None:
    """Scrape Traefik once and print the resulting metrics."""
    config = _resolve_config(ctx, **overrides)
    exporter, registry = build_registry(config)

    try:
        if output_format == "json":
            click.echo(json.dumps(registry.export_json(), indent=2))
        else:
            click.echo(registry.export_prometheus(), nl=False)
    finally:
        exporter.close()

    if exporter.last_error is not None:
        click.secho(f"✗ {exporter.last_error}", fg="red", err=True)
        raise SystemExit(1)


@cli.command("check-config")
@click.pass_context
def check_config(ctx: click.Context) -> None:
    """Show the resolved configuration and any problems."""
    config: ExporterConfig = ctx.obj["config"]

    click.echo()
    for key, value in config.to_dict().items():
        click.echo(f"  {key:18} {value}")
    click.echo()

    problems = config.validate()
    if problems:
        for problem in problems:
            click.secho(f"  ✗ {problem}", fg="red")
        click.echo()
        raise SystemExit(1)

    click.secho("  ✓ Configuration OK", fg="green")
    click.echo()


if __name__ == "__main__":
    cli()
