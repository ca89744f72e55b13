"""
Build Info — Version metadata for logs, --version and the build_info gauge.

Revision and branch are stamped in at image build time through the
BUILD_REVISION / BUILD_BRANCH environment variables.
"""

from __future__ import annotations

import getpass
import os
import platform
from datetime import datetime, timezone
from typing import Dict, List

from .metrics import Collector, Gauge, MetricDescriptor, MetricPoint

PROGRAM = "traefik_exporter"
VERSION = "0.1.0"


def build_labels() -> Dict[str, str]:
    return {
        "version": VERSION,
        "revision": os.environ.get("BUILD_REVISION", "unknown"),
        "branch": os.environ.get("BUILD_BRANCH", "unknown"),
        "pythonversion": platform.python_version(),
    }


def version_info() -> str:
    labels = build_labels()
    return f"(version={labels['version']}, branch={labels['branch']}, revision={labels['revision']})"


def build_context() -> str:
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = "unknown"
    date = datetime.now(timezone.utc).strftime("%Y%m%d-%H:%M:%S")
    return f"(python={platform.python_version()}, user={user}, date={date})"


def version_banner() -> str:
    labels = build_labels()
    return (
        f"{PROGRAM}, version {labels['version']} "
        f"(branch: {labels['branch']}, revision: {labels['revision']})\n"
        f"  python version: {labels['pythonversion']}\n"
        f"  platform:       {platform.platform()}"
    )


class BuildInfoCollector(Collector):
    """Exports a constant 1 labelled with the exporter's build metadata."""

    def __init__(self, program: str = PROGRAM):
        self._gauge = Gauge(
            "build_info",
            f"A metric with a constant '1' value labeled by version, revision, "
            f"branch, and pythonversion from which {program} was built.",
            const_labels=build_labels(),
            namespace=program,
        )
        self._gauge.set(1)

    def describe(self) -> List[MetricDescriptor]:
        return [self._gauge.desc()]

    def collect(self) -> List[MetricPoint]:
        return [self._gauge.export()]
