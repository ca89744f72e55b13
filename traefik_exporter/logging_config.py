"""
Logging setup for the exporter.

LOG_LEVEL picks the level (default INFO). LOG_FORMAT picks "text" for a
terminal or "json" for log shippers. Scrape failures carry their kind and
upstream status as structured fields in JSON mode.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict

# Set via extra= by the collection engine
EXTRA_FIELDS = ("failure_kind", "status_code")

# Libraries whose per-request chatter duplicates the web layer's log lines
QUIET_LOGGERS = ("werkzeug", "httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, message and extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (name, getattr(record, name)) for name in EXTRA_FIELDS if hasattr(record, name)
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


class HumanFormatter(logging.Formatter):
    """`12:34:56 ERROR   [engine         ] Can't scrape Traefik: ...`"""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        level = f"{record.levelname:7}"
        if sys.stderr.isatty():
            level = f"{self.LEVEL_COLORS.get(record.levelname, '')}{level}{self.RESET}"

        source = record.name.rsplit(".", 1)[-1][:15]
        line = f"{stamp} {level} [{source:15}] {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str | None = None, format_type: str | None = None) -> None:
    """Install a single stderr handler on the root logger. Arguments override the env."""
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    format_name = (format_type or os.environ.get("LOG_FORMAT", "text")).lower()
    numeric_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if format_name == "json" else HumanFormatter())
    handler.setLevel(numeric_level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(f"Logging configured: level={level_name}, format={format_name}")
