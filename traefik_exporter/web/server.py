"""
Exposition Server — Flask app serving the metrics page.

Routes:
    /                 (landing page linking to the metrics path)
    <telemetry_path>  (Prometheus text exposition, default /metrics)

Every request to the metrics path triggers a fresh Traefik scrape.
"""

from __future__ import annotations

import logging
import time

from flask import Flask, Response, current_app, g, request

from ..config.loader import DEFAULT_TELEMETRY_PATH, parse_listen_address
from ..observability.metrics import CONTENT_TYPE_LATEST, CollectorRegistry

logger = logging.getLogger(__name__)

LANDING_PAGE = """<html>
             <head><title>Traefik Exporter</title></head>
             <body>
             <h1>Traefik Exporter</h1>
             <p><a href='{metrics_path}'>Metrics</a></p>
             </body>
             </html>"""


def index():
    """Serve the landing page."""
    html = LANDING_PAGE.format(metrics_path=current_app.config["TELEMETRY_PATH"])
    return Response(html, mimetype="text/html")


def metrics():
    """Render every registered collector."""
    registry: CollectorRegistry = current_app.config["COLLECTOR_REGISTRY"]
    return Response(registry.export_prometheus(), content_type=CONTENT_TYPE_LATEST)


def create_app(
    registry: CollectorRegistry,
    telemetry_path: str = DEFAULT_TELEMETRY_PATH,
) -> Flask:
    """Create the Flask application."""
    app = Flask(__name__)

    app.config["COLLECTOR_REGISTRY"] = registry
    app.config["TELEMETRY_PATH"] = telemetry_path

    app.add_url_rule("/", "index", index)
    app.add_url_rule(telemetry_path, "metrics", metrics)

    # ── Error Handlers ────────────────────────────────────────────

    @app.errorhandler(500)
    def internal_server_error(e):
        logger.error(f"Unhandled 500 on {request.method} {request.path}: {e}")
        return Response(
            f"An error has occurred while serving metrics:\n\n{e}\n",
            status=500,
            mimetype="text/plain",
        )

    # ── Request Logging ───────────────────────────────────────────

    @app.before_request
    def log_request_start():
        g.start_time = time.time()

    @app.after_request
    def log_request_end(response):
        duration_ms = 0
        if "start_time" in g:
            duration_ms = int((time.time() - g.start_time) * 1000)

        # Scrapes arrive every few seconds; keep them out of INFO
        log_fn = logger.debug if request.path == telemetry_path else logger.info
        log_fn(
            f"{request.method} {request.path} → {response.status_code} ({duration_ms}ms)"
        )
        return response

    return app


def run_server(app: Flask, listen_address: str) -> None:
    """
    Serve the app until interrupted.

    Threaded, so concurrent scrapes queue on the collection lock
    instead of on the socket.
    """
    host, port = parse_listen_address(listen_address)
    app.run(host=host, port=port, threaded=True, debug=False, use_reloader=False)
