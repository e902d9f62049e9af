"""Metrics and health check endpoints for the operator."""

from __future__ import annotations

import threading
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, make_wsgi_app
from werkzeug.serving import BaseWSGIServer, make_server
from werkzeug.wrappers import Response


def create_combined_wsgi_app(
    registry: CollectorRegistry = REGISTRY,
    ready: threading.Event | None = None,
) -> Any:
    """Create a WSGI app that combines metrics and health check endpoints.

    Args:
        registry: Registry exposed on /metrics
        ready: Event set once the operator is ready; /readyz reports 503 until then

    Returns:
        Combined WSGI application
    """
    metrics_app = make_wsgi_app(registry)

    def combined_app(environ: dict[str, Any], start_response: Any) -> list[bytes]:
        """WSGI app that routes /healthz and /readyz, delegates the rest to prometheus."""
        path = environ.get("PATH_INFO", "")

        if path == "/healthz":
            response = Response('{"status":"ok"}', mimetype="application/json", status=200)
            return response(environ, start_response)
        elif path == "/readyz":
            if ready is None or ready.is_set():
                response = Response('{"status":"ready"}', mimetype="application/json", status=200)
            else:
                response = Response('{"status":"not ready"}', mimetype="application/json", status=503)
            return response(environ, start_response)
        else:
            return metrics_app(environ, start_response)

    return combined_app


def start_metrics_server(
    port: int,
    registry: CollectorRegistry = REGISTRY,
    ready: threading.Event | None = None,
) -> BaseWSGIServer:
    """Serve the combined app on a background daemon thread.

    Returns:
        The running server, so the caller can shut it down
    """
    server = make_server("", port, create_combined_wsgi_app(registry, ready), threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server
