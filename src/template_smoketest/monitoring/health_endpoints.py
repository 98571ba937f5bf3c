"""HTTP endpoints for liveness and Prometheus scraping."""

from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Callable, Iterable
from socketserver import ThreadingMixIn
from typing import Any
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app

logger = logging.getLogger(__name__)

WsgiApp = Callable[[dict[str, Any], Callable[..., Any]], Iterable[bytes]]


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` (host optional, as in ``:8080``) into its parts.

    Raises:
      ValueError: if the port is missing or not numeric.
    """
    host, separator, port = address.strip().rpartition(":")
    if not separator or not port.isdigit():
        raise ValueError(f"Invalid listen address: {address!r}")
    return host.strip("[]") or "0.0.0.0", int(port)


def build_wsgi_app(registry: CollectorRegistry) -> WsgiApp:
    """Serve ``/healthz`` and ``/metrics``; everything else is 404."""
    metrics_app = make_wsgi_app(registry)

    def app(environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        path = environ.get("PATH_INFO", "")
        method = environ.get("REQUEST_METHOD", "GET")
        if path == "/healthz":
            logger.debug("%s /healthz", method)
            start_response("200 OK", [("Content-Type", "text/plain; charset=utf-8")])
            return [b"ok"]
        if path == "/metrics":
            logger.debug("%s /metrics", method)
            return metrics_app(environ, start_response)
        start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])
        return [b"not found"]

    return app


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _ThreadingWSGIServerV6(_ThreadingWSGIServer):
    address_family = socket.AF_INET6


class _LoggingRequestHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:  # pylint: disable=redefined-builtin
        logger.debug("%s - %s", self.address_string(), format % args)


class MetricsHttpServer:
    """Runs the WSGI app on a background daemon thread."""

    def __init__(self, listen_address: str, app: WsgiApp) -> None:
        self._host, self._port = parse_listen_address(listen_address)
        self._app = app
        self._server: WSGIServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int:
        """Bound port; differs from the configured one when port 0 was requested."""
        if self._server is None:
            return self._port
        return int(self._server.server_address[1])

    def start(self) -> None:
        self._server = make_server(
            self._host,
            self._port,
            self._app,
            server_class=_ThreadingWSGIServerV6 if ":" in self._host else _ThreadingWSGIServer,
            handler_class=_LoggingRequestHandler,
        )
        self._thread = threading.Thread(
            target=self._server.serve_forever, name="metrics-http", daemon=True
        )
        self._thread.start()
        logger.debug("Listening at %s:%s", self._host, self.port)

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._server = None
        self._thread = None
