"""Server context + listening socket lifecycle."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from flask import Flask, current_app
from werkzeug.serving import BaseWSGIServer, make_server

from ..logging_setup import get_logger
from .controller import ControllerDescriptor

log = get_logger("http")

EXTENSION_KEY = "server_context"


@dataclass(frozen=True)
class ServerContext:
    """Read-only per-process state built once when the app is assembled."""

    app_name: str
    openapi: dict[str, Any]
    controllers: tuple[ControllerDescriptor, ...] = field(default_factory=tuple)


def install_server_context(app: Flask, context: ServerContext) -> None:
    if EXTENSION_KEY in app.extensions:
        raise RuntimeError("Server context already installed")
    app.extensions[EXTENSION_KEY] = context


def get_server_context(app: Flask | None = None) -> ServerContext:
    target = app or current_app
    try:
        return target.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError("No server context found; was the app built with create_app()?") from None


class HTTPServer:
    """Threaded WSGI server with graceful, idempotent stop.

    ``start`` binds and serves from a background thread. ``stop`` stops
    accepting connections, waits for in-flight request threads and releases
    the socket; calling it again (or before ``start``) does nothing.
    """

    def __init__(self, app: Flask, host: str = "127.0.0.1", port: int = 0):
        self.app = app
        self.host = host
        self._requested_port = port
        self._server: BaseWSGIServer | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._stopped = threading.Event()

    @property
    def running(self) -> bool:
        return self._server is not None

    @property
    def port(self) -> int:
        if self._server is None:
            return self._requested_port
        return self._server.server_port

    def start(self) -> None:
        with self._lock:
            if self._server is not None:
                return
            get_server_context(self.app)
            server = make_server(self.host, self._requested_port, self.app, threaded=True)
            # Non-daemon request threads so server_close() joins in-flight requests
            server.daemon_threads = False
            server.block_on_close = True
            self._server = server
            self._stopped.clear()
            self._thread = threading.Thread(target=server.serve_forever, name="http-server", daemon=True)
            self._thread.start()
        log.info("HTTP server listening on port %s", self.port)

    def stop(self) -> None:
        with self._lock:
            server, thread = self._server, self._thread
            if server is None:
                return
            self._server = None
            self._thread = None
        server.shutdown()
        server.server_close()
        if thread is not None:
            thread.join()
        self._stopped.set()
        log.info("HTTP server stopped")

    def wait(self) -> None:
        """Block until ``stop`` is called (from a signal handler or another thread)."""
        while self.running:
            self._stopped.wait(0.5)


__all__ = ["HTTPServer", "ServerContext", "get_server_context", "install_server_context"]
