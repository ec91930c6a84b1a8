"""HTTP server running the WSGI application."""

from __future__ import annotations

import socket
import threading
from typing import Any, Callable

from werkzeug.serving import WSGIRequestHandler, make_server

from chatapi.config import HTTPConfig


class Server:
    """An HTTP server bound to the configured port on construction."""

    def __init__(self, cfg: HTTPConfig, handler: Callable[..., Any]) -> None:
        seconds = cfg.read_timeout.total_seconds()

        class _RequestHandler(WSGIRequestHandler):
            timeout = seconds if seconds > 0 else None

        port = cfg.port
        number = int(port) if port.isdigit() else (socket.getservbyname(port, "tcp") if port else 0)
        self._server = make_server(
            "0.0.0.0", number, handler, threaded=True, request_handler=_RequestHandler
        )
        self._lock = threading.Lock()
        self._serving = False
        self._closed = False

    @property
    def port(self) -> int:
        return self._server.server_port

    def run(self) -> None:
        """Serve requests until :meth:`shutdown` is called."""
        with self._lock:
            if self._closed:
                return
            self._serving = True
        self._server.serve_forever()

    def shutdown(self) -> None:
        """Stop serving and close the socket."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._serving:
            self._server.shutdown()
        self._server.server_close()