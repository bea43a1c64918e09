"""Listening servers that run a handler for every accepted connection."""

from __future__ import annotations

import logging
import selectors
import socket
import threading
from collections.abc import Callable

from .socket_utils import create_server

logger = logging.getLogger(__name__)

ConnectionHandler = Callable[[socket.socket], None]

_POLL_INTERVAL = 0.2


class ConnectionServer:
    """Accept connections and run ``handler`` on each in its own thread.

    The handler receives the connected socket, which is closed once the
    handler returns. A handler that raises only ends its own connection.
    """

    def __init__(
        self,
        address: str | None,
        port: int,
        handler: ConnectionHandler,
        label: str,
    ) -> None:
        self.handler = handler
        self.label = label
        self._listener = create_server(address, port)
        self.address, self.port = self._listener.getsockname()[:2]
        self._stopping = threading.Event()
        self._serving = False
        self._lock = threading.Lock()

    def __enter__(self) -> ConnectionServer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def serve_forever(self) -> None:
        """Accept connections until :meth:`shutdown` is called."""
        with self._lock:
            if self._stopping.is_set():
                return
            self._serving = True
        logger.info("[*] %s: Listening on port %d...", self.label, self.port)
        try:
            with selectors.DefaultSelector() as selector:
                selector.register(self._listener, selectors.EVENT_READ)
                while not self._stopping.is_set():
                    if selector.select(_POLL_INTERVAL):
                        self._accept()
        finally:
            with self._lock:
                self._serving = False
            self._listener.close()

    def shutdown(self) -> None:
        """Stop accepting connections and release the listening socket."""
        with self._lock:
            self._stopping.set()
            if not self._serving:
                self._listener.close()

    def _accept(self) -> None:
        try:
            client, peer = self._listener.accept()
        except OSError as exc:
            logger.error("[*] %s: accept: %s", self.label, exc)
            return
        worker = threading.Thread(
            target=self._serve_client,
            args=(client, peer[0]),
            name=f"{self.label} {peer[0]}:{peer[1]}",
            daemon=True,
        )
        worker.start()

    def _serve_client(self, client: socket.socket, peer_ip: str) -> None:
        logger.info("[*] %s: New connection from %s", self.label, peer_ip)
        try:
            with client:
                self.handler(client)
        except Exception:
            logger.exception("[!] %s: handler failed for %s", self.label, peer_ip)
        logger.info("[*] %s: Connection terminated.", self.label)


def _serve(address: str | None, port: int, handler: ConnectionHandler, label: str) -> None:
    server = ConnectionServer(address, port, handler, label)
    try:
        server.serve_forever()
    finally:
        server.shutdown()


def tcp_server(address: str | None, port: int, handler: ConnectionHandler) -> None:
    """Serve plain TCP connections on ``address:port`` forever."""
    _serve(address, port, handler, "TCP Server")


def tls_server(address: str | None, port: int, handler: ConnectionHandler) -> None:
    """Serve the TLS-facing listener on ``address:port`` forever."""
    _serve(address, port, handler, "TLS Server")