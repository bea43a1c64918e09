"""Bidirectional byte relay between a TLS socket and a plain socket."""

from __future__ import annotations

import selectors
import socket
import ssl
from dataclasses import dataclass

from .socket_utils import BUFFER_SIZE

_TLS_SIDE = 0
_PLAIN_SIDE = 1


@dataclass
class RelayStats:
    """Bytes moved in each direction by one relay session."""

    to_plain: int = 0
    to_tls: int = 0


def _receive(sock: socket.socket) -> bytes | None:
    """Read what is ready on ``sock`` without blocking.

    Returns ``None`` at end of stream and ``b""`` when nothing was ready,
    which happens when a TLS record carried no application data.
    """
    timeout = sock.gettimeout()
    sock.setblocking(False)
    try:
        try:
            first = sock.recv(BUFFER_SIZE)
        except (ssl.SSLWantReadError, ssl.SSLWantWriteError, BlockingIOError):
            return b""
        if not first:
            return None
        chunks = [first]
        pending = getattr(sock, "pending", None)
        while pending is not None and pending() > 0:
            chunk = sock.recv(BUFFER_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)
    finally:
        sock.settimeout(timeout)


def forward(tls_sock: socket.socket, plain_sock: socket.socket) -> RelayStats:
    """Copy bytes both ways until either side closes or fails.

    Neither socket is closed here. Returns how many bytes went each way.
    """
    stats = RelayStats()
    with selectors.DefaultSelector() as selector:
        selector.register(tls_sock, selectors.EVENT_READ, _TLS_SIDE)
        selector.register(plain_sock, selectors.EVENT_READ, _PLAIN_SIDE)
        while True:
            try:
                events = selector.select()
            except (OSError, ValueError):
                return stats
            for key, _ in sorted(events, key=lambda event: event[0].data):
                source, target = (
                    (tls_sock, plain_sock) if key.data == _TLS_SIDE else (plain_sock, tls_sock)
                )
                try:
                    data = _receive(source)
                    if data is None:
                        return stats
                    if data:
                        target.sendall(data)
                except (OSError, ValueError):
                    return stats
                if key.data == _TLS_SIDE:
                    stats.to_plain += len(data)
                else:
                    stats.to_tls += len(data)