"""Creation of listening and connected IPv4 TCP sockets."""

from __future__ import annotations

import socket

BUFFER_SIZE = 16384
MAX_CLIENTS = 100

_ANY_ADDRESS = "0.0.0.0"


def _endpoint(address: str | None, port: int) -> tuple[str, int]:
    """Return a socket address, insisting on a dotted IPv4 literal."""
    if address is None:
        return (_ANY_ADDRESS, port)
    try:
        socket.inet_pton(socket.AF_INET, address)
    except OSError as exc:
        raise ValueError(f"Invalid address: {address!r}") from exc
    return (address, port)


def create_server(address: str | None, port: int) -> socket.socket:
    """Open a TCP socket listening on ``address:port``.

    ``None`` as the address listens on every interface. The socket has
    ``SO_REUSEADDR`` set and a backlog of ``MAX_CLIENTS``.
    """
    endpoint = _endpoint(address, port)
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        server.bind(endpoint)
        server.listen(MAX_CLIENTS)
    except BaseException:
        server.close()
        raise
    return server


def create_client(address: str | None, port: int) -> socket.socket:
    """Connect a TCP socket to ``address:port``.

    Raises ``ValueError`` for a missing or malformed address and
    ``ConnectionError`` when the connection cannot be made.
    """
    if address is None:
        raise ValueError("Server address cannot be null!")
    endpoint = _endpoint(address, port)
    client = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        client.connect(endpoint)
    except OSError as exc:
        client.close()
        raise ConnectionError(f"Connection to {address}:{port} failed") from exc
    return client