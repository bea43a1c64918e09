"""TLS contexts for both ends of the bridge and ALPN selection."""

from __future__ import annotations

import ssl
from collections.abc import Iterable

ALPN_PROTOCOLS: tuple[str, ...] = ("http/1.1", "http/1.0", "h2")


class TLSContextError(Exception):
    """A TLS context could not be set up from the given files."""


def create_client_context(root_ca_path: str | None) -> ssl.SSLContext:
    """Build a client context that does not verify the peer certificate.

    When ``root_ca_path`` is given its certificates are loaded into the
    context's store.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    if root_ca_path is not None:
        try:
            context.load_verify_locations(cafile=root_ca_path)
        except (OSError, ssl.SSLError) as exc:
            raise TLSContextError(f"Cannot load root CA file: {root_ca_path}") from exc
    return context


def create_server_context(cert_path: str, key_path: str) -> ssl.SSLContext:
    """Build a server context from PEM certificate and private key files."""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    try:
        context.load_cert_chain(certfile=cert_path, keyfile=key_path)
    except (OSError, ssl.SSLError) as exc:
        raise TLSContextError(
            f"Cannot load certificate {cert_path} with key {key_path}"
        ) from exc
    return context


def select_alpn_protocol(offered: Iterable[str | bytes]) -> str | None:
    """Pick the first protocol the peer offered that the bridge supports.

    Returns ``None`` when nothing in ``offered`` is supported.
    """
    for protocol in offered:
        name = protocol.decode("ascii", "replace") if isinstance(protocol, bytes) else protocol
        if name in ALPN_PROTOCOLS:
            return name
    return None