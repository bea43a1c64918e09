"""The two halves of the bridge and the proxy that runs them together."""

from __future__ import annotations

import logging
import socket
import ssl
import threading
from dataclasses import dataclass
from enum import Enum

from .relay import forward
from .servers import ConnectionHandler, ConnectionServer
from .socket_utils import create_client
from .ssl_utils import ALPN_PROTOCOLS, create_client_context, create_server_context

logger = logging.getLogger(__name__)

LOCALHOST = "127.0.0.1"

_SHUTDOWN_TIMEOUT = 1.0


class ProxyType(str, Enum):
    """How the bridge talks TLS on both ends."""

    TLS = "tls"
    GRPC = "grpc"

    @property
    def uses_alpn(self) -> bool:
        return self is ProxyType.GRPC


@dataclass(frozen=True)
class ProxyConfig:
    """Ports and certificate files for one bridge."""

    tls_port: int
    service_port: int
    tcp_port: int = 8080
    cert_path: str = "cert.pem"
    key_path: str = "key.pem"
    ca_cert_path: str | None = None


def _close_tls(tls: ssl.SSLSocket) -> None:
    """Send close_notify where possible, then close the socket."""
    try:
        tls.settimeout(_SHUTDOWN_TIMEOUT)
        tls.unwrap()
    except (OSError, ValueError):
        pass
    finally:
        tls.close()


def make_tcp_client_handler(config: ProxyConfig, alpn: bool) -> ConnectionHandler:
    """Handler that relays a plain connection to the service over TLS."""

    def handle(client: socket.socket) -> None:
        service = create_client(LOCALHOST, config.service_port)
        try:
            context = create_client_context(config.ca_cert_path)
            if alpn:
                context.set_alpn_protocols(list(ALPN_PROTOCOLS))
            logger.info("[*] TCP Server: Trying to connect to the service...")
            tls = context.wrap_socket(service)
        except BaseException:
            service.close()
            raise
        try:
            logger.info("[*] TCP Server: Successfully connected to the service via TLS.")
            forward(tls, client)
        finally:
            _close_tls(tls)

    return handle


def make_tls_client_handler(config: ProxyConfig, alpn: bool) -> ConnectionHandler:
    """Handler that terminates TLS and relays to the local TCP listener."""

    def handle(client: socket.socket) -> None:
        context = create_server_context(config.cert_path, config.key_path)
        if alpn:
            context.set_alpn_protocols(list(ALPN_PROTOCOLS))
        tls = context.wrap_socket(client, server_side=True)
        try:
            with create_client(LOCALHOST, config.tcp_port) as upstream:
                logger.info("[*] TLS Server: Successfully connected to server TCP")
                forward(tls, upstream)
        finally:
            _close_tls(tls)

    return handle


def run_proxy(config: ProxyConfig, proxy_type: ProxyType | str) -> None:
    """Run the local TCP listener and the public TLS listener until stopped.

    Both listeners are bound before any connection is served, so a port
    that is taken raises ``OSError`` straight away.
    """
    kind = ProxyType(proxy_type)
    alpn = kind.uses_alpn
    tcp = ConnectionServer(
        LOCALHOST, config.tcp_port, make_tcp_client_handler(config, alpn), "TCP Server"
    )
    try:
        tls = ConnectionServer(
            None, config.tls_port, make_tls_client_handler(config, alpn), "TLS Server"
        )
    except BaseException:
        tcp.shutdown()
        raise
    worker = threading.Thread(target=tcp.serve_forever, name="TCP Server", daemon=True)
    worker.start()
    try:
        tls.serve_forever()
    finally:
        tls.shutdown()
        tcp.shutdown()
        worker.join()


def proxy_tls(
    tcp_port: int,
    tls_port: int,
    service_port: int,
    cert_path: str,
    key_path: str,
    ca_cert_path: str | None,
) -> None:
    """Run a plain TLS bridge."""
    config = ProxyConfig(tls_port, service_port, tcp_port, cert_path, key_path, ca_cert_path)
    run_proxy(config, ProxyType.TLS)


def proxy_grpc(
    tcp_port: int,
    tls_port: int,
    service_port: int,
    cert_path: str,
    key_path: str,
    ca_cert_path: str | None,
) -> None:
    """Run a bridge that negotiates ALPN on both ends, as gRPC needs."""
    config = ProxyConfig(tls_port, service_port, tcp_port, cert_path, key_path, ca_cert_path)
    run_proxy(config, ProxyType.GRPC)