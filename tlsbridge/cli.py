"""Command line entry point for the TLS bridge."""

from __future__ import annotations

import getopt
import logging
import sys
from collections.abc import Sequence

from .proxy import ProxyConfig, ProxyType, run_proxy

PROG = "tlsbridge"

USAGE = (
    "Usage: {prog} -t <TLS port> -s <Service port> -x <Proxy type> "
    "[-p <TCP port>] [-c <Cert path>] [-k <Key path>] [-r <Root CA path>]"
)

_OPTIONS = "t:p:s:c:k:r:x:"


class UsageError(Exception):
    """The command line is incomplete or malformed."""


class UnsupportedProxyType(UsageError):
    """The requested proxy type is not one the bridge offers."""


def _port(option: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise UsageError(f"Error: {option} expects a port number, got {value!r}.") from None


def parse_args(argv: Sequence[str]) -> tuple[ProxyConfig, ProxyType]:
    """Turn command line arguments into a configuration and proxy type."""
    try:
        options, _ = getopt.gnu_getopt(list(argv), _OPTIONS)
    except getopt.GetoptError as exc:
        raise UsageError(f"Error: {exc.msg}.") from exc
    settings = dict(options)

    tls_port = _port("-t", settings.get("-t", "0"))
    tcp_port = _port("-p", settings.get("-p", "8080"))
    service_port = _port("-s", settings.get("-s", "0"))

    if tls_port == 0:
        raise UsageError("Error: TLS port (-t) is required.")
    if service_port == 0:
        raise UsageError("Error: Service port (-s) is required.")
    type_name = settings.get("-x")
    if type_name is None:
        raise UsageError("Error: Proxy Type (-x) is required.")
    try:
        proxy_type = ProxyType(type_name)
    except ValueError:
        raise UnsupportedProxyType(
            f"Error: Proxy type '{type_name}' is not supported. Valid proxy types: tls, grpc"
        ) from None

    config = ProxyConfig(
        tls_port=tls_port,
        service_port=service_port,
        tcp_port=tcp_port,
        cert_path=settings.get("-c", "cert.pem"),
        key_path=settings.get("-k", "key.pem"),
        ca_cert_path=settings.get("-r"),
    )
    return config, proxy_type


def main(argv: Sequence[str] | None = None) -> int:
    """Run the bridge; returns the process exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        config, proxy_type = parse_args(args)
    except UnsupportedProxyType as exc:
        print(exc, file=sys.stderr)
        return 1
    except UsageError as exc:
        print(exc, file=sys.stderr)
        print(USAGE.format(prog=PROG), file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)
    try:
        run_proxy(config, proxy_type)
    except KeyboardInterrupt:
        return 0
    except (OSError, OverflowError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())