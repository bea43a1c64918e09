# tlsbridge

`tlsbridge` sits between TLS clients and a TLS service running on
`127.0.0.1`. Client connections come in as TLS and are decrypted. The plain
stream goes through a local TCP hop on `127.0.0.1`, where it can be
inspected or tapped. It is then encrypted again on its way to the service.

```
client --TLS--> [tls port, all interfaces] --TCP--> [tcp port, 127.0.0.1] --TLS--> [service port, 127.0.0.1]
```

Two proxy types are available:

- `tls`: plain TLS on both legs.
- `grpc`: the same path, but both legs offer ALPN with the protocols
  `http/1.1`, `http/1.0` and `h2`, so HTTP/2 clients such as gRPC keep
  working through the proxy.

## Installation

```
pip install .
```

No third-party packages are needed at run time. To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
tlsbridge -t <TLS port> -s <Service port> -x <Proxy type> [-p <TCP port>] [-c <Cert path>] [-k <Key path>] [-r <Root CA path>]
```

| Option | Meaning | Default |
| ------ | ------- | ------- |
| `-t` | Port where TLS clients connect, on all interfaces (required) | |
| `-s` | Port of the TLS service on 127.0.0.1 (required) | |
| `-x` | Proxy type, `tls` or `grpc` (required) | |
| `-p` | Port of the internal plain TCP hop on 127.0.0.1 | `8080` |
| `-c` | PEM certificate shown to clients | `cert.pem` |
| `-k` | PEM private key for that certificate | `key.pem` |
| `-r` | Root CA file to load for the service connection | none |

Example:

```
tlsbridge -t 8443 -s 50051 -x grpc -c server.pem -k server.key
```

The same command is available as `python -m tlsbridge.cli`.

Behaviour worth knowing:

- A missing or zero `-t` or `-s`, a missing `-x`, a non-numeric port or an
  unknown option prints an error and the usage line, and exits with status 1.
  An unknown proxy type prints an error and exits with status 1.
- Both listeners are bound before anything is served; if a port cannot be
  bound the error is printed and the exit status is 1.
- Ctrl-C stops the proxy with exit status 0.
- Progress messages, prefixed with `[*]`, are logged to standard output.
- Each accepted connection is handled in its own thread. A failure in one
  connection is logged and ends only that connection.
- The certificate and key are loaded when a client connects, so a wrong
  `-c` or `-k` path shows up as a logged error on each connection rather
  than at start-up.
- The upstream service's certificate is not verified, even when `-r` is
  given; `-r` only loads the file, and a file that cannot be loaded makes
  that connection fail.

## Library use

```python
from tlsbridge.proxy import ProxyConfig, ProxyType, run_proxy

config = ProxyConfig(
    tls_port=8443,
    service_port=50051,
    tcp_port=8080,
    cert_path="cert.pem",
    key_path="key.pem",
    ca_cert_path=None,
)
run_proxy(config, ProxyType.GRPC)
```

`run_proxy` blocks until interrupted. It also accepts the proxy type as a
string (`"tls"` or `"grpc"`). `proxy_tls(...)` and `proxy_grpc(...)` take
`tcp_port, tls_port, service_port, cert_path, key_path, ca_cert_path` as
positional arguments.

Building blocks:

- `tlsbridge.socket_utils`: `create_server(address, port)` returns a
  listening IPv4 socket (`None` listens on all interfaces);
  `create_client(address, port)` returns a connected one, raising
  `ValueError` for a malformed address and `ConnectionError` when the
  connection fails.
- `tlsbridge.ssl_utils`: `create_server_context(cert_path, key_path)` and
  `create_client_context(root_ca_path)` build `ssl.SSLContext` objects and
  raise `TLSContextError` when a file cannot be loaded;
  `select_alpn_protocol(offered)` returns the first offered protocol found
  in `ALPN_PROTOCOLS`, or `None`.
- `tlsbridge.relay`: `forward(tls_sock, plain_sock)` copies data both ways
  until either side closes, without closing either socket, and returns a
  `RelayStats` with the byte counts for each direction.
- `tlsbridge.servers`: `ConnectionServer(address, port, handler, label)`
  runs `handler(sock)` in a thread for each accepted connection and closes
  the socket afterwards; `serve_forever()` runs until `shutdown()` is
  called, and the server can be used as a context manager.
  `tcp_server` and `tls_server` serve forever with a given handler.
- `tlsbridge.proxy`: `make_tcp_client_handler(config, alpn)` and
  `make_tls_client_handler(config, alpn)` return the handlers for the two
  legs.
- `tlsbridge.cli`: `parse_args(argv)` returns a `(ProxyConfig, ProxyType)`
  pair or raises `UsageError`; `main(argv=None)` returns the exit status.

## What it does not do

Only IPv4 is supported, and the service and the internal TCP hop are always
on `127.0.0.1`. The upstream certificate is never verified, and there is no
client-certificate authentication on the listening side. Data passing
through the TCP hop is not logged or recorded by the package itself.