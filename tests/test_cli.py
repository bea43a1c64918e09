import socket

import pytest

from tlsbridge.cli import UnsupportedProxyType, UsageError, main, parse_args
from tlsbridge.proxy import ProxyType


def test_parse_args_defaults():
    config, proxy_type = parse_args(["-t", "8443", "-s", "50051", "-x", "grpc"])
    assert proxy_type is ProxyType.GRPC
    assert config.tls_port == 8443
    assert config.service_port == 50051
    assert config.tcp_port == 8080
    assert config.cert_path == "cert.pem"
    assert config.key_path == "key.pem"
    assert config.ca_cert_path is None


def test_parse_args_all_options():
    config, proxy_type = parse_args(
        ["-t", "9443", "-s", "9000", "-x", "tls", "-p", "9090",
         "-c", "server.crt", "-k", "server.key", "-r", "ca.pem"]
    )
    assert proxy_type is ProxyType.TLS
    assert (config.tls_port, config.service_port, config.tcp_port) == (9443, 9000, 9090)
    assert (config.cert_path, config.key_path, config.ca_cert_path) == (
        "server.crt", "server.key", "ca.pem",
    )


def test_last_repeated_option_wins():
    config, _ = parse_args(["-t", "1000", "-t", "2000", "-s", "3000", "-x", "tls"])
    assert config.tls_port == 2000


@pytest.mark.parametrize(
    "argv, option",
    [
        (["-s", "9000", "-x", "tls"], "-t"),
        (["-t", "0", "-s", "9000", "-x", "tls"], "-t"),
        (["-t", "9443", "-x", "tls"], "-s"),
        (["-t", "9443", "-s", "9000"], "-x"),
    ],
)
def test_missing_required_option(argv, option):
    with pytest.raises(UsageError, match=f"\\({option}\\) is required"):
        parse_args(argv)


def test_unknown_option_is_rejected():
    with pytest.raises(UsageError):
        parse_args(["-t", "9443", "-s", "9000", "-x", "tls", "-z"])


def test_non_numeric_port_is_rejected():
    with pytest.raises(UsageError, match="-p"):
        parse_args(["-t", "9443", "-s", "9000", "-x", "tls", "-p", "http"])


def test_unsupported_proxy_type():
    with pytest.raises(UnsupportedProxyType, match="'http'"):
        parse_args(["-t", "9443", "-s", "9000", "-x", "http"])


def test_main_prints_usage_on_missing_option(capsys):
    assert main(["-s", "9000", "-x", "tls"]) == 1
    err = capsys.readouterr().err
    assert "TLS port (-t) is required" in err
    assert "Usage:" in err


def test_main_reports_unsupported_type(capsys):
    assert main(["-t", "9443", "-s", "9000", "-x", "http"]) == 1
    err = capsys.readouterr().err
    assert "tls, grpc" in err
    assert "Usage:" not in err


def test_main_fails_when_port_is_taken(capsys):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]
        status = main(["-t", "9443", "-s", "9000", "-x", "tls", "-p", str(port)])
    assert status == 1
    assert "Error:" in capsys.readouterr().err