"""TLS terminating and re-encrypting TCP proxy with an ALPN mode for gRPC."""

__version__ = "0.1.0"
__all__ = ["__version__"]