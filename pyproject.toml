[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "tlsbridge"
version = "0.1.0"
description = "A TCP proxy that terminates TLS, passes the plain stream through a local TCP hop and re-encrypts it towards a local service, with an ALPN mode for gRPC"
requires-python = ">=3.10"
dependencies = []
keywords = ["tls", "proxy", "ssl", "grpc", "alpn", "tcp", "relay"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Proxy Servers",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest", "cryptography"]

[project.scripts]
tlsbridge = "tlsbridge.cli:main"

[tool.setuptools.packages.find]
include = ["tlsbridge*"]

[tool.pytest.ini_options]
addopts = "-ra"
