"""Pytest configuration and shared fixtures for metrics facade tests."""

import json
import socket
from typing import Any, Callable

import pytest

from chpr_metrics.clients.base import MetricsClient
from chpr_metrics.sender import reset_sender


METRICS_ENV_VARS = (
    "METRICS_HOST",
    "METRICS_PORT",
    "METRICS_PREFIX",
    "METRICS_DESTINATIONS",
    "METRICS_LOG_LEVEL",
    "METRICS_LOG_FORMAT",
)

LOCALHOST = "127.0.0.1"


# ==================== Environment Fixtures ====================


@pytest.fixture(autouse=True)
def clean_metrics_env(monkeypatch):
    """Start every test with no METRICS_* variable and no shared sender."""
    for name in METRICS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_sender()
    yield
    reset_sender()


# ==================== UDP Server Fixtures ====================


class UDPServer:
    """A bound UDP socket standing in for a StatsD collector."""

    def __init__(self):
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind((LOCALHOST, 0))
        self.sock.settimeout(2.0)
        self.port = str(self.sock.getsockname()[1])

    def receive(self) -> str:
        """Return the next datagram payload (fails the test after 2s)."""
        data, _ = self.sock.recvfrom(1024)
        return data.decode("utf-8")

    def close(self) -> None:
        self.sock.close()


@pytest.fixture
def udp_server():
    """Create a UDP server on an ephemeral port."""
    server = UDPServer()
    yield server
    server.close()


@pytest.fixture
def make_udp_server():
    """Factory for several UDP servers in one test."""
    servers: list[UDPServer] = []

    def _make() -> UDPServer:
        server = UDPServer()
        servers.append(server)
        return server

    yield _make
    for server in servers:
        server.close()


@pytest.fixture
def standard_env(monkeypatch, udp_server) -> UDPServer:
    """Point the standard configuration at ``udp_server`` with prefix "prefix1."."""
    monkeypatch.setenv("METRICS_HOST", LOCALHOST)
    monkeypatch.setenv("METRICS_PORT", udp_server.port)
    monkeypatch.setenv("METRICS_PREFIX", "prefix1.")
    return udp_server


@pytest.fixture
def destinations_json() -> Callable[..., str]:
    """Render METRICS_DESTINATIONS for (port, prefix) pairs on localhost."""

    def _render(*entries: tuple[str, str]) -> str:
        return json.dumps(
            [{"host": LOCALHOST, "port": port, "prefix": prefix} for port, prefix in entries]
        )

    return _render


# ==================== Client Doubles ====================


class RecordingClient(MetricsClient):
    """MetricsClient that records every call."""

    def __init__(self, name: str = "recording"):
        self.name = name
        self.calls: list[tuple[str, str, Any]] = []
        self.closed = False

    def count(self, bucket, n):
        self.calls.append(("count", bucket, n))

    def gauge(self, bucket, value):
        self.calls.append(("gauge", bucket, value))

    def timing(self, bucket, value_ms):
        self.calls.append(("timing", bucket, value_ms))

    def close(self):
        self.closed = True

    def __repr__(self):
        return f"RecordingClient({self.name!r})"


class FailingClient(MetricsClient):
    """MetricsClient whose every send raises."""

    def count(self, bucket, n):
        raise RuntimeError("count failed")

    def gauge(self, bucket, value):
        raise RuntimeError("gauge failed")

    def timing(self, bucket, value_ms):
        raise RuntimeError("timing failed")


@pytest.fixture
def recording_client() -> RecordingClient:
    return RecordingClient()


@pytest.fixture
def failing_client() -> FailingClient:
    return FailingClient()
