"""
StatsD client over UDP.

Each call encodes one line of the statistics protocol and sends it as its
own datagram on a connected UDP socket:

    <prefix><bucket>:<value>|c     count
    <prefix><bucket>:<value>|g     gauge
    <prefix><bucket>:<value>|ms    timing

Sending never raises. Socket errors (including the ICMP "port unreachable"
a connected UDP socket reports on a later send) are passed to the error
handler given at construction.
"""

import socket
from decimal import Decimal
from numbers import Real
from typing import Callable

from ..exceptions import MetricsClientBuildError
from .base import MetricsClient


ErrorHandler = Callable[[Exception], None]


def format_value(value: Real) -> str:
    """Render a metric value without exponent or trailing zeros.

    Examples:
        >>> format_value(3)
        '3'
        >>> format_value(123.0)
        '123'
        >>> format_value(0.25)
        '0.25'
    """
    if isinstance(value, bool):
        raise TypeError("metric values must be numbers, not bool")
    if isinstance(value, int):
        return str(value)
    as_float = float(value)
    if as_float.is_integer():
        return str(int(as_float))
    text = format(Decimal(repr(as_float)), "f")
    return text.rstrip("0").rstrip(".") if "." in text else text


def split_address(address: str) -> tuple[str, int]:
    """Split "host:port" into its parts.

    Raises:
        ValueError: No port, or the port is not an integer in 0-65535
    """
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise ValueError(f"missing port in address {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not port.isdigit() or not 0 <= int(port) <= 65535:
        raise ValueError(f"invalid port {port!r} in address {address!r}")
    return host, int(port)


class StatsdClient(MetricsClient):
    """
    StatsD client bound to one collector address and prefix.

    The address is resolved and the socket connected in the constructor,
    so an unusable address fails here rather than on the first send.

    Example:
        >>> client = StatsdClient("127.0.0.1:8125", prefix="api.")
        >>> client.count("requests", 3)      # sends "api.requests:3|c"
        >>> client.timing("request.duration", 42)
    """

    def __init__(
        self,
        address: str,
        prefix: str = "",
        error_handler: ErrorHandler | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            address: "host:port" of the collector
            prefix: Prepended verbatim to every bucket
            error_handler: Called with the exception on send errors

        Raises:
            MetricsClientBuildError: The address cannot be parsed or resolved
        """
        self.address = address
        self.prefix = prefix
        self._error_handler = error_handler

        try:
            host, port = split_address(address)
            family, socktype, proto, _, sockaddr = socket.getaddrinfo(
                host, port, type=socket.SOCK_DGRAM
            )[0]
            self._socket = socket.socket(family, socktype, proto)
        except (ValueError, OSError) as e:
            raise MetricsClientBuildError(
                f"Cannot resolve statsd address: {e}",
                address=address,
                prefix=prefix,
            ) from e

        try:
            self._socket.connect(sockaddr)
        except OSError as e:
            self._socket.close()
            raise MetricsClientBuildError(
                f"Cannot connect statsd socket: {e}",
                address=address,
                prefix=prefix,
            ) from e

    def _send(self, line: str) -> None:
        try:
            self._socket.send(line.encode("utf-8"))
        except OSError as e:
            if self._error_handler is not None:
                self._error_handler(e)

    def _line(self, bucket: str, value: Real, kind: str) -> str:
        return f"{self.prefix}{bucket}:{format_value(value)}|{kind}"

    def count(self, bucket: str, n: Real) -> None:
        self._send(self._line(bucket, n, "c"))

    def gauge(self, bucket: str, value: Real) -> None:
        self._send(self._line(bucket, value, "g"))

    def timing(self, bucket: str, value_ms: int) -> None:
        self._send(self._line(bucket, value_ms, "ms"))

    def close(self) -> None:
        """Close the socket. Sends after close go to the error handler."""
        self._socket.close()

    def __repr__(self) -> str:
        return f"StatsdClient(address={self.address!r}, prefix={self.prefix!r})"


__all__ = ["ErrorHandler", "StatsdClient", "format_value", "split_address"]
