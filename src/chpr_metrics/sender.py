"""Metrics sender and process-wide accessor.

A Sender holds the clients built from the environment and fans every
metric out to all of them. Most code uses the shared instance:

    >>> from chpr_metrics import get_sender
    >>> metrics = get_sender()
    >>> metrics.count("my_counter", 3)
    >>> metrics.increment("my_counter")
    >>> timing = metrics.new_timing()
    >>> timing.send("some_task.timing")

Code that wants an isolated instance (tests, scripts handling several
configurations) builds one with Sender.from_env() and passes it around.
"""

import math
import threading
from datetime import timedelta
from numbers import Real
from typing import Iterable

from .client import ClientBuilder
from .clients.base import MetricsClient
from .exceptions import NoMetricsClientError
from .log_config import get_context_logger
from .resolver import resolve_client_configs
from .settings import MetricsSettings
from .timing import DEFAULT_CLOCK, Clock, Timing


logger = get_context_logger("metrics.sender")


def duration_to_ms(duration: timedelta | float) -> int:
    """Convert a duration to whole milliseconds, truncating toward zero.

    Args:
        duration: A timedelta, or a number of seconds

    Examples:
        >>> duration_to_ms(timedelta(microseconds=123456))
        123
        >>> duration_to_ms(1.5)
        1500

    Raises:
        TypeError: Not a timedelta or a number
        ValueError: NaN
        OverflowError: Infinite
    """
    if not isinstance(duration, timedelta):
        if isinstance(duration, bool) or not isinstance(duration, Real):
            raise TypeError(f"duration must be a timedelta or seconds, got {duration!r}")
        return math.trunc(duration * 1000)
    micros = (duration.days * 86400 + duration.seconds) * 1_000_000 + duration.microseconds
    ms = abs(micros) // 1000
    return -ms if micros < 0 else ms


class Sender:
    """
    Fans metrics out to an ordered, fixed list of clients.

    Every operation is sent to each client in list order. A client that
    raises is logged and skipped; the caller never sees the error.

    Attributes:
        clients: The clients, in fan-out order
        clock: Time source used by new_timing()
    """

    def __init__(self, clients: Iterable[MetricsClient], clock: Clock | None = None):
        """
        Initialize the sender.

        Args:
            clients: Clients to fan out to
            clock: Time source for timings (default: the system clock)

        Raises:
            NoMetricsClientError: ``clients`` is empty
        """
        self.clients: tuple[MetricsClient, ...] = tuple(clients)
        self.clock = clock or DEFAULT_CLOCK
        if not self.clients:
            logger.warning("[METRICS] No metrics client initialized")
            raise NoMetricsClientError(
                "[METRICS] No metrics client initialized, set METRICS_HOST or METRICS_DESTINATIONS"
            )

    @classmethod
    def from_env(
        cls,
        settings: MetricsSettings | None = None,
        builder: ClientBuilder | None = None,
        extra_clients: Iterable[MetricsClient] = (),
        clock: Clock | None = None,
    ) -> "Sender":
        """
        Build a sender from the METRICS_* configuration.

        The standard destination comes first, then METRICS_DESTINATIONS in
        array order, then ``extra_clients``.

        Args:
            settings: Settings to resolve (default: read the environment)
            builder: Client factory (default: ClientBuilder())
            extra_clients: Clients appended after the configured ones
            clock: Time source for timings

        Raises:
            MetricsConfigError: Misconfiguration, unusable address, or no
                client at all
        """
        if settings is None:
            settings = MetricsSettings()
        if builder is None:
            builder = ClientBuilder()

        clients: list[MetricsClient] = []
        try:
            for config in resolve_client_configs(settings):
                clients.append(builder.build_client(config))
        except Exception:
            for client in clients:
                client.close()
            raise
        clients.extend(extra_clients)

        sender = cls(clients, clock=clock)
        logger.info("[METRICS] metrics sender initialized", clients=len(sender.clients))
        return sender

    def _fan_out(self, operation: str, bucket: str, *args) -> None:
        for client in self.clients:
            try:
                getattr(client, operation)(bucket, *args)
            except Exception:
                logger.exception(
                    "[METRICS] Error caught in metrics client",
                    client=repr(client),
                    operation=operation,
                    bucket=bucket,
                )

    def count(self, bucket: str, n: Real) -> None:
        """Send a count metric."""
        self._fan_out("count", bucket, n)

    def increment(self, bucket: str) -> None:
        """Send an increment metric (a count of 1)."""
        self._fan_out("increment", bucket)

    def gauge(self, bucket: str, value: Real) -> None:
        """Send a gauge metric."""
        self._fan_out("gauge", bucket, value)

    def duration(self, bucket: str, duration: timedelta | float) -> None:
        """
        Send a timing metric from a duration.

        Useful when the start time is not "now", where new_timing() cannot
        apply. Sub-millisecond remainders are dropped.

        Args:
            bucket: Metric name
            duration: A timedelta, or a number of seconds
        """
        try:
            value_ms = duration_to_ms(duration)
        except (TypeError, ValueError, OverflowError):
            logger.exception(
                "[METRICS] Invalid duration, timing not sent",
                bucket=bucket,
                duration=repr(duration),
            )
            return
        self._fan_out("timing", bucket, value_ms)

    def new_timing(self) -> Timing:
        """Start a Timing bound to this sender."""
        return Timing(self, clock=self.clock)

    def close(self) -> None:
        """Close every client."""
        for client in self.clients:
            client.close()

    def __repr__(self) -> str:
        return f"Sender(clients={list(self.clients)!r})"


_sender: Sender | None = None
_sender_lock = threading.Lock()


def get_sender() -> Sender:
    """
    Return the process-wide Sender, building it on first call.

    Later calls return the same instance, even if the environment changed.
    A failed build stores nothing, so the next call tries again.

    Raises:
        MetricsConfigError: The first build failed
    """
    global _sender
    if _sender is None:
        with _sender_lock:
            if _sender is None:
                _sender = Sender.from_env()
    return _sender


def reset_sender() -> None:
    """Drop the process-wide Sender. For test isolation only."""
    global _sender
    with _sender_lock:
        if _sender is not None:
            _sender.close()
        _sender = None


def count(bucket: str, n: Real) -> None:
    """Send a count metric through the shared sender."""
    get_sender().count(bucket, n)


def increment(bucket: str) -> None:
    """Send an increment metric through the shared sender."""
    get_sender().increment(bucket)


def gauge(bucket: str, value: Real) -> None:
    """Send a gauge metric through the shared sender."""
    get_sender().gauge(bucket, value)


def duration(bucket: str, duration: timedelta | float) -> None:
    """Send a timing metric through the shared sender."""
    get_sender().duration(bucket, duration)


def new_timing() -> Timing:
    """Start a Timing on the shared sender."""
    return get_sender().new_timing()


__all__ = [
    "Sender",
    "count",
    "duration",
    "duration_to_ms",
    "gauge",
    "get_sender",
    "increment",
    "new_timing",
    "reset_sender",
]
