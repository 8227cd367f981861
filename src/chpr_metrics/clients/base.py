"""
Abstract base class for metrics clients.

A Sender fans every metric out to a list of MetricsClient objects, so any
backend (StatsD over UDP, an in-process Prometheus registry, ...) can sit
behind the same calls.
"""

from abc import ABC, abstractmethod
from numbers import Real


class MetricsClient(ABC):
    """
    Abstract base class for metrics clients.

    Implementations must not raise on transport failures: errors are
    reported through whatever error handler the client was built with.
    """

    @abstractmethod
    def count(self, bucket: str, n: Real) -> None:
        """
        Record a count delta.

        Args:
            bucket: Metric name, without the destination prefix
            n: Delta to add
        """
        pass

    def increment(self, bucket: str) -> None:
        """Record a count delta of 1."""
        self.count(bucket, 1)

    @abstractmethod
    def gauge(self, bucket: str, value: Real) -> None:
        """
        Set a gauge to an absolute value.

        Args:
            bucket: Metric name
            value: Value to set
        """
        pass

    @abstractmethod
    def timing(self, bucket: str, value_ms: int) -> None:
        """
        Record a timing.

        Args:
            bucket: Metric name
            value_ms: Duration in whole milliseconds
        """
        pass

    def close(self) -> None:
        """Release any resource held by the client."""
        pass


__all__ = ["MetricsClient"]
