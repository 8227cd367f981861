"""
Prometheus metrics client.

Feeds the same count / gauge / timing calls into a prometheus_client
registry, so a service can expose locally what it also ships to StatsD.
It is not built from the environment; pass it to the Sender explicitly:

    >>> sender = Sender.from_env(extra_clients=[PrometheusClient(prefix="api.")])
"""

from numbers import Real
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram

from .base import MetricsClient


class PrometheusClient(MetricsClient):
    """
    Prometheus metrics client.

    Creates Counter, Gauge and Histogram metrics on first use of a bucket.
    Timings are observed in milliseconds.

    Example:
        >>> client = PrometheusClient(registry=CollectorRegistry(), prefix="api.")
        >>> client.count("requests", 1)   # api_requests_total += 1
    """

    def __init__(
        self, registry: CollectorRegistry | None = None, prefix: str = ""
    ) -> None:
        """
        Initialize Prometheus metrics client.

        Metrics are registered per client. Two clients on the same registry
        that use the same bucket collide: the second one's calls fail with
        "Duplicated timeseries" (logged by the Sender, never raised). Give
        each client its own CollectorRegistry unless only one client uses
        the default REGISTRY.

        Args:
            registry: Optional CollectorRegistry. If None, uses the default REGISTRY.
            prefix: Prepended to every bucket before sanitizing
        """
        self._registry = registry or REGISTRY
        self.prefix = prefix

        # Cache for created metrics
        self._counters: dict[str, Counter] = {}
        self._histograms: dict[str, Histogram] = {}
        self._gauges: dict[str, Gauge] = {}

    def _sanitize_metric_name(self, bucket: str) -> str:
        """
        Sanitize metric name for Prometheus.

        Converts dots and dashes to underscores.

        Args:
            bucket: Bucket name without prefix

        Returns:
            Sanitized metric name
        """
        return f"{self.prefix}{bucket}".replace(".", "_").replace("-", "_").strip("_")

    def _get(self, cache: dict[str, Any], factory: type, bucket: str, kind: str) -> Any:
        metric_name = self._sanitize_metric_name(bucket)
        if metric_name not in cache:
            cache[metric_name] = factory(
                metric_name,
                f"{kind} for {self.prefix}{bucket}",
                registry=self._registry,
            )
        return cache[metric_name]

    def count(self, bucket: str, n: Real) -> None:
        """
        Increment a counter.

        Prometheus counters only go up; negative deltas raise ValueError,
        which the Sender logs and skips.
        """
        self._get(self._counters, Counter, bucket, "Counter").inc(n)

    def gauge(self, bucket: str, value: Real) -> None:
        """Set a gauge to an absolute value."""
        self._get(self._gauges, Gauge, bucket, "Gauge").set(value)

    def timing(self, bucket: str, value_ms: int) -> None:
        """Observe a duration in milliseconds."""
        self._get(self._histograms, Histogram, bucket, "Histogram").observe(value_ms)

    def __repr__(self) -> str:
        return f"PrometheusClient(prefix={self.prefix!r})"


__all__ = ["PrometheusClient"]
