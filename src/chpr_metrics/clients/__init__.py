"""
Metrics clients.

Every destination a Sender fans out to is a MetricsClient.

Example:
    >>> from chpr_metrics.clients import StatsdClient, PrometheusClient
    >>>
    >>> statsd = StatsdClient("127.0.0.1:8125", prefix="api.")
    >>> statsd.count("requests", 1)
    >>>
    >>> prom = PrometheusClient(prefix="api.")
    >>> prom.gauge("queue.size", 12)
"""

from .base import MetricsClient
from .prometheus import PrometheusClient
from .statsd import ErrorHandler, StatsdClient, format_value

__all__ = [
    "ErrorHandler",
    "MetricsClient",
    "PrometheusClient",
    "StatsdClient",
    "format_value",
]
