"""
chpr-metrics

Process-wide StatsD metrics facade. Destinations come from the
environment; every metric is sent to all of them.

Configuration:
    METRICS_HOST / METRICS_PORT / METRICS_PREFIX   one destination
    METRICS_DESTINATIONS                           JSON array of
                                                   {"host", "port", "prefix"}

Usage:
    import chpr_metrics

    chpr_metrics.count("orders.created", 3)
    chpr_metrics.increment("orders.created")
    chpr_metrics.gauge("queue.size", 12)

    timing = chpr_metrics.new_timing()
    process_order()
    timing.send("orders.process.timing")

    # Explicit instance instead of the shared one
    sender = chpr_metrics.Sender.from_env()
"""

from .client import ClientBuilder, default_client_error_handler
from .clients import MetricsClient, PrometheusClient, StatsdClient
from .exceptions import (
    MetricsClientBuildError,
    MetricsConfigError,
    MetricsConfigValidationError,
    MetricsDestinationsError,
    MetricsException,
    NoMetricsClientError,
)
from .log_config import MetricsLoggingConfig, configure_logging, get_context_logger
from .resolver import ClientConfig
from .sender import (
    Sender,
    count,
    duration,
    gauge,
    get_sender,
    increment,
    new_timing,
    reset_sender,
)
from .settings import MetricsDestination, MetricsSettings
from .timing import Clock, FrozenClock, SystemClock, Timing

__version__ = "1.0.0"

__all__ = [
    # Main classes
    "Sender",
    "Timing",
    "ClientBuilder",
    "ClientConfig",
    # Clients
    "MetricsClient",
    "StatsdClient",
    "PrometheusClient",
    "default_client_error_handler",
    # Shared sender
    "get_sender",
    "reset_sender",
    "count",
    "increment",
    "gauge",
    "duration",
    "new_timing",
    # Time
    "Clock",
    "SystemClock",
    "FrozenClock",
    # Configuration
    "MetricsSettings",
    "MetricsDestination",
    "MetricsLoggingConfig",
    "configure_logging",
    "get_context_logger",
    # Errors
    "MetricsException",
    "MetricsConfigError",
    "MetricsConfigValidationError",
    "MetricsDestinationsError",
    "NoMetricsClientError",
    "MetricsClientBuildError",
]
