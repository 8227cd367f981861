"""Metrics facade exception hierarchy.

Initialization problems are raised as exceptions instead of aborting the
process, so the application decides whether a missing metrics setup should
stop it. Errors that happen while sending a metric never reach the caller:
they are handed to the client's error handler.

Exception Hierarchy:
    MetricsException (base)
    └── MetricsConfigError
        ├── MetricsConfigValidationError
        ├── MetricsDestinationsError
        ├── NoMetricsClientError
        └── MetricsClientBuildError
"""

from typing import Optional


class MetricsException(Exception):
    """Base exception for all metrics facade errors.

    All metrics-specific exceptions inherit from this class to allow
    catching them with a single except clause.
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        """Initialize metrics exception.

        Args:
            message: Error message
            context: Optional context dictionary for debugging
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation with context."""
        if self.context:
            context_str = "; ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class MetricsConfigError(MetricsException):
    """Base exception for fatal metrics configuration errors.

    Raised while building a Sender. No partial or degraded sender is
    produced when one of these is raised.
    """

    pass


class MetricsConfigValidationError(MetricsConfigError):
    """Raised when the standard configuration is only partially set.

    METRICS_HOST is set but METRICS_PORT or METRICS_PREFIX is empty.

    Attributes:
        missing: Names of the empty variables
    """

    def __init__(
        self,
        message: str,
        missing: Optional[list[str]] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if missing:
            context["missing"] = ",".join(missing)
        super().__init__(message, context)
        self.missing = missing or []


class MetricsDestinationsError(MetricsConfigError):
    """Raised when METRICS_DESTINATIONS is not a JSON array of destinations.

    Attributes:
        raw_value: The environment value that failed to parse
        parser_error: The underlying validation error
    """

    def __init__(
        self,
        message: str,
        raw_value: Optional[str] = None,
        parser_error: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if raw_value is not None:
            context["metrics_destinations"] = raw_value[:200]
        super().__init__(message, context)
        self.raw_value = raw_value
        self.parser_error = parser_error


class NoMetricsClientError(MetricsConfigError):
    """Raised when neither configuration form produced a client."""

    pass


class MetricsClientBuildError(MetricsConfigError):
    """Raised when a StatsD client cannot be created for a destination.

    Attributes:
        address: The "host:port" address that was rejected
        prefix: Prefix of the rejected destination
    """

    def __init__(
        self,
        message: str,
        address: Optional[str] = None,
        prefix: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if address is not None:
            context["address"] = address
        if prefix is not None:
            context["prefix"] = prefix
        super().__init__(message, context)
        self.address = address
        self.prefix = prefix


__all__ = [
    "MetricsException",
    "MetricsConfigError",
    "MetricsConfigValidationError",
    "MetricsDestinationsError",
    "NoMetricsClientError",
    "MetricsClientBuildError",
]
