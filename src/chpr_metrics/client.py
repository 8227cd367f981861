"""Client factory.

Builds a StatsdClient for each resolved ClientConfig and wires in the
error handler that reports send failures.
"""

from .clients.statsd import ErrorHandler, StatsdClient
from .exceptions import MetricsClientBuildError
from .log_config import get_context_logger
from .resolver import ClientConfig


logger = get_context_logger("metrics.client")


def default_client_error_handler(error: Exception) -> None:
    """Log a send/connection error reported by a StatsD client."""
    logger.error("[METRICS] Error caught in metrics", error=str(error))


class ClientBuilder:
    """Builds StatsD clients from ClientConfig values.

    Args:
        error_handler: Called by every built client on send errors
    """

    def __init__(self, error_handler: ErrorHandler = default_client_error_handler):
        self.error_handler = error_handler

    def build_client(self, config: ClientConfig) -> StatsdClient:
        """Return a StatsD client for ``config``.

        Raises:
            MetricsClientBuildError: The address cannot be parsed, resolved
                or connected. Not retried.
        """
        try:
            client = StatsdClient(
                config.host,
                prefix=config.prefix,
                error_handler=self.error_handler,
            )
        except MetricsClientBuildError as e:
            logger.error(
                "Error creating the statsd client",
                config=config,
                error=str(e),
            )
            raise

        logger.debug("[METRICS] statsd client created", address=config.host, prefix=config.prefix)
        return client


__all__ = ["ClientBuilder", "default_client_error_handler"]
