"""Destination resolution.

Turns the two configuration forms found in MetricsSettings into
ClientConfig values:

- the standard form (METRICS_HOST / METRICS_PORT / METRICS_PREFIX), giving at
  most one destination;
- the multi-destination form (METRICS_DESTINATIONS), a JSON array giving one
  destination per element.
"""

from dataclasses import dataclass

from pydantic import ValidationError

from .exceptions import MetricsConfigValidationError, MetricsDestinationsError
from .log_config import get_context_logger
from .settings import DESTINATIONS_ADAPTER, MetricsDestination, MetricsSettings


logger = get_context_logger("metrics.resolver")


@dataclass(frozen=True)
class ClientConfig:
    """Address and prefix handed to the client builder.

    Attributes:
        host: "<host>:<port>"
        prefix: Prepended verbatim to every bucket
    """

    host: str
    prefix: str


def client_config_from_destination(destination: MetricsDestination) -> ClientConfig:
    """Build a ClientConfig from one decoded destination."""
    return ClientConfig(
        host=f"{destination.host}:{destination.port}",
        prefix=destination.prefix,
    )


def resolve_standard_config(settings: MetricsSettings) -> ClientConfig | None:
    """Resolve the METRICS_HOST / METRICS_PORT / METRICS_PREFIX form.

    Args:
        settings: Loaded metrics settings

    Returns:
        The standard ClientConfig, or None when METRICS_HOST is empty

    Raises:
        MetricsConfigValidationError: METRICS_HOST is set but the port or
            prefix is empty
    """
    if not settings.host:
        logger.info(
            "[METRICS] METRICS_HOST empty, not initializing a client for the standard configuration"
        )
        return None

    missing = [
        name
        for name, value in (
            ("METRICS_PORT", settings.port),
            ("METRICS_PREFIX", settings.prefix),
        )
        if not value
    ]
    if missing:
        logger.error(
            "[METRICS] Basic configuration can not have any empty port or prefix",
            host=settings.host,
            missing=missing,
        )
        raise MetricsConfigValidationError(
            "[METRICS] Basic configuration can not have any empty port or prefix",
            missing=missing,
            context={"host": settings.host},
        )

    return ClientConfig(host=f"{settings.host}:{settings.port}", prefix=settings.prefix)


def parse_destinations(raw: str) -> list[MetricsDestination]:
    """Decode a METRICS_DESTINATIONS value.

    Raises:
        MetricsDestinationsError: Not JSON, or not an array of destinations
    """
    try:
        return DESTINATIONS_ADAPTER.validate_json(raw)
    except ValidationError as e:
        logger.error(
            "Error parsing env METRICS_DESTINATIONS",
            metrics_destinations=raw,
            error=str(e),
        )
        raise MetricsDestinationsError(
            "[METRICS] Error creating statsd client - JSON unmarshalling failed",
            raw_value=raw,
            parser_error=e,
        ) from e


def resolve_destination_configs(settings: MetricsSettings) -> list[ClientConfig]:
    """Resolve the METRICS_DESTINATIONS form, keeping array order.

    Returns:
        One ClientConfig per array element (empty when the variable is unset)

    Raises:
        MetricsDestinationsError: The value is set but malformed
    """
    if not settings.destinations:
        logger.info(
            "[METRICS] METRICS_DESTINATIONS empty, not initializing a client for the advanced configuration"
        )
        return []

    return [
        client_config_from_destination(destination)
        for destination in parse_destinations(settings.destinations)
    ]


def resolve_client_configs(settings: MetricsSettings) -> list[ClientConfig]:
    """Resolve both forms: the standard destination first, then the array."""
    configs: list[ClientConfig] = []
    standard = resolve_standard_config(settings)
    if standard is not None:
        configs.append(standard)
    configs.extend(resolve_destination_configs(settings))
    return configs


__all__ = [
    "ClientConfig",
    "client_config_from_destination",
    "parse_destinations",
    "resolve_client_configs",
    "resolve_destination_configs",
    "resolve_standard_config",
]
