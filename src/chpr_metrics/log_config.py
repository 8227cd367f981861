"""Logging configuration and utilities."""

import logging
import sys
from dataclasses import dataclass
from typing import Any

import structlog
from structlog.stdlib import LoggerFactory, add_logger_name

from .settings import MetricsSettings


LOG_FORMATS = ("json", "console")


@dataclass
class MetricsLoggingConfig:
    """Logging settings for processes that use the metrics facade.

    Example:
        ```python
        config = MetricsLoggingConfig.from_env()
        configure_logging(config)
        ```
    """

    level: str = "INFO"
    log_format: str = "json"

    def __post_init__(self) -> None:
        self.level = self.level.upper()
        if logging.getLevelName(self.level) == f"Level {self.level}":
            raise ValueError(f"Unknown log level: {self.level}")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {LOG_FORMATS}, got {self.log_format!r}"
            )

    @classmethod
    def from_env(cls) -> "MetricsLoggingConfig":
        """Build from METRICS_LOG_LEVEL and METRICS_LOG_FORMAT."""
        settings = MetricsSettings()
        return cls(
            level=settings.log_level or "INFO",
            log_format=settings.log_format or "json",
        )

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level, "log_format": self.log_format}


def configure_logging(config: MetricsLoggingConfig | None = None) -> None:
    """Install the structlog processor chain on top of stdlib logging.

    Args:
        config: Logging settings (default: read from the environment)
    """
    if config is None:
        config = MetricsLoggingConfig.from_env()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.level),
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_logger_name,
    ]
    if config.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_context_logger(name: str) -> structlog.BoundLogger:
    """Get a context-aware logger.

    Args:
        name: Logger name

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


__all__ = [
    "LOG_FORMATS",
    "MetricsLoggingConfig",
    "configure_logging",
    "get_context_logger",
]
