"""
Settings Management Module

Reads the metrics destinations from the process environment with
pydantic-settings. Values are kept as raw strings: deciding what an empty
or malformed value means is the resolver's job, not the settings loader's.

Environment variables:
    METRICS_HOST, METRICS_PORT, METRICS_PREFIX   standard destination
    METRICS_DESTINATIONS                         JSON array of destinations
    METRICS_LOG_LEVEL, METRICS_LOG_FORMAT        logging (see log_config)
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MetricsSettings(BaseSettings):
    """
    Metrics configuration read from METRICS_* environment variables.

    Examples:
        Load from the environment:
        >>> settings = MetricsSettings()

        Explicit values (tests, scripts):
        >>> settings = MetricsSettings(host="statsd.local", port="8125", prefix="api.")
    """

    model_config = SettingsConfigDict(
        env_prefix="METRICS_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = ""
    port: str = ""
    prefix: str = ""
    destinations: str = ""

    log_level: str = "INFO"
    log_format: str = "json"


class MetricsDestination(BaseModel):
    """One element of the METRICS_DESTINATIONS array.

    The lower-case keys are canonical; the METRICS_HOST / METRICS_PORT /
    METRICS_PREFIX keys used by older deployments are accepted too.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(
        min_length=1, validation_alias=AliasChoices("host", "METRICS_HOST")
    )
    port: str = Field(
        min_length=1, validation_alias=AliasChoices("port", "METRICS_PORT")
    )
    prefix: str = Field(validation_alias=AliasChoices("prefix", "METRICS_PREFIX"))

    @field_validator("port", mode="before")
    @classmethod
    def _port_to_str(cls, value):
        # JSON numbers are accepted for the port; booleans are not.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


DESTINATIONS_ADAPTER = TypeAdapter(list[MetricsDestination])


__all__ = ["MetricsSettings", "MetricsDestination", "DESTINATIONS_ADAPTER"]
