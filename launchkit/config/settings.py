"""Configuration models using Pydantic."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LaunchkitSettings(BaseSettings):
    """Global application settings."""

    model_config = SettingsConfigDict(
        env_prefix="LAUNCHKIT_",
        case_sensitive=False,
        validate_assignment=True,
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="plain",
        description="Log format (json, plain)"
    )

    # Discovery configuration
    discovery_timeout: float = Field(
        default=30,
        ge=1,
        le=600,
        description="Maximum time in seconds a single plugin may spend discovering actions"
    )
    fail_on_discovery_error: bool = Field(
        default=False,
        description="Abort startup when any plugin fails to discover its actions"
    )

    # Metrics configuration
    metrics_enabled: bool = Field(
        default=False,
        description="Enable Prometheus metrics"
    )
    metrics_port: int = Field(
        default=8080,
        ge=1024,
        le=65535,
        description="Port for Prometheus metrics server"
    )
