"""
Shared configuration management for the LDAP Group Access layer.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.logging import parse_log_level


class BaseConfig(BaseSettings):
    """Base configuration class with common settings.

    Every field can be overridden through a ``GROUP_ACCESS_`` prefixed
    environment variable or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="GROUP_ACCESS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Collaborators
    catalog_file: str = Field(default="catalog.yaml", description="YAML file listing directory groups and sites")
    settings_file: Optional[str] = Field(default=None, description="JSON file persisting setting values; in-memory when unset")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        parse_log_level(value)
        return value.strip().lower()


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
