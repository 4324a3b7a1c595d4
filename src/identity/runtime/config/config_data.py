"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class OIDCProviderConfig(BaseModel):
    """OIDC provider connection known to the identity core."""

    issuer: str | None = Field(default=None, description="OIDC issuer URL")
    organization: str | None = Field(
        default=None,
        description="Enterprise SSO organization assigned to accounts linked through this provider",
    )
    enabled: bool = Field(default=True, description="Enable this provider")
    dev_only: bool = Field(
        default=False, description="Enable this provider only in development environment"
    )


class OIDCConfig(BaseModel):
    """OIDC configuration model."""

    providers: dict[str, OIDCProviderConfig] = Field(
        default_factory=dict,
        description="OIDC provider configurations (empty = accept any provider key)",
    )


class LinkingConfig(BaseModel):
    """Account linking policy."""

    allow_unlink_last_provider: bool = Field(
        default=False,
        description="Allow removing the only provider link of a credential",
    )


class ConfigData(BaseModel):
    """Root configuration model."""

    app: AppConfig = Field(default_factory=AppConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    oidc: OIDCConfig = Field(default_factory=OIDCConfig)
    linking: LinkingConfig = Field(default_factory=LinkingConfig)
