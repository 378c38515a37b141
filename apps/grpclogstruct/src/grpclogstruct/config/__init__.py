"""
grpclogstruct Configuration Module.

Implements the Nested Settings Pattern: each sub-module is an independent
concern with its own environment variable prefix.

Usage:
    from grpclogstruct.config import settings

    settings.logging.level        # GLS_LOG_LEVEL
    settings.adapter.source       # GLS_ADAPTER_SOURCE
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .adapter import AdapterSettings
from .logging import LogFormat, LoggingSettings, LogLevel


class Settings(BaseSettings):
    """Composite settings aggregating all configuration domains."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @cached_property
    def adapter(self) -> AdapterSettings:
        return AdapterSettings()


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "AdapterSettings",
    "LoggingSettings",
    "LogFormat",
    "LogLevel",
]
