"""
Adapter Configuration.

Controls how gRPC log calls are turned into structured events.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdapterSettings(BaseSettings):
    """gRPC logging adapter configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GLS_ADAPTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    source: str = Field(default="grpc", description="Value of the 'source' field on every emitted event")
    logger_name: str = Field(default="grpc", description="Structured logger name used by the default entry")
    fatal_exit_code: int = Field(default=1, ge=0, le=255, description="Process exit code after a fatal event")
    intercept_stdlib: bool = Field(
        default=True,
        description="Route stdlib logging from the gRPC runtime through the rule dispatcher",
    )
    stdlib_loggers: list[str] = Field(
        default_factory=lambda: ["grpc"],
        description="Stdlib logger names to intercept",
    )
