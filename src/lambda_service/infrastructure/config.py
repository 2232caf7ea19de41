"""Configuration management for the lambda service."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseModel):
    """Record store configuration."""

    backend: Literal["memory", "file"] = Field(default="memory", description="Adapter backend")
    table_name: str = Field(default="records", min_length=1, description="Logical table name")
    data_dir: Path = Field(default=Path("/tmp/lambda_service/db"), description="File backend root")


class StorageConfig(BaseModel):
    """Blob store configuration."""

    backend: Literal["memory", "file"] = Field(default="memory", description="Adapter backend")
    bucket_name: str = Field(default="objects", min_length=1, description="Logical bucket name")
    data_dir: Path = Field(
        default=Path("/tmp/lambda_service/storage"), description="File backend root"
    )
    allow_empty_objects: bool = Field(default=True, description="Accept zero-length objects")


class ProcessorConfig(BaseModel):
    """Request processor configuration."""

    operation_field: str = Field(
        default="operation",
        min_length=1,
        description="Field of request data that names the port operation",
    )


class ServerConfig(BaseModel):
    """Local development server configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=9000, ge=1, le=65535, description="Server port")
    metrics_port: int = Field(default=8009, ge=1, le=65535, description="Prometheus metrics port")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="lambda_service", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the lambda service."""

    model_config = SettingsConfigDict(
        env_prefix="LAMBDA_SERVICE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    processor: ProcessorConfig = Field(default_factory=ProcessorConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the process-wide configuration, read once at start-up."""
    return Config()
