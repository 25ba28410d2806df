"""Configuration management for the table store."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Storage configuration."""

    default_path: Path = Field(
        default=Path("./database.ht"), description="Store file used when no path is given"
    )
    required_suffix: str = Field(
        default=".ht", min_length=1, description="Suffix every store path must carry"
    )
    fsync: bool = Field(default=True, description="fsync the temp file before replacing")

    @field_validator("required_suffix")
    @classmethod
    def _suffix_starts_with_dot(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError(f"required_suffix must start with '.', got {value!r}")
        return value


class CodecConfig(BaseModel):
    """Snapshot encryption configuration."""

    key_size: Literal[16, 24, 32] = Field(
        default=32, description="AES key size in bytes (32 = AES-256)"
    )
    fail_open: bool = Field(
        default=True,
        description="Treat undecodable snapshots as an empty store instead of raising",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="tablevault", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the table store."""

    model_config = SettingsConfigDict(
        env_prefix="TABLEVAULT_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    codec: CodecConfig = Field(default_factory=CodecConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
