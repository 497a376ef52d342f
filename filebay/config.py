"""Filebay configuration management.

Configuration sources (in priority order):
1. Environment variables (FILEBAY_ prefix)
2. Config file (config.yaml)
3. Defaults
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000


class StorageConfig(BaseModel):
    """Storage root and stream I/O configuration."""

    # Every request path is resolved under this directory
    root_path: str = "/var/lib/filebay/files"
    # Read and write chunk boundary
    chunk_bytes: int = Field(default=64 * 1024, ge=1)
    compress_level: int = Field(default=6, ge=0, le=9)


class CorsConfig(BaseModel):
    """Cross-origin headers applied to every response."""

    allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    allow_methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST", "PATCH", "DELETE"]
    )
    allow_headers: list[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    """structlog output configuration."""

    level: Literal["debug", "info", "warning", "error"] = "info"
    json_output: bool = False


class Settings(BaseSettings):
    """Filebay application settings."""

    model_config = SettingsConfigDict(
        env_prefix="FILEBAY_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over values passed in from the YAML file
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def _load_config_file() -> dict:
    """Load configuration from YAML file if exists.

    Looks for config file in order:
    1. FILEBAY_CONFIG_FILE environment variable
    2. ./config.yaml
    3. /etc/filebay/config.yaml
    """
    import os

    config_paths = [
        os.environ.get("FILEBAY_CONFIG_FILE"),
        Path("config.yaml"),
        Path("/etc/filebay/config.yaml"),
    ]

    for path in config_paths:
        if path is None:
            continue
        path = Path(path)
        if path.exists():
            with open(path) as f:
                return yaml.safe_load(f) or {}

    return {}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Configuration is loaded from:
    1. YAML config file (if exists)
    2. Environment variables (override)
    3. Defaults
    """
    file_config = _load_config_file()

    # Environment variables override file values via pydantic-settings
    return Settings(**file_config)
