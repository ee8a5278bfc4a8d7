"""Application configuration using Pydantic Settings."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

SETTINGS_FILE_NAME = "settings.json"


def _default_data_dir() -> Path:
    """Data directory used when FILMLINK_DATA_DIR is not set."""
    return Path.cwd() / "data"


def json_config_settings_source(
    settings: BaseSettings | None = None,
) -> dict[str, Any]:
    """Load settings from settings.json file.

    This source has lowest priority - env vars will override JSON values.
    The "matching" object is not a Settings field; it is read separately by
    ``filmlink.core.matching.config``.

    Returns:
        Dictionary with setting keys (lowercase) and values from JSON file.
    """
    data_dir_env = os.environ.get("FILMLINK_DATA_DIR", "")
    data_dir = Path(data_dir_env) if data_dir_env else _default_data_dir()
    settings_file = data_dir / "config" / SETTINGS_FILE_NAME

    if not settings_file.exists():
        return {}

    try:
        with settings_file.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}

    if not isinstance(data, dict):
        return {}

    return {k.lower(): v for k, v in data.items() if k.lower() != "matching"}


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from:
    1. JSON file (settings.json in config directory) - lowest priority
    2. .env file
    3. Environment variables, prefixed with FILMLINK_
    4. Values passed to Settings() - highest priority
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FILMLINK_",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources - JSON file first, then env vars.

        Priority (lowest to highest):
        1. JSON file (settings.json)
        2. .env file
        3. Environment variables
        4. Init settings
        """
        # Sources are listed highest priority first.
        return (  # type: ignore[return-value]
            init_settings,
            env_settings,
            dotenv_settings,
            json_config_settings_source,
        )

    env: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Application environment (development, production, testing)",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    data_dir: Path = Field(
        default_factory=_default_data_dir,
        description="Base directory for settings.json and log files",
    )

    log_to_file: bool = Field(
        default=False,
        description="Write JSON logs under logs_dir instead of stdout",
    )

    # Resolution
    resolve_concurrency: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Maximum number of titles resolved at the same time",
    )

    search_pool_size: int = Field(
        default=3,
        ge=1,
        le=32,
        description="Number of equivalent search sessions in a SearchClientPool",
    )

    @property
    def config_dir(self) -> Path:
        """Directory for configuration files (settings.json)."""
        return self.data_dir / "config"

    @property
    def settings_file(self) -> Path:
        return self.config_dir / SETTINGS_FILE_NAME

    @property
    def logs_dir(self) -> Path:
        """Directory for log files (if file logging is enabled)."""
        return self.data_dir / "logs"

    @property
    def is_debug(self) -> bool:
        """Check if running in debug/development mode."""
        return self.env == "development"

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_testing(self) -> bool:
        return self.env == "testing"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance.

    The cache is cleared when reload_settings() is called.
    """
    return Settings()


def reload_settings() -> Settings:
    """Reload settings from all sources (JSON, .env, env vars).

    Returns:
        New Settings instance
    """
    get_settings.cache_clear()
    return get_settings()
