"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (ROUTEREGISTRY__ENVIRONMENT=production)
  2. routeregistry.yaml     (searched in cwd, then the platform config dir)
  3. Hardcoded defaults

The config file is optional — all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_APP_NAME = "routeregistry"
_DEFAULT_DATA_DIR = platformdirs.user_data_dir(_APP_NAME)


def _find_config_file() -> str | None:
    """Return the path of the first routeregistry.yaml found, or None."""
    candidates = [
        Path("routeregistry.yaml"),
        Path(platformdirs.user_config_dir(_APP_NAME)) / "routeregistry.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    host: str = "0.0.0.0"
    port: int = 8080


class RegistrySettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # None means "<data_dir>/data" and "<data_dir>/next" respectively
    published_dir: str | None = None
    drafts_dir: str | None = None
    max_file_bytes: int = Field(default=5 * 1024 * 1024, ge=1)
    # how many higher version numbers `draft --use-next` will try
    version_probe: int = Field(default=10, ge=1)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: ROUTEREGISTRY__SERVER__PORT=9090
        env_prefix="ROUTEREGISTRY__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    environment: Literal["production", "development"] = "development"
    data_dir: str = _DEFAULT_DATA_DIR
    server: ServerSettings = ServerSettings()
    registry: RegistrySettings = RegistrySettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def published_dir(self) -> Path:
        if self.registry.published_dir:
            return Path(self.registry.published_dir).expanduser()
        return Path(self.data_dir).expanduser() / "data"

    @property
    def drafts_dir(self) -> Path:
        if self.registry.drafts_dir:
            return Path(self.registry.drafts_dir).expanduser()
        return Path(self.data_dir).expanduser() / "next"

    def source_dir(self) -> tuple[Path, str]:
        """Root the registry loads from, plus a label for log output.

        Production serves published versions; development serves drafts.
        """
        if self.environment == "production":
            return self.published_dir, "published"
        return self.drafts_dir, "drafts"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
