"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (USBIDS__UPDATE__INTERVAL_HOURS=12)
  2. usbids.yaml            (searched in cwd, then ~/.config/usbids/)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import httpx
import platformdirs
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("usbids")

DEFAULT_SOURCE_URLS = [
    "http://www.linux-usb.org/usb.ids",
    "https://raw.githubusercontent.com/systemd/systemd/main/hwdb.d/usb.ids",
]


def _find_config_file() -> str | None:
    """Return the path of the first usbids.yaml found, or None."""
    candidates = [
        Path("usbids.yaml"),
        Path.home() / ".config" / "usbids" / "usbids.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class SourceSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Tried in order; first successful download wins.
    urls: list[str] = list(DEFAULT_SOURCE_URLS)

    @field_validator("urls")
    @classmethod
    def validate_urls(cls, v: list[str]) -> list[str]:
        for url in v:
            try:
                parsed = httpx.URL(url)
            except httpx.InvalidURL as exc:
                raise ValueError(f"invalid source url {url!r}: {exc}") from exc
            if parsed.scheme not in ("http", "https") or not parsed.host:
                raise ValueError(f"source url must be an absolute http(s) url: {url!r}")
        return v


class FetcherSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    timeout_seconds: float = 30.0


class StorageSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    data_dir: str = _DEFAULT_DATA_DIR
    raw_file: str = "usb.ids"
    dataset_file: str = "usb.ids.json"
    version_file: str = "usb.ids.version.json"


class UpdateSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    interval_hours: int = 24

    @field_validator("interval_hours")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        if v < 0:
            raise ValueError("interval_hours must be >= 0")
        return v


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: USBIDS__STORAGE__DATA_DIR=/srv/usbids
        env_prefix="USBIDS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    sources: SourceSettings = SourceSettings()
    fetcher: FetcherSettings = FetcherSettings()
    storage: StorageSettings = StorageSettings()
    update: UpdateSettings = UpdateSettings()
    logging: LoggingSettings = LoggingSettings()

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
