"""Unit tests for configuration defaults and validation."""

from __future__ import annotations

import platformdirs
import pytest
from pydantic import ValidationError

from usbids.config import (
    _DEFAULT_DATA_DIR,
    DEFAULT_SOURCE_URLS,
    Settings,
    SourceSettings,
    StorageSettings,
    UpdateSettings,
)


class TestPlatformDefaults:
    """Verify config defaults use platformdirs instead of hardcoded Unix paths."""

    def test_default_data_dir_matches_platformdirs(self) -> None:
        assert platformdirs.user_data_dir("usbids") == _DEFAULT_DATA_DIR

    def test_storage_settings_uses_platform_default(self) -> None:
        settings = StorageSettings()
        assert settings.data_dir == _DEFAULT_DATA_DIR
        assert settings.version_file == "usb.ids.version.json"

    def test_default_sources_in_priority_order(self) -> None:
        assert SourceSettings().urls == DEFAULT_SOURCE_URLS
        assert DEFAULT_SOURCE_URLS[0] == "http://www.linux-usb.org/usb.ids"

    def test_default_interval_is_daily(self) -> None:
        assert Settings().update.interval_hours == 24


class TestEnvironmentOverrides:
    def test_nested_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("USBIDS__UPDATE__INTERVAL_HOURS", "6")
        assert Settings().update.interval_hours == 6

    def test_init_args_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("USBIDS__LOGGING__LEVEL", "DEBUG")
        settings = Settings(logging={"level": "ERROR"})
        assert settings.logging.level == "ERROR"


class TestConfigValidation:
    def test_wrong_type_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(update={"interval_hours": "not-a-number"})  # type: ignore[arg-type]

    def test_negative_interval_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UpdateSettings(interval_hours=-1)

    def test_non_http_source_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SourceSettings(urls=["ftp://example.com/usb.ids"])

    @pytest.mark.parametrize("url", ["http://[::1", "http://", "https://host:notaport/usb.ids"])
    def test_malformed_source_rejected(self, url: str) -> None:
        with pytest.raises(ValidationError):
            SourceSettings(urls=[url])

    def test_valid_sources_accepted(self) -> None:
        urls = ["https://example.com/usb.ids", "http://[::1]:8080/usb.ids"]
        assert SourceSettings(urls=urls).urls == urls

    def test_unknown_top_level_field_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(completely_unknown_field="oops")  # type: ignore[call-arg]

    def test_unknown_nested_field_raises_validation_error(self) -> None:
        """A typo like 'data_dri' is caught rather than silently ignored."""
        with pytest.raises(ValidationError):
            StorageSettings(data_dri="/intended/path")  # type: ignore[call-arg]
