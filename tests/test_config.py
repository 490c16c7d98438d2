"""Tests for the typed configuration system."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mackerel_otel.config import Platform, Settings, _config_file, get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Ensure each test starts with a fresh Settings instance."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:
    def test_loads_without_env_overrides(self):
        s = Settings()
        assert s.logging.level == "INFO"
        assert s.logging.format == "json"
        assert s.catalog.file is None
        assert s.catalog.platform is None


class TestEnvOverrides:
    def test_logging_level_uppercase_normalisation(self, monkeypatch):
        monkeypatch.setenv("MACKEREL_OTEL_LOGGING__LEVEL", "debug")
        assert Settings().logging.level == "DEBUG"

    def test_catalog_platform(self, monkeypatch):
        monkeypatch.setenv("MACKEREL_OTEL_CATALOG__PLATFORM", "windows")
        assert Settings().catalog.platform == "windows"
        assert Settings().catalog.platform is Platform.WINDOWS

    def test_catalog_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MACKEREL_OTEL_CATALOG__FILE", str(tmp_path / "c.yml"))
        assert Settings().catalog.file == tmp_path / "c.yml"


class TestConfigFile:
    def test_explicit_config_file(self, monkeypatch, tmp_path):
        conf = tmp_path / "settings.toml"
        conf.write_text('[logging]\nlevel = "warning"\nformat = "text"\n')
        monkeypatch.setenv("MACKEREL_OTEL_CONFIG_FILE", str(conf))
        s = Settings()
        assert s.logging.level == "WARNING"
        assert s.logging.format == "text"

    def test_env_beats_config_file(self, monkeypatch, tmp_path):
        conf = tmp_path / "settings.toml"
        conf.write_text('[catalog]\nplatform = "linux"\n')
        monkeypatch.setenv("MACKEREL_OTEL_CONFIG_FILE", str(conf))
        monkeypatch.setenv("MACKEREL_OTEL_CATALOG__PLATFORM", "windows")
        assert Settings().catalog.platform == "windows"

    def test_missing_explicit_config_file_raises(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MACKEREL_OTEL_CONFIG_FILE", str(tmp_path / "nope.toml"))
        with pytest.raises(FileNotFoundError, match="MACKEREL_OTEL_CONFIG_FILE"):
            _config_file()

    def test_default_config_file_location(self, monkeypatch):
        monkeypatch.delenv("MACKEREL_OTEL_CONFIG_FILE", raising=False)
        path = _config_file()
        assert path.name == "settings.toml"
        assert path.parent.name == "conf"
        assert isinstance(path, Path)


class TestValidation:
    def test_invalid_log_level_raises(self):
        with pytest.raises(ValidationError, match="level must be one of"):
            Settings(logging={"level": "NONSENSE"})

    def test_invalid_log_format_raises(self):
        with pytest.raises(ValidationError):
            Settings(logging={"format": "xml"})

    def test_invalid_platform_raises(self):
        with pytest.raises(ValidationError):
            Settings(catalog={"platform": "solaris"})


class TestCaching:
    def test_get_settings_returns_same_instance(self):
        assert get_settings() is get_settings()

    def test_cache_clear_returns_new_instance(self):
        s1 = get_settings()
        get_settings.cache_clear()
        s2 = get_settings()
        assert s1 is not s2
