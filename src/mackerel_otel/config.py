"""Typed configuration for the mackerel-otel command line.

The naming core (``names``, ``graphdef``, ``catalog``) never reads settings;
only the CLI and logging setup do.

Loading priority (highest to lowest):
  1. Explicit init kwargs (programmatic overrides, tests)
  2. Environment variables: MACKEREL_OTEL_<SECTION>__<KEY>
  3. Config file: MACKEREL_OTEL_CONFIG_FILE env var, or conf/settings.toml
  4. Model field defaults

Example env overrides:
  MACKEREL_OTEL_LOGGING__LEVEL=DEBUG
  MACKEREL_OTEL_CATALOG__PLATFORM=windows
  MACKEREL_OTEL_CATALOG__FILE=/etc/mackerel-otel/system_metrics.yml
"""

import os
from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

# src/mackerel_otel/config.py → ../../..
_PROJECT_ROOT = Path(__file__).parent.parent.parent
_DEFAULT_CONFIG = _PROJECT_ROOT / "conf" / "settings.toml"


def _config_file() -> Path:
    """Resolve the config file path.

    Returns MACKEREL_OTEL_CONFIG_FILE if set (raises FileNotFoundError if
    missing), otherwise the default at conf/settings.toml, which may be
    absent in an installed package.
    """
    if env_val := os.environ.get("MACKEREL_OTEL_CONFIG_FILE"):
        p = Path(env_val)
        if not p.is_file():
            raise FileNotFoundError(f"MACKEREL_OTEL_CONFIG_FILE not found: {p}")
        return p
    return _DEFAULT_CONFIG


# ---------------------------------------------------------------------------
# Section models — each maps to a [section] in conf/settings.toml
# ---------------------------------------------------------------------------


class LoggingSettings(BaseModel):
    """Logging verbosity and output format."""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"

    @field_validator("level", mode="before")
    @classmethod
    def _normalise_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"level must be one of {sorted(valid)}, got {v!r}")
        return v.upper()


class Platform(StrEnum):
    """Host platforms with a section in the system metric catalog."""

    LINUX = "linux"
    WINDOWS = "windows"


class CatalogSettings(BaseModel):
    """Which system metric catalog the CLI classifies against."""

    # None → the catalog bundled with the package.
    file: Path | None = None
    # None → any platform.
    platform: Platform | None = None


# ---------------------------------------------------------------------------
# Root settings class
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """All mackerel-otel runtime settings, fully resolved and validated."""

    logging: LoggingSettings = LoggingSettings()
    catalog: CatalogSettings = CatalogSettings()

    model_config = SettingsConfigDict(
        env_prefix="MACKEREL_OTEL_",
        env_nested_delimiter="__",  # MACKEREL_OTEL_LOGGING__LEVEL → logging.level
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
        # TOML + env only.
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=_config_file()),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide Settings instance (loaded once, cached thereafter).

    Tests should call ``get_settings.cache_clear()`` before each test that
    patches environment variables or the config file.
    """
    return Settings()
