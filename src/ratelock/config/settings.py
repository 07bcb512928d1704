"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``RATELOCK_*`` prefix
  3. TOML file    — ``ratelock.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`ratelock.config.discovery`. Unlike a hard failure on bad input, any
TOML or env value that fails validation drops the settings back to code
defaults (CLI flags still apply).
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from ratelock.config.discovery import find_config, read_toml
from ratelock.config.models import (
    AdvancedConfig,
    KeyboardConfig,
    RateLockConfig,
    SpeedConfig,
    StorageConfig,
    UiConfig,
)

logger = logging.getLogger(__name__)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``ratelock.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for source selection during construction.
_tls = threading.local()


class RateLockSettings(BaseSettings):
    """Unified settings for the ratelock CLI and runtime.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.

    Attributes:
        config_path: The TOML file that was loaded, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "RATELOCK_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    speed: SpeedConfig = Field(default_factory=SpeedConfig)
    ui: UiConfig = Field(default_factory=UiConfig)
    keyboard: KeyboardConfig = Field(default_factory=KeyboardConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        if getattr(_tls, "defaults_only", False):
            return (init_settings,)
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        search_root: Path | None = None,
        **cli_flags: Any,
    ) -> RateLockSettings:
        """Construct settings from CLI invocation.

        Discovers ``ratelock.toml`` via walk-up from *search_root* (or uses
        the explicit *config_path*) and merges CLI flags as highest-priority
        overrides. Never raises on bad configuration.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
            else:
                logger.warning("Config file %s not found, using defaults", config_path)
        else:
            toml_path = find_config(search_root)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        except ValidationError as exc:
            logger.warning(
                "Invalid configuration, falling back to defaults (%d errors)",
                exc.error_count(),
            )
            logger.debug("Settings validation errors: %s", exc)
            _tls.defaults_only = True
            return cls(config_path=None, **cli_flags)
        finally:
            _tls.toml_path = None
            _tls.defaults_only = False

    def to_config(self) -> RateLockConfig:
        """Project the TOML-backed sections into a plain :class:`RateLockConfig`."""
        return RateLockConfig(
            speed=self.speed,
            ui=self.ui,
            keyboard=self.keyboard,
            advanced=self.advanced,
            storage=self.storage,
        )
