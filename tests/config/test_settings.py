"""Tests for RateLockSettings — unified settings with TOML source."""

from __future__ import annotations

from pathlib import Path

import pytest

from ratelock.config.settings import RateLockSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RATELOCK_CONFIG", raising=False)
    monkeypatch.delenv("RATELOCK_SPEED__MAX_RATE", raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = RateLockSettings.from_cli(search_root=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.speed.default_rate == 1.0
        assert settings.keyboard.enable_shortcuts is True

    def test_frozen(self, tmp_path: Path) -> None:
        settings = RateLockSettings.from_cli(search_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "ratelock.toml").write_text("[speed]\ndefault_rate = 1.75\n")
        settings = RateLockSettings.from_cli(search_root=tmp_path)
        assert settings.speed.default_rate == 1.75
        assert settings.config_path == tmp_path.resolve() / "ratelock.toml"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text("[ui]\nshow_notifications = false\n")
        settings = RateLockSettings.from_cli(config_path=str(custom), search_root=tmp_path)
        assert settings.ui.show_notifications is False
        assert settings.config_path == custom

    def test_missing_explicit_path_uses_defaults(self, tmp_path: Path) -> None:
        settings = RateLockSettings.from_cli(config_path=str(tmp_path / "nope.toml"))
        assert settings.config_path is None
        assert settings.speed.default_rate == 1.0

    def test_invalid_toml_values_fall_back(self, tmp_path: Path) -> None:
        (tmp_path / "ratelock.toml").write_text("[speed]\nmin_rate = 4.0\nmax_rate = 2.0\n")
        settings = RateLockSettings.from_cli(search_root=tmp_path, verbose=True)
        assert settings.speed.min_rate == 0.1
        assert settings.verbose is True
        assert settings.config_path is None

    def test_malformed_toml_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "ratelock.toml").write_text("[speed\ndefault_rate = ")
        settings = RateLockSettings.from_cli(search_root=tmp_path)
        assert settings.speed.default_rate == 1.0
        assert settings.keyboard.enable_shortcuts is True


class TestEnvAndFlags:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "ratelock.toml").write_text("[speed]\nmax_rate = 3.0\n")
        monkeypatch.setenv("RATELOCK_SPEED__MAX_RATE", "8.0")
        settings = RateLockSettings.from_cli(search_root=tmp_path)
        assert settings.speed.max_rate == 8.0

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = RateLockSettings.from_cli(search_root=tmp_path, json_output=True, quiet=True)
        assert settings.json_output is True
        assert settings.quiet is True

    def test_to_config(self, tmp_path: Path) -> None:
        (tmp_path / "ratelock.toml").write_text("[advanced]\ncheck_interval = 250\n")
        config = RateLockSettings.from_cli(search_root=tmp_path).to_config()
        assert config.advanced.check_interval == 250
