"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ratelock.toml only contains
overrides. An empty file (or none at all) yields the stock keybindings
and a 0.1x–5.0x rate window.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ratelock.domain.actions import Action
from ratelock.domain.keys import Modifier, normalize_key

# --- ratelock.toml sections ---


class SpeedConfig(BaseModel):
    """[speed] section."""

    model_config = {"frozen": True}

    default_rate: float = Field(default=1.0, gt=0)
    remember_last_rate: bool = True
    min_rate: float = Field(default=0.1, gt=0)
    max_rate: float = Field(default=5.0, gt=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> SpeedConfig:
        if self.min_rate > self.max_rate:
            msg = f"min_rate ({self.min_rate}) must not exceed max_rate ({self.max_rate})"
            raise ValueError(msg)
        return self


class UiConfig(BaseModel):
    """[ui] section."""

    model_config = {"frozen": True}

    show_notifications: bool = True
    notification_duration: int = Field(default=1000, ge=0)  # milliseconds
    enable_on_page_load: bool = True


class KeyBinding(BaseModel):
    """One entry of ``[keyboard.actions]``.

    The TOML form is flat: ``d = { type = "adjust_rate", delta = 0.5 }``,
    optionally with ``modifiers = ["alt", "shift"]``. When *modifiers* is
    omitted the keyboard section's ``default_modifiers`` apply.
    """

    model_config = {"frozen": True}

    action: Action
    modifiers: tuple[Modifier, ...] | None = None

    @model_validator(mode="before")
    @classmethod
    def _split_flat_form(cls, data: Any) -> Any:
        if isinstance(data, dict) and "action" not in data:
            payload = dict(data)
            modifiers = payload.pop("modifiers", None)
            return {"action": payload, "modifiers": modifiers}
        return data


def _default_bindings() -> dict[str, KeyBinding]:
    raw: dict[str, dict[str, Any]] = {
        "q": {"type": "set_rate", "value": 1.0},
        "w": {"type": "set_rate", "value": 1.5},
        "e": {"type": "set_rate", "value": 2.0},
        "a": {"type": "adjust_rate", "delta": -0.5},
        "d": {"type": "adjust_rate", "delta": 0.5},
        "z": {"type": "adjust_rate", "delta": -0.1},
        "x": {"type": "adjust_rate", "delta": 0.1},
        "v": {"type": "seek_by", "seconds": -2},
        "b": {"type": "seek_by", "seconds": 2},
        "g": {"type": "seek_by", "seconds": -6},
        "h": {"type": "seek_by", "seconds": 6},
        "y": {"type": "seek_by", "seconds": -18},
        "u": {"type": "seek_by", "seconds": 18},
        "n": {"type": "seek_by", "seconds": 80},
        "p": {"type": "seek_by", "seconds": 36000},
    }
    return {key: KeyBinding.model_validate(value) for key, value in raw.items()}


class KeyboardConfig(BaseModel):
    """[keyboard] section."""

    model_config = {"frozen": True}

    enable_shortcuts: bool = True
    default_modifiers: tuple[Modifier, ...] = (Modifier.ALT,)
    actions: dict[str, KeyBinding] = Field(default_factory=_default_bindings)

    @field_validator("actions")
    @classmethod
    def _normalize_keys(cls, value: dict[str, KeyBinding]) -> dict[str, KeyBinding]:
        return {normalize_key(key): binding for key, binding in value.items()}


class AdvancedConfig(BaseModel):
    """[advanced] section."""

    model_config = {"frozen": True}

    debug_mode: bool = False
    auto_apply_to_new_media: bool = True
    check_interval: int = Field(default=100, gt=0)  # milliseconds


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    path: Path = Field(default_factory=lambda: Path.home() / ".ratelock" / "state.db")


class RateLockConfig(BaseModel):
    """Root configuration composing all sections.

    Matches the full ratelock.toml schema.
    """

    model_config = {"frozen": True}

    speed: SpeedConfig = Field(default_factory=SpeedConfig)
    ui: UiConfig = Field(default_factory=UiConfig)
    keyboard: KeyboardConfig = Field(default_factory=KeyboardConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
