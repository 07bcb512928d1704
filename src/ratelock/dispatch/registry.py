"""ActionRegistry — maps a key event to at most one Action.

Matching policy: the key must have a binding, and every modifier that
binding requires must be held. Modifiers the binding does not list are not
checked, so Alt+Shift+D still resolves a binding configured as Alt+D.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ratelock.domain.keys import KeyEvent, Modifier, format_combo, normalize_key

if TYPE_CHECKING:
    from ratelock.config.models import KeyboardConfig
    from ratelock.domain.actions import AdjustRate, SeekBy, SetRate


@dataclass(frozen=True)
class ResolvedBinding:
    """A binding with its effective modifier set filled in."""

    key: str
    modifiers: frozenset[Modifier]
    action: SetRate | AdjustRate | SeekBy

    @property
    def combo(self) -> str:
        return format_combo(self.key, list(self.modifiers))

    def matches(self, event: KeyEvent) -> bool:
        return event.key == self.key and self.modifiers <= event.held


class ActionRegistry:
    """Lookup table built from the ``[keyboard]`` config section."""

    def __init__(self, config: KeyboardConfig) -> None:
        self._enabled = config.enable_shortcuts
        defaults = frozenset(config.default_modifiers)
        self._bindings: dict[str, ResolvedBinding] = {}
        for key, binding in config.actions.items():
            normalized = normalize_key(key)
            required = defaults if binding.modifiers is None else frozenset(binding.modifiers)
            self._bindings[normalized] = ResolvedBinding(normalized, required, binding.action)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def resolve(self, event: KeyEvent) -> SetRate | AdjustRate | SeekBy | None:
        """Return the bound action, or None when nothing matches."""
        if not self._enabled:
            return None
        binding = self._bindings.get(event.key)
        if binding is None or not binding.matches(event):
            return None
        return binding.action

    def bindings(self) -> list[ResolvedBinding]:
        return sorted(self._bindings.values(), key=lambda b: b.key)

    def __len__(self) -> int:
        return len(self._bindings)
