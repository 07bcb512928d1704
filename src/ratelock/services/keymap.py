"""KeymapService — inspect and resolve keybindings without a page."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ratelock.dispatch.registry import ActionRegistry
from ratelock.domain.actions import describe_action
from ratelock.domain.keys import parse_combo
from ratelock.errors import ComboParseError
from ratelock.services.result import ServiceResult

if TYPE_CHECKING:
    from ratelock.config.models import KeyboardConfig
    from ratelock.dispatch.registry import ResolvedBinding


def _binding_row(binding: ResolvedBinding) -> dict[str, Any]:
    return {
        "combo": binding.combo,
        "key": binding.key,
        "modifiers": sorted(m.value for m in binding.modifiers),
        "action": binding.action.model_dump(),
        "summary": describe_action(binding.action),
    }


class KeymapService:
    """Read-only queries over the ``[keyboard]`` section."""

    def __init__(self, keyboard: KeyboardConfig) -> None:
        self._keyboard = keyboard
        self._registry = ActionRegistry(keyboard)

    def list_bindings(self) -> ServiceResult:
        items = [_binding_row(b) for b in self._registry.bindings()]
        return ServiceResult(
            ok=True,
            op="list_bindings",
            data={
                "enabled": self._registry.enabled,
                "default_modifiers": [m.value for m in self._keyboard.default_modifiers],
                "count": len(items),
                "items": items,
            },
            warnings=[] if self._registry.enabled else ["Keyboard shortcuts are disabled"],
        )

    def resolve(self, combo: str) -> ServiceResult:
        try:
            event = parse_combo(combo)
        except ComboParseError as exc:
            return ServiceResult.failure("resolve", "INVALID_COMBO", str(exc), combo=combo)

        action = self._registry.resolve(event)
        if action is None:
            return ServiceResult.failure(
                "resolve", "NO_MATCH", f"{combo} is not bound", combo=combo
            )
        return ServiceResult(
            ok=True,
            op="resolve",
            data={
                "combo": combo,
                "action": action.model_dump(),
                "summary": describe_action(action),
            },
        )
