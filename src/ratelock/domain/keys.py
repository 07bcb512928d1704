"""Key events, modifier flags, and combo-string parsing.

A combo string is ``+``-separated with the key last, e.g. ``"alt+d"`` or
``"ctrl+shift+x"``. Modifier names accept the browser aliases
``control`` (ctrl) and ``cmd`` (meta).
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, field_validator

from ratelock.errors import ComboParseError


class Modifier(StrEnum):
    """Modifier keys that a binding can require."""

    CTRL = "ctrl"
    ALT = "alt"
    SHIFT = "shift"
    META = "meta"

    @classmethod
    def _missing_(cls, value: object) -> Modifier | None:
        if not isinstance(value, str):
            return None
        lowered = value.strip().lower()
        alias = _ALIASES.get(lowered, lowered)
        for member in cls:
            if member.value == alias:
                return member
        return None


_ALIASES: dict[str, str] = {
    "control": "ctrl",
    "cmd": "meta",
    "command": "meta",
    "option": "alt",
}


def normalize_key(key: str) -> str:
    """Fold single printable characters to lower case.

    Holding Shift turns ``"d"`` into ``"D"``; bindings are configured on the
    unshifted key so both must land on the same entry. Named keys such as
    ``"ArrowLeft"`` are kept verbatim.
    """
    if len(key) == 1:
        return key.lower()
    return key


class KeyEvent(BaseModel):
    """One key press with the modifier flags held at the time."""

    model_config = {"frozen": True}

    key: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    meta: bool = False

    @field_validator("key")
    @classmethod
    def _normalize(cls, value: str) -> str:
        if not value:
            msg = "key must not be empty"
            raise ValueError(msg)
        return normalize_key(value)

    @property
    def held(self) -> frozenset[Modifier]:
        """The set of modifiers held during this event."""
        flags = {
            Modifier.CTRL: self.ctrl,
            Modifier.ALT: self.alt,
            Modifier.SHIFT: self.shift,
            Modifier.META: self.meta,
        }
        return frozenset(mod for mod, on in flags.items() if on)


def parse_combo(text: str) -> KeyEvent:
    """Parse ``"alt+shift+d"`` into a :class:`KeyEvent`.

    Raises:
        ComboParseError: If the string is empty, names an unknown modifier,
            or has no key part.
    """
    parts = [p.strip() for p in text.split("+")]
    if not text.strip() or any(not p for p in parts):
        msg = f"Invalid key combo: {text!r}"
        raise ComboParseError(msg)

    *mod_names, key = parts
    flags: dict[str, bool] = {}
    for name in mod_names:
        try:
            flags[Modifier(name).value] = True
        except ValueError as exc:
            msg = f"Unknown modifier {name!r} in combo {text!r}"
            raise ComboParseError(msg) from exc
    return KeyEvent(key=key, **flags)


def format_combo(key: str, modifiers: tuple[Modifier, ...] | list[Modifier]) -> str:
    """Render a binding as a combo string, modifiers in canonical order."""
    order = list(Modifier)
    ordered = sorted(set(modifiers), key=order.index)
    return "+".join([*(m.value for m in ordered), key])
