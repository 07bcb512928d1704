"""Tests for key events and combo parsing."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ratelock.domain.keys import KeyEvent, Modifier, format_combo, normalize_key, parse_combo
from ratelock.errors import ComboParseError


class TestModifier:
    def test_aliases(self) -> None:
        assert Modifier("control") is Modifier.CTRL
        assert Modifier("cmd") is Modifier.META
        assert Modifier("Option") is Modifier.ALT

    def test_unknown_raises(self) -> None:
        with pytest.raises(ValueError):
            Modifier("hyper")


class TestKeyEvent:
    def test_single_char_key_lowercased(self) -> None:
        assert KeyEvent(key="D", shift=True).key == "d"

    def test_named_key_kept(self) -> None:
        assert normalize_key("ArrowLeft") == "ArrowLeft"

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            KeyEvent(key="")

    def test_held(self) -> None:
        event = KeyEvent(key="d", alt=True, shift=True)
        assert event.held == frozenset({Modifier.ALT, Modifier.SHIFT})


class TestParseCombo:
    def test_alt_d(self) -> None:
        event = parse_combo("alt+d")
        assert event.key == "d"
        assert event.alt is True
        assert event.shift is False

    def test_multiple_modifiers_and_case(self) -> None:
        event = parse_combo("Ctrl + Shift + X")
        assert event.key == "x"
        assert event.held == frozenset({Modifier.CTRL, Modifier.SHIFT})

    def test_bare_key(self) -> None:
        assert parse_combo("q").held == frozenset()

    @pytest.mark.parametrize("text", ["", "   ", "alt+", "+d", "alt++d"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(ComboParseError):
            parse_combo(text)

    def test_unknown_modifier(self) -> None:
        with pytest.raises(ComboParseError, match="hyper"):
            parse_combo("hyper+d")

    def test_combo_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_combo("")


class TestFormatCombo:
    def test_canonical_order(self) -> None:
        assert format_combo("d", [Modifier.SHIFT, Modifier.ALT]) == "alt+shift+d"

    def test_no_modifiers(self) -> None:
        assert format_combo("q", ()) == "q"
