"""Tests for the plugin manager and built-in console notifier."""

from __future__ import annotations

from io import StringIO
from typing import Any

from rich.console import Console

from ratelock.output.console import RATELOCK_THEME, get_output
from ratelock.plugins.builtins.console import ConsoleNotifier
from ratelock.plugins.manager import PluginManager


class TestPluginManager:
    def test_discover_without_entry_points(self) -> None:
        manager = PluginManager()
        assert manager.is_loaded is False
        manager.discover_and_load()
        assert manager.is_loaded is True

    def test_register_is_idempotent_by_name(self, recorder: Any) -> None:
        manager = PluginManager()
        manager.register_plugin(recorder, name="recorder")
        manager.register_plugin(recorder, name="recorder")
        assert manager.list_plugin_names().count("recorder") == 1

    def test_hook_dispatch(self, plugins: PluginManager, recorder: Any) -> None:
        plugins.hook.post_teardown(element_id="m", reason="shutdown")
        assert recorder.calls == [("post_teardown", {"element_id": "m", "reason": "shutdown"})]

    def test_unregister(self, plugins: PluginManager, recorder: Any) -> None:
        plugins.unregister(recorder)
        assert recorder not in plugins.get_plugins()

    def test_class_plugins_are_instantiated(self) -> None:
        manager = PluginManager()
        manager._pm.register(ConsoleNotifier, name="console")
        manager._normalize_plugin_instances()
        (plugin,) = manager.get_plugins()
        assert isinstance(plugin, ConsoleNotifier)


class TestConsoleNotifier:
    def test_records_without_console(self) -> None:
        notifier = ConsoleNotifier()
        notifier.show_notification(message="Speed: 2.00x", duration_ms=1000)
        assert notifier.messages == ["Speed: 2.00x"]
        assert notifier.shown[0].duration_ms == 1000

    def test_prints_to_console(self) -> None:
        console = Console(file=StringIO(), theme=RATELOCK_THEME, no_color=True)
        notifier = ConsoleNotifier(console)
        manager = PluginManager()
        manager.register_plugin(notifier, name="console")
        manager.hook.show_notification(message="6s forward", duration_ms=500)
        assert "6s forward" in get_output(console)
