"""Tests for BaseService hook dispatch."""

from __future__ import annotations

from typing import Any

from ratelock.guard.context import GuardContext
from ratelock.plugins.manager import PluginManager, hookimpl
from ratelock.services.base import BaseService


class ExplodingPlugin:
    @hookimpl
    def show_notification(self, message: str, duration_ms: int) -> None:
        raise RuntimeError("display gone")


class TestDispatchEvent:
    def test_no_plugins_is_noop(self, context: GuardContext) -> None:
        BaseService(context)._notify("Speed: 1.00x")

    def test_unknown_hook_ignored(self, context: GuardContext, plugins: PluginManager) -> None:
        warnings: list[str] = []
        BaseService(context, plugins)._dispatch_event("post_nothing", {}, warnings)
        assert warnings == []

    def test_notification_carries_duration(
        self, context: GuardContext, plugins: PluginManager, recorder: Any
    ) -> None:
        BaseService(context, plugins)._notify("Speed: 1.00x")
        assert recorder.calls == [
            ("show_notification", {"message": "Speed: 1.00x", "duration_ms": 1000})
        ]

    def test_plugin_failure_becomes_warning(self, context: GuardContext) -> None:
        manager = PluginManager()
        manager.register_plugin(ExplodingPlugin(), name="exploding")
        warnings: list[str] = []
        BaseService(context, manager)._notify("Speed: 1.00x", warnings)
        assert warnings == ["Hook show_notification failed"]
