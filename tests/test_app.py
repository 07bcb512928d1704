"""Tests for RateLockApp wiring."""

from __future__ import annotations

from typing import Any

from ratelock.app import RateLockApp
from ratelock.config.models import RateLockConfig
from ratelock.domain.keys import parse_combo
from ratelock.infrastructure.store import RateStore
from ratelock.page.document import MediaDocument
from ratelock.plugins.manager import PluginManager


class TestStart:
    def test_guards_existing_and_new_media(
        self, config: RateLockConfig, document: MediaDocument, loop: Any
    ) -> None:
        existing = document.create_media("a")
        app = RateLockApp(document, config, loop=loop)
        app.start()
        late = document.create_media("b")
        assert app.context.state_for(existing) is not None
        assert app.context.state_for(late) is not None
        assert app.context.active_tasks() == 2

    def test_restores_persisted_rate(
        self, config: RateLockConfig, document: MediaDocument, loop: Any, store: RateStore
    ) -> None:
        store.save_rate(1.75)
        element = document.create_media("a")
        app = RateLockApp(document, config, loop=loop, store=store)
        app.start()
        assert app.target_rate == 1.75
        assert element.get_raw_rate() == 1.75

    def test_disabled_on_page_load(self, document: MediaDocument, loop: Any) -> None:
        config = RateLockConfig.model_validate({"ui": {"enable_on_page_load": False}})
        element = document.create_media("a")
        app = RateLockApp(document, config, loop=loop)
        app.start()
        assert app.started is False
        assert app.context.state_for(element) is None
        assert app.on_key(parse_combo("alt+e")) is None

    def test_no_auto_apply_to_new_media(self, document: MediaDocument, loop: Any) -> None:
        config = RateLockConfig.model_validate({"advanced": {"auto_apply_to_new_media": False}})
        app = RateLockApp(document, config, loop=loop)
        app.start()
        late = document.create_media("b")
        assert app.context.state_for(late) is None


class TestKeys:
    def test_key_press_persists_rate(
        self,
        config: RateLockConfig,
        document: MediaDocument,
        loop: Any,
        store: RateStore,
        plugins: PluginManager,
    ) -> None:
        document.create_media("a")
        app = RateLockApp(document, config, loop=loop, store=store, plugins=plugins)
        app.start()
        result = app.on_key(parse_combo("alt+shift+d"))
        assert result is not None and result.ok
        assert result.data["persisted"] is True
        assert store.load_rate() == 1.5

    def test_shortcuts_disabled(self, document: MediaDocument, loop: Any) -> None:
        config = RateLockConfig.model_validate({"keyboard": {"enable_shortcuts": False}})
        document.create_media("a")
        app = RateLockApp(document, config, loop=loop)
        app.start()
        assert app.on_key(parse_combo("alt+e")) is None


class TestStop:
    def test_stop_releases_everything(
        self, config: RateLockConfig, document: MediaDocument, loop: Any
    ) -> None:
        document.create_media("a")
        document.create_media("b")
        app = RateLockApp(document, config, loop=loop)
        app.start()
        assert app.stop() == 2
        assert loop.pending() == 0
        late = document.create_media("c")
        assert app.context.state_for(late) is None
