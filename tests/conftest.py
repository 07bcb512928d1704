"""Shared pytest fixtures and test helpers for ratelock tests."""

from __future__ import annotations

import heapq
import itertools
import logging
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from ratelock.config.models import RateLockConfig
from ratelock.guard.context import GuardContext
from ratelock.guard.rate_guard import RateGuard
from ratelock.infrastructure.store import RateStore
from ratelock.page.document import MediaDocument
from ratelock.plugins.manager import PluginManager, hookimpl

# ---------------------------------------------------------------------------
# Deterministic event loop
# ---------------------------------------------------------------------------


class ManualHandle:
    def __init__(self, when: float, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualLoop:
    """call_soon/call_later loop whose clock only moves when told to.

    ``advance(seconds)`` runs every callback due up to the new time in
    (when, scheduling order); callbacks scheduled while running are picked
    up in the same pass if they fall due.
    """

    def __init__(self) -> None:
        self.time = 0.0
        self._queue: list[tuple[float, int, ManualHandle]] = []
        self._seq = itertools.count()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        return self.call_later(0.0, callback, *args)

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        handle = ManualHandle(self.time + delay, callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def run_ready(self) -> None:
        """Run everything due at the current time (call_soon work)."""
        self.advance(0.0)

    def advance(self, seconds: float) -> None:
        deadline = self.time + seconds
        while self._queue and self._queue[0][0] <= deadline + 1e-9:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.time = max(self.time, when)
            handle.callback(*handle.args)
        self.time = deadline


class RecordingPlugin:
    """Records every hook call as ``(hook_name, kwargs)``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def show_notification(self, message: str, duration_ms: int) -> None:
        self.calls.append(("show_notification", {"message": message, "duration_ms": duration_ms}))

    @hookimpl
    def post_rate_change(self, rate: float, element_count: int, persisted: bool) -> None:
        self.calls.append(
            (
                "post_rate_change",
                {"rate": rate, "element_count": element_count, "persisted": persisted},
            )
        )

    @hookimpl
    def post_seek(self, element_id: str, seconds: float, current_time: float) -> None:
        self.calls.append(
            (
                "post_seek",
                {"element_id": element_id, "seconds": seconds, "current_time": current_time},
            )
        )

    @hookimpl
    def post_guard(self, element_id: str, rate: float, intercepting: bool) -> None:
        self.calls.append(
            ("post_guard", {"element_id": element_id, "rate": rate, "intercepting": intercepting})
        )

    @hookimpl
    def post_teardown(self, element_id: str, reason: str) -> None:
        self.calls.append(("post_teardown", {"element_id": element_id, "reason": reason}))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def messages(self) -> list[str]:
        return [kw["message"] for name, kw in self.calls if name == "show_notification"]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by CLI invocations."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    ratelock_level = logging.getLogger("ratelock").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("ratelock").setLevel(ratelock_level)



@pytest.fixture
def loop() -> ManualLoop:
    return ManualLoop()


@pytest.fixture
def config(tmp_path: Path) -> RateLockConfig:
    """Default configuration with the state database under tmp_path."""
    return RateLockConfig.model_validate({"storage": {"path": str(tmp_path / "state.db")}})


@pytest.fixture
def store(config: RateLockConfig) -> Generator[RateStore]:
    opened = RateStore.open(config.storage.path)
    assert opened is not None
    try:
        yield opened
    finally:
        opened.close()


@pytest.fixture
def recorder() -> RecordingPlugin:
    return RecordingPlugin()


@pytest.fixture
def plugins(recorder: RecordingPlugin) -> PluginManager:
    manager = PluginManager()
    manager.register_plugin(recorder, name="recorder")
    return manager


@pytest.fixture
def context(config: RateLockConfig, loop: ManualLoop) -> GuardContext:
    return GuardContext(config, loop)


@pytest.fixture
def guard(context: GuardContext, plugins: PluginManager) -> RateGuard:
    return RateGuard(context, plugins)


@pytest.fixture
def document() -> MediaDocument:
    return MediaDocument()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from tmp_path with the state database kept there too.

    Use via ``@pytest.mark.usefixtures("_isolated_env")`` on command tests.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("RATELOCK_CONFIG", raising=False)
    monkeypatch.setenv("RATELOCK_STORAGE__PATH", str(tmp_path / "state.db"))
