"""SimulationService — run the guard end to end against a simulated page.

Builds a :class:`MediaDocument`, starts a :class:`RateLockApp` on a fresh
asyncio loop, replays key presses and hostile page-script steps on a fixed
timeline, then reports what every element ended up at.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ratelock.app import RateLockApp
from ratelock.domain.keys import KeyEvent, parse_combo
from ratelock.errors import ComboParseError
from ratelock.page.document import MediaDocument
from ratelock.page.script import PageScript, StepKind
from ratelock.plugins.builtins.console import ConsoleNotifier
from ratelock.plugins.manager import PluginManager
from ratelock.services.result import ServiceResult

if TYPE_CHECKING:
    from ratelock.config.models import RateLockConfig
    from ratelock.infrastructure.store import RateStore
    from ratelock.page.element import SimulatedMediaElement

logger = logging.getLogger(__name__)

# Seconds between consecutive scripted events on the timeline.
STEP = 0.02


@dataclass
class Scenario:
    """What to replay.

    Events are spaced :data:`STEP` apart in this order: key presses, public
    rate writes, raw pipeline writes, reloads, then removal of the first
    element. The run lasts at least *run_for* seconds and always leaves two
    reconciliation ticks after the last event.
    """

    keys: list[str] = field(default_factory=list)
    foreign_writes: list[float] = field(default_factory=list)
    raw_writes: list[float] = field(default_factory=list)
    reloads: int = 0
    remove_first: bool = False
    elements: int = 1
    media_duration: float | None = 120.0
    run_for: float = 0.5


def _element_report(element: SimulatedMediaElement, app: RateLockApp) -> dict[str, Any]:
    state = app.context.state_for(element)
    accessor = state.accessor if state is not None else None
    return {
        "id": element.element_id,
        "connected": element.is_connected,
        "rate": element.playback_rate,
        "raw_rate": element.get_raw_rate(),
        "current_time": element.current_time,
        "guarded": state is not None and state.active,
        "intercepting": state.intercepting if state is not None else False,
        "corrections": state.corrections if state is not None else 0,
        "foreign_writes": accessor.foreign_writes if accessor is not None else 0,
    }


class SimulationService:
    """Replays a :class:`Scenario` and reports the outcome."""

    def __init__(
        self,
        config: RateLockConfig,
        store: RateStore | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._plugins = plugins

    def run(self, scenario: Scenario) -> ServiceResult:
        try:
            events = [parse_combo(combo) for combo in scenario.keys]
        except ComboParseError as exc:
            return ServiceResult.failure("simulate", "INVALID_COMBO", str(exc))
        if scenario.elements < 1:
            return ServiceResult.failure("simulate", "INVALID_SCENARIO", "Need at least 1 element")

        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(self._run(loop, scenario, events))
        finally:
            loop.close()

    async def _run(
        self,
        loop: asyncio.AbstractEventLoop,
        scenario: Scenario,
        events: list[KeyEvent],
    ) -> ServiceResult:
        plugins = self._plugins or PluginManager()
        notifier = ConsoleNotifier()
        plugins.register_plugin(notifier, name="simulation-notifier")

        document = MediaDocument()
        created = [
            document.create_media(f"media-{index + 1}", duration=scenario.media_duration)
            for index in range(scenario.elements)
        ]
        created[0].paused = False

        app = RateLockApp(document, self._config, loop=loop, store=self._store, plugins=plugins)
        app.start()

        outcomes: list[dict[str, Any]] = []

        def press(combo: str, event: KeyEvent) -> None:
            result = app.on_key(event)
            outcomes.append(
                {
                    "combo": combo,
                    "ok": bool(result and result.ok),
                    "op": result.op if result else None,
                    "code": result.error.code if result and result.error else None,
                }
            )

        at = 0.0
        for combo, event in zip(scenario.keys, events, strict=True):
            at += STEP
            loop.call_later(at, press, combo, event)

        script = PageScript(document)
        for value in scenario.foreign_writes:
            at += STEP
            script.add(at, StepKind.WRITE, value=value)
        for value in scenario.raw_writes:
            at += STEP
            script.add(at, StepKind.RAW_WRITE, value=value)
        for _ in range(scenario.reloads):
            at += STEP
            script.add(at, StepKind.RELOAD)
        if scenario.remove_first:
            at += STEP
            script.add(at, StepKind.REMOVE, element_id="media-1")
        script.start(loop)

        settle = 2 * self._config.advanced.check_interval / 1000.0
        await asyncio.sleep(max(scenario.run_for, at + settle))

        report = {
            "target_rate": app.target_rate,
            "actions": outcomes,
            "elements": [_element_report(e, app) for e in created],
            "notifications": notifier.messages,
            "script_steps": len(script.executed),
        }
        script.cancel()
        app.stop()
        plugins.unregister(notifier)
        return ServiceResult(ok=True, op="simulate", data=report)

