"""Scripted page behaviour — foreign writers for the simulator.

A :class:`PageScript` plays a list of timed steps against a document the
way a hostile or merely opinionated host page would: assigning the public
``playback_rate``, poking the raw pipeline, reloading sources, or removing
elements.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from asyncio import TimerHandle

    from ratelock.guard.scheduler import LoopLike
    from ratelock.page.document import MediaDocument
    from ratelock.page.element import SimulatedMediaElement

logger = logging.getLogger(__name__)


class StepKind(StrEnum):
    """What a scripted step does to its element."""

    WRITE = "write"  # element.playback_rate = value (interceptable)
    RAW_WRITE = "raw_write"  # bypasses interception
    RELOAD = "reload"  # pipeline reset to the default rate
    REMOVE = "remove"  # detach from the document


@dataclass(frozen=True)
class ScriptStep:
    """One timed action. *at* is seconds after :meth:`PageScript.start`."""

    at: float
    kind: StepKind
    element_id: str | None = None
    value: float | None = None


@dataclass
class PageScript:
    """Schedules :class:`ScriptStep` objects on a loop against *document*."""

    document: MediaDocument
    steps: list[ScriptStep] = field(default_factory=list)
    executed: list[ScriptStep] = field(default_factory=list)
    _handles: list[TimerHandle] = field(default_factory=list, repr=False)

    def add(
        self,
        at: float,
        kind: StepKind | str,
        *,
        element_id: str | None = None,
        value: float | None = None,
    ) -> PageScript:
        self.steps.append(ScriptStep(at, StepKind(kind), element_id, value))
        return self

    def start(self, loop: LoopLike) -> None:
        for step in sorted(self.steps, key=lambda s: s.at):
            self._handles.append(loop.call_later(step.at, self._run, step))

    def cancel(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()

    def _target(self, element_id: str | None) -> SimulatedMediaElement | None:
        media = self.document.query_media()
        if element_id is None:
            return media[0] if media else None
        return next((m for m in media if m.element_id == element_id), None)

    def _run(self, step: ScriptStep) -> None:
        element = self._target(step.element_id)
        if element is None:
            logger.debug("Script step %s skipped: no element %s", step.kind, step.element_id)
            return
        if step.kind is StepKind.WRITE:
            element.playback_rate = step.value if step.value is not None else 1.0
        elif step.kind is StepKind.RAW_WRITE:
            element.set_raw_rate(step.value if step.value is not None else 1.0)
        elif step.kind is StepKind.RELOAD:
            element.load(duration=element.duration)
        elif step.kind is StepKind.REMOVE:
            self.document.remove(element)
        self.executed.append(step)
