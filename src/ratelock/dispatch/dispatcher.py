"""CommandDispatcher — routes a resolved Action to its effect.

Target selection prefers a playing element, otherwise the first one on
the page. Rate actions apply to the whole page with the target first;
``AdjustRate`` is relative to the context's target rate rather than any
element's own rate, so repeated presses compose across elements.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from ratelock.domain.actions import AdjustRate, SeekBy, SetRate
from ratelock.domain.rates import seek_target
from ratelock.services.base import BaseService
from ratelock.services.result import ServiceResult

if TYPE_CHECKING:
    from ratelock.dispatch.registry import ActionRegistry
    from ratelock.domain.keys import KeyEvent
    from ratelock.guard.context import GuardContext
    from ratelock.guard.rate_guard import RateGuard
    from ratelock.page.element import MediaElement
    from ratelock.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class MediaSource(Protocol):
    def query_media(self) -> list[MediaElement]: ...


def format_seek(seconds: float) -> str:
    """Notification text for a relative seek.

    Examples:
        >>> format_seek(6)
        '6s forward'
        >>> format_seek(-2.5)
        '2.5s back'
    """
    direction = "forward" if seconds > 0 else "back"
    return f"{abs(seconds):g}s {direction}"


class CommandDispatcher(BaseService):
    """Executes keyboard actions against the page's media elements."""

    def __init__(
        self,
        context: GuardContext,
        guard: RateGuard,
        registry: ActionRegistry,
        source: MediaSource,
        plugins: PluginManager | None = None,
    ) -> None:
        super().__init__(context, plugins)
        self._guard = guard
        self._registry = registry
        self._source = source

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    def select_target(self) -> MediaElement | None:
        """First playing element, else the first element, else None."""
        media = self._source.query_media()
        if not media:
            return None
        return next((m for m in media if not m.paused), media[0])

    def handle_key(self, event: KeyEvent) -> ServiceResult:
        """Resolve *event* and execute its action.

        ``NO_MATCH`` means the key is not ours and the host should let it
        through; any other outcome means the key was consumed.
        """
        action = self._registry.resolve(event)
        if action is None:
            return ServiceResult.failure(
                "handle_key", "NO_MATCH", f"No binding for {event.key!r}", consumed=False
            )
        return self.execute(action)

    def execute(self, action: SetRate | AdjustRate | SeekBy) -> ServiceResult:
        target = self.select_target()
        if target is None:
            return ServiceResult.failure(
                action.type, "NO_TARGET", "No media element on the page", consumed=True
            )

        if isinstance(action, SetRate):
            return self._apply_rate(target, action.value, op="set_rate")
        if isinstance(action, AdjustRate):
            return self._apply_rate(
                target, self._context.target_rate + action.delta, op="adjust_rate"
            )
        return self.seek_by(target, action.seconds)

    def seek_by(self, element: MediaElement, seconds: float) -> ServiceResult:
        """Move *element*'s playhead by *seconds*, clamped to ``[0, duration]``."""
        warnings: list[str] = []
        before = element.current_time
        element.current_time = seek_target(before, seconds, element.duration)
        logger.debug(
            "Seek %+gs on %s: %.2f -> %.2f",
            seconds,
            element.element_id,
            before,
            element.current_time,
        )
        self._notify(format_seek(seconds), warnings)
        self._dispatch_event(
            "post_seek",
            {
                "element_id": element.element_id,
                "seconds": seconds,
                "current_time": element.current_time,
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op="seek_by",
            data={
                "element": element.element_id,
                "seconds": seconds,
                "current_time": element.current_time,
            },
            warnings=warnings,
        )

    def _apply_rate(self, target: MediaElement, rate: float, *, op: str) -> ServiceResult:
        others = [m for m in self._source.query_media() if m is not target]
        return self._guard.apply_target_rate(rate, [target, *others], op=op)
