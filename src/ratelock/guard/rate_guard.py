"""RateGuard — makes the desired rate authoritative on each guarded element.

Guarding an element:

1. tears down any prior guard on it (cancels its timer synchronously,
   unhooks native listeners, uninstalls the old accessor);
2. installs a :class:`GuardedRate` over the public playback rate, or, when
   the element refuses (locked), keeps going degraded with reconciliation
   only;
3. forces the desired rate through the raw setter;
4. starts the element's reconciliation task.

The last write through the guard's internal path wins; foreign writes are
always rejected or corrected after the fact.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ratelock.config.logging import element_context
from ratelock.errors import AccessorLockedError
from ratelock.guard.accessor import GuardedRate
from ratelock.guard.scheduler import ReconciliationScheduler
from ratelock.guard.state import GuardState
from ratelock.services.base import BaseService
from ratelock.services.result import ServiceResult

if TYPE_CHECKING:
    from ratelock.guard.context import GuardContext
    from ratelock.page.element import MediaElement
    from ratelock.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


def format_rate(rate: float) -> str:
    """Notification text for a rate change."""
    return f"Speed: {rate:.2f}x"


class RateGuard(BaseService):
    """Per-element rate protection bound to one :class:`GuardContext`."""

    def __init__(self, context: GuardContext, plugins: PluginManager | None = None) -> None:
        super().__init__(context, plugins)
        self._scheduler = ReconciliationScheduler(
            context.loop, context.check_interval, self._retire
        )

    @property
    def scheduler(self) -> ReconciliationScheduler:
        return self._scheduler

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def guard(self, element: MediaElement, rate: float | None = None) -> GuardState:
        """Put *element* under guard at *rate* (default: the target rate).

        Any existing guard on the element is torn down first, so an element
        never has two competing reconciliation loops.
        """
        prior = self._context.detach(element)
        if prior is not None:
            self._release(element, prior, reason="replaced")

        desired = self._context.clamp(self._context.target_rate if rate is None else rate)
        state = GuardState(element_id=element.element_id, desired_rate=desired)
        accessor = GuardedRate(element, state, self._context.loop)
        state.accessor = accessor

        with element_context(state.element_id):
            try:
                element.install_rate_accessor(accessor)
                state.intercepting = True
            except AccessorLockedError as exc:
                logger.warning("Rate interception unavailable, guarding degraded: %s", exc)

            try:
                accessor.force_write(desired)
            except ValueError:
                logger.warning("Initial rate %.2f rejected by element", desired, exc_info=True)

            self._context.attach(element, state)
            self._scheduler.register(element, state)
            logger.debug("Guarding at %.2fx (intercepting=%s)", desired, state.intercepting)

        self._dispatch_event(
            "post_guard",
            {"element_id": state.element_id, "rate": desired, "intercepting": state.intercepting},
        )
        return state

    def process(self, element: MediaElement) -> bool:
        """Guard *element* at the target rate unless it is already guarded.

        Idempotent: this is the entry point for the element observer.
        Returns True when a new guard was installed.
        """
        state = self._context.state_for(element)
        if state is not None and state.active:
            return False
        self.guard(element)
        return True

    def teardown(self, element: MediaElement, *, reason: str = "released") -> bool:
        """Release the guard on *element*. Returns False if it was not guarded."""
        state = self._context.detach(element)
        if state is None:
            return False
        self._release(element, state, reason=reason)
        return True

    def teardown_all(self) -> int:
        count = 0
        for element, state in self._context.guarded():
            self._context.detach(element)
            self._release(element, state, reason="shutdown")
            count += 1
        return count

    # ------------------------------------------------------------------
    # Rate operations
    # ------------------------------------------------------------------

    def desired_rate(self, element: MediaElement) -> float | None:
        state = self._context.state_for(element)
        return state.desired_rate if state is not None else None

    def set_desired_rate(self, element: MediaElement, rate: float) -> ServiceResult:
        """Clamp *rate*, enforce it on *element*, record it as the target rate.

        Guards the element first if needed. Persists the target when
        ``remember_last_rate`` is on, and shows a notification.
        """
        warnings: list[str] = []
        clamped = self._context.clamp(rate)
        self._enforce(element, clamped, warnings)
        return self._commit("set_desired_rate", clamped, [element.element_id], warnings)

    def apply_target_rate(
        self,
        rate: float,
        elements: Iterable[MediaElement],
        *,
        op: str = "set_rate",
    ) -> ServiceResult:
        """Apply *rate* to every element given (the whole page), notify once."""
        warnings: list[str] = []
        clamped = self._context.clamp(rate)
        ids: list[str] = []
        for element in elements:
            self._enforce(element, clamped, warnings)
            ids.append(element.element_id)
        return self._commit(op, clamped, ids, warnings)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _enforce(self, element: MediaElement, rate: float, warnings: list[str]) -> None:
        state = self._context.state_for(element)
        if state is None or not state.active or state.accessor is None:
            state = self.guard(element, rate)
        else:
            try:
                state.accessor.force_write(rate)
            except ValueError:
                logger.warning("Rate %.2f rejected by %s", rate, element.element_id)
        if not state.intercepting:
            warnings.append(f"{element.element_id}: rate interception unavailable")

    def _commit(
        self,
        op: str,
        rate: float,
        element_ids: list[str],
        warnings: list[str],
    ) -> ServiceResult:
        persisted = self._context.set_target_rate(rate)
        wants_persist = self._context.config.speed.remember_last_rate
        if wants_persist and self._context.store is not None and not persisted:
            warnings.append("Could not persist rate")
        self._notify(format_rate(rate), warnings)
        self._dispatch_event(
            "post_rate_change",
            {"rate": rate, "element_count": len(element_ids), "persisted": persisted},
            warnings,
        )
        logger.debug("Target rate set to %.2f on %d element(s)", rate, len(element_ids))
        return ServiceResult(
            ok=True,
            op=op,
            data={"rate": rate, "elements": element_ids, "persisted": persisted},
            warnings=warnings,
        )

    def _release(self, element: MediaElement, state: GuardState, *, reason: str) -> None:
        state.active = False
        if state.task is not None:
            state.task.cancel()
        for event, listener in state.listeners:
            element.remove_event_listener(event, listener)
        state.listeners.clear()
        if state.accessor is not None and element.rate_accessor is state.accessor:
            element.remove_rate_accessor()
        logger.debug("Released guard on %s (%s)", state.element_id, reason)
        self._dispatch_event("post_teardown", {"element_id": state.element_id, "reason": reason})

    def _retire(self, element: MediaElement, state: GuardState) -> None:
        """Scheduler callback: the element left the document."""
        if self._context.state_for(element) is state:
            self._context.detach(element)
        self._release(element, state, reason="detached")
