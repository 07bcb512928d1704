"""Reconciliation scheduler — periodic and event-triggered drift correction.

Each guarded element gets one :class:`PeriodicTask`. A tick either retires
the guard (element detached or collected: terminal) or compares the raw
rate with the desired rate and forces it back when they differ by more than
the tolerance. Native media events that can reset the rate run the same
check immediately, so a wrong rate is visible for at most one tick or one
event, whichever comes first.

The scheduler only needs ``call_soon``/``call_later`` and cancellable
handles, so any asyncio event loop (or a manual loop in tests) drives it.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

from ratelock.config.logging import element_context
from ratelock.domain.rates import rates_differ
from ratelock.page.element import EMPTIED, LOADEDMETADATA, PLAY, RATECHANGE

if TYPE_CHECKING:
    from ratelock.guard.state import GuardState
    from ratelock.page.element import MediaElement

logger = logging.getLogger(__name__)

# Native events known to reset or report a changed playback rate.
RESET_EVENTS: tuple[str, ...] = (RATECHANGE, LOADEDMETADATA, PLAY, EMPTIED)


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class LoopLike(Protocol):
    """The subset of :class:`asyncio.AbstractEventLoop` the guard uses."""

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> Cancellable: ...

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> Cancellable: ...


class PeriodicTask:
    """A re-arming ``call_later`` timer.

    ``cancel()`` cancels the pending handle synchronously and marks the task
    so that a tick already executing cannot re-arm it.
    """

    def __init__(self, loop: LoopLike, interval: float, callback: Callable[[], None]) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._handle: Cancellable | None = None
        self._cancelled = False
        self.ticks = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def active(self) -> bool:
        return not self._cancelled and self._handle is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> PeriodicTask:
        if not self._cancelled and self._handle is None:
            self._arm()
        return self

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._run)

    def _run(self) -> None:
        self._handle = None
        if self._cancelled:
            return
        self.ticks += 1
        try:
            self._callback()
        finally:
            if not self._cancelled:
                self._arm()


RetireCallback = Callable[["MediaElement", "GuardState"], None]


class ReconciliationScheduler:
    """Owns the recurring correction loop and native-event hooks per element.

    Parameters:
        loop: Event loop for the recurring timers.
        interval: Seconds between ticks.
        on_detached: Called with ``(element, state)`` when a tick finds the
            element no longer attached; the guard discards its state there.
    """

    def __init__(self, loop: LoopLike, interval: float, on_detached: RetireCallback) -> None:
        self._loop = loop
        self._interval = interval
        self._on_detached = on_detached

    @property
    def interval(self) -> float:
        return self._interval

    def register(self, element: MediaElement, state: GuardState) -> PeriodicTask:
        """Attach native hooks and start the recurring task for *element*."""
        element_ref = weakref.ref(element)

        def on_native_event(event: str) -> None:
            target = element_ref()
            if target is None or not state.active:
                return
            with element_context(state.element_id):
                if self.reconcile(target, state):
                    logger.debug("Corrected rate after native %s event", event)

        for event in RESET_EVENTS:
            element.add_event_listener(event, on_native_event)
            state.listeners.append((event, on_native_event))

        task = PeriodicTask(self._loop, self._interval, lambda: self._tick(element_ref, state))
        state.task = task
        return task.start()

    def reconcile(self, element: MediaElement, state: GuardState) -> bool:
        """Force the desired rate back if the raw rate drifted. Returns True if corrected."""
        if not state.active or state.accessor is None:
            return False
        actual = element.get_raw_rate()
        if not rates_differ(actual, state.desired_rate):
            return False
        logger.debug(
            "Rate drift on %s: raw %.3f, desired %.3f",
            state.element_id,
            actual,
            state.desired_rate,
        )
        state.corrections += 1
        state.accessor.force_write(state.desired_rate)
        return True

    def _tick(
        self,
        element_ref: weakref.ReferenceType[MediaElement],
        state: GuardState,
    ) -> None:
        element = element_ref()
        if element is None:
            logger.debug("Guarded element %s was collected", state.element_id)
            if state.task is not None:
                state.task.cancel()
            state.active = False
            return

        with element_context(state.element_id):
            if not element.is_connected:
                if state.task is not None:
                    state.task.cancel()
                self._on_detached(element, state)
                return
            try:
                self.reconcile(element, state)
            except Exception:
                logger.debug("Reconciliation tick failed", exc_info=True)
