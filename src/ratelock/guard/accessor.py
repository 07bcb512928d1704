"""GuardedRate — the proxy installed over an element's public playback rate.

``read()`` is always guard-authoritative. ``write()`` from a page script is
a foreign write: the value is dropped and a correction is deferred to the
next loop turn, where it re-reads the desired rate (never a captured copy)
and reasserts it only if the raw rate still disagrees. ``force_write()`` is
the guard's own path; it raises a self-write flag so that the nested
``write()`` it triggers is applied instead of rejected. The flag drops
before the raw rate changes, so a ``ratechange`` listener that writes back
is foreign. Self and foreign writes are told apart by that flag alone,
never by comparing values.
"""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING

from ratelock.domain.rates import rates_differ

if TYPE_CHECKING:
    from ratelock.guard.scheduler import LoopLike
    from ratelock.guard.state import GuardState
    from ratelock.page.element import MediaElement

logger = logging.getLogger(__name__)


class GuardedRate:
    """Read/write interception for one element's playback rate.

    Parameters:
        element: The guarded element (held weakly).
        state: Shared guard state; ``state.desired_rate`` is the source of truth.
        loop: Event loop used to defer foreign-write resolution.
    """

    def __init__(self, element: MediaElement, state: GuardState, loop: LoopLike) -> None:
        self._element_ref: weakref.ReferenceType[MediaElement] = weakref.ref(element)
        self._state = state
        self._loop = loop
        self._self_write = False
        self.foreign_writes = 0

    @property
    def element(self) -> MediaElement | None:
        return self._element_ref()

    def read(self) -> float:
        return self._state.desired_rate

    def write(self, value: float) -> None:
        if self._self_write:
            self._apply(value)
            return
        self.foreign_writes += 1
        logger.debug(
            "Rejected foreign rate write %r on %s (desired %.2f)",
            value,
            self._state.element_id,
            self._state.desired_rate,
        )
        self._loop.call_soon(self._resolve_foreign_write)

    def force_write(self, value: float) -> None:
        element = self.element
        self._self_write = True
        try:
            if element is not None and element.rate_accessor is self:
                element.playback_rate = value
            else:
                self.write(value)
        finally:
            self._self_write = False

    def _apply(self, value: float) -> None:
        # Writes made by ratechange listeners during the raw set are foreign.
        self._self_write = False
        self._state.desired_rate = value
        element = self.element
        if element is not None:
            element.set_raw_rate(value)

    def _resolve_foreign_write(self) -> None:
        if not self._state.active:
            return
        element = self.element
        if element is None:
            return
        if rates_differ(element.get_raw_rate(), self._state.desired_rate):
            self._state.corrections += 1
            self.force_write(self._state.desired_rate)
