"""GuardContext — explicit owner of the target rate and guard registry.

Replaces module-level globals: everything the dispatcher and guard share
lives on one context object that callers construct and pass in.

Element → GuardState association is a :class:`weakref.WeakKeyDictionary`,
so the guard never extends an element's lifetime; the page owns that.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Iterator
from typing import TYPE_CHECKING

from ratelock.domain.rates import clamp_rate

if TYPE_CHECKING:
    from ratelock.config.models import RateLockConfig
    from ratelock.guard.scheduler import LoopLike
    from ratelock.guard.state import GuardState
    from ratelock.infrastructure.store import RateStore
    from ratelock.page.element import MediaElement

logger = logging.getLogger(__name__)


class GuardContext:
    """Shared runtime state for one page.

    Parameters:
        config: Effective configuration.
        loop: Event loop that drives deferred corrections and ticks.
        store: Durable store for the last requested rate, or None.
        target_rate: Initial target; defaults to ``speed.default_rate``.
    """

    def __init__(
        self,
        config: RateLockConfig,
        loop: LoopLike,
        *,
        store: RateStore | None = None,
        target_rate: float | None = None,
    ) -> None:
        self.config = config
        self.loop = loop
        self.store = store
        initial = config.speed.default_rate if target_rate is None else target_rate
        self._target_rate = self.clamp(initial)
        self._states: weakref.WeakKeyDictionary[MediaElement, GuardState] = (
            weakref.WeakKeyDictionary()
        )

    # ------------------------------------------------------------------
    # Target rate
    # ------------------------------------------------------------------

    @property
    def min_rate(self) -> float:
        return self.config.speed.min_rate

    @property
    def max_rate(self) -> float:
        return self.config.speed.max_rate

    @property
    def check_interval(self) -> float:
        """Reconciliation interval in seconds."""
        return self.config.advanced.check_interval / 1000.0

    @property
    def target_rate(self) -> float:
        return self._target_rate

    def clamp(self, rate: float) -> float:
        return clamp_rate(rate, self.min_rate, self.max_rate)

    def set_target_rate(self, rate: float) -> bool:
        """Record *rate* as the target and persist it when configured.

        Returns True if the rate was written to the store.
        """
        self._target_rate = self.clamp(rate)
        if not self.config.speed.remember_last_rate or self.store is None:
            return False
        return self.store.save_rate(self._target_rate)

    def restore_target_rate(self) -> float:
        """Load the persisted rate at startup, falling back to the default."""
        rate = self.config.speed.default_rate
        if self.config.speed.remember_last_rate and self.store is not None:
            saved = self.store.load_rate()
            if saved is not None:
                rate = saved
        self._target_rate = self.clamp(rate)
        logger.debug("Target rate restored to %.2f", self._target_rate)
        return self._target_rate

    # ------------------------------------------------------------------
    # Guard registry
    # ------------------------------------------------------------------

    def state_for(self, element: MediaElement) -> GuardState | None:
        return self._states.get(element)

    def attach(self, element: MediaElement, state: GuardState) -> None:
        self._states[element] = state

    def detach(self, element: MediaElement) -> GuardState | None:
        return self._states.pop(element, None)

    def guarded(self) -> Iterator[tuple[MediaElement, GuardState]]:
        yield from list(self._states.items())

    def __len__(self) -> int:
        return len(self._states)

    def active_tasks(self) -> int:
        """Count of live reconciliation timers across all guarded elements."""
        return sum(
            1 for state in self._states.values() if state.task is not None and state.task.active
        )
