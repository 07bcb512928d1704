"""RateLockApp — wires config, store, guard, dispatcher, and observer for a page.

Startup order:

1. restore the target rate (persisted value if enabled, else the default);
2. when ``ui.enable_on_page_load`` is set, guard every media element
   already on the page and, with ``advanced.auto_apply_to_new_media``,
   subscribe to insertions;
3. key events are accepted once started and shortcuts are enabled.

The app must be constructed with an event loop, or inside a running one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ratelock.dispatch.dispatcher import CommandDispatcher
from ratelock.dispatch.registry import ActionRegistry
from ratelock.guard.context import GuardContext
from ratelock.guard.rate_guard import RateGuard

if TYPE_CHECKING:
    from ratelock.config.models import RateLockConfig
    from ratelock.domain.keys import KeyEvent
    from ratelock.guard.scheduler import LoopLike
    from ratelock.infrastructure.store import RateStore
    from ratelock.page.document import MediaDocument
    from ratelock.plugins.manager import PluginManager
    from ratelock.services.result import ServiceResult

logger = logging.getLogger(__name__)


class RateLockApp:
    """One page's worth of rate protection.

    Parameters:
        document: The page's media document (element observer).
        config: Effective configuration.
        loop: Event loop; defaults to the running asyncio loop.
        store: Persistence for the last rate, or None to disable.
        plugins: Plugin manager for notifications and lifecycle hooks.
    """

    def __init__(
        self,
        document: MediaDocument,
        config: RateLockConfig,
        *,
        loop: LoopLike | None = None,
        store: RateStore | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self.document = document
        self.config = config
        self.context = GuardContext(
            config, loop if loop is not None else asyncio.get_running_loop(), store=store
        )
        self.guard = RateGuard(self.context, plugins)
        self.registry = ActionRegistry(config.keyboard)
        self.dispatcher = CommandDispatcher(
            self.context, self.guard, self.registry, document, plugins
        )
        self._unsubscribe: Callable[[], None] | None = None
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def target_rate(self) -> float:
        return self.context.target_rate

    def start(self) -> None:
        """Restore the target rate and begin guarding the page."""
        if self._started:
            return
        self.context.restore_target_rate()
        if not self.config.ui.enable_on_page_load:
            logger.debug("enable_on_page_load is off; not guarding")
            return

        for element in self.document.query_media():
            self.guard.process(element)
        if self.config.advanced.auto_apply_to_new_media:
            self._unsubscribe = self.document.observe(self.guard.process)

        self._started = True
        logger.debug(
            "Started at %.2fx guarding %d element(s)",
            self.context.target_rate,
            len(self.context),
        )

    def stop(self) -> int:
        """Unsubscribe from the document and release every guard."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        released = self.guard.teardown_all()
        self._started = False
        return released

    def on_key(self, event: KeyEvent) -> ServiceResult | None:
        """Handle one key press. None when the app is idle or shortcuts are off."""
        if not self._started or not self.registry.enabled:
            return None
        return self.dispatcher.handle_key(event)
