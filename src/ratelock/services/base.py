"""BaseService — shared foundation for the guard and the dispatcher.

Every service receives the :class:`GuardContext` for its page and an
optional :class:`PluginManager`. Lifecycle events and notifications go out
through pluggy hooks.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ratelock.guard.context import GuardContext
    from ratelock.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for service-layer classes.

    Usage::

        class CommandDispatcher(BaseService):
            def execute(self, action: Action) -> ServiceResult:
                warnings: list[str] = []
                ...
                self._notify("Speed: 2.00x", warnings)
    """

    def __init__(self, context: GuardContext, plugins: PluginManager | None = None) -> None:
        self._context = context
        self._plugins = plugins

    @property
    def context(self) -> GuardContext:
        return self._context

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str] | None = None,
    ) -> None:
        """Call a lifecycle hook synchronously. No-op without plugins."""
        if self._plugins is None:
            return
        hook_fn = getattr(self._plugins.hook, hook_name, None)
        if hook_fn is None:
            return
        try:
            hook_fn(**payload)
        except Exception:
            logger.debug("Hook %s failed", hook_name, exc_info=True)
            if warnings is not None:
                warnings.append(f"Hook {hook_name} failed")

    def _notify(self, message: str, warnings: list[str] | None = None) -> None:
        """Show *message* through the notification hook when enabled."""
        ui = self._context.config.ui
        if not ui.show_notifications:
            return
        self._dispatch_event(
            "show_notification",
            {"message": message, "duration_ms": ui.notification_duration},
            warnings,
        )
