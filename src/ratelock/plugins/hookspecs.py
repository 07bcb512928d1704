"""Pluggy hook specifications for ratelock notifications and lifecycle events.

``show_notification`` is the notification UI collaborator: the core calls
it with a display string and a duration and consumes no return value.
The ``post_*`` hooks report guard lifecycle and user actions.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("ratelock")


class RateLockHookSpec:
    """Hook specifications for the ratelock plugin system."""

    @hookspec
    def show_notification(self, message: str, duration_ms: int) -> None:
        """Display a transient message (e.g. ``"Speed: 1.50x"``)."""

    @hookspec
    def post_rate_change(self, rate: float, element_count: int, persisted: bool) -> None:
        """Called after the target rate was applied to *element_count* elements."""

    @hookspec
    def post_seek(self, element_id: str, seconds: float, current_time: float) -> None:
        """Called after a relative seek moved the playhead."""

    @hookspec
    def post_guard(self, element_id: str, rate: float, intercepting: bool) -> None:
        """Called after an element came under guard."""

    @hookspec
    def post_teardown(self, element_id: str, reason: str) -> None:
        """Called after an element's guard was released."""
