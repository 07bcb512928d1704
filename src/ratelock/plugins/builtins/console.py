"""Console notifier — the default notification UI.

Renders each notification as a one-line styled message on a Rich console
and keeps a record of what was shown, so the simulator can report it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ratelock.plugins.manager import hookimpl

if TYPE_CHECKING:
    from rich.console import Console


@dataclass(frozen=True)
class Notification:
    message: str
    duration_ms: int


class ConsoleNotifier:
    """Show notifications on *console*; with no console, only record them."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console
        self.shown: list[Notification] = []

    @hookimpl
    def show_notification(self, message: str, duration_ms: int) -> None:
        self.shown.append(Notification(message, duration_ms))
        if self._console is not None:
            self._console.print(f"[rl.notice]▶ {message}[/rl.notice]")

    @property
    def messages(self) -> list[str]:
        return [n.message for n in self.shown]
