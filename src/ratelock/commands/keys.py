"""Command: list the keybinding table."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ratelock.commands._base import RateCommand

if TYPE_CHECKING:
    from ratelock.commands._context import AppContext


@click.command(
    cls=RateCommand,
    examples="""\
  ratelock keys
  ratelock keys -v
  ratelock --json keys
  ratelock -q keys""",
)
@click.pass_obj
def keys(app: AppContext) -> None:
    """List every key combination and the action it triggers."""
    from ratelock.services.keymap import KeymapService

    app.emit(KeymapService(app.config.keyboard).list_bindings())
