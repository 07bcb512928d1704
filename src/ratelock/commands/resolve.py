"""Command: resolve a key combination to its action."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ratelock.commands._base import RateCommand

if TYPE_CHECKING:
    from ratelock.commands._context import AppContext


@click.command(
    cls=RateCommand,
    examples="""\
  ratelock resolve alt+d
  ratelock resolve alt+shift+d
  ratelock --json resolve ctrl+alt+q""",
)
@click.argument("combo")
@click.pass_obj
def resolve(app: AppContext, combo: str) -> None:
    """Show which action COMBO (e.g. alt+d) triggers."""
    from ratelock.services.keymap import KeymapService

    app.emit(KeymapService(app.config.keyboard).resolve(combo))
