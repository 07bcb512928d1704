"""Command group: inspect and manage the persisted playback rate."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ratelock.commands._base import RateGroup

if TYPE_CHECKING:
    from ratelock.commands._context import AppContext
    from ratelock.services.preferences import PreferenceService


def _service(app: AppContext) -> PreferenceService:
    from ratelock.services.preferences import PreferenceService

    return PreferenceService(app.config, app.store)


@click.group(
    cls=RateGroup,
    examples="""\
  ratelock rate show
  ratelock rate set 1.75
  ratelock rate clear""",
)
def rate() -> None:
    """Inspect or change the remembered playback rate."""


@rate.command(
    examples="""\
  ratelock rate show
  ratelock -q rate show""",
)
@click.pass_obj
def show(app: AppContext) -> None:
    """Show the saved rate and the rate pages start at."""
    app.emit(_service(app).show())


@rate.command(
    "set",
    examples="""\
  ratelock rate set 2
  ratelock rate set 0.75""",
)
@click.argument("value", type=float)
@click.pass_obj
def set_rate(app: AppContext, value: float) -> None:
    """Save VALUE as the remembered rate (clamped to the configured bounds)."""
    app.emit(_service(app).set_rate(value))


@rate.command(
    examples="""\
  ratelock rate clear""",
)
@click.pass_obj
def clear(app: AppContext) -> None:
    """Forget the remembered rate; pages start at the default again."""
    app.emit(_service(app).clear())
