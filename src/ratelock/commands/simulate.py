"""Command: run the rate guard against a simulated page."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ratelock.commands._base import RateCommand

if TYPE_CHECKING:
    from ratelock.commands._context import AppContext


@click.command(
    cls=RateCommand,
    examples="""\
  ratelock simulate --key alt+d --key alt+d
  ratelock simulate --key alt+e --foreign 0.3
  ratelock simulate --raw 1.0 --reload
  ratelock simulate --elements 3 --key alt+w --remove -v
  ratelock simulate --key alt+shift+d --persist""",
)
@click.option("--elements", default=1, show_default=True, help="Media elements on the page.")
@click.option("--key", "keys", multiple=True, help="Key combo to press (repeatable).")
@click.option(
    "--foreign",
    "foreign_writes",
    type=float,
    multiple=True,
    help="Rate a page script writes through the public property (repeatable).",
)
@click.option(
    "--raw",
    "raw_writes",
    type=float,
    multiple=True,
    help="Rate written below the interceptor, as a media pipeline would (repeatable).",
)
@click.option("--reload", "reloads", count=True, help="Reload the media (repeatable).")
@click.option("--remove", is_flag=True, help="Remove the first element from the page.")
@click.option(
    "--duration",
    type=float,
    default=120.0,
    show_default=True,
    help="Media duration in seconds.",
)
@click.option(
    "--run-for",
    type=float,
    default=0.5,
    show_default=True,
    help="Minimum wall-clock seconds to run.",
)
@click.option("--persist", is_flag=True, help="Read and save the last rate in the state database.")
@click.pass_obj
def simulate(
    app: AppContext,
    elements: int,
    keys: tuple[str, ...],
    foreign_writes: tuple[float, ...],
    raw_writes: tuple[float, ...],
    reloads: int,
    remove: bool,
    duration: float,
    run_for: float,
    persist: bool,
) -> None:
    """Guard a simulated page, replay key presses and hostile writes, report rates."""
    from ratelock.services.simulation import Scenario, SimulationService

    scenario = Scenario(
        keys=list(keys),
        foreign_writes=list(foreign_writes),
        raw_writes=list(raw_writes),
        reloads=reloads,
        remove_first=remove,
        elements=elements,
        media_duration=duration,
        run_for=run_for,
    )
    store = app.store if persist else None
    app.emit(SimulationService(app.config, store=store, plugins=app.plugins).run(scenario))
