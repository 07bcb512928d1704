"""Command: print the effective configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ratelock.commands._base import RateCommand
from ratelock.services.result import ServiceResult

if TYPE_CHECKING:
    from ratelock.commands._context import AppContext


@click.command(
    "config",
    cls=RateCommand,
    examples="""\
  ratelock config
  ratelock -v config
  ratelock --json config
  RATELOCK_SPEED__MAX_RATE=8 ratelock config
  ratelock -c ./ratelock.toml config""",
)
@click.pass_obj
def config_cmd(app: AppContext) -> None:
    """Show the configuration after merging file, environment, and defaults."""
    source = app.settings.config_path
    app.emit(
        ServiceResult(
            ok=True,
            op="show_config",
            data={
                "source": str(source) if source is not None else None,
                "config": app.config.model_dump(mode="json"),
            },
        )
    )
