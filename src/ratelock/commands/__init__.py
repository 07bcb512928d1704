"""Subcommand modules for ratelock.

``register_commands()`` imports command modules lazily so ``ratelock
--help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every command group and standalone command on the root group."""
    # --- Groups ---
    from ratelock.commands.rate import rate

    cli.add_command(rate)

    # --- Standalone commands ---
    from ratelock.commands.config_cmd import config_cmd
    from ratelock.commands.keys import keys
    from ratelock.commands.resolve import resolve
    from ratelock.commands.simulate import simulate

    cli.add_command(keys)
    cli.add_command(resolve)
    cli.add_command(simulate)
    cli.add_command(config_cmd)
