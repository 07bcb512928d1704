"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Opens the state database lazily and centralizes
result emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ratelock.config.logging import configure_logging
from ratelock.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from ratelock.config.models import RateLockConfig
    from ratelock.config.settings import RateLockSettings
    from ratelock.infrastructure.store import RateStore
    from ratelock.plugins.manager import PluginManager
    from ratelock.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store and plugin manager are created on first access so ``--help``
    and ``--version`` never touch the database or entry points.
    """

    def __init__(self, settings: RateLockSettings) -> None:
        self.settings = settings
        self.config: RateLockConfig = settings.to_config()
        self._store: RateStore | None = None
        self._store_opened = False
        self._plugins: PluginManager | None = None

        configure_logging(
            verbose=settings.verbose or settings.advanced.debug_mode,
            log_json=settings.log_json,
        )

    @property
    def store(self) -> RateStore | None:
        """The state store, or None when the database cannot be opened."""
        if not self._store_opened:
            from ratelock.infrastructure.store import RateStore

            self._store = RateStore.open(self.settings.storage.path)
            self._store_opened = True
        return self._store

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager with entry points and the console notifier loaded."""
        if self._plugins is None:
            from ratelock.output.console import create_stderr_console
            from ratelock.plugins.builtins.console import ConsoleNotifier
            from ratelock.plugins.manager import PluginManager

            manager = PluginManager()
            manager.discover_and_load()
            console = None
            if not (self.settings.quiet or self.settings.json_output):
                console = create_stderr_console()
            manager.register_plugin(ConsoleNotifier(console), name="console-notifier")
            self._plugins = manager
        return self._plugins

    def close(self) -> None:
        if self._store is not None:
            self._store.close()

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout, with warnings on stderr so piped output stays clean.
        * Failure: stderr, then exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON output already carries the warnings.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
