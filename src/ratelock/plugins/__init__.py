"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``ratelock.plugins`` group,
plus built-ins registered directly.
INVARIANT: Plugin failures are warnings, never errors.
"""

from ratelock.plugins.manager import PluginManager, hookimpl

__all__ = ["PluginManager", "hookimpl"]
