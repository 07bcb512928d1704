"""Exception types raised inside ratelock.

Nothing here is fatal to the process: callers catch these at the seams
(guard installation, CLI argument parsing) and degrade.
"""

from __future__ import annotations


class RateLockError(Exception):
    """Base class for all ratelock errors."""


class AccessorLockedError(RateLockError):
    """The element refuses a replacement rate accessor (non-configurable)."""


class ComboParseError(RateLockError, ValueError):
    """A key combination string could not be parsed."""
