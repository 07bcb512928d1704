"""Keyboard command path — key → action → target element."""

from ratelock.dispatch.dispatcher import CommandDispatcher
from ratelock.dispatch.registry import ActionRegistry, ResolvedBinding

__all__ = ["ActionRegistry", "CommandDispatcher", "ResolvedBinding"]
