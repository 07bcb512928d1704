"""Rate-protection core — guard, accessor proxy, scheduler, shared context."""

from ratelock.guard.accessor import GuardedRate
from ratelock.guard.context import GuardContext
from ratelock.guard.rate_guard import RateGuard
from ratelock.guard.scheduler import PeriodicTask, ReconciliationScheduler
from ratelock.guard.state import GuardState

__all__ = [
    "GuardContext",
    "GuardState",
    "GuardedRate",
    "PeriodicTask",
    "RateGuard",
    "ReconciliationScheduler",
]
