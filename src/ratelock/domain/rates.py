"""Pure rate and time arithmetic shared by the guard and the dispatcher."""

from __future__ import annotations

import math

RATE_TOLERANCE = 0.01


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp *value* into ``[lower, upper]``. NaN collapses to *lower*."""
    if math.isnan(value):
        return lower
    return max(lower, min(upper, value))


def clamp_rate(rate: float, min_rate: float, max_rate: float) -> float:
    """Clamp a requested playback rate to the configured bounds."""
    return clamp(float(rate), min_rate, max_rate)


def rates_differ(actual: float, desired: float) -> bool:
    """Whether *actual* has drifted from *desired* beyond the tolerance."""
    if math.isnan(actual):
        return True
    return abs(actual - desired) > RATE_TOLERANCE


def safe_duration(duration: float | None) -> float:
    """Upper seek bound: unknown, NaN or negative durations are 0."""
    if duration is None or math.isnan(duration) or duration < 0:
        return 0.0
    return duration


def seek_target(current_time: float | None, offset: float, duration: float | None) -> float:
    """Compute the clamped playhead position after a relative seek.

    Examples:
        >>> seek_target(3.0, -6, 120.0)
        0.0
        >>> seek_target(10.0, 6, 120.0)
        16.0
        >>> seek_target(10.0, 6, None)
        0.0
    """
    start = 0.0 if current_time is None or math.isnan(current_time) else current_time
    return clamp(start + offset, 0.0, safe_duration(duration))
