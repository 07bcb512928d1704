"""Semantic commands a keybinding resolves to.

Three immutable variants, validated as a discriminated union on ``type``:

- ``SetRate(value)``: request an absolute playback rate.
- ``AdjustRate(delta)``: move the process-wide target rate by *delta*.
- ``SeekBy(seconds)``: move the playhead relative to its current position.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter


class SetRate(BaseModel):
    """Set the target rate to an absolute value."""

    model_config = {"frozen": True}

    type: Literal["set_rate"] = "set_rate"
    value: float


class AdjustRate(BaseModel):
    """Add *delta* to the current target rate."""

    model_config = {"frozen": True}

    type: Literal["adjust_rate"] = "adjust_rate"
    delta: float


class SeekBy(BaseModel):
    """Seek forwards (positive) or backwards (negative) by *seconds*."""

    model_config = {"frozen": True}

    type: Literal["seek_by"] = "seek_by"
    seconds: float


Action = Annotated[SetRate | AdjustRate | SeekBy, Field(discriminator="type")]

ACTION_ADAPTER: TypeAdapter[SetRate | AdjustRate | SeekBy] = TypeAdapter(Action)


def parse_action(data: dict[str, object]) -> SetRate | AdjustRate | SeekBy:
    """Validate a raw mapping (e.g. from TOML) into an Action variant."""
    return ACTION_ADAPTER.validate_python(data)


def describe_action(action: SetRate | AdjustRate | SeekBy) -> str:
    """Short human-readable summary used by the CLI.

    Examples:
        >>> describe_action(SetRate(value=1.5))
        'set rate 1.50x'
        >>> describe_action(AdjustRate(delta=-0.1))
        'adjust rate -0.10'
        >>> describe_action(SeekBy(seconds=6))
        'seek +6s'
    """
    if isinstance(action, SetRate):
        return f"set rate {action.value:.2f}x"
    if isinstance(action, AdjustRate):
        return f"adjust rate {action.delta:+.2f}"
    return f"seek {action.seconds:+g}s"
