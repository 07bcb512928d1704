"""Media element protocol and a simulated implementation.

An element exposes two paths to its playback rate:

- the *public* ``playback_rate`` attribute that page scripts use, which
  routes through an installed :class:`RateAccessor` when one is present;
- the *raw* path (``get_raw_rate``/``set_raw_rate``), the element's own
  setter that no accessor can intercept.

Installing an accessor is the equivalent of redefining the property on the
instance. A ``locked`` element refuses the redefinition.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections import defaultdict
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from ratelock.errors import AccessorLockedError

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]

# Native events a media pipeline fires that may reset the playback rate.
RATECHANGE = "ratechange"
LOADEDMETADATA = "loadedmetadata"
EMPTIED = "emptied"
PLAY = "play"
PAUSE = "pause"


@runtime_checkable
class RateAccessor(Protocol):
    """Replacement read/write pair for an element's public playback rate."""

    def read(self) -> float: ...

    def write(self, value: float) -> None: ...


@runtime_checkable
class MediaElement(Protocol):
    """What the guard, scheduler, and dispatcher require of an element."""

    element_id: str
    paused: bool
    current_time: float
    duration: float | None

    @property
    def playback_rate(self) -> float: ...

    @playback_rate.setter
    def playback_rate(self, value: float) -> None: ...

    @property
    def is_connected(self) -> bool: ...

    @property
    def rate_accessor(self) -> RateAccessor | None: ...

    def get_raw_rate(self) -> float: ...

    def set_raw_rate(self, rate: float) -> None: ...

    def install_rate_accessor(self, accessor: RateAccessor) -> None: ...

    def remove_rate_accessor(self) -> None: ...

    def add_event_listener(self, event: str, listener: Listener) -> None: ...

    def remove_event_listener(self, event: str, listener: Listener) -> None: ...


_ids = itertools.count(1)


class SimulatedMediaElement:
    """In-process stand-in for a page ``<video>``/``<audio>`` element.

    Parameters:
        element_id: Identifier used in logs and CLI output.
        duration: Media length in seconds; None or NaN means "not yet known".
        paused: Initial paused state.
        locked: Refuse accessor installation (a non-configurable property).
        default_rate: Rate the media pipeline resets to on ``load()``.
    """

    def __init__(
        self,
        element_id: str | None = None,
        *,
        duration: float | None = None,
        paused: bool = True,
        locked: bool = False,
        default_rate: float = 1.0,
        current_time: float = 0.0,
    ) -> None:
        self.element_id = element_id or f"media-{next(_ids)}"
        self.duration = duration
        self.paused = paused
        self.locked = locked
        self.default_rate = default_rate
        self.current_time = current_time
        self._raw_rate = default_rate
        self._accessor: RateAccessor | None = None
        self._connected = False
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def __repr__(self) -> str:
        return f"<SimulatedMediaElement {self.element_id} rate={self._raw_rate}>"

    # ------------------------------------------------------------------
    # Public (interceptable) rate
    # ------------------------------------------------------------------

    @property
    def playback_rate(self) -> float:
        if self._accessor is not None:
            return self._accessor.read()
        return self._raw_rate

    @playback_rate.setter
    def playback_rate(self, value: float) -> None:
        if self._accessor is not None:
            self._accessor.write(value)
        else:
            self.set_raw_rate(value)

    # ------------------------------------------------------------------
    # Raw rate (the element's own setter)
    # ------------------------------------------------------------------

    def get_raw_rate(self) -> float:
        return self._raw_rate

    def set_raw_rate(self, rate: float) -> None:
        """Apply *rate* to the pipeline; fires ``ratechange`` on change.

        Raises:
            ValueError: For NaN or infinite rates, as a browser would.
        """
        rate = float(rate)
        if math.isnan(rate) or math.isinf(rate):
            msg = f"Playback rate must be finite, got {rate!r}"
            raise ValueError(msg)
        if rate == self._raw_rate:
            return
        self._raw_rate = rate
        self.dispatch_event(RATECHANGE)

    # ------------------------------------------------------------------
    # Accessor installation
    # ------------------------------------------------------------------

    @property
    def rate_accessor(self) -> RateAccessor | None:
        return self._accessor

    def install_rate_accessor(self, accessor: RateAccessor) -> None:
        if self.locked:
            msg = f"playbackRate on {self.element_id} is not configurable"
            raise AccessorLockedError(msg)
        self._accessor = accessor

    def remove_rate_accessor(self) -> None:
        self._accessor = None

    # ------------------------------------------------------------------
    # Document attachment
    # ------------------------------------------------------------------

    @property
    def is_connected(self) -> bool:
        return self._connected

    def _set_connected(self, connected: bool) -> None:
        self._connected = connected

    # ------------------------------------------------------------------
    # Events and pipeline behaviour
    # ------------------------------------------------------------------

    def add_event_listener(self, event: str, listener: Listener) -> None:
        if listener not in self._listeners[event]:
            self._listeners[event].append(listener)

    def remove_event_listener(self, event: str, listener: Listener) -> None:
        try:
            self._listeners[event].remove(listener)
        except ValueError:
            pass

    def listener_count(self, event: str | None = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, []))
        return sum(len(v) for v in self._listeners.values())

    def dispatch_event(self, event: str) -> None:
        """Invoke listeners for *event* in registration order."""
        for listener in list(self._listeners.get(event, [])):
            listener(event)

    def play(self) -> None:
        self.paused = False
        self.dispatch_event(PLAY)

    def pause(self) -> None:
        self.paused = True
        self.dispatch_event(PAUSE)

    def load(self, duration: float | None = None) -> None:
        """Reload the source: the pipeline resets rate and position.

        Fires ``emptied`` then ``loadedmetadata``, the way a source change
        does in a browser.
        """
        self.current_time = 0.0
        self.duration = duration
        if self._raw_rate != self.default_rate:
            self._raw_rate = self.default_rate
            self.dispatch_event(RATECHANGE)
        self.dispatch_event(EMPTIED)
        self.dispatch_event(LOADEDMETADATA)
