"""MediaDocument — the element observer the guard registers against.

Supplies the media elements currently attached and notifies subscribers of
newly inserted ones. Removal only flips the element's connected flag; the
reconciliation loop notices on its next tick.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from ratelock.page.element import SimulatedMediaElement

logger = logging.getLogger(__name__)

InsertionCallback = Callable[[SimulatedMediaElement], None]


class MediaDocument:
    """Ordered collection of attached media elements with insertion observers."""

    def __init__(self, elements: Iterable[SimulatedMediaElement] = ()) -> None:
        self._elements: list[SimulatedMediaElement] = []
        self._observers: list[InsertionCallback] = []
        for element in elements:
            self.append(element)

    def __len__(self) -> int:
        return len(self._elements)

    def query_media(self) -> list[SimulatedMediaElement]:
        """All attached media elements in document order."""
        return list(self._elements)

    def contains(self, element: object) -> bool:
        return any(e is element for e in self._elements)

    def create_media(self, element_id: str | None = None, **kwargs: Any) -> SimulatedMediaElement:
        """Create a :class:`SimulatedMediaElement` and append it."""
        element = SimulatedMediaElement(element_id, **kwargs)
        self.append(element)
        return element

    def append(self, element: SimulatedMediaElement) -> None:
        """Attach *element* and notify insertion observers.

        Appending an element that is already attached is a no-op.
        """
        if self.contains(element):
            return
        self._elements.append(element)
        element._set_connected(True)
        for callback in list(self._observers):
            try:
                callback(element)
            except Exception:
                logger.warning(
                    "Insertion observer failed for %s", element.element_id, exc_info=True
                )

    def remove(self, element: SimulatedMediaElement) -> bool:
        """Detach *element*. Returns False when it was not attached."""
        for index, candidate in enumerate(self._elements):
            if candidate is element:
                del self._elements[index]
                element._set_connected(False)
                return True
        return False

    def observe(self, callback: InsertionCallback) -> Callable[[], None]:
        """Subscribe to insertions. Returns an unsubscribe callable."""
        self._observers.append(callback)

        def unsubscribe() -> None:
            try:
                self._observers.remove(callback)
            except ValueError:
                pass

        return unsubscribe
