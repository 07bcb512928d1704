"""Page model — media elements and the document that owns them.

The guard never creates or destroys elements; it only attaches state to
whatever the document hands it. :class:`SimulatedMediaElement` and
:class:`MediaDocument` are the in-process page used by the CLI simulator
and the test suite. Any object satisfying :class:`MediaElement` can be
guarded.
"""

from ratelock.page.document import MediaDocument
from ratelock.page.element import MediaElement, RateAccessor, SimulatedMediaElement

__all__ = ["MediaDocument", "MediaElement", "RateAccessor", "SimulatedMediaElement"]
