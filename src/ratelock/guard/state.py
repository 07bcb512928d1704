"""Per-element guard state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ratelock.guard.accessor import GuardedRate
    from ratelock.guard.scheduler import PeriodicTask
    from ratelock.page.element import Listener


@dataclass(eq=False)
class GuardState:
    """Everything the guard owns for one media element.

    Holds no strong reference to the element itself, so an entry in the
    context's weak mapping disappears once the page drops the element.

    Attributes:
        element_id: Element identifier, kept for logs after the element dies.
        desired_rate: The rate enforced on the element.
        accessor: Proxy that intercepts the element's public rate.
        intercepting: False when the element refused the accessor and the
            guard is running degraded (reconciliation only).
        task: The recurring reconciliation task.
        listeners: Native event hooks attached to the element.
        active: False once torn down; deferred work checks this.
        corrections: Number of times drift was corrected.
    """

    element_id: str
    desired_rate: float
    accessor: GuardedRate | None = None
    intercepting: bool = False
    task: PeriodicTask | None = None
    listeners: list[tuple[str, Listener]] = field(default_factory=list)
    active: bool = True
    corrections: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "element_id": self.element_id,
            "desired_rate": self.desired_rate,
            "intercepting": self.intercepting,
            "active": self.active,
            "corrections": self.corrections,
        }
