"""Process services shared by layout instances."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

from gridboard.api.events import Scope
from gridboard.runtime.events import ScopedEventBus
from gridboard.runtime.scheduler import Scheduler


class IdAllocator:
    """Monotonic identifier source."""

    def __init__(self, prefix: str = "cn", start: int = 0) -> None:
        self._prefix = prefix
        self._counter = itertools.count(start)

    def next_id(self, prefix: str | None = None) -> str:
        return f"{self._prefix if prefix is None else prefix}{next(self._counter)}"


class ZOrderService:
    """Monotonically increasing stacking counter for focus-raising.

    Not thread-safe; callers on multiple threads must serialize access.
    """

    def __init__(self, start: int = 1) -> None:
        self._top = start

    @property
    def top(self) -> int:
        return self._top

    def raise_(self) -> int:
        self._top += 1
        return self._top


@dataclass(slots=True)
class LayoutContext:
    """Injected services: ids, stacking order, events and deferred work."""

    ids: IdAllocator = field(default_factory=IdAllocator)
    z_order: ZOrderService = field(default_factory=ZOrderService)
    events: ScopedEventBus = field(default_factory=ScopedEventBus)
    scheduler: Scheduler = field(default_factory=Scheduler)

    def new_scope(self) -> Scope:
        """Allocate a topic namespace unique within this context."""
        return Scope(self.ids.next_id("scope"))


_SHARED_CONTEXT: LayoutContext | None = None


def shared_layout_context() -> LayoutContext:
    """Return the lazily created process-wide context."""
    global _SHARED_CONTEXT
    if _SHARED_CONTEXT is None:
        _SHARED_CONTEXT = LayoutContext()
    return _SHARED_CONTEXT


def create_layout_context() -> LayoutContext:
    """Create an isolated context, mainly for tests and embedded hosts."""
    return LayoutContext()
