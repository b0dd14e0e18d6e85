"""Public event bus API contracts and layout event payloads."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, TypeVar

from gridboard.api.geometry import BlockRect

TEvent = TypeVar("TEvent")


@dataclass(frozen=True, slots=True)
class Subscription:
    """Opaque subscription token."""

    id: int
    scope: "Scope"
    event_type: type[object]


@dataclass(frozen=True, slots=True)
class Scope:
    """Opaque per-instance topic namespace."""

    id: str


class Topic(Protocol[TEvent]):
    """One named channel inside a scope."""

    def trigger(self, payload: TEvent) -> int:
        """Deliver payload to every subscriber, in subscription order."""

    def on(self, callback: Callable[[TEvent], None]) -> None:
        """Append a subscriber."""

    def off(self, callback: Callable[[TEvent], None]) -> None:
        """Remove a subscriber; unknown callbacks are ignored."""


class EventBus(Protocol):
    """Public in-process pub/sub contract."""

    def topic(self, scope: Scope, event_type: type[TEvent]) -> Topic[TEvent]:
        """Return the cached topic for scope and event type."""

    def subscribe(
        self,
        scope: Scope,
        event_type: type[TEvent],
        handler: Callable[[TEvent], None],
    ) -> Subscription:
        """Subscribe handler for event type within scope."""

    def unsubscribe(self, subscription: Subscription) -> None:
        """Unsubscribe token."""

    def publish(self, scope: Scope, event: object) -> int:
        """Publish event and return invocation count."""


class GestureKind(StrEnum):
    """Pointer gestures a block can be in."""

    MOVE = "move"
    RESIZE = "resize"


PositionalRecord = Mapping[str, "int | str"]


@dataclass(frozen=True, slots=True)
class BlockRequested:
    """Grid selection finished and produced a candidate rectangle."""

    rect: BlockRect


@dataclass(frozen=True, slots=True)
class BlockCommitted:
    """A block committed a new rectangle at the end of a gesture."""

    block_id: str
    rect: BlockRect


@dataclass(frozen=True, slots=True)
class BlockRemovalRequested:
    """A block asked its owner to remove it."""

    block_id: str


@dataclass(frozen=True, slots=True)
class GestureStarted:
    block_id: str
    kind: GestureKind


@dataclass(frozen=True, slots=True)
class GestureEnded:
    block_id: str
    kind: GestureKind


@dataclass(frozen=True, slots=True)
class BlockLifecycleEvent:
    """Outward notification carrying the block positional record."""

    block_id: str
    record: PositionalRecord


@dataclass(frozen=True, slots=True)
class BlockCreated(BlockLifecycleEvent):
    pass


@dataclass(frozen=True, slots=True)
class BlockChanged(BlockLifecycleEvent):
    pass


@dataclass(frozen=True, slots=True)
class BlockRemoved(BlockLifecycleEvent):
    pass


@dataclass(frozen=True, slots=True)
class EditorToggled:
    """Coordinator switched between design and display mode."""

    editable: bool


def create_event_bus() -> EventBus:
    """Create default event bus implementation."""
    from gridboard.runtime.events import ScopedEventBus

    return ScopedEventBus()


__all__ = [
    "BlockChanged",
    "BlockCommitted",
    "BlockCreated",
    "BlockLifecycleEvent",
    "BlockRemovalRequested",
    "BlockRemoved",
    "BlockRequested",
    "EditorToggled",
    "EventBus",
    "GestureEnded",
    "GestureKind",
    "GestureStarted",
    "PositionalRecord",
    "Scope",
    "Subscription",
    "Topic",
    "create_event_bus",
]
