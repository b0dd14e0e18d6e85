"""Scoped event bus primitives for layout modules."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from gridboard.api.events import Scope, Subscription

TEvent = TypeVar("TEvent")
EventHandler = Callable[[Any], None]


class EventTopic(Generic[TEvent]):
    """Ordered subscriber list for one (scope, event type) channel."""

    def __init__(self, scope: Scope, event_type: type[TEvent]) -> None:
        self.scope = scope
        self.event_type = event_type
        self._handlers: list[Callable[[TEvent], None]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def on(self, callback: Callable[[TEvent], None]) -> None:
        self._handlers.append(callback)

    def off(self, callback: Callable[[TEvent], None]) -> None:
        try:
            self._handlers.remove(callback)
        except ValueError:
            return

    def trigger(self, payload: TEvent) -> int:
        """Invoke handlers synchronously; handlers added during dispatch wait for the next trigger."""
        handlers = tuple(self._handlers)
        for handler in handlers:
            handler(payload)
        return len(handlers)


class ScopedEventBus:
    """Process-wide pub/sub whose topics are partitioned by scope."""

    def __init__(self) -> None:
        self._next_id = 1
        self._topics: dict[tuple[Scope, type[object]], EventTopic[Any]] = {}
        self._subscriptions: dict[int, EventHandler] = {}
        self._metrics_collector: object | None = None

    def set_metrics_collector(self, metrics_collector: object | None) -> None:
        """Attach optional metrics collector used for publish counts."""
        self._metrics_collector = metrics_collector

    def topic(self, scope: Scope, event_type: type[TEvent]) -> EventTopic[TEvent]:
        """Return the topic for scope and event type, creating it on first use."""
        key = (scope, event_type)
        topic = self._topics.get(key)
        if topic is None:
            topic = EventTopic(scope, event_type)
            self._topics[key] = topic
        return topic

    def subscribe(
        self,
        scope: Scope,
        event_type: type[TEvent],
        handler: Callable[[TEvent], None],
    ) -> Subscription:
        """Subscribe handler for an event type within a scope."""
        sub_id = self._next_id
        self._next_id += 1
        self._subscriptions[sub_id] = handler
        self.topic(scope, event_type).on(handler)
        return Subscription(id=sub_id, scope=scope, event_type=event_type)

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription if present."""
        handler = self._subscriptions.pop(subscription.id, None)
        if handler is None:
            return
        self.topic(subscription.scope, subscription.event_type).off(handler)

    def publish(self, scope: Scope, event: object) -> int:
        """Publish one event to its exact-type topic and return number of invoked handlers."""
        metrics = self._metrics_collector
        if metrics is not None and hasattr(metrics, "increment_event_publish_count"):
            metrics.increment_event_publish_count(1)
        topic = self._topics.get((scope, type(event)))
        if topic is None:
            return 0
        return topic.trigger(event)


EventBus = ScopedEventBus
