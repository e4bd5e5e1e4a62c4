"""
Event bus system for the Plant Memory application.
Enables decoupled communication between the journal store and its readers
through domain events published after every committed change.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union
from uuid import uuid4

logger = logging.getLogger(__name__)

# Matches every published event regardless of type or aggregate
ALL_EVENTS = "*"

EventCallback = Callable[["DomainEvent"], Union[None, Awaitable[None]]]


@dataclass
class DomainEvent:
    """
    Base class for all domain events.
    Events represent something that happened in the domain.
    """
    event_type: str
    aggregate_id: str
    aggregate_type: str
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        data = asdict(self)
        data['timestamp'] = self.timestamp.isoformat()
        return data

    def add_metadata(self, key: str, value: Any):
        """Add metadata to event."""
        self.metadata[key] = value

    def topics(self) -> List[str]:
        """Topics this event is delivered on."""
        return [self.event_type, self.aggregate_type, ALL_EVENTS]


@dataclass
class EventSubscription:
    """Event subscription configuration."""
    topic: str
    callback: EventCallback
    subscription_id: str = field(default_factory=lambda: str(uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        """Convert subscription to dictionary."""
        return {
            "subscription_id": self.subscription_id,
            "topic": self.topic,
            "callback": getattr(self.callback, "__qualname__", repr(self.callback)),
        }


class EventBus:
    """
    In-process event bus for publishing and subscribing to domain events.

    Delivery happens inline in publish(): callbacks are expected to be cheap
    (mark a view stale, schedule work) and must never block the publisher.
    A failing callback is logged and skipped; it never fails the publisher
    or starves the other subscribers.
    """

    def __init__(self):
        self.subscriptions: Dict[str, List[EventSubscription]] = {}
        self._stats = {
            "published": 0,
            "delivered": 0,
            "failed": 0,
        }

    def subscribe(self, topic: str, callback: EventCallback) -> Callable[[], None]:
        """
        Register a callback for a topic (event type, aggregate type or ALL_EVENTS).

        Returns:
            Callable that removes the subscription; safe to call twice.
        """
        subscription = EventSubscription(topic=topic, callback=callback)
        self.subscriptions.setdefault(topic, []).append(subscription)
        logger.debug(f"Subscribed {subscription.subscription_id} to {topic}")

        def unsubscribe() -> None:
            handlers = self.subscriptions.get(topic, [])
            if subscription in handlers:
                handlers.remove(subscription)
                logger.debug(f"Unsubscribed {subscription.subscription_id} from {topic}")
            if not handlers:
                self.subscriptions.pop(topic, None)

        return unsubscribe

    async def publish(self, event: DomainEvent) -> int:
        """
        Deliver an event to every matching subscriber.

        Returns:
            Number of callbacks that handled the event successfully
        """
        self._stats["published"] += 1
        delivered = 0

        # Copy so callbacks may unsubscribe while we iterate
        targets: List[EventSubscription] = []
        for topic in event.topics():
            targets.extend(self.subscriptions.get(topic, []))

        for subscription in list(targets):
            try:
                result = subscription.callback(event)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._stats["failed"] += 1
                logger.error(
                    f"Subscriber {subscription.subscription_id} failed on {event.event_type}: {e}",
                    exc_info=True
                )

        self._stats["delivered"] += delivered
        logger.debug(f"Published {event.event_type} ({event.event_id}) to {delivered} subscribers")
        return delivered

    def subscriber_count(self, topic: Optional[str] = None) -> int:
        if topic is not None:
            return len(self.subscriptions.get(topic, []))
        return sum(len(handlers) for handlers in self.subscriptions.values())

    def get_stats(self) -> Dict[str, Any]:
        """Get event bus statistics."""
        return {
            **self._stats,
            "subscriptions": {topic: len(handlers) for topic, handlers in self.subscriptions.items()},
        }
