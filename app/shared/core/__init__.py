"""
Core utilities package for the Plant Memory application.
Provides the exception hierarchy, the in-process event bus and live queries.
"""

from .exceptions import (
    PlantMemoryException,
    ValidationError,
    NotFoundError,
    ConflictError,
    StorageError,
)

from .event_bus import (
    ALL_EVENTS,
    DomainEvent,
    EventBus,
    EventSubscription,
)

from .live_query import (
    LiveQuery,
    LiveSubscription,
)

__all__ = [
    # Exceptions
    "PlantMemoryException",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "StorageError",
    # Events
    "ALL_EVENTS",
    "DomainEvent",
    "EventBus",
    "EventSubscription",
    # Live queries
    "LiveQuery",
    "LiveSubscription",
]
