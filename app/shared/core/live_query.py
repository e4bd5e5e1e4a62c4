# 📄 File: app/shared/core/live_query.py
# 🧭 Purpose (Layman Explanation):
# Lets the garden screen and widgets "watch" the journal: each watcher gets the current
# list straight away and a fresh full list whenever a memory is saved or deleted.
# 🧪 Purpose (Technical Summary):
# Live (reactive) queries built on the event bus. A LiveQuery pairs an async fetch
# with the topics whose events invalidate it; each subscription is an async iterator
# that re-runs the fetch after changes, conflating bursts into one latest snapshot.
# 🔗 Dependencies:
# asyncio, app.shared.core.event_bus
# 🔄 Connected Modules / Calls From:
# Journal repository (observe_* methods), journal service (composed observers),
# garden overview (combined live view)

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, Sequence, Tuple, TypeVar

from app.shared.core.event_bus import DomainEvent, EventBus

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class LiveQuery(Generic[T]):
    """
    A re-runnable query whose result set is pushed to subscribers on change.

    Emissions are always full results (never diffs). A subscriber that is
    slower than the writers sees the latest result, not every intermediate one.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        event_bus: EventBus,
        topics: Sequence[str],
        name: str = "live_query",
    ):
        if not topics:
            raise ValueError("A live query needs at least one topic")
        self._fetch = fetch
        self.event_bus = event_bus
        self.topics: Tuple[str, ...] = tuple(dict.fromkeys(topics))
        self.name = name

    async def snapshot(self) -> T:
        """Run the query once (point-in-time read)."""
        return await self._fetch()

    def subscribe(self) -> "LiveSubscription[T]":
        """Attach a new independent subscriber."""
        return LiveSubscription(self)

    def map(self, transform: Callable[[T], R], name: Optional[str] = None) -> "LiveQuery[R]":
        """Derive a live query whose emissions are transform(result)."""

        async def fetch() -> R:
            return transform(await self._fetch())

        return LiveQuery(fetch, self.event_bus, self.topics, name or f"{self.name}.map")

    @staticmethod
    def combine(
        queries: Sequence["LiveQuery[Any]"],
        transform: Callable[..., R],
        name: str = "combined",
    ) -> "LiveQuery[R]":
        """
        Derive a live query from several others.

        The combined query re-runs every source and passes their results,
        in order, to transform. All sources must share one event bus.
        """
        if not queries:
            raise ValueError("combine() needs at least one query")
        bus = queries[0].event_bus
        if any(query.event_bus is not bus for query in queries):
            raise ValueError("Combined live queries must share one event bus")

        async def fetch() -> R:
            results = [await query.snapshot() for query in queries]
            return transform(*results)

        topics = [topic for query in queries for topic in query.topics]
        return LiveQuery(fetch, bus, topics, name)

    def __repr__(self) -> str:
        return f"<LiveQuery(name={self.name}, topics={self.topics})>"


class LiveSubscription(Generic[T]):
    """
    One consumer's view of a LiveQuery.

    Iterate with ``async for``; the first item is the current result, later
    items follow committed changes. close() (or leaving ``async with``) stops
    delivery and detaches from the bus.
    """

    def __init__(self, query: LiveQuery[T]):
        self._query = query
        self._stale = asyncio.Event()
        self._stale.set()
        self._closed = False
        self.emissions = 0
        self._unsubscribers = [
            query.event_bus.subscribe(topic, self._on_change) for topic in query.topics
        ]
        logger.debug(f"Live subscription opened on {query.name}")

    def _on_change(self, event: DomainEvent) -> None:
        if not self._closed:
            self._stale.set()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_pending_change(self) -> bool:
        """True when the next iteration will produce a new emission without waiting."""
        return not self._closed and self._stale.is_set()

    def __aiter__(self) -> "LiveSubscription[T]":
        return self

    async def __anext__(self) -> T:
        if self._closed:
            raise StopAsyncIteration

        await self._stale.wait()
        if self._closed:
            raise StopAsyncIteration

        # Cleared before fetching so a change during the fetch triggers another emission
        self._stale.clear()
        try:
            result = await self._query.snapshot()
        except Exception:
            self._stale.set()
            raise

        self.emissions += 1
        return result

    async def next(self, timeout: Optional[float] = None) -> T:
        """Wait for the next emission, optionally bounded by a timeout in seconds."""
        if timeout is None:
            return await self.__anext__()
        return await asyncio.wait_for(self.__anext__(), timeout=timeout)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        # Wake a consumer blocked in __anext__ so it can finish
        self._stale.set()
        logger.debug(f"Live subscription closed on {self._query.name}")

    async def __aenter__(self) -> "LiveSubscription[T]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
