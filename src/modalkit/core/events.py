"""In-process event bus with bounded per-subscriber queues.

Publishing is synchronous so it can be driven straight from state-cell
listeners; consumption is asynchronous.

Usage example:

    bus = EventBus(default_maxsize=16)
    sub = bus.subscribe("modal.state")

    bus.publish("modal.state", pack({"visible": True}))
    bus.close()

    async def consumer():
        async for env in sub:
            state = unpack(env.payload)
            # forward to a client...

Notes
-----
- Each subscriber has its own bounded asyncio.Queue per topic.
- Backpressure policy is drop-oldest on publish if a subscriber queue is full.
- Shutdown via close() signals all subscriptions to finish by sending a sentinel.
- All calls must happen on the thread running the consumers' event loop.
- Serialization helpers (pack/unpack) use msgpack.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from time import monotonic
from typing import Any, AsyncIterator, Dict, List

import msgpack

__all__ = [
    "EventBus",
    "Subscription",
    "Envelope",
    "BusMetrics",
    "pack",
    "unpack",
]


@dataclass(slots=True)
class Envelope:
    topic: str
    ts: float
    payload: bytes


@dataclass(slots=True)
class TopicStats:
    subscribers: int
    drops: int
    publishes: int
    deliveries: int


@dataclass(slots=True)
class BusMetrics:
    topics: Dict[str, TopicStats]


_Sentinel = object()


class _TopicState:
    __slots__ = ("subscribers", "drops", "publishes", "deliveries")

    def __init__(self) -> None:
        self.subscribers: List[asyncio.Queue[Envelope | object]] = []
        # metrics
        self.drops: int = 0
        self.publishes: int = 0
        self.deliveries: int = 0


def _put_drop_oldest(
    q: asyncio.Queue[Envelope | object], item: Envelope, maxsize: int
) -> int:
    """Enqueue *item*, evicting the oldest entries beyond *maxsize*.

    Queues are created unbounded so the close sentinel always fits; the
    bound is enforced here instead. Returns the number of dropped entries.
    """
    dropped = 0
    while q.qsize() >= maxsize:
        try:
            q.get_nowait()
        except asyncio.QueueEmpty:
            break
        dropped += 1
    q.put_nowait(item)
    return dropped


class EventBus:
    """Event bus with per-subscriber bounded queues and drop-oldest backpressure.

    Parameters
    ----------
    default_maxsize:
        Queue size for new subscriptions (min 1).
    """

    def __init__(self, *, default_maxsize: int = 1024) -> None:
        self._maxsize = max(1, int(default_maxsize))
        self._topics: Dict[str, _TopicState] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _topic(self, topic: str) -> _TopicState:
        state = self._topics.get(topic)
        if state is None:
            state = _TopicState()
            self._topics[topic] = state
        return state

    def subscribe(self, topic: str) -> "Subscription":
        """Create a subscription to a topic.

        Multiple subscribers per topic are supported; each gets its own queue.
        """
        if self._closed:
            raise RuntimeError("EventBus is closed")
        queue: asyncio.Queue[Envelope | object] = asyncio.Queue()
        self._topic(topic).subscribers.append(queue)
        return Subscription(self, topic, queue)

    def publish(self, topic: str, payload: bytes) -> None:
        """Publish a message to a topic.

        Applies drop-oldest per subscriber queue if full.
        """
        if self._closed:
            raise RuntimeError("EventBus is closed")
        env = Envelope(topic=topic, ts=monotonic(), payload=payload)
        state = self._topic(topic)
        state.publishes += 1
        for q in list(state.subscribers):
            state.drops += _put_drop_oldest(q, env, self._maxsize)
            state.deliveries += 1

    def close(self) -> None:
        """Close the bus and signal every subscriber to finish."""
        if self._closed:
            return
        self._closed = True
        for state in self._topics.values():
            for q in list(state.subscribers):
                q.put_nowait(_Sentinel)

    def metrics(self) -> BusMetrics:
        """Return per-topic metrics snapshot."""
        return BusMetrics(
            topics={
                name: TopicStats(
                    subscribers=len(state.subscribers),
                    drops=state.drops,
                    publishes=state.publishes,
                    deliveries=state.deliveries,
                )
                for name, state in self._topics.items()
            }
        )

    def _remove_subscription(
        self, topic: str, queue: asyncio.Queue[Envelope | object]
    ) -> None:
        state = self._topics.get(topic)
        if not state:
            return
        try:
            state.subscribers.remove(queue)
        except ValueError:
            return


class Subscription:
    """A subscription that yields Envelopes as an async iterator."""

    def __init__(
        self,
        bus: EventBus,
        topic: str,
        queue: asyncio.Queue[Envelope | object],
    ) -> None:
        self._bus = bus
        self._topic = topic
        self._queue: asyncio.Queue[Envelope | object] = queue
        self._closed = False

    def __aiter__(self) -> AsyncIterator[Envelope]:
        return self

    async def __anext__(self) -> Envelope:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _Sentinel:
            raise StopAsyncIteration
        assert isinstance(item, Envelope)
        return item

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._bus._remove_subscription(self._topic, self._queue)
        # Wake an iterator blocked in __anext__
        self._queue.put_nowait(_Sentinel)


# Serialization helpers -----------------------------------------------------


def pack(obj: Any) -> bytes:
    """Serialize an object to bytes using msgpack."""
    return msgpack.packb(obj, use_bin_type=True)


def unpack(b: bytes) -> Any:
    """Deserialize bytes into an object using msgpack."""
    return msgpack.unpackb(b, raw=False, strict_map_key=False)
