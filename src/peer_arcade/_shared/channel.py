# Area: Shared
"""
peer_arcade._shared.channel — Presence/broadcast channel interface
===================================================================

The transport is an external collaborator: best-effort pub/sub per topic
with join/leave/sync presence events and no delivery or ordering
guarantee. This module defines the interface the room code depends on
and ``InMemoryHub``, an in-process implementation used by tests, the
demo CLI and local play.

InMemoryHub queues every delivery and only hands events to subscribers
on ``flush()``. A handler that sends while handling therefore never
re-enters another handler, which mirrors a real network.
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional, Protocol, Tuple, Union

from ..errors import ConnectionTimeoutError

logger = logging.getLogger("peer_arcade.channel")

SUBSCRIBED = "SUBSCRIBED"
CLOSED = "CLOSED"
OK = "ok"


@dataclass(frozen=True)
class StatusEvent:
    status: str


@dataclass(frozen=True)
class PresenceSyncEvent:
    """Full presence snapshot: presence key -> list of tracked payloads."""
    state: Dict[str, List[Dict[str, Any]]]


@dataclass(frozen=True)
class PresenceJoinEvent:
    key: str
    new_presences: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class PresenceLeaveEvent:
    key: str
    left_presences: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class BroadcastEvent:
    event: str
    payload: Dict[str, Any]


ChannelEvent = Union[
    StatusEvent, PresenceSyncEvent, PresenceJoinEvent, PresenceLeaveEvent, BroadcastEvent
]
EventCallback = Callable[[ChannelEvent], None]


class Channel(Protocol):
    """One subscription to a topic."""

    topic: str
    presence_key: str

    def subscribe(self, callback: EventCallback) -> None:
        ...

    def track(self, payload: Dict[str, Any]) -> str:
        ...

    def send(self, envelope: Dict[str, Any]) -> str:
        ...

    def unsubscribe(self) -> None:
        ...


class Transport(Protocol):
    """Factory for channels."""

    def channel(self, topic: str, presence_key: str) -> Channel:
        ...


DropFilter = Callable[[str, str, BroadcastEvent], bool]


class InMemoryHub:
    """
    In-process presence/broadcast hub.

    Usage:
        hub = InMemoryHub()
        ch = hub.channel("room:caro:ABC234", presence_key="sess-1")
        ch.subscribe(callback)
        ch.track({...})
        hub.flush()

    Attributes:
        ack_subscriptions: If False, SUBSCRIBED is never delivered
        drop_filter: ``(topic, recipient_key, event) -> bool``; True drops
        sent: Every accepted broadcast as ``(topic, sender_key, envelope)``
    """

    def __init__(self, ack_subscriptions: bool = True):
        self.ack_subscriptions = ack_subscriptions
        self.drop_filter: Optional[DropFilter] = None
        self.sent: List[Tuple[str, str, Dict[str, Any]]] = []
        self._subscribers: Dict[str, List["HubChannel"]] = {}
        self._presence: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
        self._queue: Deque[Tuple["HubChannel", ChannelEvent]] = deque()

    def channel(self, topic: str, presence_key: str) -> "HubChannel":
        return HubChannel(self, topic, presence_key)

    def presence_state(self, topic: str) -> Dict[str, List[Dict[str, Any]]]:
        return copy.deepcopy(self._presence.get(topic, {}))

    def subscribers(self, topic: str) -> List["HubChannel"]:
        return list(self._subscribers.get(topic, []))

    def pending(self) -> int:
        return len(self._queue)

    def flush(self, max_deliveries: int = 100_000) -> int:
        """Deliver queued events until the hub is idle. Returns the count."""
        delivered = 0
        while self._queue:
            if delivered >= max_deliveries:
                raise RuntimeError(f"hub did not settle after {max_deliveries} deliveries")
            channel, event = self._queue.popleft()
            if channel.callback is not None and channel.subscribed:
                channel.callback(event)
            delivered += 1
        return delivered

    # ── used by HubChannel ───────────────────────────────────

    def _enqueue(self, channel: "HubChannel", event: ChannelEvent) -> None:
        self._queue.append((channel, event))

    def _add_subscriber(self, channel: "HubChannel") -> None:
        self._subscribers.setdefault(channel.topic, []).append(channel)
        if self.ack_subscriptions:
            self._enqueue(channel, StatusEvent(SUBSCRIBED))

    def _remove_subscriber(self, channel: "HubChannel") -> None:
        subscribers = self._subscribers.get(channel.topic, [])
        if channel in subscribers:
            subscribers.remove(channel)
        self._enqueue(channel, StatusEvent(CLOSED))
        presences = self._presence.get(channel.topic, {})
        left = presences.pop(channel.presence_key, None)
        if left is not None:
            self._announce(channel.topic, PresenceLeaveEvent(channel.presence_key, left))

    def _track(self, channel: "HubChannel", payload: Dict[str, Any]) -> None:
        presences = self._presence.setdefault(channel.topic, {})
        is_new = channel.presence_key not in presences
        presences[channel.presence_key] = [copy.deepcopy(payload)]
        if is_new:
            self._announce(channel.topic, PresenceJoinEvent(channel.presence_key, [copy.deepcopy(payload)]))
        else:
            self._announce(channel.topic, None)

    def _announce(self, topic: str, event: Optional[ChannelEvent]) -> None:
        for subscriber in self._subscribers.get(topic, []):
            if event is not None:
                self._enqueue(subscriber, event)
            self._enqueue(subscriber, PresenceSyncEvent(self.presence_state(topic)))

    def _broadcast(self, channel: "HubChannel", envelope: Dict[str, Any]) -> None:
        self.sent.append((channel.topic, channel.presence_key, copy.deepcopy(envelope)))
        event = BroadcastEvent(
            event=envelope.get("event", ""),
            payload=copy.deepcopy(envelope.get("payload", {})),
        )
        for subscriber in self._subscribers.get(channel.topic, []):
            if subscriber is channel:
                continue
            if self.drop_filter and self.drop_filter(channel.topic, subscriber.presence_key, event):
                logger.debug("Dropped %s for %s", event.event, subscriber.presence_key)
                continue
            self._enqueue(subscriber, event)


class HubChannel:
    """Channel handed out by InMemoryHub."""

    def __init__(self, hub: InMemoryHub, topic: str, presence_key: str):
        self.hub = hub
        self.topic = topic
        self.presence_key = presence_key
        self.callback: Optional[EventCallback] = None
        self.subscribed = False

    def subscribe(self, callback: EventCallback) -> None:
        self.callback = callback
        self.subscribed = True
        self.hub._add_subscriber(self)

    def track(self, payload: Dict[str, Any]) -> str:
        if not self.subscribed:
            return "not_subscribed"
        self.hub._track(self, payload)
        return OK

    def send(self, envelope: Dict[str, Any]) -> str:
        if not self.subscribed:
            return "not_subscribed"
        self.hub._broadcast(self, envelope)
        return OK

    def unsubscribe(self) -> None:
        if not self.subscribed:
            return
        self.hub._remove_subscriber(self)
        self.subscribed = False


def await_subscription(
    channel: Channel,
    is_subscribed: Callable[[], bool],
    timeout: float,
    *,
    pump: Optional[Callable[[], Any]] = None,
    clock: Callable[[], float],
    sleep: Callable[[float], None],
    poll_seconds: float = 0.01,
) -> None:
    """
    Block until ``is_subscribed()`` or the timeout elapses.

    ``pump`` is called on every poll so in-process transports can
    deliver queued events (``InMemoryHub.flush``).

    Raises:
        ConnectionTimeoutError: If the subscription is not confirmed in
            time; the channel is unsubscribed first
    """
    deadline = clock() + timeout
    while True:
        if pump:
            pump()
        if is_subscribed():
            return
        if clock() >= deadline:
            channel.unsubscribe()
            error = ConnectionTimeoutError(channel.topic, timeout)
            logger.error(str(error))
            raise error
        sleep(poll_seconds)
