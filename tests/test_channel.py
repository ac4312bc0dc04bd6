# Area: Shared Tests
"""Tests for the in-process hub and subscription waiting."""

import pytest

from peer_arcade._shared import InMemoryHub
from peer_arcade._shared.channel import (
    CLOSED,
    OK,
    SUBSCRIBED,
    BroadcastEvent,
    PresenceJoinEvent,
    PresenceLeaveEvent,
    PresenceSyncEvent,
    StatusEvent,
    await_subscription,
)
from peer_arcade.errors import ConnectionTimeoutError

from helpers import FakeClock

TOPIC = "room:caro:TEST23"


def subscribe(hub, key):
    events = []
    channel = hub.channel(TOPIC, key)
    channel.subscribe(events.append)
    return channel, events


class TestInMemoryHub:
    """Tests for InMemoryHub delivery."""

    def test_subscribe_acknowledged_on_flush(self):
        """Test that SUBSCRIBED arrives only when the hub is flushed."""
        hub = InMemoryHub()
        _, events = subscribe(hub, "a")
        assert events == []
        hub.flush()
        assert events == [StatusEvent(SUBSCRIBED)]

    def test_track_announces_join_and_sync(self):
        """Test that a first track sends join then sync to everyone."""
        hub = InMemoryHub()
        a, a_events = subscribe(hub, "a")
        b, b_events = subscribe(hub, "b")
        hub.flush()
        assert a.track({"sessionId": "a"}) == OK
        hub.flush()
        assert isinstance(b_events[-2], PresenceJoinEvent)
        assert isinstance(b_events[-1], PresenceSyncEvent)
        assert b_events[-1].state == {"a": [{"sessionId": "a"}]}

    def test_retrack_sends_only_sync(self):
        """Test that re-tracking updates presence without a new join."""
        hub = InMemoryHub()
        a, a_events = subscribe(hub, "a")
        hub.flush()
        a.track({"sessionId": "a", "isReady": False})
        hub.flush()
        a_events.clear()
        a.track({"sessionId": "a", "isReady": True})
        hub.flush()
        assert [type(e) for e in a_events] == [PresenceSyncEvent]
        assert hub.presence_state(TOPIC)["a"][0]["isReady"] is True

    def test_broadcast_has_no_self_echo(self):
        """Test that the sender does not receive its own broadcast."""
        hub = InMemoryHub()
        a, a_events = subscribe(hub, "a")
        b, b_events = subscribe(hub, "b")
        hub.flush()
        a.send({"type": "broadcast", "event": "chat", "payload": {"x": 1}})
        hub.flush()
        assert BroadcastEvent("chat", {"x": 1}) in b_events
        assert not any(isinstance(e, BroadcastEvent) for e in a_events)
        assert hub.sent[0][1] == "a"

    def test_drop_filter_drops_per_recipient(self):
        """Test that the drop filter simulates lossy delivery."""
        hub = InMemoryHub()
        a, _ = subscribe(hub, "a")
        b, b_events = subscribe(hub, "b")
        c, c_events = subscribe(hub, "c")
        hub.flush()
        hub.drop_filter = lambda topic, key, event: key == "b"
        a.send({"event": "log", "payload": {"message": "hi"}})
        hub.flush()
        assert not any(isinstance(e, BroadcastEvent) for e in b_events)
        assert any(isinstance(e, BroadcastEvent) for e in c_events)

    def test_unsubscribe_announces_leave(self):
        """Test that leaving removes presence and tells the others."""
        hub = InMemoryHub()
        a, _ = subscribe(hub, "a")
        b, b_events = subscribe(hub, "b")
        hub.flush()
        a.track({"sessionId": "a"})
        hub.flush()
        a.unsubscribe()
        hub.flush()
        assert isinstance(b_events[-2], PresenceLeaveEvent)
        assert b_events[-2].left_presences == [{"sessionId": "a"}]
        assert b_events[-1].state == {}
        assert hub.subscribers(TOPIC) == [b]

    def test_send_after_unsubscribe_refused(self):
        """Test that a closed channel refuses sends and tracks."""
        hub = InMemoryHub()
        a, _ = subscribe(hub, "a")
        hub.flush()
        a.unsubscribe()
        assert a.send({"event": "log", "payload": {}}) == "not_subscribed"
        assert a.track({}) == "not_subscribed"

    def test_flush_guards_against_runaway_delivery(self):
        """Test that a feedback loop is cut off."""
        hub = InMemoryHub()
        a = hub.channel(TOPIC, "a")
        b = hub.channel(TOPIC, "b")
        a.subscribe(lambda e: isinstance(e, BroadcastEvent) and a.send({"event": "log", "payload": {}}))
        b.subscribe(lambda e: isinstance(e, BroadcastEvent) and b.send({"event": "log", "payload": {}}))
        hub.flush()
        a.send({"event": "log", "payload": {}})
        with pytest.raises(RuntimeError):
            hub.flush(max_deliveries=50)


class TestAwaitSubscription:
    """Tests for await_subscription."""

    def test_returns_once_subscribed(self):
        """Test that the pump delivers SUBSCRIBED and the wait ends."""
        hub = InMemoryHub()
        state = {"subscribed": False}
        channel = hub.channel(TOPIC, "a")
        channel.subscribe(lambda e: state.update(subscribed=e == StatusEvent(SUBSCRIBED)))
        clock = FakeClock()
        await_subscription(
            channel, lambda: state["subscribed"], 1.0,
            pump=hub.flush, clock=clock, sleep=clock.advance,
        )
        assert state["subscribed"] is True

    def test_timeout_unsubscribes_and_raises(self):
        """Test that an unacknowledged subscription times out cleanly."""
        hub = InMemoryHub(ack_subscriptions=False)
        channel = hub.channel(TOPIC, "a")
        channel.subscribe(lambda e: None)
        clock = FakeClock()
        with pytest.raises(ConnectionTimeoutError) as exc_info:
            await_subscription(
                channel, lambda: False, 2.0,
                pump=hub.flush, clock=clock, sleep=clock.advance,
            )
        assert exc_info.value.timeout_seconds == 2.0
        assert channel.subscribed is False
        assert hub.subscribers(TOPIC) == []

    def test_closed_status_is_not_subscribed(self):
        """Test that CLOSED is a distinct status."""
        assert StatusEvent(CLOSED) != StatusEvent(SUBSCRIBED)
