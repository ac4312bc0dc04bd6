# Area: Matchmaking Tests
"""Tests for matchmaking pairing."""

from unittest.mock import Mock

from peer_arcade._matchmaking import MatchmakingSession, decide_pairing
from peer_arcade._matchmaking.pairing import CREATE, IDLE, WAIT
from peer_arcade._roles import matchmaking_topic
from peer_arcade._shared.channel import BroadcastEvent

from helpers import FakeClock, identity_for


class TestDecidePairing:
    """Tests for the pure tie-break."""

    def test_alone_is_idle(self):
        """Test that a lone searcher waits for company."""
        assert decide_pairing("sess-a", []).action == IDLE

    def test_self_is_filtered(self):
        """Test that the searcher never pairs with itself."""
        me = identity_for("alice")
        assert decide_pairing("sess-alice", [me]).action == IDLE

    def test_greater_id_creates(self):
        """Test that the lexicographically greater session creates the room."""
        decision = decide_pairing("sess-bob", [identity_for("alice")])
        assert decision.action == CREATE
        assert decision.opponent_id == "sess-alice"

    def test_lesser_id_waits(self):
        """Test that the other side waits for match_found."""
        decision = decide_pairing("sess-alice", [identity_for("bob")])
        assert decision.action == WAIT
        assert decision.opponent_id == "sess-bob"

    def test_first_in_roster_order(self):
        """Test that with several searchers the first other peer is chosen."""
        decision = decide_pairing("sess-zed", [identity_for("bob"), identity_for("alice")])
        assert decision.opponent_id == "sess-bob"


class TestMatchmakingSession:
    """Tests for searchers over the hub."""

    def searcher(self, hub, name, offset=0, **kwargs):
        clock = FakeClock()
        kwargs.setdefault("room_code_factory", lambda game_type: "UO-ABC234")
        search = MatchmakingSession(
            "uno", identity_for(name, offset), hub,
            pump=hub.flush, clock=clock, sleep=clock.advance, **kwargs
        )
        search.connect()
        hub.flush()
        return search

    def test_two_searchers_meet_in_one_room(self, hub):
        """Test that both searchers end up with the same room code."""
        on_match = Mock()
        alice = self.searcher(hub, "alice", 0, on_match=on_match)
        assert alice.matched is False
        bob = self.searcher(hub, "bob", 5)

        assert bob.match.created is True
        assert bob.match.opponent_id == "sess-alice"
        assert alice.match.created is False
        assert alice.match.room_code == bob.match.room_code == "UO-ABC234"
        on_match.assert_called_once_with(alice.match)

    def test_matched_searchers_leave_topic(self, hub):
        """Test that nobody stays on the matchmaking topic after pairing."""
        self.searcher(hub, "alice", 0)
        self.searcher(hub, "bob", 5)
        hub.flush()
        assert hub.subscribers(matchmaking_topic("uno")) == []

    def test_match_found_for_someone_else_ignored(self, hub):
        """Test that a searcher only follows assignments addressed to it."""
        alice = self.searcher(hub, "alice", 0)
        alice._on_event(BroadcastEvent("match_found", {
            "targetSessionId": "sess-carol", "roomId": "UO-ZZZ999",
        }))
        assert alice.matched is False

    def test_cancel(self, hub):
        """Test that cancelling leaves the topic unmatched."""
        alice = self.searcher(hub, "alice", 0)
        alice.cancel()
        hub.flush()
        assert hub.subscribers(matchmaking_topic("uno")) == []
        assert alice.matched is False
