# Area: Sync Tests
"""Tests for broadcast envelopes and parse_envelope."""

import pytest

from peer_arcade._engines import Move, PlayerSeat
from peer_arcade._sync.messages import (
    ChatEnvelope,
    FireResultEnvelope,
    GameActionEnvelope,
    GameStartEnvelope,
    GameStartPayload,
    GameUpdateEnvelope,
    MatchFoundEnvelope,
    MatchFoundPayload,
    RestartEnvelope,
    SyncStateEnvelope,
    new_message_id,
    parse_envelope,
)
from peer_arcade.errors import ProtocolError


class TestWireFormat:
    """Tests for serializing envelopes."""

    def test_game_start_wire_is_camel_case(self):
        """Test the broadcast wrapper and camelCase payload keys."""
        envelope = GameStartEnvelope(payload=GameStartPayload(
            game_type="caro",
            players=[PlayerSeat(id="sess-a", display_name="Alice")],
            host_id="sess-a",
            seed=7,
        ))
        wire = envelope.to_wire()
        assert wire["type"] == "broadcast"
        assert wire["event"] == "game_start"
        assert wire["payload"]["gameType"] == "caro"
        assert wire["payload"]["hostId"] == "sess-a"
        assert wire["payload"]["players"] == [{"id": "sess-a", "displayName": "Alice"}]

    def test_restart_payload_defaults_to_empty(self):
        """Test that restart carries an empty payload."""
        assert RestartEnvelope().to_wire()["payload"] == {}

    def test_match_found_wire(self):
        """Test the matchmaking assignment field names."""
        wire = MatchFoundEnvelope(payload=MatchFoundPayload(
            target_session_id="sess-b", room_id="CR-ABC234"
        )).to_wire()
        assert wire["payload"] == {"targetSessionId": "sess-b", "roomId": "CR-ABC234"}

    def test_message_ids_unique(self):
        """Test that chat/emoji ids do not collide."""
        assert new_message_id() != new_message_id()


class TestParseEnvelope:
    """Tests for parse_envelope."""

    def test_parses_each_event_to_its_type(self):
        """Test discrimination on the event name."""
        chat = parse_envelope({"event": "chat", "payload": {
            "id": "m1", "senderId": "sess-a", "senderName": "A", "content": "hi", "timestamp": 1.0,
        }})
        assert isinstance(chat, ChatEnvelope)
        assert chat.payload.sender_id == "sess-a"

        verdict = parse_envelope({"event": "fire_result", "payload": {
            "x": 1, "y": 2, "result": "hit", "gameOver": False, "actorId": "sess-b",
        }})
        assert isinstance(verdict, FireResultEnvelope)

    def test_round_trip_through_wire(self):
        """Test that a sent envelope parses back to an equal envelope."""
        envelope = GameUpdateEnvelope(payload={"gameType": "caro", "state": {"phase": "playing"}})
        assert parse_envelope(envelope.to_wire()) == envelope

    @pytest.mark.parametrize("event", ["gameAction", "game_action"])
    def test_action_aliases(self, event):
        """Test that both action event spellings carry a Move."""
        envelope = parse_envelope({"event": event, "payload": {
            "type": "play", "actorId": "sess-b", "payload": {"card_id": 3},
        }})
        assert isinstance(envelope, GameActionEnvelope)
        assert isinstance(envelope.payload, Move)
        assert envelope.event == event

    def test_state_alias(self):
        """Test that gameState parses as a snapshot."""
        envelope = parse_envelope({"event": "gameState", "payload": {"gameType": "uno", "state": {}}})
        assert isinstance(envelope, GameUpdateEnvelope)

    def test_sync_state_target_optional(self):
        """Test that sync_state without targetId is accepted."""
        envelope = parse_envelope({"event": "sync_state", "payload": {
            "gameType": "caro", "state": {}, "phase": "playing", "responderId": "sess-a",
        }})
        assert isinstance(envelope, SyncStateEnvelope)
        assert envelope.payload.target_id is None

    def test_unknown_event_raises(self):
        """Test that events outside the closed set are rejected."""
        with pytest.raises(ProtocolError) as exc_info:
            parse_envelope({"event": "teleport", "payload": {}})
        assert exc_info.value.event == "teleport"

    def test_missing_event_raises(self):
        """Test that an envelope without an event is rejected."""
        with pytest.raises(ProtocolError):
            parse_envelope({"payload": {}})

    def test_malformed_payload_raises_with_details(self):
        """Test that validation problems are listed."""
        with pytest.raises(ProtocolError) as exc_info:
            parse_envelope({"event": "fire", "payload": {"x": "north"}})
        assert exc_info.value.errors
        assert "PROTOCOL_VIOLATION" in exc_info.value.format_error_log()

    def test_bad_verdict_rejected(self):
        """Test that fire_result only accepts hit or miss."""
        with pytest.raises(ProtocolError):
            parse_envelope({"event": "fire_result", "payload": {
                "x": 1, "y": 1, "result": "sunk", "actorId": "sess-b",
            }})

    def test_chat_length_limit(self):
        """Test that empty and over-long chat lines are rejected."""
        base = {"id": "m", "senderId": "s", "timestamp": 0}
        with pytest.raises(ProtocolError):
            parse_envelope({"event": "chat", "payload": {**base, "content": ""}})
        with pytest.raises(ProtocolError):
            parse_envelope({"event": "chat", "payload": {**base, "content": "x" * 501}})
