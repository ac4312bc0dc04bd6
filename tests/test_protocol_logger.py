# Area: Shared Tests
"""Tests for protocol logger."""

import io

from peer_arcade._shared.protocol_logger import (
    EVENT_DISPLAY_NAMES,
    GREEN,
    ORANGE,
    RED,
    RESET,
    ProtocolLogger,
    get_protocol_logger,
)
from peer_arcade._sync.messages import EVENT_NAMES


class TestEventDisplayNames:
    """Tests for event → display name mapping."""

    def test_every_event_has_display_name(self):
        """Test that no broadcast event falls back to its raw name."""
        assert set(EVENT_DISPLAY_NAMES) == set(EVENT_NAMES)

    def test_aliases_share_display_name(self):
        """Test that alias spellings display identically."""
        assert EVENT_DISPLAY_NAMES["gameState"] == EVENT_DISPLAY_NAMES["game_update"]
        assert EVENT_DISPLAY_NAMES["gameAction"] == EVENT_DISPLAY_NAMES["game_action"]


class TestProtocolLogger:
    """Tests for ProtocolLogger class."""

    def test_logger_creation(self):
        """Test that logger starts as a guest with no room."""
        logger = ProtocolLogger()
        assert logger.is_host is False
        assert logger._room_code == "------"

    def test_set_room_code_none(self):
        """Test that an empty room code falls back to dashes."""
        logger = ProtocolLogger()
        logger.set_room_code("CR-ABC234")
        assert logger._room_code == "CR-ABC234"
        logger.set_room_code("")
        assert logger._room_code == "------"

    def test_role_follows_host_flag(self):
        """Test HOST / GUEST role strings."""
        logger = ProtocolLogger(is_host=True)
        assert logger._get_role() == "HOST"
        logger.set_host(False)
        assert logger._get_role() == "GUEST"

    def test_log_received_output(self):
        """Test log_received writes a formatted line."""
        stream = io.StringIO()
        logger = ProtocolLogger(stream=stream)
        logger.set_room_code("CR-ABC234")
        logger.log_received("game_update", "sess-bob")
        output = stream.getvalue()

        assert "RECEIVED" in output
        assert "sess-bob" in output
        assert "STATE-SNAPSHOT" in output
        assert "CR-ABC234" in output
        assert GREEN in output and RESET in output

    def test_log_sent_defaults_to_room(self):
        """Test that a broadcast without a target is addressed to the room."""
        stream = io.StringIO()
        logger = ProtocolLogger(is_host=True, stream=stream)
        logger.log_sent("fire")
        output = stream.getvalue()

        assert "SENT" in output
        assert "room" in output
        assert "FIRE" in output
        assert "ROLE: HOST" in output

    def test_unknown_event_shows_raw_name(self):
        """Test that unmapped events are printed as-is."""
        stream = io.StringIO()
        ProtocolLogger(stream=stream).log_received("custom_event")
        assert "custom_event" in stream.getvalue()

    def test_log_presence_output(self):
        """Test presence lines use the presence color."""
        stream = io.StringIO()
        ProtocolLogger(stream=stream).log_presence("JOIN", "sess-carol")
        output = stream.getvalue()
        assert "PRESENCE" in output
        assert "JOIN" in output and "sess-carol" in output
        assert ORANGE in output

    def test_log_error_output(self, capsys):
        """Test log_error prints to stderr."""
        logger = ProtocolLogger()
        logger.log_error("Something went wrong")
        captured = capsys.readouterr()
        output = captured.err

        assert "[ERROR]" in output
        assert "Something went wrong" in output
        assert RED in output
        assert RESET in output


class TestGetProtocolLogger:
    """Tests for get_protocol_logger singleton."""

    def test_returns_same_instance(self):
        """Test that get_protocol_logger returns singleton."""
        logger1 = get_protocol_logger()
        logger2 = get_protocol_logger()
        assert logger1 is logger2
