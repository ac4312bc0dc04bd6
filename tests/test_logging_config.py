# Area: Shared Tests
"""Tests for logging setup and protocol mode."""

import json
import logging

import pytest

from peer_arcade._shared import (
    disable_protocol_mode,
    enable_protocol_mode,
    is_protocol_mode_enabled,
    log_error,
    setup_logging,
)
from peer_arcade._shared.logging_config import JSONFormatter, ProtocolFilter
from peer_arcade.errors import GameStartError


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    disable_protocol_mode()
    pkg_logger = logging.getLogger("peer_arcade")
    for handler in list(pkg_logger.handlers):
        handler.close()
    pkg_logger.handlers.clear()
    pkg_logger.propagate = True


def record(message="hello", **extra):
    rec = logging.LogRecord("peer_arcade.sync.room", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(rec, key, value)
    return rec


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_terminal_and_file_handlers(self, tmp_path):
        """Test that a log file path adds a JSON file handler."""
        setup_logging(str(tmp_path / "logs" / "peer.log"))
        pkg_logger = logging.getLogger("peer_arcade")
        assert len(pkg_logger.handlers) == 2
        assert isinstance(pkg_logger.handlers[1].formatter, JSONFormatter)
        assert pkg_logger.propagate is False

    def test_no_file(self):
        """Test that None disables file logging."""
        setup_logging(None)
        assert len(logging.getLogger("peer_arcade").handlers) == 1

    def test_file_lines_are_json(self, tmp_path):
        """Test that file records are one JSON object per line."""
        path = tmp_path / "peer.log"
        setup_logging(str(path))
        logging.getLogger("peer_arcade.sync.room").info("Room ready")
        for handler in logging.getLogger("peer_arcade").handlers:
            handler.flush()
        entry = json.loads(path.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["message"] == "Room ready"
        assert entry["logger"] == "peer_arcade.sync.room"
        assert entry["level"] == "INFO"


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_context_fields_included(self):
        """Test that room context attached via extra is kept."""
        data = json.loads(JSONFormatter().format(record(room_code="CR-ABC234", event="fire")))
        assert data["room_code"] == "CR-ABC234"
        assert data["event"] == "fire"
        assert "session_id" not in data


class TestProtocolMode:
    """Tests for protocol mode switching."""

    def test_filter_follows_mode(self):
        """Test that terminal records are hidden only in protocol mode."""
        log_filter = ProtocolFilter()
        assert log_filter.filter(record()) is True
        enable_protocol_mode()
        assert is_protocol_mode_enabled() is True
        assert log_filter.filter(record()) is False
        disable_protocol_mode()
        assert log_filter.filter(record()) is True


class TestLogError:
    """Tests for log_error."""

    def test_prints_error_block(self, capsys):
        """Test that the structured block goes to stderr."""
        log_error(GameStartError("need at least 2 players", "CR-ABC234"))
        err = capsys.readouterr().err
        assert "GAME_START_REFUSED" in err
        assert "CR-ABC234" in err
