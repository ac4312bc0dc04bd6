# Area: Runner Tests
"""Tests for PeerRunner."""

import logging
from unittest.mock import patch

import pytest

from peer_arcade._runner_config import DEFAULTS
from peer_arcade._shared import InMemoryHub, disable_protocol_mode, is_protocol_mode_enabled
from peer_arcade._sync.enums import RoomState
from peer_arcade.errors import ConfigError
from peer_arcade.runner import PeerRunner


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    disable_protocol_mode()
    pkg_logger = logging.getLogger("peer_arcade")
    for handler in list(pkg_logger.handlers):
        handler.close()
    pkg_logger.handlers.clear()
    pkg_logger.propagate = True


@pytest.fixture
def config(tmp_path):
    return {
        **DEFAULTS,
        "game_type": "uno",
        "room_code": "abc234",
        "display_name": "Alice",
        "user_id": "user-alice",
        "db_path": str(tmp_path / "arcade.db"),
        "log_file": str(tmp_path / "arcade.log"),
        "tick_seconds": 0,
    }


class TestPeerRunnerInit:
    """Tests for runner construction."""

    def test_builds_room_from_config(self, config):
        """Test that the room code is normalized and the identity set."""
        runner = PeerRunner(config, protocol_mode=False)
        assert runner.room.room_code == "UO-ABC234"
        assert runner.room.game_type == "uno"
        assert runner.identity.display_name == "Alice"
        assert runner.identity.user_id == "user-alice"
        assert is_protocol_mode_enabled() is False

    def test_generates_room_code(self, config):
        """Test that a missing room code is generated with the game prefix."""
        config["room_code"] = None
        runner = PeerRunner(config, protocol_mode=False)
        assert runner.room.room_code.startswith("UO-")

    def test_protocol_mode(self, config):
        """Test that protocol mode is switched on by default."""
        PeerRunner(config)
        assert is_protocol_mode_enabled() is True

    def test_invalid_config_raises(self, config):
        """Test that validation runs before anything else is built."""
        config["game_type"] = "chess"
        with pytest.raises(ConfigError):
            PeerRunner(config, protocol_mode=False)


class TestPeerRunnerLoop:
    """Tests for tick and run."""

    def test_run_connects_ticks_and_leaves(self, config):
        """Test a bounded run registers the room and leaves cleanly."""
        hub = InMemoryHub()
        runner = PeerRunner(config, transport=hub, protocol_mode=False)
        runner.run(max_ticks=1)

        assert runner.registry.get_room("UO-ABC234")["host_id"] == runner.identity.session_id
        assert runner.room.connected is False
        assert hub.subscribers(runner.room.topic) == []

    def test_tick_errors_are_logged(self, config):
        """Test that a failing tick does not stop the loop."""
        runner = PeerRunner(config, protocol_mode=False)
        with patch.object(runner, "tick", side_effect=[RuntimeError("boom"), None]):
            with patch.object(runner._protocol_logger, "log_error") as log_error:
                runner.run(max_ticks=2)
        log_error.assert_called_once_with("boom")

    def test_cleanup_failure_is_warned(self, config):
        """Test that registry cleanup errors are not raised."""
        runner = PeerRunner(config, protocol_mode=False)
        with patch.object(runner.registry, "cleanup_expired", side_effect=RuntimeError("locked")):
            runner.tick()

    def test_stop(self, config):
        """Test that stop ends the loop after the current tick."""
        runner = PeerRunner(config, protocol_mode=False)
        with patch.object(runner, "tick", side_effect=runner.stop):
            runner.run()
        assert runner.room.phase == RoomState.LOBBY
