# Area: Runner Tests
"""Tests for the command-line interface."""

import json
import logging

import pytest

from peer_arcade._shared import disable_protocol_mode
from peer_arcade.cli import main, parse_args


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    yield
    disable_protocol_mode()
    pkg_logger = logging.getLogger("peer_arcade")
    for handler in list(pkg_logger.handlers):
        handler.close()
    pkg_logger.handlers.clear()
    pkg_logger.propagate = True


class TestParseArgs:
    """Tests for argument parsing."""

    def test_command_required(self):
        """Test that a subcommand must be given."""
        with pytest.raises(SystemExit):
            parse_args([])

    def test_unknown_game_rejected(self):
        """Test that --game is limited to the known games."""
        with pytest.raises(SystemExit):
            parse_args(["demo", "--game", "chess"])

    def test_demo_defaults(self):
        """Test demo argument defaults."""
        args = parse_args(["demo"])
        assert args.game == "caro"
        assert args.seed == 1
        assert args.db is None


class TestCommands:
    """Tests for each subcommand."""

    def test_room_code(self, capsys):
        """Test that a prefixed code is printed."""
        assert main(["room-code", "--game", "uno"]) == 0
        assert capsys.readouterr().out.startswith("UO-")

    def test_room_code_share_link(self, capsys):
        """Test that the share link is printed under the base URL."""
        main(["room-code", "--game", "memory", "--base-url", "https://arcade.example/"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[1] == f"https://arcade.example/game/memory/{lines[0]}"

    def test_demo(self, capsys, tmp_path):
        """Test that the demo prints the log and the verdict."""
        assert main(["demo", "--game", "caro", "--db", str(tmp_path / "h.db")]) == 0
        out = capsys.readouterr().out
        assert "Alice wins (five_in_a_row, 9 moves)" in out

    def test_matchmaking_demo(self, capsys):
        """Test that both searchers report the same room."""
        assert main(["matchmaking-demo", "--game", "uno"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert sorted(line.split()[0] for line in lines) == ["created", "joined"]

    def test_run(self, tmp_path):
        """Test a bounded run from a config file."""
        config = tmp_path / "config.json"
        config.write_text(json.dumps({
            "game_type": "caro",
            "db_path": str(tmp_path / "arcade.db"),
            "log_file": str(tmp_path / "arcade.log"),
            "tick_seconds": 0,
        }), encoding="utf-8")
        assert main(["run", "--config", str(config), "--ticks", "1"]) == 0

    def test_run_with_bad_config(self, capsys, tmp_path):
        """Test that configuration errors exit with status 1."""
        config = tmp_path / "config.json"
        config.write_text(json.dumps({
            "game_type": "chess",
            "log_file": None,
        }), encoding="utf-8")
        assert main(["run", "--config", str(config)]) == 1
        assert "INVALID_CONFIG" in capsys.readouterr().err
