# Area: Sync Tests
"""Tests for the room lifecycle state machine."""

from unittest.mock import patch

import pytest

from peer_arcade._sync.enums import RoomEvent, RoomState
from peer_arcade._sync.state_machine import RoomStateMachine


class TestRoomStateMachineBase:
    """Tests for basic state machine functionality."""

    def test_initial_state_is_lobby(self):
        """Test that the state machine starts in LOBBY."""
        sm = RoomStateMachine()
        assert sm.current_state == RoomState.LOBBY
        assert sm.is_playing is False

    def test_can_transition_returns_true_for_valid(self):
        """Test can_transition returns True for valid transitions."""
        sm = RoomStateMachine()
        assert sm.can_transition(RoomEvent.GAME_STARTED) is True

    def test_can_transition_returns_false_for_invalid(self):
        """Test can_transition returns False for invalid transitions."""
        sm = RoomStateMachine()
        assert sm.can_transition(RoomEvent.GAME_FINISHED) is False

    def test_transition_raises_on_invalid(self):
        """Test that invalid transition raises ValueError."""
        sm = RoomStateMachine()
        with pytest.raises(ValueError):
            sm.transition(RoomEvent.OPPONENT_LEFT)


class TestRoomStateMachineTransitions:
    """Tests for specific state transitions."""

    def test_full_happy_path(self):
        """Test lobby -> playing -> finished -> lobby."""
        sm = RoomStateMachine()
        assert sm.transition(RoomEvent.GAME_STARTED) == RoomState.PLAYING
        assert sm.is_playing
        assert sm.transition(RoomEvent.GAME_FINISHED) == RoomState.FINISHED
        assert sm.transition(RoomEvent.RESTART) == RoomState.LOBBY

    def test_opponent_left_finishes(self):
        """Test that abandonment ends the game."""
        sm = RoomStateMachine()
        sm.transition(RoomEvent.GAME_STARTED)
        assert sm.transition(RoomEvent.OPPONENT_LEFT) == RoomState.FINISHED

    @pytest.mark.parametrize("events", [
        [],
        [RoomEvent.GAME_STARTED],
        [RoomEvent.GAME_STARTED, RoomEvent.GAME_FINISHED],
    ])
    def test_restart_from_any_state(self, events):
        """Test that RESTART always returns to the lobby."""
        sm = RoomStateMachine()
        for event in events:
            sm.transition(event)
        assert sm.transition(RoomEvent.RESTART) == RoomState.LOBBY

    def test_forced_transition_logs_warning(self):
        """Test that a forced transition moves on and warns."""
        sm = RoomStateMachine()
        sm.transition(RoomEvent.GAME_STARTED)
        sm.transition(RoomEvent.GAME_FINISHED)
        with patch("peer_arcade._sync.state_machine.logger") as mock_logger:
            assert sm.transition(RoomEvent.GAME_STARTED, force=True) == RoomState.PLAYING
            assert "Forced transition" in mock_logger.warning.call_args[0][0]

    def test_reset(self):
        """Test that reset returns to the lobby without validation."""
        sm = RoomStateMachine()
        sm.transition(RoomEvent.GAME_STARTED)
        sm.reset()
        assert sm.current_state == RoomState.LOBBY
