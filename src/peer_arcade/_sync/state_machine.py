# Area: Sync
"""
peer_arcade._sync.state_machine — Room lifecycle state machine
==============================================================

Tracks whether a room is in the lobby, playing, or finished. Snapshots
may arrive out of order, so handlers may force a transition; forced
transitions are logged as warnings.
"""

import logging

from .enums import RoomEvent, RoomState

logger = logging.getLogger("peer_arcade.sync.state_machine")

# Valid state transitions: {current_state: {event: next_state}}
TRANSITIONS = {
    RoomState.LOBBY: {
        RoomEvent.GAME_STARTED: RoomState.PLAYING,
        RoomEvent.RESTART: RoomState.LOBBY,
    },
    RoomState.PLAYING: {
        RoomEvent.GAME_FINISHED: RoomState.FINISHED,
        RoomEvent.OPPONENT_LEFT: RoomState.FINISHED,
        RoomEvent.RESTART: RoomState.LOBBY,
    },
    RoomState.FINISHED: {
        RoomEvent.RESTART: RoomState.LOBBY,
    },
}


class RoomStateMachine:
    """
    State machine for one room.

    Attributes:
        current_state: The current room state
    """

    def __init__(self):
        self.current_state = RoomState.LOBBY

    def can_transition(self, event: RoomEvent) -> bool:
        """
        Check if a transition is valid from current state.

        Args:
            event: The event to check

        Returns:
            True if the transition is valid, False otherwise
        """
        return event in TRANSITIONS.get(self.current_state, {})

    def transition(self, event: RoomEvent, force: bool = False) -> RoomState:
        """
        Execute a state transition.

        Args:
            event: The event triggering the transition
            force: If True, move to the event's target state even when the
                transition is not valid from here (out-of-order snapshots)

        Returns:
            The new state after transition

        Raises:
            ValueError: If the transition is not valid and force=False
        """
        if not self.can_transition(event):
            if not force:
                raise ValueError(
                    f"Invalid transition: {event.value} from {self.current_state.value}"
                )
            logger.warning(
                f"Forced transition: {event.value} from {self.current_state.value}"
            )
            for transitions in TRANSITIONS.values():
                if event in transitions:
                    self.current_state = transitions[event]
                    break
            return self.current_state

        self.current_state = TRANSITIONS[self.current_state][event]
        return self.current_state

    def reset(self) -> None:
        """Return to the lobby."""
        self.current_state = RoomState.LOBBY

    @property
    def is_playing(self) -> bool:
        return self.current_state == RoomState.PLAYING
