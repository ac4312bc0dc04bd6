# Area: Sync
"""
peer_arcade._sync.handler_base — Base room event handler
========================================================

Handlers receive the room they act on and return the envelopes the
room must broadcast once the handler has finished.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, List, Optional

from .._engines import GameState, Move

if TYPE_CHECKING:
    from .room_session import RoomSession

logger = logging.getLogger("peer_arcade.sync.handler")


class BaseRoomHandler(ABC):
    """
    Abstract base class for room event handlers.

    Provides helpers for:
    - Checking that a sender is seated in the running game
    - Applying a move through the room's engine
    - Logging handling
    """

    def __init__(self, room: "RoomSession"):
        self.room = room

    @abstractmethod
    def handle(self, envelope: Any) -> List[Any]:
        """
        Handle an envelope.

        Args:
            envelope: The parsed envelope

        Returns:
            Envelopes to broadcast (possibly empty)
        """

    def is_seated(self, player_id: Optional[str]) -> bool:
        """True if there is no frozen player list yet or the id is in it."""
        if not player_id or not self.room.players:
            return True
        return any(seat.id == player_id for seat in self.room.players)

    def apply(self, move: Move) -> Optional[GameState]:
        """
        Apply a move to the room's game state.

        Returns:
            The new state if accepted, None if rejected (logged at debug)
        """
        room = self.room
        if room.game is None:
            logger.debug(f"Ignoring {move.type}: no game in progress")
            return None
        result = room.engine.apply_move(room.game, move.actor_id, move)
        if not result.accepted:
            logger.debug(f"Rejected {move.type} from {move.actor_id}: {result.reason}")
            return None
        return result.state

    def log_handling(self, event: str, sender: Optional[str] = None) -> None:
        if sender:
            logger.debug(f"Handling {event} (from {sender})")
        else:
            logger.debug(f"Handling {event}")
