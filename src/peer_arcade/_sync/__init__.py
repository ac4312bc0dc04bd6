# Area: Sync
"""
State synchronization protocol.

This package contains:
- Broadcast envelopes and their parser
- The room lifecycle state machine
- The broadcast router and room event handlers
- RoomSession, the per-room actor
"""

from .broadcast_router import BroadcastRouter
from .cosmetics import ChatLine, Cosmetics, EmojiReaction
from .enums import RoomEvent, RoomState, SyncMode
from .messages import Envelope, parse_envelope
from .room_session import RoomSession, sync_mode_for
from .state_machine import RoomStateMachine

__all__ = [
    "BroadcastRouter",
    "ChatLine",
    "Cosmetics",
    "EmojiReaction",
    "Envelope",
    "RoomEvent",
    "RoomSession",
    "RoomState",
    "RoomStateMachine",
    "SyncMode",
    "parse_envelope",
    "sync_mode_for",
]
