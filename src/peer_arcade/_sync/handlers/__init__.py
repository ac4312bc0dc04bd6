# Area: Sync
"""
Room event handlers.

This package contains:
- Game lifecycle handlers (start, snapshots, host-only actions, resync, restart)
- Battleship verdict handlers (fire, fire_result, player_ready)
- Chat, emoji and log handlers
"""

from .battleship import FireHandler, FireResultHandler, PlayerReadyHandler
from .cosmetics import ChatHandler, EmojiHandler, LogHandler
from .game import (
    GameActionHandler,
    GameStartHandler,
    GameUpdateHandler,
    RequestStateHandler,
    RestartHandler,
    SyncStateHandler,
)

__all__ = [
    "ChatHandler",
    "EmojiHandler",
    "FireHandler",
    "FireResultHandler",
    "GameActionHandler",
    "GameStartHandler",
    "GameUpdateHandler",
    "LogHandler",
    "PlayerReadyHandler",
    "RequestStateHandler",
    "RestartHandler",
    "SyncStateHandler",
]
