# Area: Sync
"""
peer_arcade._sync.enums — Room lifecycle enums
==============================================

Defines the states and events of the room lifecycle state machine.
"""

from enum import Enum


class RoomState(Enum):
    """
    States of a room.

    State transitions:
    LOBBY -> PLAYING (on GAME_STARTED)
    PLAYING -> FINISHED (on GAME_FINISHED or OPPONENT_LEFT)
    Any state -> LOBBY (on RESTART)
    """
    LOBBY = "LOBBY"
    PLAYING = "PLAYING"
    FINISHED = "FINISHED"


class RoomEvent(Enum):
    """
    Events that trigger room transitions.

    Events are triggered by:
    - GAME_STARTED: game_start applied (or a snapshot of a running game)
    - GAME_FINISHED: the engine reports a terminal outcome
    - OPPONENT_LEFT: the recorded opponent left mid-game
    - RESTART: restart sent or received
    """
    GAME_STARTED = "GAME_STARTED"
    GAME_FINISHED = "GAME_FINISHED"
    OPPONENT_LEFT = "OPPONENT_LEFT"
    RESTART = "RESTART"


class SyncMode(Enum):
    """How a game's state travels between peers."""
    SNAPSHOT = "snapshot"      # acting peer broadcasts full state
    HOST_ONLY = "host_only"    # actions to host, host broadcasts state
    OWN_GRID = "own_grid"      # fire / fire_result verdicts
