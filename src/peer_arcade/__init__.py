"""
peer_arcade — Serverless multiplayer game rooms
===============================================

Peers join a room over a pub/sub channel with presence, agree on roles
from the presence roster and replicate game state among themselves.
Four games ship with the package: Caro, Battleship, Uno and Memory Match.

Quick Start (everything in one process):
    from peer_arcade import InMemoryHub, RoomSession, create_identity

    hub = InMemoryHub()
    alice = RoomSession("caro", "CR-ABC234", create_identity(None, "Alice"), hub, pump=hub.flush)
    alice.connect()
    ...
    alice.start_game()
    alice.submit_move("place", {"x": 50, "y": 50})

Long-running peer:
    from peer_arcade import PeerRunner, load_config
    PeerRunner(load_config("config.json")).run()
"""

from ._engines import (
    GAME_TYPES,
    GameEngine,
    GameState,
    Move,
    MoveResult,
    Outcome,
    PlayerSeat,
    get_engine,
)
from ._matchmaking import MatchmakingSession, MatchResult, decide_pairing
from ._presence import PresenceTracker
from ._roles import (
    PeerIdentity,
    RoleAssignment,
    create_identity,
    generate_room_code,
    is_valid_room_code,
    resolve_roles,
)
from ._runner_config import load_config, validate_config
from ._shared import InMemoryHub, SqliteGameHistoryStore, SqliteRoomRegistry
from ._sync import RoomSession, RoomState, SyncMode, parse_envelope
from .errors import (
    ConfigError,
    ConnectionTimeoutError,
    GameStartError,
    PeerArcadeError,
    ProtocolError,
    TransportError,
)
from .runner import PeerRunner

__all__ = [
    # Main classes
    "RoomSession",
    "MatchmakingSession",
    "PeerRunner",
    "InMemoryHub",
    # Engines
    "GAME_TYPES",
    "GameEngine",
    "GameState",
    "Move",
    "MoveResult",
    "Outcome",
    "PlayerSeat",
    "get_engine",
    # Roles and presence
    "PeerIdentity",
    "PresenceTracker",
    "RoleAssignment",
    "create_identity",
    "generate_room_code",
    "is_valid_room_code",
    "resolve_roles",
    # Sync
    "MatchResult",
    "RoomState",
    "SyncMode",
    "decide_pairing",
    "parse_envelope",
    # Collaborators and config
    "SqliteGameHistoryStore",
    "SqliteRoomRegistry",
    "load_config",
    "validate_config",
    # Errors
    "PeerArcadeError",
    "ConfigError",
    "ConnectionTimeoutError",
    "GameStartError",
    "ProtocolError",
    "TransportError",
]
__version__ = "1.0.0"
