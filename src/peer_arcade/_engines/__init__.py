# Area: Engines
"""
Pure, deterministic game engines.

This package contains:
- The engine contract (GameEngine, Move, MoveResult, Outcome)
- Caro, Battleship, Uno and Memory Match engines
- A registry keyed by game type
"""

from typing import Dict

from .base import (
    AuthorityMode,
    DRAW,
    GameEngine,
    GameState,
    Move,
    MoveResult,
    Outcome,
    PlayerSeat,
    new_seed,
)
from .battleship import BattleshipEngine
from .caro import CaroEngine
from .memory import MemoryEngine
from .uno import UnoEngine

ENGINES: Dict[str, GameEngine] = {
    engine.game_type: engine
    for engine in (CaroEngine(), BattleshipEngine(), UnoEngine(), MemoryEngine())
}

GAME_TYPES = tuple(ENGINES)


def get_engine(game_type: str) -> GameEngine:
    """Return the engine for a game type; raise ValueError if unknown."""
    try:
        return ENGINES[game_type]
    except KeyError:
        raise ValueError(
            f"Unknown game type '{game_type}', expected one of {GAME_TYPES}"
        ) from None


__all__ = [
    "AuthorityMode",
    "BattleshipEngine",
    "CaroEngine",
    "DRAW",
    "ENGINES",
    "GAME_TYPES",
    "GameEngine",
    "GameState",
    "MemoryEngine",
    "Move",
    "MoveResult",
    "Outcome",
    "PlayerSeat",
    "UnoEngine",
    "get_engine",
    "new_seed",
]
