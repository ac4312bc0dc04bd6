# Area: Engines
"""
peer_arcade._engines.base — Game engine contract
=================================================

Every game is a pure, synchronous, deterministic engine. Given identical
inputs two peers compute identical states, which is what lets the room
replicate game state without a server.

Engines never mutate the state they are given. ``apply_move`` works on a
deep copy and returns the untouched input when the move is rejected.
"""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel, ConfigDict, Field

ACTION_LOG_LIMIT = 10
DRAW = "draw"


class AuthorityMode(Enum):
    """Which peers may mutate and broadcast game state."""
    SYMMETRIC = "symmetric"      # the turn holder applies and broadcasts
    HOST_ONLY = "host_only"      # only the host applies submitted actions


class PlayerSeat(BaseModel):
    """One seat in the frozen player list of a running game."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    display_name: str = Field("", alias="displayName")


class Move(BaseModel):
    """Immutable, serializable action applied by every receiving engine."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: str
    actor_id: str = Field(..., alias="actorId")
    payload: Dict[str, Any] = Field(default_factory=dict)
    client_timestamp: float = Field(default_factory=time.time, alias="clientTimestamp")


class GameState(BaseModel):
    """Fields shared by every engine's state model."""

    model_config = ConfigDict(populate_by_name=True)

    game_type: str = Field(..., alias="gameType")
    phase: str
    players: List[PlayerSeat]
    winner: Optional[str] = None
    seed: int = 0
    action_log: List[str] = Field(default_factory=list, alias="actionLog")

    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def seat_of(self, player_id: str) -> Optional[int]:
        for index, seat in enumerate(self.players):
            if seat.id == player_id:
                return index
        return None

    def name_of(self, player_id: str) -> str:
        index = self.seat_of(player_id)
        if index is None:
            return player_id
        return self.players[index].display_name or player_id

    def log(self, entry: str) -> None:
        self.action_log.append(entry)
        del self.action_log[:-ACTION_LOG_LIMIT]


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Attributes:
        state: The next state, or the untouched input state when rejected
        accepted: True if the move was valid and applied
        reason: Why the move was rejected, if it was
    """

    state: GameState
    accepted: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class Outcome:
    """Terminal result of a game."""

    winner: Optional[str]
    is_draw: bool
    reason: str


class GameEngine(ABC):
    """
    Abstract base class for the four game engines.

    Subclasses implement ``initial_state``, ``validate_move``,
    ``_apply`` (the mutation of an already validated copy),
    ``check_terminal`` and ``turn_holder``.
    """

    game_type: str = ""
    authority_mode: AuthorityMode = AuthorityMode.SYMMETRIC
    state_model: Type[GameState] = GameState
    min_players: int = 2
    max_players: int = 2
    shares_snapshots: bool = True
    finished_phase: str = "finished"

    @abstractmethod
    def initial_state(
        self,
        players: Sequence[PlayerSeat],
        host_id: str,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> GameState:
        """Build the state a game starts from."""

    @abstractmethod
    def validate_move(self, state: GameState, actor_id: str, move: Move) -> bool:
        """Return True if ``actor_id`` may apply ``move`` to ``state``."""

    @abstractmethod
    def _apply(self, state: GameState, actor_id: str, move: Move) -> None:
        """Mutate ``state`` (a private copy) with an already validated move."""

    @abstractmethod
    def check_terminal(self, state: GameState) -> Optional[Outcome]:
        """Return the outcome if the game is over, else None."""

    @abstractmethod
    def turn_holder(self, state: GameState) -> Optional[str]:
        """Return the id of the player allowed to act next."""

    def can_act(self, state: GameState, player_id: str) -> bool:
        """True if ``player_id`` may make the next move."""
        return state.phase != self.finished_phase and self.turn_holder(state) == player_id

    def rejection_reason(self, state: GameState, actor_id: str, move: Move) -> str:
        return f"invalid {move.type} from {actor_id}"

    def apply_move(self, state: GameState, actor_id: str, move: Move) -> MoveResult:
        """Apply ``move`` to a copy of ``state``; reject without side effects."""
        if not self.validate_move(state, actor_id, move):
            return MoveResult(
                state=state,
                accepted=False,
                reason=self.rejection_reason(state, actor_id, move),
            )
        next_state = state.model_copy(deep=True)
        self._apply(next_state, actor_id, move)
        return MoveResult(state=next_state, accepted=True)

    def forfeit(self, state: GameState, winner_id: str) -> GameState:
        """Finish the game in favour of ``winner_id`` (opponent abandoned)."""
        next_state = state.model_copy(deep=True)
        next_state.phase = self.finished_phase
        next_state.winner = winner_id
        next_state.log(f"{next_state.name_of(winner_id)} wins, opponent left")
        return next_state

    def move_count(self, state: GameState) -> int:
        return 0

    def to_snapshot(self, state: GameState) -> Dict[str, Any]:
        return state.model_dump(mode="json", by_alias=True)

    def from_snapshot(self, data: Dict[str, Any]) -> GameState:
        return self.state_model.model_validate(data)

    def is_finished(self, state: GameState) -> bool:
        return state.phase == self.finished_phase


def make_rng(seed: int, *salt: Any) -> random.Random:
    """Deterministic RNG for a seed, optionally salted (e.g. reshuffle count)."""
    if not salt:
        return random.Random(seed)
    return random.Random(":".join(str(part) for part in (seed,) + salt))


def new_seed() -> int:
    return random.SystemRandom().randrange(1, 2**31)


def seat_list(players: Sequence[Any]) -> List[PlayerSeat]:
    """Coerce dicts / seats / identities into a fresh list of PlayerSeat."""
    seats: List[PlayerSeat] = []
    for player in players:
        if isinstance(player, PlayerSeat):
            seats.append(player)
        elif isinstance(player, dict):
            seats.append(PlayerSeat.model_validate(player))
        else:
            seats.append(PlayerSeat(
                id=player.session_id,
                display_name=player.display_name,
            ))
    return seats
