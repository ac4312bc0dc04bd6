# Area: Engines
"""
peer_arcade._engines.memory — Memory Match engine
=================================================

A turn reveals up to two hidden, unmatched cards. The second reveal is
resolved immediately: a pair scores one point and the player keeps the
turn, a mismatch re-hides both cards and passes the turn round-robin
over the frozen player list. ``last_reveal`` keeps the two indices so a
UI can show the pair before it is hidden again.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from .base import (
    AuthorityMode,
    DRAW,
    GameEngine,
    GameState,
    Move,
    Outcome,
    PlayerSeat,
    make_rng,
    new_seed,
    seat_list,
)

SYMBOLS = (
    "dog", "cat", "mouse", "hamster", "rabbit", "fox", "bear", "panda",
    "koala", "tiger", "lion", "cow", "pig", "frog", "monkey", "chicken",
    "penguin", "bird", "chick", "unicorn", "bee", "bug", "butterfly", "snail",
    "ladybug", "ant", "spider", "turtle", "snake", "lizard", "octopus", "squid",
    "shrimp", "lobster", "crab", "blowfish", "tropical_fish", "fish", "dolphin", "whale",
)

# (cols, rows, label)
GRID_PRESETS = (
    (4, 3, "4x3 (12 Cards)"),
    (5, 4, "5x4 (20 Cards)"),
    (6, 5, "6x5 (30 Cards)"),
    (7, 6, "7x6 (42 Cards)"),
)


class GridSize(BaseModel):
    model_config = ConfigDict(frozen=True)

    cols: PositiveInt
    rows: PositiveInt

    @property
    def cell_count(self) -> int:
        return self.cols * self.rows


class GridOptions(BaseModel):
    """Start options: an explicit size wins over a preset index."""

    preset: int = Field(0, ge=0, lt=len(GRID_PRESETS))
    rows: Optional[PositiveInt] = None
    cols: Optional[PositiveInt] = None


class MemoryCard(BaseModel):
    id: int
    symbol: str
    is_flipped: bool = Field(False, alias="isFlipped")
    is_matched: bool = Field(False, alias="isMatched")
    matched_by: Optional[str] = Field(None, alias="matchedBy")

    model_config = ConfigDict(populate_by_name=True)


class MemoryState(GameState):
    game_type: str = Field("memory", alias="gameType")
    phase: str = "playing"
    grid: GridSize
    cards: List[MemoryCard]
    turn: str
    scores: Dict[str, int] = Field(default_factory=dict)
    flipped_indices: List[int] = Field(default_factory=list, alias="flippedIndices")
    last_reveal: List[int] = Field(default_factory=list, alias="lastReveal")
    turns_taken: int = Field(0, alias="turnsTaken")


def grid_from_options(options: Optional[Dict[str, Any]]) -> GridSize:
    """Resolve ``{"preset": i}`` or ``{"rows": r, "cols": c}``; default 4x3."""
    chosen = GridOptions.model_validate(options or {})
    if chosen.rows is not None and chosen.cols is not None:
        grid = GridSize(cols=chosen.cols, rows=chosen.rows)
    else:
        cols, rows, _ = GRID_PRESETS[chosen.preset]
        grid = GridSize(cols=cols, rows=rows)
    if grid.cell_count % 2:
        raise ValueError(f"grid {grid.cols}x{grid.rows} must have an even cell count")
    if grid.cell_count // 2 > len(SYMBOLS):
        raise ValueError(f"grid {grid.cols}x{grid.rows} needs more than {len(SYMBOLS)} symbols")
    return grid


class MemoryEngine(GameEngine):
    """Symmetric engine for 2 or more players."""

    game_type = "memory"
    authority_mode = AuthorityMode.SYMMETRIC
    state_model = MemoryState
    max_players = 8

    def initial_state(
        self,
        players: Sequence[PlayerSeat],
        host_id: str,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> MemoryState:
        seats = seat_list(players)
        seats.sort(key=lambda seat: seat.id != host_id)
        seed = seed if seed is not None else new_seed()
        grid = grid_from_options(options)
        rng = make_rng(seed, "deck")

        chosen = rng.sample(SYMBOLS, grid.cell_count // 2)
        deck = chosen + chosen
        rng.shuffle(deck)

        state = MemoryState(
            players=seats,
            seed=seed,
            grid=grid,
            cards=[MemoryCard(id=i, symbol=symbol) for i, symbol in enumerate(deck)],
            turn=seats[0].id,
            scores={seat.id: 0 for seat in seats},
        )
        state.log(f"Game started, {state.name_of(state.turn)}'s turn")
        return state

    def turn_holder(self, state: MemoryState) -> Optional[str]:
        if state.phase != "playing":
            return None
        return state.turn

    def validate_move(self, state: MemoryState, actor_id: str, move: Move) -> bool:
        if move.type != "flip" or state.phase != "playing":
            return False
        if actor_id != state.turn or len(state.flipped_indices) >= 2:
            return False
        try:
            index = int(move.payload["index"])
        except (KeyError, TypeError, ValueError):
            return False
        if index < 0 or index >= len(state.cards):
            return False
        card = state.cards[index]
        return not card.is_flipped and not card.is_matched

    def rejection_reason(self, state: MemoryState, actor_id: str, move: Move) -> str:
        if state.phase != "playing":
            return "game is not in progress"
        if actor_id != state.turn:
            return "not your turn"
        return "card cannot be revealed"

    def _apply(self, state: MemoryState, actor_id: str, move: Move) -> None:
        index = int(move.payload["index"])
        state.cards[index].is_flipped = True
        state.flipped_indices.append(index)
        if len(state.flipped_indices) < 2:
            state.last_reveal = []
            return

        first, second = state.flipped_indices
        state.last_reveal = [first, second]
        state.flipped_indices = []
        state.turns_taken += 1
        a, b = state.cards[first], state.cards[second]

        if a.symbol == b.symbol:
            for card in (a, b):
                card.is_matched = True
                card.matched_by = actor_id
            state.scores[actor_id] = state.scores.get(actor_id, 0) + 1
            if all(card.is_matched for card in state.cards):
                self._finish(state)
            else:
                state.log("Match! Go again.")
            return

        a.is_flipped = False
        b.is_flipped = False
        seat = state.seat_of(actor_id)
        state.turn = state.players[(seat + 1) % len(state.players)].id
        state.log("Miss! Next turn.")

    def _finish(self, state: MemoryState) -> None:
        state.phase = "finished"
        best = max(state.scores.values())
        leaders = [pid for pid, score in state.scores.items() if score == best]
        state.winner = leaders[0] if len(leaders) == 1 else DRAW
        state.log("Game Over!")

    def check_terminal(self, state: MemoryState) -> Optional[Outcome]:
        if state.winner is None:
            return None
        if state.winner == DRAW:
            return Outcome(winner=None, is_draw=True, reason="all_pairs_matched")
        if all(card.is_matched for card in state.cards):
            return Outcome(winner=state.winner, is_draw=False, reason="all_pairs_matched")
        return Outcome(winner=state.winner, is_draw=False, reason="opponent_left")

    def move_count(self, state: MemoryState) -> int:
        return state.turns_taken
