# Area: Engines
"""
peer_arcade._engines.caro — Caro (Gomoku) engine
================================================

Five in a row on a bounded 100x100 board. Marks alternate strictly by
the parity of the move count: even count places 'X', odd places 'O'.
The host (seat 0) plays 'X'.

Only the four lines through the last placed cell are scanned for a win,
since a new five-in-a-row can only appear through that cell.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .base import (
    AuthorityMode,
    DRAW,
    GameEngine,
    GameState,
    Move,
    Outcome,
    PlayerSeat,
    new_seed,
    seat_list,
)

BOARD_SIZE = 100
WIN_LENGTH = 5
SYMBOLS = ("X", "O")

# horizontal, vertical, diagonal \, diagonal /
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((1, 0), (0, 1), (1, 1), (1, -1))


class CaroMove(BaseModel):
    """A placed mark."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    player: str
    timestamp: float = 0.0


class CaroState(GameState):
    game_type: str = Field("caro", alias="gameType")
    phase: str = "playing"
    moves: List[CaroMove] = Field(default_factory=list)
    winning_cells: List[Tuple[int, int]] = Field(default_factory=list, alias="winningCells")
    winner_symbol: Optional[str] = Field(None, alias="winnerSymbol")


def current_symbol(moves: Sequence[CaroMove]) -> str:
    return SYMBOLS[len(moves) % 2]


def find_win(moves: Sequence[CaroMove]) -> Tuple[Optional[str], List[Tuple[int, int]]]:
    """Return (symbol, five winning cells) if the last move completed a line."""
    if len(moves) < WIN_LENGTH * 2 - 1:
        return None, []

    board = {(m.x, m.y): m.player for m in moves}
    last = moves[-1]
    player = last.player

    for dx, dy in DIRECTIONS:
        line = [(last.x, last.y)]
        for step in range(1, WIN_LENGTH):
            cell = (last.x + dx * step, last.y + dy * step)
            if board.get(cell) != player:
                break
            line.append(cell)
        for step in range(1, WIN_LENGTH):
            cell = (last.x - dx * step, last.y - dy * step)
            if board.get(cell) != player:
                break
            line.insert(0, cell)
        if len(line) >= WIN_LENGTH:
            return player, line[:WIN_LENGTH]

    return None, []


class CaroEngine(GameEngine):
    """Symmetric engine: the turn holder places, then broadcasts a snapshot."""

    game_type = "caro"
    authority_mode = AuthorityMode.SYMMETRIC
    state_model = CaroState

    def initial_state(
        self,
        players: Sequence[PlayerSeat],
        host_id: str,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> CaroState:
        seats = seat_list(players)
        # host always plays X
        seats.sort(key=lambda seat: seat.id != host_id)
        state = CaroState(players=seats, seed=seed if seed is not None else new_seed())
        state.log("Game started, X to move")
        return state

    def symbol_of(self, state: CaroState, player_id: str) -> Optional[str]:
        index = state.seat_of(player_id)
        if index is None or index > 1:
            return None
        return SYMBOLS[index]

    def turn_holder(self, state: CaroState) -> Optional[str]:
        if state.phase != "playing" or len(state.players) < 2:
            return None
        return state.players[len(state.moves) % 2].id

    def is_valid_cell(self, state: CaroState, x: int, y: int) -> bool:
        if x < 0 or x >= BOARD_SIZE or y < 0 or y >= BOARD_SIZE:
            return False
        return not any(m.x == x and m.y == y for m in state.moves)

    def validate_move(self, state: CaroState, actor_id: str, move: Move) -> bool:
        if move.type != "place" or state.phase != "playing":
            return False
        if actor_id != self.turn_holder(state):
            return False
        try:
            x, y = int(move.payload["x"]), int(move.payload["y"])
        except (KeyError, TypeError, ValueError):
            return False
        return self.is_valid_cell(state, x, y)

    def rejection_reason(self, state: CaroState, actor_id: str, move: Move) -> str:
        if state.phase != "playing":
            return "game is not in progress"
        if actor_id != self.turn_holder(state):
            return "not your turn"
        return "cell is out of bounds or occupied"

    def _apply(self, state: CaroState, actor_id: str, move: Move) -> None:
        symbol = current_symbol(state.moves)
        placed = CaroMove(
            x=int(move.payload["x"]),
            y=int(move.payload["y"]),
            player=symbol,
            timestamp=move.client_timestamp,
        )
        state.moves.append(placed)
        state.log(f"{state.name_of(actor_id)} ({symbol}) placed at {placed.x},{placed.y}")

        winner_symbol, cells = find_win(state.moves)
        if winner_symbol:
            state.phase = "finished"
            state.winner_symbol = winner_symbol
            state.winning_cells = cells
            state.winner = actor_id
            state.log(f"{winner_symbol} wins")
        elif len(state.moves) >= BOARD_SIZE * BOARD_SIZE:
            state.phase = "finished"
            state.winner = DRAW
            state.log("Board full, draw")

    def check_terminal(self, state: CaroState) -> Optional[Outcome]:
        if state.winner == DRAW:
            return Outcome(winner=None, is_draw=True, reason="board_full")
        if state.winner is None:
            return None
        reason = "five_in_a_row" if state.winner_symbol else "opponent_left"
        return Outcome(winner=state.winner, is_draw=False, reason=reason)

    def move_count(self, state: CaroState) -> int:
        return len(state.moves)
