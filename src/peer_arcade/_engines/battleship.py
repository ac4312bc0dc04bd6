# Area: Engines
"""
peer_arcade._engines.battleship — Battleship engine
===================================================

Each peer holds one ``Board`` per player. The viewer's own board knows
where the ships are; the opponent's board is the radar and only ever
contains verdicts received from the opponent.

Authority is per grid: the defender resolves a shot against its private
board (``resolve_fire``) and publishes the verdict as a ``fire_result``
move. Both peers then apply the same verdict, so turn and winner stay in
lock-step even though neither peer sees the other's fleet.

Turn rule: a hit keeps the turn with the attacker, a miss passes it.
The game ends when all 17 ship cells of one board are hit.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from .base import (
    AuthorityMode,
    GameEngine,
    GameState,
    Move,
    Outcome,
    PlayerSeat,
    make_rng,
    new_seed,
    seat_list,
)

GRID_SIZE = 10

# (ship id, display name, size)
FLEET: Tuple[Tuple[str, str, int], ...] = (
    ("carrier", "Carrier", 5),
    ("battleship", "Battleship", 4),
    ("cruiser", "Cruiser", 3),
    ("submarine", "Submarine", 3),
    ("destroyer", "Destroyer", 2),
)
SHIP_SIZES = {ship_id: size for ship_id, _, size in FLEET}
FLEET_CELLS = sum(SHIP_SIZES.values())  # 17

EMPTY, SHIP, HIT, MISS = "empty", "ship", "hit", "miss"
ORIENTATIONS = ("horizontal", "vertical")


class Board(BaseModel):
    """A 10x10 grid. ``cells[row][col]`` is empty / ship / hit / miss."""

    cells: List[List[str]] = Field(
        default_factory=lambda: [[EMPTY] * GRID_SIZE for _ in range(GRID_SIZE)]
    )
    ships: Dict[str, List[Tuple[int, int]]] = Field(default_factory=dict)
    ready: bool = False

    def hits(self) -> int:
        return sum(row.count(HIT) for row in self.cells)

    def is_shot(self, row: int, col: int) -> bool:
        return self.cells[row][col] in (HIT, MISS)


class BattleshipState(GameState):
    game_type: str = Field("battleship", alias="gameType")
    phase: str = "placement"
    viewer_id: str = Field("", alias="viewerId")
    boards: Dict[str, Board] = Field(default_factory=dict)
    turn: Optional[str] = None
    pending_shot: Optional[Tuple[int, int]] = Field(None, alias="pendingShot")
    shots_fired: int = Field(0, alias="shotsFired")


def ship_cells(ship_id: str, row: int, col: int, orientation: str) -> List[Tuple[int, int]]:
    size = SHIP_SIZES[ship_id]
    if orientation == "horizontal":
        return [(row, col + i) for i in range(size)]
    return [(row + i, col) for i in range(size)]


def can_place_ship(board: Board, ship_id: str, row: int, col: int, orientation: str) -> bool:
    """True if the ship fits inside the grid without touching another ship."""
    if ship_id not in SHIP_SIZES or ship_id in board.ships:
        return False
    if orientation not in ORIENTATIONS:
        return False
    for r, c in ship_cells(ship_id, row, col, orientation):
        if r < 0 or r >= GRID_SIZE or c < 0 or c >= GRID_SIZE:
            return False
        if board.cells[r][c] != EMPTY:
            return False
    return True


def place_ship(board: Board, ship_id: str, row: int, col: int, orientation: str) -> None:
    cells = ship_cells(ship_id, row, col, orientation)
    for r, c in cells:
        board.cells[r][c] = SHIP
    board.ships[ship_id] = cells


def random_fleet(seed: int) -> Board:
    """Place the whole fleet at random, largest ship first."""
    rng = make_rng(seed, "fleet")
    board = Board()
    for ship_id, _, _ in sorted(FLEET, key=lambda ship: -ship[2]):
        while True:
            orientation = rng.choice(ORIENTATIONS)
            row = rng.randrange(GRID_SIZE)
            col = rng.randrange(GRID_SIZE)
            if can_place_ship(board, ship_id, row, col, orientation):
                place_ship(board, ship_id, row, col, orientation)
                break
    return board


def cell_label(x: int, y: int) -> str:
    return f"{chr(ord('A') + x)}{y + 1}"


class BattleshipEngine(GameEngine):
    """Two-player engine with per-grid authority; no snapshots are shared."""

    game_type = "battleship"
    authority_mode = AuthorityMode.SYMMETRIC
    state_model = BattleshipState
    shares_snapshots = False

    def initial_state(
        self,
        players: Sequence[PlayerSeat],
        host_id: str,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> BattleshipState:
        options = options or {}
        seats = seat_list(players)
        seats.sort(key=lambda seat: seat.id != host_id)
        state = BattleshipState(
            players=seats,
            seed=seed if seed is not None else new_seed(),
            viewer_id=options.get("viewer_id", host_id),
            boards={seat.id: Board() for seat in seats},
        )
        state.log("Place your fleet")
        return state

    def opponent_of(self, state: BattleshipState, player_id: str) -> Optional[str]:
        for seat in state.players:
            if seat.id != player_id:
                return seat.id
        return None

    def turn_holder(self, state: BattleshipState) -> Optional[str]:
        if state.phase != "playing":
            return None
        return state.turn

    def can_act(self, state: BattleshipState, player_id: str) -> bool:
        return state.phase == "playing" and state.turn == player_id and state.pending_shot is None

    # ── validation ───────────────────────────────────────────

    def validate_move(self, state: BattleshipState, actor_id: str, move: Move) -> bool:
        return self._problem(state, actor_id, move) is None

    def rejection_reason(self, state: BattleshipState, actor_id: str, move: Move) -> str:
        return self._problem(state, actor_id, move) or "invalid move"

    def _problem(self, state: BattleshipState, actor_id: str, move: Move) -> Optional[str]:
        if actor_id not in state.boards:
            return "actor is not seated"
        p = move.payload
        try:
            if move.type == "place_ship":
                if state.phase != "placement" or actor_id != state.viewer_id:
                    return "only the viewer places ships during placement"
                board = state.boards[actor_id]
                if board.ready:
                    return "fleet already locked"
                if not can_place_ship(board, p["ship"], int(p["row"]), int(p["col"]), p["orientation"]):
                    return "ship does not fit there"
                return None
            if move.type in ("randomize_fleet", "reset_fleet"):
                if state.phase != "placement" or actor_id != state.viewer_id:
                    return "only the viewer arranges ships during placement"
                if state.boards[actor_id].ready:
                    return "fleet already locked"
                return None
            if move.type == "ready":
                if state.phase != "placement":
                    return "not in placement"
                board = state.boards[actor_id]
                if board.ready:
                    return "already ready"
                if actor_id == state.viewer_id and len(board.ships) != len(FLEET):
                    return "fleet is incomplete"
                return None
            if move.type == "fire":
                if state.phase != "playing" or actor_id != state.turn:
                    return "not your turn"
                if state.pending_shot is not None:
                    return "waiting for previous verdict"
                x, y = int(p["x"]), int(p["y"])
                if not _in_bounds(x, y):
                    return "out of bounds"
                target = state.boards[self.opponent_of(state, actor_id)]
                if target.is_shot(y, x):
                    return "cell already fired at"
                return None
            if move.type == "fire_result":
                if state.phase != "playing" or actor_id == state.turn:
                    return "verdict must come from the defender"
                x, y = int(p["x"]), int(p["y"])
                if state.pending_shot != (x, y):
                    return "verdict does not match the pending shot"
                if p["result"] not in (HIT, MISS):
                    return "unknown verdict"
                return None
        except (KeyError, TypeError, ValueError):
            return "malformed payload"
        return f"unknown move type {move.type}"

    # ── mutation ─────────────────────────────────────────────

    def _apply(self, state: BattleshipState, actor_id: str, move: Move) -> None:
        p = move.payload
        if move.type == "place_ship":
            place_ship(state.boards[actor_id], p["ship"], int(p["row"]), int(p["col"]), p["orientation"])
        elif move.type == "randomize_fleet":
            state.boards[actor_id] = random_fleet(int(p.get("seed", state.seed)))
        elif move.type == "reset_fleet":
            state.boards[actor_id] = Board()
        elif move.type == "ready":
            state.boards[actor_id].ready = True
            state.log(f"{state.name_of(actor_id)} locked their fleet")
            if all(board.ready for board in state.boards.values()):
                state.phase = "playing"
                state.turn = state.players[0].id
                state.log(f"Battle started, {state.name_of(state.turn)} fires first")
        elif move.type == "fire":
            x, y = int(p["x"]), int(p["y"])
            state.pending_shot = (x, y)
            state.shots_fired += 1
            state.log(f"{state.name_of(actor_id)} fires at {cell_label(x, y)}")
        elif move.type == "fire_result":
            self._apply_verdict(state, actor_id, p)

    def _apply_verdict(self, state: BattleshipState, defender_id: str, p: Dict[str, Any]) -> None:
        x, y = int(p["x"]), int(p["y"])
        attacker_id = state.turn
        board = state.boards[defender_id]
        is_hit = p["result"] == HIT
        board.cells[y][x] = HIT if is_hit else MISS
        state.pending_shot = None

        if board.hits() >= FLEET_CELLS:
            state.phase = "finished"
            state.winner = attacker_id
            state.log(f"{state.name_of(attacker_id)} sank the enemy fleet")
            return
        if is_hit:
            state.log(f"Hit at {cell_label(x, y)}, {state.name_of(attacker_id)} fires again")
        else:
            state.turn = defender_id
            state.log(f"Miss at {cell_label(x, y)}")

    def resolve_fire(self, state: BattleshipState, x: int, y: int) -> Move:
        """Defender side: judge a pending shot against the private board."""
        board = state.boards[state.viewer_id]
        is_hit = board.cells[y][x] in (SHIP, HIT)
        hits_after = board.hits() + (1 if board.cells[y][x] == SHIP else 0)
        return Move(
            type="fire_result",
            actor_id=state.viewer_id,
            payload={
                "x": x,
                "y": y,
                "result": HIT if is_hit else MISS,
                "game_over": hits_after >= FLEET_CELLS,
            },
        )

    def check_terminal(self, state: BattleshipState) -> Optional[Outcome]:
        if state.winner is None:
            return None
        for board in state.boards.values():
            if board.hits() >= FLEET_CELLS:
                return Outcome(winner=state.winner, is_draw=False, reason="fleet_sunk")
        return Outcome(winner=state.winner, is_draw=False, reason="opponent_left")

    def move_count(self, state: BattleshipState) -> int:
        return state.shots_fired


def _in_bounds(x: int, y: int) -> bool:
    return 0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE
