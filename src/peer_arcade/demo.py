# Area: Runner
"""
peer_arcade.demo — Scripted in-process games
============================================

Two simulated peers join the same room over an InMemoryHub and play a
game to its end with simple scripted strategies. Used by the CLI to
show the protocol at work without a network.

Usage:
    from peer_arcade.demo import run_demo
    result = run_demo("caro", seed=7)
    print(result.outcome)
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from ._engines import GAME_TYPES, Outcome
from ._engines.battleship import GRID_SIZE
from ._engines.uno_cards import COLORS, card_details, is_playable
from ._matchmaking import MatchmakingSession, MatchResult
from ._roles import create_identity, generate_room_code
from ._shared import InMemoryHub
from ._shared.collaborators import GameHistoryStore
from ._sync import RoomSession

logger = logging.getLogger("peer_arcade.demo")

DEFAULT_MAX_TURNS = 5000


@dataclass
class DemoResult:
    game_type: str
    room_code: str
    outcome: Optional[Outcome]
    winner_name: Optional[str]
    turns: int
    log: List[str]


class DemoPlayer:
    """A peer in a demo room that picks its own moves."""

    def __init__(self, name: str, seed: int):
        self.name = name
        self.seed = seed
        self.room: Optional[RoomSession] = None
        # memory match: card index -> symbol seen so far
        self.seen: Dict[int, str] = {}

    def observe(self, room: RoomSession) -> None:
        state = room.state
        if state is None or room.game_type != "memory":
            return
        for index in list(state.flipped_indices) + list(state.last_reveal):
            self.seen[index] = state.cards[index].symbol

    def arrange_fleet(self) -> None:
        self.room.submit_move("randomize_fleet", {"seed": self.seed})
        self.room.submit_move("ready")

    def play_turn(self) -> bool:
        """Submit one move; False if the strategy found nothing to do."""
        move = getattr(self, f"_next_{self.room.game_type}")()
        if move is None:
            return False
        move_type, payload = move
        result = self.room.submit_move(move_type, payload)
        if not result.accepted:
            logger.warning(f"{self.name}: {move_type} rejected ({result.reason})")
        return result.accepted

    # ── strategies ───────────────────────────────────────────

    def _next_caro(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        # host builds a line on row 50, the guest on row 52
        state = self.room.state
        symbol = self.room.engine.symbol_of(state, self.room.my_id)
        row = 50 if symbol == "X" else 52
        placed = sum(1 for m in state.moves if m.player == symbol)
        return "place", {"x": 50 + placed, "y": row}

    def _next_battleship(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        state = self.room.state
        opponent = self.room.engine.opponent_of(state, self.room.my_id)
        radar = state.boards[opponent]
        for row in range(GRID_SIZE):
            for col in range(GRID_SIZE):
                if not radar.is_shot(row, col):
                    return "fire", {"x": col, "y": row}
        return None

    def _next_uno(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        state = self.room.state
        hand = state.hand_of(self.room.my_id)
        for card_id in hand.cards:
            if not is_playable(card_id, state.top_card, state.current_color):
                continue
            payload: Dict[str, Any] = {"card_id": card_id}
            if card_details(card_id).is_black:
                payload["color"] = _favourite_color(hand.cards)
            return "play", payload
        return "draw", {}

    def _next_memory(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        state = self.room.state
        hidden = [
            i for i, card in enumerate(state.cards)
            if not card.is_matched and not card.is_flipped
        ]
        if not hidden:
            return None
        unseen = [i for i in hidden if i not in self.seen]

        if state.flipped_indices:
            symbol = state.cards[state.flipped_indices[0]].symbol
            for index in hidden:
                if self.seen.get(index) == symbol:
                    return "flip", {"index": index}
        else:
            by_symbol: Dict[str, List[int]] = {}
            for index in hidden:
                if index in self.seen:
                    by_symbol.setdefault(self.seen[index], []).append(index)
            for indices in by_symbol.values():
                if len(indices) >= 2:
                    return "flip", {"index": indices[0]}
        return "flip", {"index": (unseen or hidden)[0]}


def _favourite_color(cards: List[int]) -> str:
    counts = Counter(card_details(c).color for c in cards if not card_details(c).is_black)
    if not counts:
        return COLORS[0]
    return counts.most_common(1)[0][0]


def run_demo(
    game_type: str = "caro",
    seed: int = 1,
    *,
    history: Optional[GameHistoryStore] = None,
    max_turns: int = DEFAULT_MAX_TURNS,
) -> DemoResult:
    """
    Play one scripted game between two in-process peers.

    Args:
        game_type: One of the registered game types
        seed: Game seed (deck shuffles, fleet placement)
        history: Optional store; the host records the finished game
        max_turns: Safety cap on the number of submitted moves

    Returns:
        DemoResult with the outcome as seen by the host

    Raises:
        ValueError: If the game type is unknown
        RuntimeError: If the game did not finish within ``max_turns``
    """
    if game_type not in GAME_TYPES:
        raise ValueError(f"Unknown game type '{game_type}', expected one of {GAME_TYPES}")

    hub = InMemoryHub()
    room_code = generate_room_code(game_type)
    joined = datetime.now(timezone.utc)
    players = [DemoPlayer("Alice", seed), DemoPlayer("Bob", seed + 1)]

    for offset, player in enumerate(players):
        identity = create_identity(
            f"user-{player.name.lower()}",
            player.name,
            now=joined + timedelta(seconds=offset),
        )
        player.room = RoomSession(
            game_type,
            room_code,
            identity,
            hub,
            history=history,
            pump=hub.flush,
            on_change=player.observe,
        )
        player.room.connect()
    hub.flush()

    host = players[0].room
    host.start_game(seed=seed)
    hub.flush()

    if game_type == "battleship":
        for player in players:
            player.arrange_fleet()
            hub.flush()

    turns = 0
    while host.outcome is None:
        if turns >= max_turns:
            raise RuntimeError(f"{game_type} demo did not finish after {max_turns} turns")
        actor = next((p for p in players if p.room.is_my_turn), None)
        if actor is None or not actor.play_turn():
            raise RuntimeError(f"{game_type} demo stalled after {turns} turns")
        hub.flush()
        turns += 1

    outcome = host.outcome
    winner_name = host.state.name_of(outcome.winner) if outcome.winner else None
    result = DemoResult(
        game_type=game_type,
        room_code=room_code,
        outcome=outcome,
        winner_name=winner_name,
        turns=turns,
        log=list(host.state.action_log),
    )
    for player in players:
        player.room.leave()
    hub.flush()
    return result


def run_matchmaking_demo(game_type: str = "caro") -> List[MatchResult]:
    """
    Two searchers meet on the matchmaking topic and get paired.

    Returns:
        The match result of each searcher (both name the same room)
    """
    hub = InMemoryHub()
    results: List[MatchResult] = []
    searchers = [
        MatchmakingSession(
            game_type,
            create_identity(f"user-{name.lower()}", name),
            hub,
            pump=hub.flush,
            on_match=results.append,
        )
        for name in ("Alice", "Bob")
    ]
    for searcher in searchers:
        searcher.connect()
    hub.flush()
    for searcher in searchers:
        if not searcher.matched:
            searcher.cancel()
    hub.flush()
    return [s.match for s in searchers if s.match is not None]
