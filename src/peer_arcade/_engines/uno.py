# Area: Engines
"""
peer_arcade._engines.uno — Uno engine
=====================================

Host-authoritative: only the host runs this engine on submitted actions
and broadcasts the resulting state. Effect resolution (draw-pile
reshuffles, skips) therefore has a single writer.

Turn order is ``(index + direction) mod players``. Skip advances one
extra step; Reverse flips the direction and, with exactly two players,
also skips; Draw2/Draw4 make the next player draw and skip them.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

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
from .uno_cards import (
    BLACK,
    COLORS,
    DRAW2,
    DRAW4,
    REVERSE,
    SKIP,
    card_details,
    create_deck,
    is_playable,
    shuffled,
)

INITIAL_HAND_SIZE = 7


class UnoHand(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    player_id: str = Field(..., alias="playerId")
    cards: List[int] = Field(default_factory=list)


class UnoState(GameState):
    game_type: str = Field("uno", alias="gameType")
    phase: str = "playing"
    host_id: str = Field("", alias="hostId")
    hands: List[UnoHand] = Field(default_factory=list)
    deck: List[int] = Field(default_factory=list)
    discard_pile: List[int] = Field(default_factory=list, alias="discardPile")
    current_turn_index: int = Field(0, alias="currentTurnIndex")
    direction: int = 1
    current_color: str = Field("red", alias="currentColor")
    reshuffles: int = 0
    moves_played: int = Field(0, alias="movesPlayed")

    def hand_of(self, player_id: str) -> Optional[UnoHand]:
        for hand in self.hands:
            if hand.player_id == player_id:
                return hand
        return None

    @property
    def top_card(self) -> int:
        return self.discard_pile[-1]


def next_index(current: int, direction: int, total: int) -> int:
    return (current + direction) % total


class UnoEngine(GameEngine):
    """Host-authoritative engine for 2-4 players."""

    game_type = "uno"
    authority_mode = AuthorityMode.HOST_ONLY
    state_model = UnoState
    min_players = 2
    max_players = 4

    def initial_state(
        self,
        players: Sequence[PlayerSeat],
        host_id: str,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> UnoState:
        seats = seat_list(players)
        seed = seed if seed is not None else new_seed()
        deck = shuffled(create_deck(), make_rng(seed, "deal"))

        hands = [UnoHand(player_id=seat.id) for seat in seats]
        for _ in range(INITIAL_HAND_SIZE):
            for hand in hands:
                hand.cards.append(deck.pop(0))

        top = deck.pop(0)
        start_color = card_details(top).color
        if start_color == BLACK:
            start_color = "red"

        state = UnoState(
            players=seats,
            seed=seed,
            host_id=host_id,
            hands=hands,
            deck=deck,
            discard_pile=[top],
            current_color=start_color,
        )
        state.log("Game started")
        return state

    def turn_holder(self, state: UnoState) -> Optional[str]:
        if state.phase != "playing" or not state.players:
            return None
        return state.players[state.current_turn_index].id

    def validate_move(self, state: UnoState, actor_id: str, move: Move) -> bool:
        return self._problem(state, actor_id, move) is None

    def rejection_reason(self, state: UnoState, actor_id: str, move: Move) -> str:
        return self._problem(state, actor_id, move) or "invalid move"

    def _problem(self, state: UnoState, actor_id: str, move: Move) -> Optional[str]:
        if state.phase != "playing":
            return "game is not in progress"
        if actor_id != self.turn_holder(state):
            return "not your turn"
        if move.type == "draw":
            return None
        if move.type != "play":
            return f"unknown move type {move.type}"
        try:
            card_id = int(move.payload["card_id"])
        except (KeyError, TypeError, ValueError):
            return "malformed payload"
        hand = state.hand_of(actor_id)
        if hand is None or card_id not in hand.cards:
            return "card not in hand"
        if not is_playable(card_id, state.top_card, state.current_color):
            return "card does not match"
        if card_details(card_id).is_black and move.payload.get("color") not in COLORS:
            return "must choose a color for a wild card"
        return None

    def _apply(self, state: UnoState, actor_id: str, move: Move) -> None:
        name = state.name_of(actor_id)
        total = len(state.players)
        state.moves_played += 1

        if move.type == "draw":
            self._draw_cards(state, state.current_turn_index, 1)
            state.current_turn_index = next_index(state.current_turn_index, state.direction, total)
            state.log(f"{name} drew a card")
            return

        card_id = int(move.payload["card_id"])
        card = card_details(card_id)
        hand = state.hand_of(actor_id)
        hand.cards.remove(card_id)
        state.discard_pile.append(card_id)
        state.current_color = move.payload["color"] if card.is_black else card.color

        skip = False
        if card.type == REVERSE:
            state.direction *= -1
            skip = total == 2
        elif card.type == SKIP:
            skip = True
        elif card.type in (DRAW2, DRAW4):
            victim = next_index(state.current_turn_index, state.direction, total)
            self._draw_cards(state, victim, 2 if card.type == DRAW2 else 4)
            skip = True

        if not hand.cards:
            state.phase = "finished"
            state.winner = actor_id
            state.log(f"{name} wins!")
            return

        for _ in range(2 if skip else 1):
            state.current_turn_index = next_index(state.current_turn_index, state.direction, total)
        state.log(f"{name} played {card.name}")

    def _draw_cards(self, state: UnoState, player_index: int, count: int) -> None:
        hand = state.hand_of(state.players[player_index].id)
        for _ in range(count):
            if not state.deck:
                if len(state.discard_pile) <= 1:
                    break
                top = state.discard_pile.pop()
                state.reshuffles += 1
                state.deck = shuffled(
                    state.discard_pile, make_rng(state.seed, "reshuffle", state.reshuffles)
                )
                state.discard_pile = [top]
                state.log("Deck reshuffled")
            hand.cards.append(state.deck.pop(0))

    def check_terminal(self, state: UnoState) -> Optional[Outcome]:
        if state.winner is None:
            return None
        hand = state.hand_of(state.winner)
        reason = "empty_hand" if hand is not None and not hand.cards else "opponent_left"
        return Outcome(winner=state.winner, is_draw=False, reason=reason)

    def move_count(self, state: UnoState) -> int:
        return state.moves_played
