# Area: Engines
"""
peer_arcade._engines.uno_cards — Uno card table
===============================================

Cards are plain integers. The table has 8 rows of 14 slots (112 ids):
rows 0-3 and 4-7 repeat the colors red, yellow, green, blue. Slot 0-9 is
a number, 10 Skip, 11 Reverse, 12 Draw2 and 13 a black card (Wild in
rows 0-3, Wild Draw 4 in rows 4-7).

The second zero of each color (ids 56, 70, 84, 98) is removed, leaving
the standard 108-card deck.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Sequence

TABLE_SIZE = 112
ROW_LENGTH = 14
REMOVED_IDS = frozenset({56, 70, 84, 98})

COLORS = ("red", "yellow", "green", "blue")
BLACK = "black"

NUMBER, SKIP, REVERSE, DRAW2, WILD, DRAW4 = (
    "Number", "Skip", "Reverse", "Draw2", "Wild", "Draw4",
)


@dataclass(frozen=True)
class UnoCard:
    """Decoded card."""

    id: int
    color: str
    type: str
    value: int   # 0-9, 20 for action cards, 50 for black cards
    name: str

    @property
    def is_black(self) -> bool:
        return self.color == BLACK


def card_color(card_id: int) -> str:
    if card_id % ROW_LENGTH == 13:
        return BLACK
    return COLORS[(card_id // ROW_LENGTH) % 4]


def card_type(card_id: int) -> str:
    slot = card_id % ROW_LENGTH
    if slot < 10:
        return NUMBER
    if slot == 10:
        return SKIP
    if slot == 11:
        return REVERSE
    if slot == 12:
        return DRAW2
    return DRAW4 if card_id // ROW_LENGTH >= 4 else WILD


def card_value(card_id: int) -> int:
    slot = card_id % ROW_LENGTH
    if slot < 10:
        return slot
    if slot < 13:
        return 20
    return 50


def card_details(card_id: int) -> UnoCard:
    color = card_color(card_id)
    kind = card_type(card_id)
    name = f"{color} {card_id % ROW_LENGTH}" if kind == NUMBER else f"{color} {kind}"
    return UnoCard(id=card_id, color=color, type=kind, value=card_value(card_id), name=name)


def create_deck() -> List[int]:
    return [card_id for card_id in range(TABLE_SIZE) if card_id not in REMOVED_IDS]


def shuffled(cards: Sequence[int], rng: random.Random) -> List[int]:
    deck = list(cards)
    rng.shuffle(deck)
    return deck


def is_playable(card_id: int, top_card_id: int, current_color: str) -> bool:
    """Color match, same number, same action symbol, or any black card."""
    card = card_details(card_id)
    if card.is_black or card.color == current_color:
        return True
    top = card_details(top_card_id)
    if card.type != top.type:
        return False
    return card.type != NUMBER or card.value == top.value
