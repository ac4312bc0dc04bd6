# Area: Roles
"""
peer_arcade._roles.room_code — Room codes and channel topics
============================================================

Room codes are 6 characters from an alphabet without look-alikes
(no 0/O, no 1/I/L), optionally prefixed per game type for routing.
"""

from __future__ import annotations

import re
import secrets
from typing import Optional

ROOM_CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 6

GAME_PREFIXES = {
    "caro": "CR-",
    "battleship": "BS-",
    "uno": "UO-",
    "memory": "MM-",
}

_CODE_RE = re.compile(
    r"^(?:(?P<prefix>[A-Z]{2})-)?(?P<code>[%s]{%d})$" % (ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH)
)


def generate_room_code(game_type: Optional[str] = None) -> str:
    """Random code, prefixed when a known game type is given."""
    code = "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))
    return GAME_PREFIXES.get(game_type or "", "") + code


def is_valid_room_code(code: str, game_type: Optional[str] = None) -> bool:
    match = _CODE_RE.match(code or "")
    if not match:
        return False
    prefix = match.group("prefix")
    if prefix is None:
        return True
    expected = GAME_PREFIXES.get(game_type) if game_type else None
    if expected is not None:
        return prefix + "-" == expected
    return prefix + "-" in GAME_PREFIXES.values()


def normalize_room_code(code: str, game_type: Optional[str] = None) -> str:
    """Upper-case user input and add the game prefix when it is missing."""
    code = code.strip().upper()
    prefix = GAME_PREFIXES.get(game_type or "", "")
    if prefix and not code.startswith(prefix):
        code = prefix + code
    return code


def room_topic(game_type: str, room_code: str) -> str:
    return f"room:{game_type}:{room_code.upper()}"


def matchmaking_topic(game_type: str) -> str:
    return f"matchmaking:{game_type}"


def share_link(base_url: str, game_type: str, room_code: str) -> str:
    return f"{base_url.rstrip('/')}/game/{game_type}/{room_code}"
