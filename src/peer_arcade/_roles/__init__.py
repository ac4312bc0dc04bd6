# Area: Roles
"""
Identity and role resolution.

This package contains:
- PeerIdentity (per-connection identity / presence payload)
- Deterministic roster ordering and role resolution
- Room code and channel topic helpers
"""

from .identity import PeerIdentity, create_identity, new_session_id
from .resolver import (
    RoleAssignment,
    Roster,
    dedupe_roster,
    resolve_roles,
    sort_roster,
)
from .room_code import (
    GAME_PREFIXES,
    generate_room_code,
    is_valid_room_code,
    matchmaking_topic,
    normalize_room_code,
    room_topic,
    share_link,
)

__all__ = [
    "GAME_PREFIXES",
    "PeerIdentity",
    "RoleAssignment",
    "Roster",
    "create_identity",
    "dedupe_roster",
    "generate_room_code",
    "is_valid_room_code",
    "matchmaking_topic",
    "new_session_id",
    "normalize_room_code",
    "resolve_roles",
    "room_topic",
    "share_link",
    "sort_roster",
]
