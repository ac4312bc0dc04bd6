# Area: Roles
"""
peer_arcade._roles.resolver — Deterministic role resolution
===========================================================

Every peer orders the roster the same way (join time, then session id)
and reads its role off that order. Nothing is negotiated: the same
roster snapshot always yields the same host and turn order on every
peer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from .identity import PeerIdentity

Roster = Tuple[PeerIdentity, ...]


def roster_key(peer: PeerIdentity) -> tuple:
    return (peer.joined_at, peer.session_id)


def sort_roster(entries: Iterable[PeerIdentity]) -> Roster:
    """Order peers by join time, ties broken by session id."""
    return tuple(sorted(entries, key=roster_key))


def dedupe_roster(entries: Iterable[PeerIdentity]) -> Roster:
    """Keep one entry per session id (last write wins), then sort."""
    by_session = {}
    for peer in entries:
        by_session[peer.session_id] = peer
    return sort_roster(by_session.values())


@dataclass(frozen=True)
class RoleAssignment:
    """
    Roles derived from one roster snapshot.

    Attributes:
        my_role_index: Index of this peer in the sorted roster (-1 if absent)
        is_host: True if this peer is at index 0, or alone/absent
        host_id: Session id of the host, if any
        opponent: Latest-joined peer other than self (two-player games)
        opponents: Every other peer in roster order
        roster: The sorted roster the roles were derived from
    """

    my_role_index: int
    is_host: bool
    host_id: Optional[str]
    opponent: Optional[PeerIdentity]
    opponents: Tuple[PeerIdentity, ...] = field(default_factory=tuple)
    roster: Roster = field(default_factory=tuple)

    @property
    def player_count(self) -> int:
        return len(self.roster)

    def can_start(self, min_players: int = 2, allow_solo: bool = False) -> bool:
        """Host may start once enough peers are present (or solo is allowed)."""
        if not self.is_host or self.my_role_index < 0:
            return False
        return allow_solo or self.player_count >= min_players


def resolve_roles(roster: Iterable[PeerIdentity], my_id: str) -> RoleAssignment:
    """
    Derive this peer's roles from a roster snapshot.

    Pure function of the roster contents: insertion order does not matter.

    Args:
        roster: Peers currently present (any order, may contain duplicates)
        my_id: This peer's session id

    Returns:
        RoleAssignment for ``my_id``
    """
    ordered = dedupe_roster(roster)
    ids = [peer.session_id for peer in ordered]

    if my_id not in ids:
        return RoleAssignment(
            my_role_index=-1,
            is_host=True,
            host_id=ids[0] if ids else None,
            opponent=None,
            opponents=ordered,
            roster=ordered,
        )

    index = ids.index(my_id)
    others = tuple(peer for peer in ordered if peer.session_id != my_id)
    # latest joiner, not first other entry: stable during reconnect races
    opponent = max(others, key=roster_key) if others else None

    return RoleAssignment(
        my_role_index=index,
        is_host=index == 0,
        host_id=ids[0],
        opponent=opponent,
        opponents=others,
        roster=ordered,
    )
