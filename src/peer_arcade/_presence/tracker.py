# Area: Presence
"""
peer_arcade._presence.tracker — Presence roster tracking
========================================================

Maintains the room roster from presence events. ``sync`` carries the
whole presence map and replaces the roster wholesale; ``join`` and
``leave`` are informational, except that a leave is reported to the
session so it can apply the abandonment rule.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .._roles import PeerIdentity, RoleAssignment, Roster, dedupe_roster, resolve_roles

logger = logging.getLogger("peer_arcade.presence")

RosterListener = Callable[[Roster], None]
LeaveListener = Callable[[str], None]


def parse_presence_entries(entries: Iterable[Dict[str, Any]]) -> List[PeerIdentity]:
    """Parse tracked payloads, skipping malformed entries."""
    peers = []
    for entry in entries:
        try:
            peers.append(PeerIdentity.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping malformed presence entry: {e.error_count()} error(s)")
    return peers


class PresenceTracker:
    """
    Roster owner for one peer.

    Usage:
        tracker = PresenceTracker(my_id, on_roster=..., on_leave=...)
        tracker.handle_sync(event.state)
        roles = tracker.roles()

    Attributes:
        my_id: This peer's session id
        roster: Sorted, deduplicated roster from the last sync
    """

    def __init__(
        self,
        my_id: str,
        on_roster: Optional[RosterListener] = None,
        on_leave: Optional[LeaveListener] = None,
    ):
        self.my_id = my_id
        self.roster: Roster = ()
        self._on_roster = on_roster
        self._on_leave = on_leave

    def handle_sync(self, state: Dict[str, List[Dict[str, Any]]]) -> Roster:
        """
        Replace the roster from a full presence snapshot.

        Args:
            state: presence key -> list of tracked payloads

        Returns:
            The new sorted roster
        """
        entries = [entry for presences in state.values() for entry in presences]
        self.roster = dedupe_roster(parse_presence_entries(entries))
        logger.debug(
            f"Presence sync: {[peer.session_id for peer in self.roster]}"
        )
        if self._on_roster:
            self._on_roster(self.roster)
        return self.roster

    def handle_join(self, key: str, new_presences: List[Dict[str, Any]]) -> None:
        names = [p.get("displayName", key) for p in new_presences]
        logger.info(f"Peer joined: {key} {names}")

    def handle_leave(self, key: str, left_presences: List[Dict[str, Any]]) -> List[str]:
        """
        Report departed sessions.

        Returns:
            Session ids that left (payload ids, falling back to the key)
        """
        left = [p.get("sessionId", key) for p in left_presences] or [key]
        for session_id in left:
            logger.info(f"Peer left: {session_id}")
            if self._on_leave:
                self._on_leave(session_id)
        return left

    def roles(self) -> RoleAssignment:
        return resolve_roles(self.roster, self.my_id)

    def find(self, session_id: str) -> Optional[PeerIdentity]:
        for peer in self.roster:
            if peer.session_id == session_id:
                return peer
        return None

    def others(self) -> List[PeerIdentity]:
        return [peer for peer in self.roster if peer.session_id != self.my_id]

    def clear(self) -> None:
        self.roster = ()
