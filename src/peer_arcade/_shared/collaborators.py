# Area: Shared
"""
peer_arcade._shared.collaborators — External collaborator interfaces
====================================================================

Identity lookup, the room registry and game history live outside the
peer protocol. This module defines the interfaces the room depends on
plus SQLite-backed and in-memory implementations.

Registry calls are best effort: callers log failures and carry on.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Protocol

from .database import DEFAULT_DB_PATH, BaseRepository

logger = logging.getLogger("peer_arcade.collaborators")

ROOM_EXPIRY_SECONDS = 180


class IdentityProvider(Protocol):
    def lookup(self, user_id: str) -> Optional[Dict[str, str]]:
        """Return ``{"id", "displayName"}`` or None for unknown users."""
        ...


class RoomRegistry(Protocol):
    def heartbeat(self, room_code: str, game_type: str = "", host_id: Optional[str] = None) -> None:
        ...

    def cleanup_expired(self) -> int:
        ...


class GameHistoryStore(Protocol):
    def save_game(
        self,
        game_type: str,
        player1: str,
        player2: Optional[str],
        winner: Optional[str],
        moves_count: int,
        duration_seconds: float,
    ) -> None:
        ...


class StaticIdentityProvider:
    """In-memory profiles keyed by user id."""

    def __init__(self, profiles: Optional[Dict[str, str]] = None):
        self._profiles = dict(profiles or {})

    def add(self, user_id: str, display_name: str) -> None:
        self._profiles[user_id] = display_name

    def lookup(self, user_id: str) -> Optional[Dict[str, str]]:
        name = self._profiles.get(user_id)
        if name is None:
            return None
        return {"id": user_id, "displayName": name}


def resolve_display_name(
    provider: Optional[IdentityProvider], user_id: Optional[str], fallback: str = "Player"
) -> str:
    """Display name from the provider, or the guest fallback."""
    if provider is None or not user_id:
        return fallback
    profile = provider.lookup(user_id)
    if not profile:
        return fallback
    return profile.get("displayName") or fallback


class SqliteRoomRegistry(BaseRepository):
    """
    Repository for the rooms table.

    A room expires after ``expiry_seconds`` without a heartbeat.
    """

    def __init__(
        self,
        db_path: str = DEFAULT_DB_PATH,
        expiry_seconds: float = ROOM_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(db_path)
        self.expiry_seconds = expiry_seconds
        self._clock = clock

    def heartbeat(self, room_code: str, game_type: str = "", host_id: Optional[str] = None) -> None:
        """Create the room or refresh its last-seen time."""
        query = """
            INSERT INTO rooms (room_code, game_type, host_id, last_heartbeat)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(room_code) DO UPDATE SET
                last_heartbeat = excluded.last_heartbeat,
                host_id = COALESCE(excluded.host_id, rooms.host_id)
        """
        self._execute(query, (room_code, game_type, host_id, self._clock()))

    def cleanup_expired(self) -> int:
        """
        Delete rooms whose last heartbeat is older than the expiry.

        Returns:
            Number of rooms removed
        """
        cutoff = self._clock() - self.expiry_seconds
        removed = self._execute_count("DELETE FROM rooms WHERE last_heartbeat < ?", (cutoff,))
        if removed:
            logger.info(f"Removed {removed} expired room(s)")
        return removed

    def get_room(self, room_code: str) -> Optional[Dict[str, Any]]:
        return self._execute_one("SELECT * FROM rooms WHERE room_code = ?", (room_code,))

    def active_rooms(self, game_type: Optional[str] = None) -> List[Dict[str, Any]]:
        if game_type:
            query = "SELECT * FROM rooms WHERE game_type = ? ORDER BY last_heartbeat DESC"
            return self._execute(query, (game_type,), fetch=True) or []
        return self._execute("SELECT * FROM rooms ORDER BY last_heartbeat DESC", fetch=True) or []


class SqliteGameHistoryStore(BaseRepository):
    """Repository for the game_history table."""

    def save_game(
        self,
        game_type: str,
        player1: str,
        player2: Optional[str],
        winner: Optional[str],
        moves_count: int,
        duration_seconds: float,
    ) -> None:
        """
        Record one finished game.

        Args:
            game_type: caro / battleship / uno / memory
            player1: Host player id
            player2: Opponent id (None for solo games)
            winner: Winner id, "draw", or None
            moves_count: Engine-defined move count
            duration_seconds: Wall time from start to finish
        """
        query = """
            INSERT INTO game_history
            (game_type, player1, player2, winner, moves_count, duration_seconds)
            VALUES (?, ?, ?, ?, ?, ?)
        """
        self._execute(query, (game_type, player1, player2, winner, moves_count, duration_seconds))

    def history_for(self, player_id: str) -> List[Dict[str, Any]]:
        query = """
            SELECT * FROM game_history
            WHERE player1 = ? OR player2 = ?
            ORDER BY id DESC
        """
        return self._execute(query, (player_id, player_id), fetch=True) or []

    def wins_for(self, player_id: str) -> int:
        row = self._execute_one(
            "SELECT COUNT(*) AS wins FROM game_history WHERE winner = ?", (player_id,)
        )
        return row["wins"] if row else 0
