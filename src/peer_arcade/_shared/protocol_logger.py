# Area: Shared
"""
peer_arcade._shared.protocol_logger — Protocol message logging
==============================================================

One colored line per broadcast sent or received, with the room code,
the counterpart and this peer's role (HOST or GUEST).
"""

from __future__ import annotations

import sys
from datetime import datetime
from typing import Optional

# ══════════════════════════════════════════════════════════════
# ANSI COLOR CODES
# ══════════════════════════════════════════════════════════════

GREEN = "\033[32m"         # Protocol messages
ORANGE = "\033[38;5;208m"  # Presence changes
RED = "\033[31m"           # Errors
RESET = "\033[0m"

# ══════════════════════════════════════════════════════════════
# EVENT → DISPLAY NAME
# ══════════════════════════════════════════════════════════════

EVENT_DISPLAY_NAMES = {
    "game_start": "START-GAME",
    "game_update": "STATE-SNAPSHOT",
    "gameState": "STATE-SNAPSHOT",
    "game_action": "ACTION",
    "gameAction": "ACTION",
    "fire": "FIRE",
    "fire_result": "FIRE-VERDICT",
    "player_ready": "FLEET-READY",
    "request_state": "STATE-REQUEST",
    "sync_state": "STATE-REPLY",
    "chat": "CHAT",
    "emoji": "EMOJI",
    "log": "LOG",
    "restart": "RESTART",
    "match_found": "MATCH-FOUND",
}


class ProtocolLogger:
    """Logger for room broadcasts and presence changes."""

    def __init__(self, is_host: bool = False, stream=None):
        self.is_host = is_host
        self.stream = stream
        self._room_code: str = "------"

    def set_room_code(self, room_code: str) -> None:
        self._room_code = room_code or "------"

    def set_host(self, is_host: bool) -> None:
        self.is_host = is_host

    def _get_role(self) -> str:
        return "HOST" if self.is_host else "GUEST"

    def _now(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def _emit(self, line: str) -> None:
        print(line, file=self.stream or sys.stdout)

    def log_received(self, event: str, sender: Optional[str] = None) -> None:
        display = EVENT_DISPLAY_NAMES.get(event, event)
        self._emit(
            f"{GREEN}{self._now()} | ROOM: {self._room_code:10} | RECEIVED | "
            f"from {sender or '-':14} | {display:15} | ROLE: {self._get_role()}{RESET}"
        )

    def log_sent(self, event: str, target: Optional[str] = None) -> None:
        display = EVENT_DISPLAY_NAMES.get(event, event)
        self._emit(
            f"{GREEN}{self._now()} | ROOM: {self._room_code:10} | SENT     | "
            f"to   {target or 'room':14} | {display:15} | ROLE: {self._get_role()}{RESET}"
        )

    def log_presence(self, change: str, session_id: str) -> None:
        self._emit(
            f"{ORANGE}{self._now()} | ROOM: {self._room_code:10} | PRESENCE | "
            f"{change:8} {session_id:14} | ROLE: {self._get_role()}{RESET}"
        )

    def log_error(self, description: str) -> None:
        print(f"{RED}[ERROR] {self._now()} | {description}{RESET}", file=sys.stderr)


_protocol_logger: Optional[ProtocolLogger] = None


def get_protocol_logger() -> ProtocolLogger:
    """Get or create the global protocol logger instance."""
    global _protocol_logger
    if _protocol_logger is None:
        _protocol_logger = ProtocolLogger()
    return _protocol_logger
