"""
peer_arcade.errors — Custom exception classes
==============================================

Defines the exception hierarchy for transport, protocol and
configuration failures. Each exception stores full context for
structured logging.

Move validation failures are NOT exceptions: engines report them
through ``MoveResult(accepted=False)`` and they never leave the peer.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class PeerArcadeError(Exception):
    """Base exception for all peer_arcade errors."""

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.__class__.__name__,
            subject="peer_arcade",
            details={},
            errors=[str(self)],
        )


class ConnectionTimeoutError(PeerArcadeError):
    """Raised when a channel subscription is not confirmed in time."""

    def __init__(self, topic: str, timeout_seconds: float):
        self.topic = topic
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Subscription to '{topic}' not confirmed after {timeout_seconds} seconds"
        )

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="CONNECTION_TIMEOUT",
            subject=self.topic,
            details={"timeout_seconds": self.timeout_seconds},
            errors=["Reload the room to retry the connection"],
        )


class TransportError(PeerArcadeError):
    """Raised when the channel refuses a track or send request."""

    def __init__(self, operation: str, topic: str, status: str):
        self.operation = operation
        self.topic = topic
        self.status = status
        super().__init__(f"Channel '{topic}' {operation} failed with status '{status}'")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="TRANSPORT_FAILURE",
            subject=self.topic,
            details={"operation": self.operation, "status": self.status},
            errors=None,
        )


class ProtocolError(PeerArcadeError):
    """Raised when an incoming envelope is unknown or malformed."""

    def __init__(
        self,
        event: str,
        errors: List[str],
        raw: Optional[Dict[str, Any]] = None,
    ):
        self.event = event
        self.errors = errors
        self.raw = raw or {}
        super().__init__(f"Invalid '{event}' envelope: {errors}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="PROTOCOL_VIOLATION",
            subject=self.event,
            details=self.raw,
            errors=self.errors,
        )


class GameStartError(PeerArcadeError):
    """Raised when a start-game request is refused."""

    def __init__(self, reason: str, room_code: str = ""):
        self.reason = reason
        self.room_code = room_code
        super().__init__(f"Cannot start game in room '{room_code}': {reason}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="GAME_START_REFUSED",
            subject=self.room_code,
            details={"reason": self.reason},
            errors=None,
        )


class ConfigError(PeerArcadeError, ValueError):
    """Raised when the runner configuration is invalid."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__(f"Invalid configuration: {problems}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="INVALID_CONFIG",
            subject="config",
            details={},
            errors=self.problems,
        )


def _format_error_block(
    error_type: str,
    subject: str,
    details: Dict[str, Any],
    errors: Optional[List[str]],
) -> str:
    """Format a structured error block for terminal and file logs."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " PEER ARCADE ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Subject:      {subject}",
    ]

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        lines.append(_indent_json(details))

    if errors:
        lines.append("")
        lines.append(" ── PROBLEMS " + "─" * 51)
        for error in errors:
            lines.append(f" • {error}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
