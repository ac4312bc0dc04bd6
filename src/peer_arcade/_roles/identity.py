# Area: Roles
"""
peer_arcade._roles.identity — Per-connection peer identity
==========================================================

A PeerIdentity lives for one channel connection and doubles as the
presence payload. ``session_id`` is unique per connection, so one
account may hold several connections (tabs, tests) without colliding.
"""

from __future__ import annotations

import secrets
import string
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SESSION_ALPHABET = string.ascii_lowercase + string.digits
SESSION_TOKEN_LENGTH = 7


class PeerIdentity(BaseModel):
    """Presence payload tracked per connection (keyed by session_id)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    session_id: str = Field(..., alias="sessionId")
    user_id: str = Field(..., alias="userId")
    display_name: str = Field("Player", alias="displayName")
    joined_at: datetime = Field(..., alias="joinedAt")
    is_ready: bool = Field(False, alias="isReady")

    @field_validator("joined_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # roster ordering compares join times across peers
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_presence(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def new_session_id() -> str:
    """Opaque per-connection token, e.g. ``sess-k3j9x0a``."""
    token = "".join(secrets.choice(SESSION_ALPHABET) for _ in range(SESSION_TOKEN_LENGTH))
    return f"sess-{token}"


def create_identity(
    user_id: Optional[str] = None,
    display_name: Optional[str] = None,
    *,
    session_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> PeerIdentity:
    """
    Create the identity for a new connection.

    Args:
        user_id: Stable id from the identity provider, or None for a guest
        display_name: Name shown to other peers
        session_id: Override the generated session token (tests)
        now: Join timestamp override (tests)

    Returns:
        PeerIdentity with a fresh session id and join timestamp
    """
    session_id = session_id or new_session_id()
    return PeerIdentity(
        session_id=session_id,
        user_id=user_id or f"guest-{session_id}",
        display_name=display_name or "Player",
        joined_at=now or datetime.now(timezone.utc),
    )
