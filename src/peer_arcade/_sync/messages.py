# Area: Sync
"""
peer_arcade._sync.messages — Broadcast envelopes
================================================

Every broadcast is ``{"type": "broadcast", "event": <name>, "payload": {...}}``.
The set of events is closed: ``parse_envelope`` validates the payload
for its event and raises ProtocolError for anything unknown or malformed.

Wire field names are camelCase; Python attributes are snake_case.
"""

from __future__ import annotations

import uuid
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .._engines import Move, PlayerSeat
from ..errors import ProtocolError

BROADCAST = "broadcast"


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ═══════════════════════════════════════════════════════════════════
# GAME LIFECYCLE
# ═══════════════════════════════════════════════════════════════════

class GameStartPayload(_Payload):
    game_type: str = Field(..., alias="gameType")
    players: List[PlayerSeat]
    host_id: str = Field(..., alias="hostId")
    seed: int
    options: Dict[str, Any] = Field(default_factory=dict)


class GameUpdatePayload(_Payload):
    game_type: str = Field(..., alias="gameType")
    state: Dict[str, Any]
    sender_id: Optional[str] = Field(None, alias="senderId")


class RequestStatePayload(_Payload):
    requester_id: str = Field(..., alias="requesterId")


class SyncStatePayload(_Payload):
    game_type: str = Field(..., alias="gameType")
    state: Dict[str, Any]
    phase: str
    players: List[PlayerSeat] = Field(default_factory=list)
    responder_id: str = Field(..., alias="responderId")
    target_id: Optional[str] = Field(None, alias="targetId")


class RestartPayload(_Payload):
    pass


# ═══════════════════════════════════════════════════════════════════
# BATTLESHIP
# ═══════════════════════════════════════════════════════════════════

class FirePayload(_Payload):
    x: int
    y: int
    actor_id: str = Field(..., alias="actorId")


class FireResultPayload(_Payload):
    x: int
    y: int
    result: Literal["hit", "miss"]
    game_over: bool = Field(False, alias="gameOver")
    actor_id: str = Field(..., alias="actorId")


class PlayerReadyPayload(_Payload):
    actor_id: str = Field(..., alias="actorId")


# ═══════════════════════════════════════════════════════════════════
# COSMETICS
# ═══════════════════════════════════════════════════════════════════

class ChatPayload(_Payload):
    id: str
    sender_id: str = Field(..., alias="senderId")
    sender_name: str = Field("", alias="senderName")
    content: str = Field(..., min_length=1, max_length=500)
    timestamp: float


class EmojiPayload(_Payload):
    id: str
    sender_id: str = Field(..., alias="senderId")
    emoji_name: str = Field(..., alias="emojiName")
    timestamp: float


class LogPayload(_Payload):
    message: str


# ═══════════════════════════════════════════════════════════════════
# MATCHMAKING
# ═══════════════════════════════════════════════════════════════════

class MatchFoundPayload(_Payload):
    target_session_id: str = Field(..., alias="targetSessionId")
    room_id: str = Field(..., alias="roomId")


# ═══════════════════════════════════════════════════════════════════
# ENVELOPES
# ═══════════════════════════════════════════════════════════════════

class _Envelope(BaseModel):
    type: Literal["broadcast"] = BROADCAST

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class GameStartEnvelope(_Envelope):
    event: Literal["game_start"] = "game_start"
    payload: GameStartPayload


class GameUpdateEnvelope(_Envelope):
    event: Literal["game_update", "gameState"] = "game_update"
    payload: GameUpdatePayload


class GameActionEnvelope(_Envelope):
    event: Literal["game_action", "gameAction"] = "game_action"
    payload: Move


class FireEnvelope(_Envelope):
    event: Literal["fire"] = "fire"
    payload: FirePayload


class FireResultEnvelope(_Envelope):
    event: Literal["fire_result"] = "fire_result"
    payload: FireResultPayload


class PlayerReadyEnvelope(_Envelope):
    event: Literal["player_ready"] = "player_ready"
    payload: PlayerReadyPayload


class RequestStateEnvelope(_Envelope):
    event: Literal["request_state"] = "request_state"
    payload: RequestStatePayload


class SyncStateEnvelope(_Envelope):
    event: Literal["sync_state"] = "sync_state"
    payload: SyncStatePayload


class ChatEnvelope(_Envelope):
    event: Literal["chat"] = "chat"
    payload: ChatPayload


class EmojiEnvelope(_Envelope):
    event: Literal["emoji"] = "emoji"
    payload: EmojiPayload


class LogEnvelope(_Envelope):
    event: Literal["log"] = "log"
    payload: LogPayload


class RestartEnvelope(_Envelope):
    event: Literal["restart"] = "restart"
    payload: RestartPayload = Field(default_factory=RestartPayload)


class MatchFoundEnvelope(_Envelope):
    event: Literal["match_found"] = "match_found"
    payload: MatchFoundPayload


Envelope = Annotated[
    Union[
        GameStartEnvelope,
        GameUpdateEnvelope,
        GameActionEnvelope,
        FireEnvelope,
        FireResultEnvelope,
        PlayerReadyEnvelope,
        RequestStateEnvelope,
        SyncStateEnvelope,
        ChatEnvelope,
        EmojiEnvelope,
        LogEnvelope,
        RestartEnvelope,
        MatchFoundEnvelope,
    ],
    Field(discriminator="event"),
]

_ENVELOPE_ADAPTER = TypeAdapter(Envelope)

EVENT_NAMES = frozenset({
    "game_start", "game_update", "gameState", "game_action", "gameAction",
    "fire", "fire_result", "player_ready", "request_state", "sync_state",
    "chat", "emoji", "log", "restart", "match_found",
})


def parse_envelope(raw: Dict[str, Any]) -> Envelope:
    """
    Validate an incoming broadcast.

    Args:
        raw: ``{"event": ..., "payload": ...}`` (``type`` optional)

    Returns:
        The typed envelope

    Raises:
        ProtocolError: If the event is unknown or the payload is malformed
    """
    event = raw.get("event", "") if isinstance(raw, dict) else ""
    if event not in EVENT_NAMES:
        raise ProtocolError(
            event or "<missing>",
            [f"unknown event '{event}'"],
            raw if isinstance(raw, dict) else None,
        )
    data = dict(raw)
    data.setdefault("type", BROADCAST)
    try:
        return _ENVELOPE_ADAPTER.validate_python(data)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ProtocolError(event, problems, raw) from e


def new_message_id() -> str:
    return uuid.uuid4().hex
