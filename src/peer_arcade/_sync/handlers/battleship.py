# Area: Sync
"""
peer_arcade._sync.handlers.battleship — Own-grid verdict handlers
=================================================================

Battleship never shares snapshots. The attacker broadcasts ``fire``;
the defender judges it against its private board and answers with
``fire_result``, which both peers then apply.
"""

from __future__ import annotations

import logging
from typing import Any, List

from ..._engines import Move
from ..handler_base import BaseRoomHandler
from ..messages import (
    FireEnvelope,
    FireResultEnvelope,
    FireResultPayload,
    PlayerReadyEnvelope,
)

logger = logging.getLogger("peer_arcade.sync.handler")


class FireHandler(BaseRoomHandler):
    """Defender side: record the shot, judge it, publish the verdict."""

    def handle(self, envelope: FireEnvelope) -> List[Any]:
        p = envelope.payload
        room = self.room
        self.log_handling(envelope.event, p.actor_id)
        state = self.apply(Move(type="fire", actor_id=p.actor_id, payload={"x": p.x, "y": p.y}))
        if state is None:
            return []
        if state.viewer_id == p.actor_id:
            room.install_state(state)
            return []

        verdict = room.engine.resolve_fire(state, p.x, p.y)
        result = room.engine.apply_move(state, verdict.actor_id, verdict)
        if not result.accepted:
            logger.warning(f"Own verdict rejected: {result.reason}")
            room.install_state(state)
            return []
        room.install_state(result.state)
        return [FireResultEnvelope(payload=FireResultPayload(
            x=p.x,
            y=p.y,
            result=verdict.payload["result"],
            game_over=verdict.payload["game_over"],
            actor_id=verdict.actor_id,
        ))]


class FireResultHandler(BaseRoomHandler):
    """Attacker side: mark the radar and move the turn as the defender says."""

    def handle(self, envelope: FireResultEnvelope) -> List[Any]:
        p = envelope.payload
        self.log_handling(envelope.event, p.actor_id)
        state = self.apply(Move(
            type="fire_result",
            actor_id=p.actor_id,
            payload={"x": p.x, "y": p.y, "result": p.result, "game_over": p.game_over},
        ))
        if state is not None:
            self.room.install_state(state)
        return []


class PlayerReadyHandler(BaseRoomHandler):
    """Record that the opponent locked their fleet."""

    def handle(self, envelope: PlayerReadyEnvelope) -> List[Any]:
        actor_id = envelope.payload.actor_id
        self.log_handling(envelope.event, actor_id)
        state = self.apply(Move(type="ready", actor_id=actor_id))
        if state is not None:
            self.room.install_state(state)
        return []
