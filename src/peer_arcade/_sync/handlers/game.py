# Area: Sync
"""
peer_arcade._sync.handlers.game — Game lifecycle handlers
=========================================================

game_start, full-state snapshots, host-only actions, late-joiner
resync and restart.
"""

from __future__ import annotations

import logging
from typing import Any, List

from pydantic import ValidationError

from ..enums import SyncMode
from ..handler_base import BaseRoomHandler
from ..messages import (
    GameActionEnvelope,
    GameStartEnvelope,
    GameUpdateEnvelope,
    RequestStateEnvelope,
    RestartEnvelope,
    SyncStateEnvelope,
    SyncStatePayload,
)

logger = logging.getLogger("peer_arcade.sync.handler")


class GameStartHandler(BaseRoomHandler):
    """Build the initial state locally from the host's seed and player list."""

    def handle(self, envelope: GameStartEnvelope) -> List[Any]:
        p = envelope.payload
        self.log_handling(envelope.event, p.host_id)
        room = self.room
        if p.game_type != room.game_type:
            logger.warning(f"Ignoring game_start for {p.game_type} in a {room.game_type} room")
            return []
        try:
            state = room.engine.initial_state(
                p.players, p.host_id, seed=p.seed, options=room.local_options(p.options)
            )
        except (ValueError, TypeError, IndexError) as e:
            logger.warning(f"Ignoring game_start with unusable options: {e}")
            return []
        room.begin_game(state, p.host_id)
        return []


class GameUpdateHandler(BaseRoomHandler):
    """Last-write-wins: overwrite local state with any seated sender's snapshot."""

    def handle(self, envelope: GameUpdateEnvelope) -> List[Any]:
        p = envelope.payload
        room = self.room
        self.log_handling(envelope.event, p.sender_id)
        if p.game_type != room.game_type or not room.engine.shares_snapshots:
            logger.warning(f"Ignoring {p.game_type} snapshot in a {room.game_type} room")
            return []
        if not self.is_seated(p.sender_id):
            logger.warning(f"Ignoring snapshot from unseated peer {p.sender_id}")
            return []
        try:
            state = room.engine.from_snapshot(p.state)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed snapshot: {e.error_count()} error(s)")
            return []
        room.install_state(state)
        return []


class GameActionHandler(BaseRoomHandler):
    """Host side of host-only games: apply a peer's action, publish the result."""

    def handle(self, envelope: GameActionEnvelope) -> List[Any]:
        move = envelope.payload
        room = self.room
        self.log_handling(envelope.event, move.actor_id)
        if room.sync_mode != SyncMode.HOST_ONLY or not room.is_game_host:
            return []
        if not self.is_seated(move.actor_id):
            logger.warning(f"Ignoring action from unseated peer {move.actor_id}")
            return []
        state = self.apply(move)
        if state is None:
            return []
        room.install_state(state)
        return [room.state_envelope()]


class RequestStateHandler(BaseRoomHandler):
    """Answer a late joiner with a full snapshot, if there is one to give."""

    def handle(self, envelope: RequestStateEnvelope) -> List[Any]:
        requester = envelope.payload.requester_id
        room = self.room
        self.log_handling(envelope.event, requester)
        if requester == room.my_id:
            return []
        if room.game is None or not room.engine.shares_snapshots:
            return []
        return [SyncStateEnvelope(payload=SyncStatePayload(
            game_type=room.game_type,
            state=room.engine.to_snapshot(room.game),
            phase=room.game.phase,
            players=room.players,
            responder_id=room.my_id,
            target_id=requester,
        ))]


class SyncStateHandler(BaseRoomHandler):
    """Apply only the first reply to our own request_state."""

    def handle(self, envelope: SyncStateEnvelope) -> List[Any]:
        p = envelope.payload
        room = self.room
        self.log_handling(envelope.event, p.responder_id)
        if not room.awaiting_sync:
            logger.debug(f"Ignoring sync_state from {p.responder_id}: not awaiting")
            return []
        if p.target_id and p.target_id != room.my_id:
            return []
        if p.game_type != room.game_type:
            return []
        try:
            state = room.engine.from_snapshot(p.state)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed sync_state: {e.error_count()} error(s)")
            return []
        room.awaiting_sync = False
        room.install_state(state, players=p.players or None)
        logger.info(f"State synced from {p.responder_id} ({state.phase})")
        return []


class RestartHandler(BaseRoomHandler):
    """Every peer drops its game and returns to the lobby."""

    def handle(self, envelope: RestartEnvelope) -> List[Any]:
        self.log_handling(envelope.event)
        self.room.reset_to_lobby()
        return []
