# Area: Matchmaking
"""
peer_arcade._matchmaking.pairing — Matchmaking pairing protocol
===============================================================

Searchers for one game type share the topic ``matchmaking:<gametype>``.
When a searcher sees another peer, the one with the greater session id
creates a room code and broadcasts ``match_found`` to the other. Both
peers then leave the matchmaking topic and join the room.

With three or more searchers each peer pairs with the first other peer
in roster order. Two creators may pick the same target; the target
follows whichever ``match_found`` arrives first.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from .._presence import PresenceTracker
from .._roles import PeerIdentity, generate_room_code, matchmaking_topic
from .._shared.channel import (
    OK,
    SUBSCRIBED,
    BroadcastEvent,
    Channel,
    PresenceSyncEvent,
    StatusEvent,
    Transport,
    await_subscription,
)
from .._sync.messages import MatchFoundEnvelope, MatchFoundPayload, parse_envelope
from ..errors import ConnectionTimeoutError, ProtocolError, TransportError

logger = logging.getLogger("peer_arcade.matchmaking")

CREATE = "create"
WAIT = "wait"
IDLE = "idle"


@dataclass(frozen=True)
class PairingDecision:
    """
    What a searcher should do after a presence sync.

    Attributes:
        action: "create" (make the room), "wait" (expect match_found)
            or "idle" (nobody else searching)
        opponent_id: Session id of the chosen opponent
    """

    action: str
    opponent_id: Optional[str] = None


@dataclass(frozen=True)
class MatchResult:
    room_code: str
    opponent_id: Optional[str]
    created: bool


def decide_pairing(my_id: str, others: Sequence[PeerIdentity]) -> PairingDecision:
    """
    Pure tie-break: the greater session id creates the room.

    Args:
        my_id: This searcher's session id
        others: Other searchers in roster order (self is filtered out)

    Returns:
        PairingDecision
    """
    candidates = [peer for peer in others if peer.session_id != my_id]
    if not candidates:
        return PairingDecision(IDLE)
    opponent = candidates[0].session_id
    if my_id > opponent:
        return PairingDecision(CREATE, opponent)
    return PairingDecision(WAIT, opponent)


class MatchmakingSession:
    """
    One searcher on the matchmaking topic.

    Usage:
        search = MatchmakingSession("uno", identity, hub, pump=hub.flush)
        search.connect()
        hub.flush()
        search.match  # MatchResult once paired
    """

    def __init__(
        self,
        game_type: str,
        identity: PeerIdentity,
        transport: Transport,
        *,
        pump: Optional[Callable[[], Any]] = None,
        connect_timeout: float = 10.0,
        on_match: Optional[Callable[[MatchResult], None]] = None,
        room_code_factory: Callable[[str], str] = generate_room_code,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.game_type = game_type
        self.identity = identity
        self.my_id = identity.session_id
        self.topic = matchmaking_topic(game_type)
        self.transport = transport
        self.connect_timeout = connect_timeout
        self.on_match = on_match
        self.match: Optional[MatchResult] = None
        self.tracker = PresenceTracker(self.my_id)
        self._room_code_factory = room_code_factory
        self._pump = pump
        self._clock = clock
        self._sleep = sleep
        self._channel: Optional[Channel] = None
        self._subscribed = False

    @property
    def matched(self) -> bool:
        return self.match is not None

    def connect(self, timeout: Optional[float] = None) -> None:
        """Join the matchmaking topic; raises ConnectionTimeoutError."""
        timeout = self.connect_timeout if timeout is None else timeout
        self._channel = self.transport.channel(self.topic, self.my_id)
        self._channel.subscribe(self._on_event)
        try:
            await_subscription(
                self._channel,
                # pairing can complete (and leave the topic) inside the first pump
                lambda: self._subscribed or self.matched,
                timeout,
                pump=self._pump,
                clock=self._clock,
                sleep=self._sleep,
            )
        except ConnectionTimeoutError:
            self._channel = None
            raise

    def cancel(self) -> None:
        """Stop searching."""
        if self._channel is not None:
            self._channel.unsubscribe()
        self._channel = None
        self._subscribed = False

    def _on_event(self, event: Any) -> None:
        if self.matched:
            return
        if isinstance(event, StatusEvent):
            self._subscribed = event.status == SUBSCRIBED
            if self._subscribed:
                status = self._channel.track(self.identity.to_presence())
                if status != OK:
                    logger.error(str(TransportError("track", self.topic, status)))
        elif isinstance(event, PresenceSyncEvent):
            self.tracker.handle_sync(event.state)
            self._on_sync()
        elif isinstance(event, BroadcastEvent):
            self._on_broadcast(event)

    def _on_sync(self) -> None:
        decision = decide_pairing(self.my_id, self.tracker.others())
        if decision.action == IDLE:
            logger.debug("No other searchers yet")
            return
        if decision.action == WAIT:
            logger.debug(f"Waiting for {decision.opponent_id} to create the room")
            return

        room_code = self._room_code_factory(self.game_type)
        envelope = MatchFoundEnvelope(payload=MatchFoundPayload(
            target_session_id=decision.opponent_id,
            room_id=room_code,
        ))
        status = self._channel.send(envelope.to_wire())
        if status != OK:
            logger.error(str(TransportError("send", self.topic, status)))
            return
        logger.info(f"Created room {room_code} for {decision.opponent_id}")
        self._matched(MatchResult(room_code, decision.opponent_id, created=True))

    def _on_broadcast(self, event: BroadcastEvent) -> None:
        try:
            envelope = parse_envelope({"event": event.event, "payload": event.payload})
        except ProtocolError as e:
            logger.warning(f"Dropped envelope: {e}")
            return
        if not isinstance(envelope, MatchFoundEnvelope):
            return
        p = envelope.payload
        if p.target_session_id != self.my_id:
            return
        logger.info(f"Matched into room {p.room_id}")
        self._matched(MatchResult(p.room_id, None, created=False))

    def _matched(self, result: MatchResult) -> None:
        self.match = result
        self.cancel()
        if self.on_match:
            self.on_match(result)
