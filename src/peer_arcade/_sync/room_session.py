# Area: Sync
"""
peer_arcade._sync.room_session — One peer's view of one room
============================================================

RoomSession is the actor for a room. It owns the presence tracker,
the lifecycle state machine, the game state and the cosmetic buffers.
Channel callbacks only ``post()`` events into the mailbox; the mailbox
is drained one event at a time, and the envelopes a handler returns are
broadcast after that handler has finished.

Public operations run through the same mailbox, so they never
interleave with an event being handled.

Three synchronization modes, chosen by the game engine:
- snapshot (Caro, Memory): the acting peer applies its move and
  broadcasts the whole state; receivers overwrite unconditionally
- host-only (Uno): guests broadcast actions, only the game host applies
  them and broadcasts the resulting state
- own-grid (Battleship): fire / fire_result verdicts, no snapshots
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional

from .._engines import (
    AuthorityMode,
    GameEngine,
    GameState,
    Move,
    MoveResult,
    Outcome,
    PlayerSeat,
    get_engine,
    new_seed,
)
from .._engines.base import DRAW
from .._presence import PresenceTracker
from .._roles import PeerIdentity, RoleAssignment, room_topic
from .._roles.resolver import roster_key
from .._shared.channel import (
    OK,
    SUBSCRIBED,
    BroadcastEvent,
    Channel,
    PresenceJoinEvent,
    PresenceLeaveEvent,
    PresenceSyncEvent,
    StatusEvent,
    Transport,
    await_subscription,
)
from .._shared.collaborators import GameHistoryStore, RoomRegistry
from .._shared.heartbeat import IntervalTracker
from .._shared.protocol_logger import ProtocolLogger
from ..errors import ConnectionTimeoutError, GameStartError, ProtocolError, TransportError
from .broadcast_router import BroadcastRouter
from .cosmetics import DEFAULT_CHAT_LIMIT, DEFAULT_EMOJI_TTL, ChatLine, Cosmetics, EmojiReaction
from .enums import RoomEvent, RoomState, SyncMode
from .handlers import (
    ChatHandler,
    EmojiHandler,
    FireHandler,
    FireResultHandler,
    GameActionHandler,
    GameStartHandler,
    GameUpdateHandler,
    LogHandler,
    PlayerReadyHandler,
    RequestStateHandler,
    RestartHandler,
    SyncStateHandler,
)
from .messages import (
    ChatEnvelope,
    ChatPayload,
    EmojiEnvelope,
    EmojiPayload,
    FireEnvelope,
    FirePayload,
    GameActionEnvelope,
    GameStartEnvelope,
    GameStartPayload,
    GameUpdateEnvelope,
    GameUpdatePayload,
    LogEnvelope,
    LogPayload,
    PlayerReadyEnvelope,
    PlayerReadyPayload,
    RequestStateEnvelope,
    RequestStatePayload,
    RestartEnvelope,
    new_message_id,
    parse_envelope,
)
from .state_machine import RoomStateMachine

logger = logging.getLogger("peer_arcade.sync.room")

DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_HEARTBEAT_INTERVAL = 60.0

# payload fields that name the peer behind an envelope, in lookup order
_SENDER_FIELDS = ("senderId", "actorId", "requesterId", "responderId", "hostId")


def sync_mode_for(engine: GameEngine) -> SyncMode:
    if engine.authority_mode == AuthorityMode.HOST_ONLY:
        return SyncMode.HOST_ONLY
    if not engine.shares_snapshots:
        return SyncMode.OWN_GRID
    return SyncMode.SNAPSHOT


class _Command:
    """A public operation queued in the mailbox."""

    def __init__(self, fn: Callable[[], Any]):
        self.fn = fn
        self.done = False
        self.result: Any = None
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            self.result = self.fn()
        except Exception as e:
            self.error = e
        self.done = True


class RoomSession:
    """
    One peer's membership in one room.

    Usage:
        room = RoomSession("caro", "CR-ABC234", identity, hub, pump=hub.flush)
        room.connect()
        room.start_game()
        room.submit_move("place", {"x": 50, "y": 50})

    Attributes:
        game: Current game state, None in the lobby
        players: Player list frozen when the game started
        game_host_id: Host of the running game (frozen with the players)
        opponent_id: Opponent recorded at game start (abandonment rule)
        awaiting_sync: True between request_state and the first sync_state
        cosmetics: Chat, emoji and log buffers
    """

    def __init__(
        self,
        game_type: str,
        room_code: str,
        identity: PeerIdentity,
        transport: Transport,
        *,
        history: Optional[GameHistoryStore] = None,
        registry: Optional[RoomRegistry] = None,
        protocol_logger: Optional[ProtocolLogger] = None,
        pump: Optional[Callable[[], Any]] = None,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL,
        chat_limit: int = DEFAULT_CHAT_LIMIT,
        emoji_ttl: float = DEFAULT_EMOJI_TTL,
        auto_resync: bool = True,
        on_change: Optional[Callable[["RoomSession"], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.game_type = game_type
        self.engine = get_engine(game_type)
        self.sync_mode = sync_mode_for(self.engine)
        self.room_code = room_code
        self.topic = room_topic(game_type, room_code)
        self.identity = identity
        self.my_id = identity.session_id

        self.transport = transport
        self.history = history
        self.registry = registry
        self.plog = protocol_logger
        self.connect_timeout = connect_timeout
        self.auto_resync = auto_resync
        self.on_change = on_change
        self._pump = pump
        self._clock = clock
        self._wall_clock = wall_clock
        self._sleep = sleep

        self.tracker = PresenceTracker(self.my_id, on_roster=self._on_roster, on_leave=self._on_leave)
        self.machine = RoomStateMachine()
        self.cosmetics = Cosmetics(chat_limit, emoji_ttl, clock)
        self.router = self._build_router()
        self._heartbeat = IntervalTracker(heartbeat_interval, clock)

        self.game: Optional[GameState] = None
        self.players: List[PlayerSeat] = []
        self.game_host_id: Optional[str] = None
        self.opponent_id: Optional[str] = None
        self.awaiting_sync = False

        self._channel: Optional[Channel] = None
        self._subscribed = False
        self._resync_requested = False
        self._started_at: Optional[float] = None
        self._history_recorded = False
        self._mailbox: Deque[Any] = deque()
        self._draining = False

        if self.plog:
            self.plog.set_room_code(room_code)

    def _build_router(self) -> BroadcastRouter:
        router = BroadcastRouter()
        update = GameUpdateHandler(self)
        action = GameActionHandler(self)
        router.register_handler("game_start", GameStartHandler(self))
        router.register_handler("game_update", update)
        router.register_handler("gameState", update)
        router.register_handler("game_action", action)
        router.register_handler("gameAction", action)
        router.register_handler("request_state", RequestStateHandler(self))
        router.register_handler("sync_state", SyncStateHandler(self))
        router.register_handler("restart", RestartHandler(self))
        router.register_handler("fire", FireHandler(self))
        router.register_handler("fire_result", FireResultHandler(self))
        router.register_handler("player_ready", PlayerReadyHandler(self))
        router.register_handler("chat", ChatHandler(self))
        router.register_handler("emoji", EmojiHandler(self))
        router.register_handler("log", LogHandler(self))
        return router

    # ══════════════════════════════════════════════════════════════
    # READ-ONLY VIEW
    # ══════════════════════════════════════════════════════════════

    @property
    def connected(self) -> bool:
        return self._subscribed

    @property
    def roles(self) -> RoleAssignment:
        return self.tracker.roles()

    @property
    def state(self) -> Optional[GameState]:
        return self.game

    @property
    def phase(self) -> RoomState:
        return self.machine.current_state

    @property
    def outcome(self) -> Optional[Outcome]:
        if self.game is None:
            return None
        return self.engine.check_terminal(self.game)

    @property
    def is_game_host(self) -> bool:
        return self.game_host_id is not None and self.game_host_id == self.my_id

    @property
    def is_my_turn(self) -> bool:
        if self.game is None or not self.machine.is_playing:
            return False
        return self.engine.can_act(self.game, self.my_id)

    @property
    def chat(self) -> List[ChatLine]:
        return list(self.cosmetics.chat)

    @property
    def log_lines(self) -> List[str]:
        return list(self.cosmetics.log_lines)

    # ══════════════════════════════════════════════════════════════
    # MAILBOX
    # ══════════════════════════════════════════════════════════════

    def post(self, item: Any) -> None:
        """Queue a channel event or command and drain the mailbox."""
        self._mailbox.append(item)
        if self._draining:
            return
        self._draining = True
        try:
            while self._mailbox:
                self._dispatch(self._mailbox.popleft())
        finally:
            self._draining = False

    def _run(self, fn: Callable[[], Any]) -> Any:
        command = _Command(fn)
        self.post(command)
        if command.error is not None:
            raise command.error
        # a command posted from inside a handler runs after it, result unknown
        return command.result if command.done else None

    def _dispatch(self, item: Any) -> None:
        if isinstance(item, _Command):
            item.run()
        elif isinstance(item, BroadcastEvent):
            self._on_broadcast(item)
        elif isinstance(item, PresenceSyncEvent):
            self.tracker.handle_sync(item.state)
        elif isinstance(item, PresenceJoinEvent):
            if self.plog:
                self.plog.log_presence("JOIN", item.key)
            self.tracker.handle_join(item.key, item.new_presences)
        elif isinstance(item, PresenceLeaveEvent):
            if self.plog:
                self.plog.log_presence("LEAVE", item.key)
            self.tracker.handle_leave(item.key, item.left_presences)
        elif isinstance(item, StatusEvent):
            self._on_status(item)
        else:
            logger.warning(f"Unknown channel event: {item!r}")

    def _on_channel_event(self, event: Any) -> None:
        self.post(event)

    def _on_status(self, event: StatusEvent) -> None:
        if event.status == SUBSCRIBED:
            self._subscribed = True
            logger.info(f"Subscribed to {self.topic}")
            self._track()
        else:
            logger.info(f"Channel {self.topic} status: {event.status}")
            self._subscribed = False

    def _on_broadcast(self, event: BroadcastEvent) -> None:
        try:
            envelope = parse_envelope({"event": event.event, "payload": event.payload})
        except ProtocolError as e:
            logger.warning(f"Dropped envelope: {e}")
            logger.debug(e.format_error_log())
            return
        if self.plog:
            self.plog.log_received(envelope.event, _sender_of(event.payload))
        for outgoing in self.router.route(envelope):
            self._send(outgoing)

    # ══════════════════════════════════════════════════════════════
    # CONNECTION
    # ══════════════════════════════════════════════════════════════

    def connect(self, timeout: Optional[float] = None) -> None:
        """
        Subscribe to the room topic and track this peer's presence.

        Args:
            timeout: Seconds to wait for the subscription, default from init

        Raises:
            ConnectionTimeoutError: If the channel never confirms
        """
        timeout = self.connect_timeout if timeout is None else timeout
        self._channel = self.transport.channel(self.topic, self.my_id)
        self._channel.subscribe(self._on_channel_event)
        try:
            await_subscription(
                self._channel,
                lambda: self._subscribed,
                timeout,
                pump=self._pump,
                clock=self._clock,
                sleep=self._sleep,
            )
        except ConnectionTimeoutError:
            self._channel = None
            raise

    def leave(self) -> None:
        """Unsubscribe; other peers see a presence leave."""
        if self._channel is not None:
            self._channel.unsubscribe()
        self._channel = None
        self._subscribed = False
        self.tracker.clear()
        logger.info(f"Left {self.topic}")

    def _track(self) -> None:
        if self._channel is None:
            return
        status = self._channel.track(self.identity.to_presence())
        if status != OK:
            logger.error(str(TransportError("track", self.topic, status)))

    def _send(self, envelope: Any) -> bool:
        wire = envelope.to_wire()
        status = self._channel.send(wire) if self._channel is not None else "not_connected"
        if status != OK:
            logger.error(str(TransportError("send", self.topic, status)))
            return False
        if self.plog:
            self.plog.log_sent(wire["event"], wire["payload"].get("targetId"))
        return True

    # ══════════════════════════════════════════════════════════════
    # PRESENCE
    # ══════════════════════════════════════════════════════════════

    def _on_roster(self, roster: Any) -> None:
        roles = self.tracker.roles()
        if self.plog:
            self.plog.set_host(roles.is_host and roles.my_role_index >= 0)
        if (
            self.auto_resync
            and self.game is None
            and not self._resync_requested
            and roles.my_role_index > 0
        ):
            self._request_state()
        self._notify()

    def _on_leave(self, session_id: str) -> None:
        if session_id == self.my_id:
            return
        if not self.machine.is_playing or self.game is None:
            return
        if session_id != self.opponent_id or self.game.seat_of(self.my_id) is None:
            return
        logger.info(f"Opponent {session_id} left mid-game, {self.my_id} wins by forfeit")
        self.game = self.engine.forfeit(self.game, self.my_id)
        self.machine.transition(RoomEvent.OPPONENT_LEFT)
        self._record_history(
            self.engine.check_terminal(self.game),
            host_gone=session_id == self.game_host_id,
        )
        self._notify()

    # ══════════════════════════════════════════════════════════════
    # STATE INSTALLATION (used by handlers)
    # ══════════════════════════════════════════════════════════════

    def local_options(self, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        local = dict(options or {})
        local["viewer_id"] = self.my_id
        return local

    def begin_game(self, state: GameState, host_id: str) -> None:
        """Freeze players and host, and enter PLAYING from any room state."""
        if self.machine.current_state != RoomState.LOBBY:
            self.machine.transition(RoomEvent.RESTART)
        self.game = state
        self.players = list(state.players)
        self.game_host_id = host_id
        self.opponent_id = self._pick_opponent()
        self.awaiting_sync = False
        self._started_at = self._clock()
        self._history_recorded = False
        self.machine.transition(RoomEvent.GAME_STARTED)
        logger.info(
            f"{self.game_type} game started in {self.room_code} "
            f"with {[seat.id for seat in self.players]}"
        )
        self._after_state_change()

    def install_state(self, state: GameState, players: Optional[List[PlayerSeat]] = None) -> None:
        """Overwrite local state (last write wins) and follow its phase."""
        self.game = state
        self.players = list(players or state.players)
        if self.game_host_id is None:
            self.game_host_id = getattr(state, "host_id", None) or state.players[0].id
        if self.opponent_id is None:
            self.opponent_id = self._pick_opponent()
        if self.machine.current_state == RoomState.LOBBY:
            self.machine.transition(RoomEvent.GAME_STARTED)
            self._started_at = self._clock()
            self._history_recorded = False
        self._after_state_change()

    def _after_state_change(self) -> None:
        if self.game is not None and self.engine.is_finished(self.game):
            if self.machine.current_state == RoomState.PLAYING:
                self.machine.transition(RoomEvent.GAME_FINISHED)
                outcome = self.engine.check_terminal(self.game)
                logger.info(f"Game over in {self.room_code}: {outcome}")
                self._record_history(outcome)
        elif self.machine.current_state == RoomState.FINISHED:
            # a newer snapshot of a running game overrides a stale finish
            self.machine.transition(RoomEvent.GAME_STARTED, force=True)
        self._notify()

    def _pick_opponent(self) -> Optional[str]:
        seated = [seat.id for seat in self.players if seat.id != self.my_id]
        if not seated or len(seated) == len(self.players):
            return None
        present = [peer for peer in self.tracker.roster if peer.session_id in seated]
        if present:
            return max(present, key=roster_key).session_id
        return seated[-1]

    def reset_to_lobby(self) -> None:
        """Drop the game, frozen players, opponent and logs."""
        self.game = None
        self.players = []
        self.game_host_id = None
        self.opponent_id = None
        self.awaiting_sync = False
        self._resync_requested = True
        self._started_at = None
        self._history_recorded = False
        self.cosmetics.clear()
        self.machine.transition(RoomEvent.RESTART)
        if self.identity.is_ready:
            self.identity = self.identity.model_copy(update={"is_ready": False})
            self._track()
        logger.info(f"Room {self.room_code} reset to lobby")
        self._notify()

    def state_envelope(self) -> GameUpdateEnvelope:
        event = "gameState" if self.sync_mode == SyncMode.HOST_ONLY else "game_update"
        return GameUpdateEnvelope(event=event, payload=GameUpdatePayload(
            game_type=self.game_type,
            state=self.engine.to_snapshot(self.game),
            sender_id=self.my_id,
        ))

    def _record_history(self, outcome: Optional[Outcome], host_gone: bool = False) -> None:
        if self._history_recorded or outcome is None:
            return
        self._history_recorded = True
        if self.history is None:
            return
        # one writer per game: the host, or whoever remains if it left
        if not (self.is_game_host or host_gone):
            return

        ids = [self._user_id_of(seat.id) for seat in self.players]
        if outcome.is_draw:
            winner = DRAW
        else:
            winner = self._user_id_of(outcome.winner) if outcome.winner else None
        duration = self._clock() - self._started_at if self._started_at is not None else 0.0
        try:
            self.history.save_game(
                game_type=self.game_type,
                player1=ids[0],
                player2=ids[1] if len(ids) > 1 else None,
                winner=winner,
                moves_count=self.engine.move_count(self.game),
                duration_seconds=round(duration, 3),
            )
        except Exception as e:
            logger.error(f"Could not save game history: {e}", exc_info=True)

    def _user_id_of(self, session_id: str) -> str:
        if session_id == self.my_id:
            return self.identity.user_id
        peer = self.tracker.find(session_id)
        return peer.user_id if peer else session_id

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self)

    # ══════════════════════════════════════════════════════════════
    # PUBLIC OPERATIONS
    # ══════════════════════════════════════════════════════════════

    def start_game(
        self,
        options: Optional[Dict[str, Any]] = None,
        allow_solo: bool = False,
        seed: Optional[int] = None,
    ) -> GameState:
        """
        Host only: freeze the roster as the player list and start a game.

        Args:
            options: Engine options broadcast to every peer (e.g. grid size)
            allow_solo: Allow starting with only this peer present
            seed: Shuffle seed, random if omitted

        Returns:
            The initial game state

        Raises:
            GameStartError: If this peer may not start a game now
        """
        return self._run(lambda: self._start_game(options, allow_solo, seed))

    def _start_game(
        self, options: Optional[Dict[str, Any]], allow_solo: bool, seed: Optional[int]
    ) -> GameState:
        roles = self.tracker.roles()
        if not self._subscribed:
            raise GameStartError("not connected", self.room_code)
        if self.machine.is_playing:
            raise GameStartError("a game is already in progress", self.room_code)
        if roles.my_role_index < 0 or not roles.is_host:
            raise GameStartError("only the host can start the game", self.room_code)
        if not roles.can_start(self.engine.min_players, allow_solo):
            raise GameStartError(
                f"need at least {self.engine.min_players} players", self.room_code
            )

        players = [
            PlayerSeat(id=peer.session_id, display_name=peer.display_name)
            for peer in roles.roster[: self.engine.max_players]
        ]
        seed = seed if seed is not None else new_seed()
        try:
            state = self.engine.initial_state(
                players, self.my_id, seed=seed, options=self.local_options(options)
            )
        except (ValueError, TypeError, IndexError) as e:
            raise GameStartError(f"invalid options: {e}", self.room_code) from e

        self.begin_game(state, self.my_id)
        self._send(GameStartEnvelope(payload=GameStartPayload(
            game_type=self.game_type,
            players=players,
            host_id=self.my_id,
            seed=seed,
            options=options or {},
        )))
        return state

    def submit_move(self, move_type: str, payload: Optional[Dict[str, Any]] = None) -> MoveResult:
        """
        Submit one of this peer's moves.

        Rejections are returned, never raised, and nothing is broadcast.
        For host-only games a guest's accepted result means the action was
        forwarded; the state changes when the host's snapshot arrives.
        """
        return self._run(lambda: self._submit_move(move_type, payload or {}))

    def _submit_move(self, move_type: str, payload: Dict[str, Any]) -> MoveResult:
        if self.game is None or not self.machine.is_playing:
            return MoveResult(state=self.game, accepted=False, reason="no game in progress")
        move = Move(
            type=move_type,
            actor_id=self.my_id,
            payload=payload,
            client_timestamp=self._wall_clock(),
        )

        if self.sync_mode == SyncMode.HOST_ONLY and not self.is_game_host:
            if not self.engine.validate_move(self.game, self.my_id, move):
                reason = self.engine.rejection_reason(self.game, self.my_id, move)
                logger.debug(f"Rejected {move_type}: {reason}")
                return MoveResult(state=self.game, accepted=False, reason=reason)
            self._send(GameActionEnvelope(event="gameAction", payload=move))
            return MoveResult(state=self.game, accepted=True)

        result = self.engine.apply_move(self.game, self.my_id, move)
        if not result.accepted:
            logger.debug(f"Rejected {move_type}: {result.reason}")
            return result
        self.install_state(result.state)

        if self.sync_mode != SyncMode.OWN_GRID:
            self._send(self.state_envelope())
        elif move_type == "fire":
            self._send(FireEnvelope(payload=FirePayload(
                x=int(payload["x"]), y=int(payload["y"]), actor_id=self.my_id
            )))
        elif move_type == "ready":
            self._set_ready(True)
            self._send(PlayerReadyEnvelope(payload=PlayerReadyPayload(actor_id=self.my_id)))
        return result

    def send_chat(self, content: str) -> Optional[ChatLine]:
        """Broadcast a chat line; blank lines are ignored."""
        content = (content or "").strip()
        if not content:
            return None
        return self._run(lambda: self._send_chat(content))

    def _send_chat(self, content: str) -> ChatLine:
        payload = ChatPayload(
            id=new_message_id(),
            sender_id=self.my_id,
            sender_name=self.identity.display_name,
            content=content[:500],
            timestamp=self._wall_clock(),
        )
        line = ChatLine(
            id=payload.id,
            sender_id=payload.sender_id,
            sender_name=payload.sender_name,
            content=payload.content,
            timestamp=payload.timestamp,
        )
        self.cosmetics.add_chat(line)
        self._send(ChatEnvelope(payload=payload))
        return line

    def send_emoji(self, emoji_name: str) -> EmojiReaction:
        return self._run(lambda: self._send_emoji(emoji_name))

    def _send_emoji(self, emoji_name: str) -> EmojiReaction:
        payload = EmojiPayload(
            id=new_message_id(),
            sender_id=self.my_id,
            emoji_name=emoji_name,
            timestamp=self._wall_clock(),
        )
        reaction = self.cosmetics.add_emoji(payload.id, self.my_id, emoji_name, payload.timestamp)
        self._send(EmojiEnvelope(payload=payload))
        return reaction

    def send_log(self, message: str) -> None:
        def _log() -> None:
            self.cosmetics.add_log(message)
            self._send(LogEnvelope(payload=LogPayload(message=message)))
        self._run(_log)

    def expire_emojis(self, now: Optional[float] = None) -> List[EmojiReaction]:
        return self.cosmetics.expire_emojis(now)

    def request_state(self) -> None:
        """Ask the room for a full snapshot; only the first reply is applied."""
        self._run(self._request_state)

    def _request_state(self) -> None:
        self.awaiting_sync = True
        self._resync_requested = True
        self._send(RequestStateEnvelope(payload=RequestStatePayload(requester_id=self.my_id)))

    def restart(self) -> None:
        """Reset every peer (this one included) to the lobby."""
        def _restart() -> None:
            self.reset_to_lobby()
            self._send(RestartEnvelope())
        self._run(_restart)

    def set_ready(self, ready: bool = True) -> None:
        """Publish readiness through presence."""
        self._run(lambda: self._set_ready(ready))

    def _set_ready(self, ready: bool) -> None:
        if self.identity.is_ready == ready:
            return
        self.identity = self.identity.model_copy(update={"is_ready": ready})
        self._track()

    def heartbeat(self) -> bool:
        """
        Refresh the room in the registry if the interval has elapsed.

        Best effort: registry failures are logged, never raised.

        Returns:
            True if a heartbeat was attempted
        """
        if self.registry is None or not self._heartbeat.due():
            return False
        self._heartbeat.mark()
        try:
            self.registry.heartbeat(self.room_code, self.game_type, self.roles.host_id)
        except Exception as e:
            logger.warning(f"Room heartbeat failed for {self.room_code}: {e}")
        return True


def _sender_of(payload: Dict[str, Any]) -> Optional[str]:
    for field in _SENDER_FIELDS:
        if payload.get(field):
            return payload[field]
    return None
