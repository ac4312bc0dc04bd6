# Area: Runner
"""
peer_arcade.runner — Room Runner
================================

Runs one peer in one room: logging, the room registry and game history
stores, the transport and a RoomSession, driven by a heartbeat loop.
"""

from __future__ import annotations

import logging
import signal
import time
from typing import Any, Callable, Dict, Optional

from ._roles import create_identity, generate_room_code, normalize_room_code
from ._runner_config import validate_config
from ._shared import (
    InMemoryHub,
    IntervalTracker,
    SqliteGameHistoryStore,
    SqliteRoomRegistry,
    enable_protocol_mode,
    get_protocol_logger,
    init_database,
    resolve_display_name,
    setup_logging,
)
from ._shared.channel import Transport
from ._shared.collaborators import IdentityProvider
from ._sync import RoomSession

logger = logging.getLogger("peer_arcade")

DEFAULT_TICK_SECONDS = 1.0


class PeerRunner:
    """
    Long-running peer.

    Usage:
        runner = PeerRunner(load_config("config.json"))
        runner.run()

    Each tick delivers pending channel events, refreshes the room in
    the registry when the heartbeat interval has elapsed, expires emoji
    reactions and periodically removes expired rooms from the registry.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        transport: Optional[Transport] = None,
        identity_provider: Optional[IdentityProvider] = None,
        pump: Optional[Callable[[], Any]] = None,
        protocol_mode: bool = True,
    ):
        self.config = config
        self._running = False

        # Setup logging
        setup_logging(log_file_path=config.get("log_file"))

        # Validate config
        validate_config(config)

        db_path = config["db_path"]
        init_database(db_path)
        self.registry = SqliteRoomRegistry(db_path, expiry_seconds=config["room_expiry_seconds"])
        self.history = SqliteGameHistoryStore(db_path)

        if transport is None:
            transport = InMemoryHub()
        if pump is None and isinstance(transport, InMemoryHub):
            pump = transport.flush
        self.transport = transport
        self._pump = pump

        game_type = config["game_type"]
        if config.get("room_code"):
            room_code = normalize_room_code(config["room_code"], game_type)
        else:
            room_code = generate_room_code(game_type)

        user_id = config.get("user_id")
        display_name = config.get("display_name") or resolve_display_name(identity_provider, user_id)
        self.identity = create_identity(user_id, display_name)

        if protocol_mode:
            # suppresses standard logs on the terminal
            enable_protocol_mode()
        self._protocol_logger = get_protocol_logger()

        self.room = RoomSession(
            game_type,
            room_code,
            self.identity,
            transport,
            history=self.history,
            registry=self.registry,
            protocol_logger=self._protocol_logger,
            pump=pump,
            connect_timeout=config["connect_timeout_seconds"],
            heartbeat_interval=config["heartbeat_interval_seconds"],
            chat_limit=config["chat_history_limit"],
            emoji_ttl=config["emoji_ttl_seconds"],
        )
        self._cleanup = IntervalTracker(config["room_expiry_seconds"])
        self.tick_seconds = config.get("tick_seconds", DEFAULT_TICK_SECONDS)

    def run(self, max_ticks: Optional[int] = None) -> None:
        """Connect and run the heartbeat loop. Blocks until stopped."""
        self._running = True
        previous_handler = signal.signal(signal.SIGINT, lambda s, f: self.stop())

        self._log_startup()
        try:
            self.room.connect()
            ticks = 0
            while self._running:
                try:
                    self.tick()
                except KeyboardInterrupt:
                    break
                except Exception as e:
                    logger.error(f"Loop error: {e}", exc_info=True)
                    self._protocol_logger.log_error(str(e))
                ticks += 1
                if max_ticks is not None and ticks >= max_ticks:
                    break
                time.sleep(self.tick_seconds)
        finally:
            self.room.leave()
            signal.signal(signal.SIGINT, previous_handler)
            self._running = False
            logger.info("Peer runner stopped.")

    def stop(self) -> None:
        self._running = False

    def tick(self) -> None:
        """Single loop iteration."""
        if self._pump:
            self._pump()
        self.room.heartbeat()
        self.room.expire_emojis()
        if self._cleanup.due():
            self._cleanup.mark()
            try:
                self.registry.cleanup_expired()
            except Exception as e:
                logger.warning(f"Registry cleanup failed: {e}")

    def _log_startup(self) -> None:
        logger.info("=" * 60)
        logger.info("  Peer Arcade Runner — Starting")
        logger.info(f"  Game:    {self.room.game_type}")
        logger.info(f"  Room:    {self.room.room_code}")
        logger.info(f"  Player:  {self.identity.display_name} ({self.identity.session_id})")
        logger.info(f"  Heartbeat every {self.config['heartbeat_interval_seconds']}s")
        logger.info("=" * 60)
