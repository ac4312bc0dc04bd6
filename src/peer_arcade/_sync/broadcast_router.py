# Area: Sync
"""
peer_arcade._sync.broadcast_router — Broadcast event router
===========================================================

Routes parsed room envelopes to their handlers by event name.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger("peer_arcade.sync.router")


class BroadcastHandler(Protocol):
    """Protocol for room event handlers."""

    def handle(self, envelope: Any) -> List[Any]:
        """Handle an envelope and return the envelopes to broadcast."""
        ...


class BroadcastRouter:
    """
    Routes room broadcasts to handlers.

    Usage:
        router = BroadcastRouter()
        router.register_handler("game_update", update_handler)
        outgoing = router.route(envelope)
    """

    def __init__(self):
        self._handlers: Dict[str, BroadcastHandler] = {}

    def register_handler(self, event: str, handler: BroadcastHandler) -> None:
        """
        Register a handler for an event name.

        Args:
            event: The event name to handle (aliases register separately)
            handler: The handler instance
        """
        self._handlers[event] = handler
        logger.debug(f"Registered handler for {event}")

    def get_handler(self, event: str) -> Optional[BroadcastHandler]:
        return self._handlers.get(event)

    def route(self, envelope: Any) -> List[Any]:
        """
        Route an envelope to its handler.

        Args:
            envelope: A parsed envelope (must have an ``event`` attribute)

        Returns:
            Envelopes to broadcast, empty if no handler is registered
        """
        event = getattr(envelope, "event", "")
        handler = self._handlers.get(event)

        if handler is None:
            logger.warning(f"No handler for event: {event}")
            return []

        logger.debug(f"Routing {event} to handler")
        return handler.handle(envelope) or []
