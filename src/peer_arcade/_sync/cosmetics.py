# Area: Sync
"""
peer_arcade._sync.cosmetics — Chat, emoji reactions and shared log
==================================================================

Non-authoritative room extras. Chat keeps the most recent messages,
emoji reactions disappear a few seconds after they are received, and
the shared log is a bounded list of lines.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

logger = logging.getLogger("peer_arcade.sync.cosmetics")

DEFAULT_CHAT_LIMIT = 100
DEFAULT_EMOJI_TTL = 3.0
LOG_LIMIT = 50


@dataclass(frozen=True)
class ChatLine:
    id: str
    sender_id: str
    sender_name: str
    content: str
    timestamp: float


@dataclass(frozen=True)
class EmojiReaction:
    id: str
    sender_id: str
    emoji_name: str
    timestamp: float
    expires_at: float


class Cosmetics:
    """
    Per-room chat, emoji and log buffers.

    Emoji expiry uses the injected monotonic clock, measured from
    receipt rather than the sender's timestamp.
    """

    def __init__(
        self,
        chat_limit: int = DEFAULT_CHAT_LIMIT,
        emoji_ttl: float = DEFAULT_EMOJI_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.emoji_ttl = emoji_ttl
        self._clock = clock
        self.chat: Deque[ChatLine] = deque(maxlen=chat_limit)
        self.emojis: List[EmojiReaction] = []
        self.log_lines: Deque[str] = deque(maxlen=LOG_LIMIT)
        self._seen_ids: Deque[str] = deque(maxlen=chat_limit * 2)

    def add_chat(self, line: ChatLine) -> bool:
        """Append a chat line; duplicates (same id) are ignored."""
        if line.id in self._seen_ids:
            return False
        self._seen_ids.append(line.id)
        self.chat.append(line)
        return True

    def add_emoji(
        self, id: str, sender_id: str, emoji_name: str, timestamp: float
    ) -> EmojiReaction:
        reaction = EmojiReaction(
            id=id,
            sender_id=sender_id,
            emoji_name=emoji_name,
            timestamp=timestamp,
            expires_at=self._clock() + self.emoji_ttl,
        )
        self.emojis.append(reaction)
        return reaction

    def expire_emojis(self, now: Optional[float] = None) -> List[EmojiReaction]:
        """Drop and return reactions whose display time has passed."""
        now = self._clock() if now is None else now
        expired = [r for r in self.emojis if now >= r.expires_at]
        if expired:
            self.emojis = [r for r in self.emojis if now < r.expires_at]
            logger.debug(f"Expired {len(expired)} emoji reaction(s)")
        return expired

    def add_log(self, message: str) -> None:
        self.log_lines.append(message)

    def clear(self) -> None:
        self.chat.clear()
        self.emojis.clear()
        self.log_lines.clear()
        self._seen_ids.clear()
