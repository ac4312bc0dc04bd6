# Area: Sync
"""Chat, emoji and shared-log handlers."""

from __future__ import annotations

from typing import Any, List

from ..cosmetics import ChatLine
from ..handler_base import BaseRoomHandler
from ..messages import ChatEnvelope, EmojiEnvelope, LogEnvelope


class ChatHandler(BaseRoomHandler):

    def handle(self, envelope: ChatEnvelope) -> List[Any]:
        p = envelope.payload
        self.room.cosmetics.add_chat(ChatLine(
            id=p.id,
            sender_id=p.sender_id,
            sender_name=p.sender_name,
            content=p.content,
            timestamp=p.timestamp,
        ))
        return []


class EmojiHandler(BaseRoomHandler):

    def handle(self, envelope: EmojiEnvelope) -> List[Any]:
        p = envelope.payload
        self.room.cosmetics.add_emoji(p.id, p.sender_id, p.emoji_name, p.timestamp)
        return []


class LogHandler(BaseRoomHandler):

    def handle(self, envelope: LogEnvelope) -> List[Any]:
        self.room.cosmetics.add_log(envelope.payload.message)
        return []
