# Area: Sync Tests
"""Tests for chat, emoji and log buffers."""

from peer_arcade._sync.cosmetics import LOG_LIMIT, ChatLine, Cosmetics

from helpers import FakeClock


def line(message_id, content="hi"):
    return ChatLine(id=message_id, sender_id="sess-a", sender_name="A", content=content, timestamp=0.0)


class TestChat:
    """Tests for the chat buffer."""

    def test_keeps_most_recent(self):
        """Test that the oldest lines fall off at the limit."""
        cosmetics = Cosmetics(chat_limit=3)
        for i in range(5):
            cosmetics.add_chat(line(f"m{i}", str(i)))
        assert [c.content for c in cosmetics.chat] == ["2", "3", "4"]

    def test_duplicate_ids_ignored(self):
        """Test that redelivered lines are not shown twice."""
        cosmetics = Cosmetics()
        assert cosmetics.add_chat(line("m1")) is True
        assert cosmetics.add_chat(line("m1")) is False
        assert len(cosmetics.chat) == 1


class TestEmoji:
    """Tests for emoji expiry."""

    def test_expiry_measured_from_receipt(self):
        """Test that the sender timestamp does not affect expiry."""
        clock = FakeClock()
        cosmetics = Cosmetics(emoji_ttl=3.0, clock=clock)
        cosmetics.add_emoji("e1", "sess-a", "fire", timestamp=0.0)
        clock.advance(1.0)
        cosmetics.add_emoji("e2", "sess-b", "heart", timestamp=0.0)

        clock.advance(2.0)
        assert [r.id for r in cosmetics.expire_emojis()] == ["e1"]
        assert [r.id for r in cosmetics.emojis] == ["e2"]

    def test_explicit_now(self):
        """Test expiry against a caller-supplied time."""
        clock = FakeClock()
        cosmetics = Cosmetics(emoji_ttl=3.0, clock=clock)
        cosmetics.add_emoji("e1", "sess-a", "fire", timestamp=0.0)
        assert cosmetics.expire_emojis(now=clock() + 10) != []


class TestLog:
    """Tests for the shared log and clearing."""

    def test_log_is_bounded(self):
        """Test that the log keeps the last LOG_LIMIT lines."""
        cosmetics = Cosmetics()
        for i in range(LOG_LIMIT + 5):
            cosmetics.add_log(f"line {i}")
        assert len(cosmetics.log_lines) == LOG_LIMIT
        assert cosmetics.log_lines[0] == "line 5"

    def test_clear_forgets_seen_ids(self):
        """Test that clear empties every buffer."""
        cosmetics = Cosmetics()
        cosmetics.add_chat(line("m1"))
        cosmetics.add_emoji("e1", "sess-a", "fire", 0.0)
        cosmetics.add_log("x")
        cosmetics.clear()
        assert not cosmetics.chat and not cosmetics.emojis and not cosmetics.log_lines
        assert cosmetics.add_chat(line("m1")) is True
