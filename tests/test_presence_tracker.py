# Area: Presence Tests
"""Tests for the presence tracker."""

from unittest.mock import Mock

from peer_arcade._presence import PresenceTracker, parse_presence_entries

from helpers import identity_for


def presence_state(*identities):
    return {identity.session_id: [identity.to_presence()] for identity in identities}


class TestParsePresenceEntries:
    """Tests for parsing tracked payloads."""

    def test_malformed_entries_skipped(self):
        """Test that entries missing required fields are dropped."""
        good = identity_for("alice").to_presence()
        peers = parse_presence_entries([good, {"displayName": "ghost"}])
        assert [p.session_id for p in peers] == ["sess-alice"]


class TestPresenceTracker:
    """Tests for PresenceTracker."""

    def test_sync_replaces_roster_sorted(self):
        """Test that a sync installs the roster in join order."""
        tracker = PresenceTracker("sess-bob")
        roster = tracker.handle_sync(presence_state(identity_for("bob", 5), identity_for("alice", 0)))
        assert [p.session_id for p in roster] == ["sess-alice", "sess-bob"]
        assert tracker.roles().my_role_index == 1

    def test_sync_with_offsetless_join_time(self):
        """Test that a join time without an offset is read as UTC and still sorts."""
        tracker = PresenceTracker("sess-alice")
        bob = identity_for("bob", 5).to_presence()
        bob["joinedAt"] = "2026-01-01T11:59:55"
        roster = tracker.handle_sync({
            "sess-alice": [identity_for("alice").to_presence()],
            "sess-bob": [bob],
        })
        assert [p.session_id for p in roster] == ["sess-bob", "sess-alice"]
        assert roster[0].joined_at.tzinfo is not None
        assert tracker.roles().my_role_index == 1

    def test_sync_replaces_wholesale(self):
        """Test that a peer missing from the next sync is gone."""
        tracker = PresenceTracker("sess-alice")
        tracker.handle_sync(presence_state(identity_for("alice"), identity_for("bob", 5)))
        tracker.handle_sync(presence_state(identity_for("alice")))
        assert tracker.others() == []

    def test_sync_notifies_listener(self):
        """Test that the roster listener sees every sync."""
        listener = Mock()
        tracker = PresenceTracker("sess-alice", on_roster=listener)
        tracker.handle_sync(presence_state(identity_for("alice")))
        listener.assert_called_once_with(tracker.roster)

    def test_leave_reports_session_ids(self):
        """Test that a leave reports the departed session to the listener."""
        on_leave = Mock()
        tracker = PresenceTracker("sess-alice", on_leave=on_leave)
        left = tracker.handle_leave("sess-bob", [identity_for("bob", 5).to_presence()])
        assert left == ["sess-bob"]
        on_leave.assert_called_once_with("sess-bob")

    def test_leave_without_payload_uses_key(self):
        """Test that an empty leave falls back to the presence key."""
        tracker = PresenceTracker("sess-alice")
        assert tracker.handle_leave("sess-bob", []) == ["sess-bob"]

    def test_join_does_not_change_roster(self):
        """Test that joins are informational; only sync updates the roster."""
        tracker = PresenceTracker("sess-alice")
        tracker.handle_join("sess-bob", [identity_for("bob").to_presence()])
        assert tracker.roster == ()

    def test_find_and_clear(self):
        """Test lookup by session id and clearing."""
        tracker = PresenceTracker("sess-alice")
        tracker.handle_sync(presence_state(identity_for("alice"), identity_for("bob", 5)))
        assert tracker.find("sess-bob").display_name == "Bob"
        assert tracker.find("sess-nobody") is None
        tracker.clear()
        assert tracker.roster == ()
