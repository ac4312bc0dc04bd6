# Area: Presence
"""Presence roster tracking."""

from .tracker import PresenceTracker, parse_presence_entries

__all__ = ["PresenceTracker", "parse_presence_entries"]
