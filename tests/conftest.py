# Area: Test Fixtures
"""Shared fixtures: an in-process hub and a factory for room peers."""

import os
import tempfile

import pytest

from peer_arcade._shared import InMemoryHub, init_database
from peer_arcade._sync import RoomSession

from helpers import FakeClock, identity_for


@pytest.fixture
def hub():
    return InMemoryHub()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def db_path():
    """Create temporary database for testing."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_database(path)
    yield path
    os.unlink(path)


@pytest.fixture
def make_peer(hub, clock):
    """
    Factory: ``make_peer("alice", offset=0, game_type="caro")`` connects a
    RoomSession to room ``TEST23`` and flushes the hub.
    """

    def _make(name, offset=0, game_type="caro", room_code="TEST23", connect=True, **kwargs):
        kwargs.setdefault("pump", hub.flush)
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("sleep", lambda seconds: clock.advance(seconds))
        room = RoomSession(game_type, room_code, identity_for(name, offset), hub, **kwargs)
        if connect:
            room.connect()
            hub.flush()
        return room

    return _make
