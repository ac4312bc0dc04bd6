# Area: Test Fixtures
"""Helpers shared by test modules."""

from datetime import datetime, timedelta, timezone

from peer_arcade._roles import create_identity

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def identity_for(name: str, offset: int = 0, user_id=None):
    """Identity joining ``offset`` seconds after BASE_TIME, session id sess-<name>."""
    return create_identity(
        user_id or f"user-{name}",
        name.capitalize(),
        session_id=f"sess-{name}",
        now=BASE_TIME + timedelta(seconds=offset),
    )
