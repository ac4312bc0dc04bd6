# Area: Shared Tests
"""Tests for IntervalTracker."""

from peer_arcade._shared import IntervalTracker

from helpers import FakeClock


class TestIntervalTracker:
    """Tests for interval bookkeeping."""

    def test_first_call_is_due(self):
        """Test that work is due before it has ever run."""
        tracker = IntervalTracker(60, FakeClock())
        assert tracker.due() is True
        assert tracker.seconds_until_due() == 0.0

    def test_not_due_until_interval_elapses(self):
        """Test the interval boundary."""
        clock = FakeClock()
        tracker = IntervalTracker(60, clock)
        tracker.mark()
        clock.advance(59.5)
        assert tracker.due() is False
        assert tracker.seconds_until_due() == 0.5
        clock.advance(0.5)
        assert tracker.due() is True

    def test_reset(self):
        """Test that reset makes work due immediately."""
        tracker = IntervalTracker(60, FakeClock())
        tracker.mark()
        tracker.reset()
        assert tracker.due() is True
